"""
External nutrient data connectors. USDA FoodData Central (free API key).
"""
from .base import NutrientLookupResult
from .usda_fdc import fetch_usda_observations, FDC_NUTRIENT_IDS

__all__ = [
    "NutrientLookupResult",
    "fetch_usda_observations",
    "FDC_NUTRIENT_IDS",
]
