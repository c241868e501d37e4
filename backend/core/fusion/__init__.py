"""
Nutrition fusion: observation collection, weighted pooling, engine, recipe totals.
"""
from .bayesian import bayesian_fuse, fuse_observations
from .observations import ObservationSet, collect_observations, DEFAULT_ALT_CONFIDENCE
from .engine import NutritionFusionEngine, FusionValidationError
from .recipe import fuse_recipe_nutrition

__all__ = [
    "bayesian_fuse",
    "fuse_observations",
    "ObservationSet",
    "collect_observations",
    "DEFAULT_ALT_CONFIDENCE",
    "NutritionFusionEngine",
    "FusionValidationError",
    "fuse_recipe_nutrition",
]
