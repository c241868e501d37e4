"""
USDA FoodData Central API connector: search hit -> alternative nutrient observations.
Free API key: https://fdc.nal.usda.gov/api-key-signup
Search: GET https://api.nal.usda.gov/fdc/v1/foods/search?api_key=KEY&query=...
"""
import logging
from typing import List

from core.config import USDA_OBSERVATION_CONFIDENCE
from core.external_apis.base import NutrientLookupResult
from core.external_apis.http_retry import get_json_with_retries
from core.models.nutrition import AltSourceValue
from core.ontology.nutrient_schema import Nutrient

logger = logging.getLogger(__name__)

USDA_SEARCH_URL = "https://api.nal.usda.gov/fdc/v1/foods/search"

# FDC nutrient id -> our nutrient key
FDC_NUTRIENT_IDS = {
    1008: Nutrient.CALORIES,   # Energy (kcal)
    1003: Nutrient.PROTEIN,
    1005: Nutrient.CARBS,      # Carbohydrate, by difference
    1004: Nutrient.FAT,        # Total lipid (fat)
    1258: Nutrient.SATURATED_FAT,
    2000: Nutrient.SUGAR,      # Sugars, total including NLEA
    1079: Nutrient.FIBER,      # Fiber, total dietary
    1093: Nutrient.SODIUM,
    1087: Nutrient.CALCIUM,
    1089: Nutrient.IRON,
    1092: Nutrient.POTASSIUM,
    1106: Nutrient.VITAMIN_A,  # Vitamin A, RAE (µg); 1104 is IU, which has no mass conversion
    1162: Nutrient.VITAMIN_C,  # Vitamin C, total ascorbic acid
    1114: Nutrient.VITAMIN_D,  # Vitamin D (D2 + D3)
}


def _food_to_observations(food: dict, confidence: float) -> List[AltSourceValue]:
    out: List[AltSourceValue] = []
    seen = set()
    for fn in food.get("foodNutrients") or []:
        nutrient = FDC_NUTRIENT_IDS.get(fn.get("nutrientId"))
        value = fn.get("value")
        if nutrient is None or nutrient in seen or not isinstance(value, (int, float)):
            continue
        seen.add(nutrient)
        out.append(AltSourceValue(
            nutrient=nutrient.value,
            value=float(value),
            unit=(fn.get("unitName") or "").lower() or None,
            confidence_score=confidence,
        ))
    return out


def fetch_usda_observations(
    ingredient_query: str,
    api_key: str,
    confidence: float = USDA_OBSERVATION_CONFIDENCE,
    timeout: int = 10,
) -> NutrientLookupResult:
    """
    Search FDC (Foundation + SR Legacy) and map the first hit's nutrients.
    Empty result when there is no key, no hit, or the API fails; never raises.
    """
    if not api_key or not ingredient_query or not ingredient_query.strip():
        logger.debug("USDA_FDC: skip empty query or no api_key")
        return NutrientLookupResult(raw_response_summary="no_key_or_query")

    query = ingredient_query.strip()[:200]
    params = {
        "api_key": api_key,
        "query": query,
        "dataType": "Foundation,SR Legacy",
        "pageSize": 5,
    }
    data, err = get_json_with_retries(USDA_SEARCH_URL, params=params, timeout=timeout, max_retries=3)
    if err is not None:
        logger.warning("USDA_FDC API fetch failed query=%s error=%s", query, err)
        return NutrientLookupResult(raw_response_summary=f"error:{err[:80]}")

    foods = (data or {}).get("foods") or []
    if not foods:
        logger.info("USDA_FDC no results query=%s", query)
        return NutrientLookupResult(raw_response_summary="no_results")

    best = foods[0]
    observations = _food_to_observations(best, confidence)
    description = (best.get("description") or "").strip()
    logger.info(
        "USDA_FDC success query=%s fdcId=%s description=%s nutrients=%d",
        query, best.get("fdcId"), description[:60], len(observations),
    )
    return NutrientLookupResult(
        observations=observations,
        description=description,
        raw_response_summary=f"description={description[:80]}",
    )
