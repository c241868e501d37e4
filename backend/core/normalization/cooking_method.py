"""
Cooking method classification: free-text instruction -> one of nine canonical labels.
Ordered (keywords, label) rules on the lower-cased text; first match wins.
Unmatched text defaults to "bake" (known simplification, kept until product decides otherwise).
"""
import logging
from typing import Tuple

from core.models.nutrition import CookingMethod

logger = logging.getLogger(__name__)

COOKING_METHOD_RULES: Tuple[Tuple[Tuple[str, ...], CookingMethod], ...] = (
    (("bake", "oven"), CookingMethod.BAKE),
    (("boil",), CookingMethod.BOIL),
    (("braise",), CookingMethod.BRAISE),
    (("fry", "sauté", "saute"), CookingMethod.FRY),
    (("grill",), CookingMethod.GRILL),
    (("roast",), CookingMethod.ROAST),
    (("steam",), CookingMethod.STEAM),
    (("slow cook", "slow-cook", "crock pot"), CookingMethod.SLOW_COOK),
    (("raw", "uncooked"), CookingMethod.RAW),
)

DEFAULT_COOKING_METHOD = CookingMethod.BAKE


def normalize_cooking_method(text: str) -> CookingMethod:
    t = (text or "").lower()
    for keywords, method in COOKING_METHOD_RULES:
        if any(k in t for k in keywords):
            return method
    logger.debug("COOKING_METHOD default applied text=%s", t[:60])
    return DEFAULT_COOKING_METHOD
