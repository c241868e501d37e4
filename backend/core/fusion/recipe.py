"""
Recipe-level nutrition: fuse every ingredient, scale by quantity, sum.
Cooking method for every ingredient is taken from the first instruction.
"""
import logging
from typing import Any, Optional, Sequence

from core.evaluation.confidence import confidence_level
from core.models.nutrition import FusionRequest
from core.ontology.nutrient_schema import Nutrient

logger = logging.getLogger(__name__)

RECIPE_NUTRIENTS = (
    Nutrient.CALORIES,
    Nutrient.PROTEIN,
    Nutrient.CARBS,
    Nutrient.FAT,
    Nutrient.FIBER,
    Nutrient.SUGAR,
    Nutrient.SODIUM,
)

# Used when no ingredient could be fused at all
DEFAULT_RECIPE_CONFIDENCE = 0.5


def _quantity(ingredient: dict) -> float:
    for key in ("qty", "qty_metric"):
        q = ingredient.get(key)
        if isinstance(q, (int, float)) and not isinstance(q, bool) and q:
            return float(q)
    return 1.0


def fuse_recipe_nutrition(
    engine,
    ingredients: Sequence[dict],
    instructions: Optional[Sequence[str]] = None,
) -> Optional[dict[str, Any]]:
    """
    Returns {calories, protein, ..., data_quality: {...}} or None when there are no ingredients.
    Ingredients with nothing fused are reported in unmatched_or_low_confidence_ingredients.
    """
    if not ingredients:
        return None

    cooking_method = instructions[0] if instructions else None
    totals = {n.value: 0.0 for n in RECIPE_NUTRIENTS}
    scores: list[float] = []
    unmatched: list[str] = []

    for ingredient in ingredients:
        item = (ingredient.get("item") or "").strip()
        if not item:
            continue
        result = engine.fuse(FusionRequest(ingredient_text=item, cooking_method=cooking_method))
        if not result.fused:
            unmatched.append(item)
            continue
        scores.append(result.overall_confidence)
        qty = _quantity(ingredient)
        for n in result.fused:
            if n.nutrient in totals:
                totals[n.nutrient] += n.fused_value * qty

    overall_score = sum(scores) / len(scores) if scores else DEFAULT_RECIPE_CONFIDENCE
    logger.info(
        "RECIPE_FUSION ingredients=%d fused=%d unmatched=%d score=%.3f",
        len(ingredients), len(scores), len(unmatched), overall_score,
    )

    out: dict[str, Any] = {k: round(v, 1) for k, v in totals.items()}
    out["data_quality"] = {
        "overall_confidence": confidence_level(overall_score),
        "overall_confidence_score": overall_score,
        "unmatched_or_low_confidence_ingredients": unmatched,
    }
    return out
