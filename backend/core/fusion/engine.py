"""
Nutrition fusion engine: one request in, one fused profile out.

Sequence per request:
    1. validate ingredient_text (no I/O on failure)
    2. Ingredient Matcher       -> one store read
    3. Source registry          -> one store read
    4. Observation Collector + bayesian fusion (pure)
    5. upsert fused profile     -> one store write, failure logged not raised
    6. cooking-method log       -> optional, failure swallowed
The engine holds no client of its own; everything goes through the injected store.
"""
import logging
from typing import Optional

from core.config import MATCH_LIMIT
from core.evaluation.confidence import compute_overall_confidence
from core.fusion.bayesian import fuse_observations
from core.fusion.observations import collect_observations
from core.matching.ingredient_matcher import IngredientMatcher
from core.models.nutrition import (
    CanonicalIngredient,
    CookingMethod,
    CookingMethodClassification,
    FusedNutrient,
    FusedNutrientProfile,
    FusionRequest,
    FusionResult,
    IngredientRecord,
)
from core.normalization.cooking_method import normalize_cooking_method
from core.normalization.normalizer import normalize_ingredient_name
from core.sources.source_registry import SourceRegistry
from core.storage.base import NutritionStore

logger = logging.getLogger(__name__)


class FusionValidationError(ValueError):
    """Request rejected before any work was done."""


def _canonical_from(records: list[IngredientRecord]) -> Optional[CanonicalIngredient]:
    if not records:
        return None
    top = records[0]
    return CanonicalIngredient(
        id=top.id,
        name=top.normalized_name or top.raw_ingredient_text,
        similarity_score=top.confidence_score,
    )


class NutritionFusionEngine:
    def __init__(self, store: NutritionStore, match_limit: int = MATCH_LIMIT):
        self.store = store
        self.matcher = IngredientMatcher(store, limit=match_limit)

    def fuse(self, request: FusionRequest) -> FusionResult:
        text = request.ingredient_text if isinstance(request.ingredient_text, str) else ""
        if not text.strip():
            raise FusionValidationError("ingredient_text is required")
        text = text.strip()
        normalized = normalize_ingredient_name(text)

        matches = self.matcher.match(text)
        registry = SourceRegistry.from_store(self.store)
        observations = collect_observations(matches, registry, request.alt_source_values)
        fused = fuse_observations(observations.by_nutrient)
        overall = compute_overall_confidence([n.confidence for n in fused])
        source_count = len({s for n in fused for s in n.sources})

        logger.info(
            "FUSION_DONE normalized=%s matches=%d observations=%d nutrients=%d sources=%d overall=%.3f",
            normalized[:60], len(matches), len(observations), len(fused), source_count, overall,
        )

        persisted = self._persist(text, normalized, fused, overall, request.override_existing)

        method: Optional[CookingMethod] = None
        if request.cooking_method:
            method = normalize_cooking_method(request.cooking_method)
            self._log_cooking_method(request.cooking_method, method)

        return FusionResult(
            fused=fused,
            overall_confidence=overall,
            source_count=source_count,
            matched_ingredients_count=len(matches),
            canonical_ingredient=_canonical_from(matches),
            cooking_method=method,
            persisted=persisted,
            ignored_nutrients=list(observations.ignored_nutrients),
        )

    def _persist(
        self,
        text: str,
        normalized: str,
        fused: list[FusedNutrient],
        overall: float,
        override_existing: bool,
    ) -> bool:
        if not fused:
            logger.info("FUSION_PERSIST_SKIPPED normalized=%s reason=no_nutrients", normalized[:60])
            return False
        profile = FusedNutrientProfile.from_fused(text, normalized, fused, overall)
        try:
            self.store.upsert_fused_profile(profile, override_existing=override_existing)
            return True
        except Exception as e:
            logger.error("FUSION_PERSIST_FAILED normalized=%s error=%s", normalized[:60], e, exc_info=True)
            return False

    def _log_cooking_method(self, instruction: str, method: CookingMethod) -> None:
        try:
            self.store.append_cooking_method(CookingMethodClassification(instruction, method))
        except Exception as e:
            logger.error("COOKING_METHOD_STORE_FAILED method=%s error=%s", method.value, e)
