"""
Engine tests: end-to-end fusion against the JSON store, persistence policy, failure isolation.
Run from backend: python -m pytest tests/test_engine.py -v
"""
import json
from unittest.mock import MagicMock

import pytest

from core.fusion import FusionValidationError, NutritionFusionEngine
from core.models.nutrition import AltSourceValue, FusionRequest


def _by_nutrient(result):
    return {n.nutrient: n for n in result.fused}


def test_chicken_breast_two_sources(chicken_store):
    """Matched records from two sources: protein pulled toward the more reliable source."""
    result = NutritionFusionEngine(chicken_store).fuse(FusionRequest("chicken breast, raw"))
    protein = _by_nutrient(result)["protein"]
    assert protein.fused_value == pytest.approx(30.18, abs=0.01)
    assert protein.confidence == pytest.approx(0.785)
    assert protein.unit == "g"
    assert protein.sources == ["USDA SR28", "Open Food Facts"]
    assert result.matched_ingredients_count == 2
    assert result.source_count == 2
    assert result.canonical_ingredient.id == "rec_a"
    assert result.canonical_ingredient.name == "chicken breast"
    assert result.canonical_ingredient.similarity_score == 0.9
    # single-source nutrients: value as stored, confidence 0.81 + 0.05
    calories = _by_nutrient(result)["calories"]
    assert calories.fused_value == 165
    assert calories.unit == "kcal"
    assert calories.confidence == pytest.approx(0.86)


def test_no_match_alt_value_only(empty_store):
    result = NutritionFusionEngine(empty_store).fuse(FusionRequest(
        "dragonfruit",
        alt_source_values=[AltSourceValue("calories", 165, confidence_score=0.6)],
    ))
    (calories,) = result.fused
    assert calories.fused_value == 165
    assert calories.confidence == pytest.approx(0.65)
    assert calories.sources == ["alternative_source"]
    assert result.source_count == 1
    assert result.overall_confidence == pytest.approx(0.65)
    assert result.canonical_ingredient is None
    assert result.matched_ingredients_count == 0


@pytest.mark.parametrize("text", ["", "   ", None])
def test_missing_ingredient_text_rejected_without_store_access(text):
    store = MagicMock()
    with pytest.raises(FusionValidationError, match="ingredient_text is required"):
        NutritionFusionEngine(store).fuse(FusionRequest(text))
    assert store.method_calls == []


def test_nothing_fused_overall_zero_and_not_persisted(empty_store):
    result = NutritionFusionEngine(empty_store).fuse(FusionRequest("dragonfruit"))
    assert result.fused == []
    assert result.overall_confidence == 0.0
    assert result.source_count == 0
    assert result.persisted is False
    assert empty_store.get_fused_profile("dragonfruit") is None


def test_idempotent_repeat(chicken_store):
    engine = NutritionFusionEngine(chicken_store)
    req = FusionRequest("Chicken Breast, raw", alt_source_values=[AltSourceValue("protein", 30, confidence_score=0.4)])
    first = engine.fuse(req).to_dict()
    second = engine.fuse(req).to_dict()
    assert first == second


def test_fused_profile_persisted_with_overall(chicken_store):
    result = NutritionFusionEngine(chicken_store).fuse(FusionRequest("  Chicken Breast, RAW "))
    assert result.persisted is True
    profile = chicken_store.get_fused_profile("chicken breast, raw")
    assert profile is not None
    assert profile.ingredient_text == "Chicken Breast, RAW"
    assert profile.fusion_method == "bayesian"
    assert profile.confidence_map["overall"] == pytest.approx(result.overall_confidence)
    assert profile.nutrient_map["protein"] == pytest.approx(30.18, abs=0.01)
    assert profile.sources_map["protein"] == ["USDA SR28", "Open Food Facts"]


def test_same_normalized_name_updates_single_row(chicken_store):
    engine = NutritionFusionEngine(chicken_store)
    engine.fuse(FusionRequest("chicken breast, raw"))
    engine.fuse(FusionRequest("CHICKEN  breast, raw", alt_source_values=[AltSourceValue("sugar", 0)]))
    data = json.loads(chicken_store.path.read_text())
    rows = [r for r in data["fused"] if r["normalized_name"] == "chicken breast, raw"]
    assert len(rows) == 1
    assert "sugar" in rows[0]["nutrition"]
    # update path keeps the original ingredient_text
    assert rows[0]["ingredient_text"] == "chicken breast, raw"


def test_override_replaces_row(chicken_store):
    engine = NutritionFusionEngine(chicken_store)
    engine.fuse(FusionRequest("chicken breast, raw"))
    engine.fuse(FusionRequest("Chicken breast, raw", override_existing=True))
    data = json.loads(chicken_store.path.read_text())
    rows = [r for r in data["fused"] if r["normalized_name"] == "chicken breast, raw"]
    assert len(rows) == 1
    assert rows[0]["ingredient_text"] == "Chicken breast, raw"


def test_persist_failure_still_returns_result(chicken_store, monkeypatch):
    def boom(*args, **kwargs):
        raise ConnectionError("storage down")
    monkeypatch.setattr(chicken_store, "upsert_fused_profile", boom)
    result = NutritionFusionEngine(chicken_store).fuse(FusionRequest("chicken breast, raw"))
    assert result.persisted is False
    assert _by_nutrient(result)["protein"].fused_value == pytest.approx(30.18, abs=0.01)


def test_cooking_method_logged(chicken_store):
    result = NutritionFusionEngine(chicken_store).fuse(
        FusionRequest("chicken breast, raw", cooking_method="Slow-Cook on low for 6 hours")
    )
    assert result.cooking_method.value == "slow cook"
    assert result.to_dict()["metadata"]["cooking_method"] == "slow cook"
    (row,) = chicken_store.list_cooking_methods()
    assert row["normalized_method"] == "slow cook"
    assert row["instruction_text"] == "Slow-Cook on low for 6 hours"
    assert row["confidence_score"] == 0.8
    assert row["classified_by"] == "api"


def test_cooking_method_store_failure_swallowed(chicken_store, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("log table missing")
    monkeypatch.setattr(chicken_store, "append_cooking_method", boom)
    result = NutritionFusionEngine(chicken_store).fuse(
        FusionRequest("chicken breast, raw", cooking_method="grill")
    )
    assert result.cooking_method.value == "grill"
    assert result.persisted is True


def test_store_read_failure_propagates():
    store = MagicMock()
    store.search_ingredient_records.side_effect = ConnectionError("unreachable")
    with pytest.raises(ConnectionError):
        NutritionFusionEngine(store).fuse(FusionRequest("egg"))
    store.upsert_fused_profile.assert_not_called()


def test_records_from_unknown_source_skipped(make_store):
    store = make_store(ingredients=[{
        "id": "orphan", "ingredient_text": "egg", "normalized_name": "egg",
        "nutrition": {"protein": 13}, "source_id": "gone", "confidence_score": 1.0,
    }])
    result = NutritionFusionEngine(store).fuse(FusionRequest("egg"))
    assert result.matched_ingredients_count == 1
    assert result.fused == []
    assert result.overall_confidence == 0.0


def test_response_shape_and_ignored_nutrients(empty_store):
    result = NutritionFusionEngine(empty_store).fuse(FusionRequest(
        "oat milk",
        alt_source_values=[AltSourceValue("calories", 48), AltSourceValue("caffeine", 0)],
    ))
    body = result.to_dict()
    assert "canonical_ingredient" not in body
    assert body["fused"] == [{
        "nutrient": "calories", "fusedValue": 48.0, "unit": "kcal",
        "confidence": pytest.approx(0.55), "sources": ["alternative_source"],
    }]
    assert body["metadata"]["ignored_nutrients"] == ["caffeine"]
    assert body["metadata"]["matched_ingredients_count"] == 0
    assert "cooking_method" not in body["metadata"]
    assert 0 <= body["overall_confidence"] <= 0.95
