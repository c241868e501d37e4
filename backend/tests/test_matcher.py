"""
Unit tests for ingredient matching and the normalizer.
Run from backend: python -m pytest tests/test_matcher.py -v
"""
import pytest

from core.matching.ingredient_matcher import IngredientMatcher
from core.normalization.normalizer import normalize_ingredient_name


def _rec(rid, text, normalized, score):
    return {
        "id": rid,
        "ingredient_text": text,
        "normalized_name": normalized,
        "nutrition": {"protein": 1},
        "source_id": "src_a",
        "confidence_score": score,
    }


def test_normalize_ingredient_name():
    assert normalize_ingredient_name("  Chicken   Breast, RAW ") == "chicken breast, raw"
    assert normalize_ingredient_name("") == ""
    assert normalize_ingredient_name(None) == ""


def test_match_both_directions_and_order(make_store):
    store = make_store(ingredients=[
        _rec("contains", "Boneless chicken breast, raw, organic", "boneless chicken breast, raw, organic", 0.5),
        _rec("contained", "Chicken breast", "chicken breast", 0.9),
        _rec("unrelated", "Beef brisket", "beef brisket", 1.0),
    ])
    matches = IngredientMatcher(store).match("chicken breast, raw")
    assert [m.id for m in matches] == ["contained", "contains"]


def test_match_limit_and_confidence_order(make_store):
    rows = [_rec(f"r{i}", f"apple variety {i}", f"apple variety {i}", i / 10) for i in range(8)]
    matches = IngredientMatcher(make_store(ingredients=rows)).match("APPLE")
    assert len(matches) == 5
    scores = [m.confidence_score for m in matches]
    assert scores == sorted(scores, reverse=True)
    assert matches[0].id == "r7"


def test_no_match_is_empty_not_error(empty_store):
    assert IngredientMatcher(empty_store).match("dragonfruit") == []


def test_empty_text_rejected(empty_store):
    with pytest.raises(ValueError):
        IngredientMatcher(empty_store).match("   ")




def test_stored_name_with_punctuation_contained_by_input(make_store):
    store = make_store(ingredients=[
        _rec("x", "Chicken Breast, Raw", "chicken breast, raw", 0.7),
        _rec("partial", "breast raw", "breast raw", 0.9),
    ])
    matches = IngredientMatcher(store).match("Boneless chicken breast, raw")
    assert [m.id for m in matches] == ["x"]


def test_wildcard_characters_are_literal(make_store):
    store = make_store(ingredients=[
        _rec("pct", "2% milk", "2% milk", 0.8),
        _rec("skim", "skim milk", "skim milk", 0.9),
    ])
    assert [m.id for m in IngredientMatcher(store).match("2% milk")] == ["pct"]
    assert IngredientMatcher(store).match("_ milk") == []
