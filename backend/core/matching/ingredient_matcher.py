"""
Ingredient Matcher: free-text ingredient -> up to N stored IngredientRecords.
A record matches when its raw text or normalized name contains the input, or is contained by it
(case-insensitive). Ordered by descending record confidence; ties keep store order.
No match is not an error: the result is simply empty.
"""
import logging
from typing import List

from core.config import MATCH_LIMIT
from core.models.nutrition import IngredientRecord
from core.normalization.normalizer import normalize_ingredient_name

logger = logging.getLogger(__name__)


def _contains_either_way(candidate: str, text: str) -> bool:
    c = normalize_ingredient_name(candidate)
    if not c or not text:
        return False
    return text in c or c in text


def record_matches(record: IngredientRecord, normalized_text: str) -> bool:
    return (
        _contains_either_way(record.raw_ingredient_text, normalized_text)
        or _contains_either_way(record.normalized_name, normalized_text)
    )


def rank_records(records: List[IngredientRecord], limit: int) -> List[IngredientRecord]:
    return sorted(records, key=lambda r: r.confidence_score, reverse=True)[:limit]


class IngredientMatcher:
    def __init__(self, store, limit: int = MATCH_LIMIT):
        self._store = store
        self._limit = limit

    def match(self, ingredient_text: str) -> List[IngredientRecord]:
        text = normalize_ingredient_name(ingredient_text)
        if not text:
            raise ValueError("ingredient text must be non-empty")
        candidates = self._store.search_ingredient_records(text, self._limit)
        matched = [r for r in candidates if record_matches(r, text)]
        if len(matched) < len(candidates):
            logger.debug(
                "MATCH dropped %d store candidates failing containment text=%s",
                len(candidates) - len(matched), text[:60],
            )
        ranked = rank_records(matched, self._limit)
        logger.info(
            "MATCH text=%s matched=%d top=%s",
            text[:60], len(ranked), ranked[0].normalized_name if ranked else None,
        )
        return ranked
