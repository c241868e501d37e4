"""
Confidence synthesis for fused nutrients.
Per nutrient: min(0.95, mean(weights) + min(0.20, 0.05 * n)).
More corroborating sources raise confidence a little; nothing is ever reported as certain.
Overall: mean of per-nutrient confidences, 0.0 when nothing was fused.
"""
from typing import Sequence

MAX_CONFIDENCE = 0.95
SOURCE_COUNT_BOOST = 0.05
MAX_SOURCE_COUNT_BOOST = 0.20

HIGH_CONFIDENCE_THRESHOLD = 0.8
LOW_CONFIDENCE_THRESHOLD = 0.6


def source_count_boost(n: int) -> float:
    return min(MAX_SOURCE_COUNT_BOOST, n * SOURCE_COUNT_BOOST)


def compute_nutrient_confidence(weights: Sequence[float]) -> float:
    """Confidence for one nutrient from its observation weights (must be non-empty)."""
    if not weights:
        raise ValueError("cannot compute confidence without observations")
    mean_weight = sum(weights) / len(weights)
    return min(MAX_CONFIDENCE, mean_weight + source_count_boost(len(weights)))


def compute_overall_confidence(confidences: Sequence[float]) -> float:
    if not confidences:
        return 0.0
    return sum(confidences) / len(confidences)


def confidence_level(score: float) -> str:
    """'high' (>= 0.8), 'low' (< 0.6), else 'medium'."""
    if score >= HIGH_CONFIDENCE_THRESHOLD:
        return "high"
    if score < LOW_CONFIDENCE_THRESHOLD:
        return "low"
    return "medium"
