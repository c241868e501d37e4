"""
Precision-weighted pooling of nutrient observations ("bayesian" fusion).
fused = sum(v * w) / sum(w); a higher-weight source pulls the estimate toward itself.
Pure: no I/O.
"""
from typing import Mapping, Sequence, Tuple

from core.evaluation.confidence import compute_nutrient_confidence
from core.models.nutrition import FusedNutrient, NutrientObservation
from core.ontology.nutrient_schema import Nutrient


def bayesian_fuse(observations: Sequence[NutrientObservation]) -> Tuple[float, float]:
    """(fused_value, confidence) for one nutrient. Observations must be non-empty."""
    if not observations:
        raise ValueError("nothing to fuse")
    weights = [o.weight for o in observations]
    if len(observations) == 1:
        # v*w/w can drift in the last bit; a lone observation is reported as-is
        return observations[0].value, compute_nutrient_confidence(weights)
    total_weight = sum(weights)
    fused_value = sum(o.value * o.weight for o in observations) / total_weight
    return fused_value, compute_nutrient_confidence(weights)


def fuse_observations(by_nutrient: Mapping[str, Sequence[NutrientObservation]]) -> list[FusedNutrient]:
    """One FusedNutrient per nutrient with at least one observation, in input order."""
    fused: list[FusedNutrient] = []
    for nutrient, observations in by_nutrient.items():
        if not observations:
            continue
        value, confidence = bayesian_fuse(observations)
        sources: list[str] = []
        for o in observations:
            if o.source_label not in sources:
                sources.append(o.source_label)
        fused.append(FusedNutrient(
            nutrient=nutrient,
            fused_value=value,
            unit=Nutrient(nutrient).unit,
            confidence=confidence,
            sources=sources,
        ))
    return fused
