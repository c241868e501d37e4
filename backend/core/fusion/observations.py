"""
Observation Collector: matched records + caller alternatives -> per-nutrient weighted observations.
Database weight = source.confidence_factor * record.confidence_score.
Alternative weight = supplied confidence (0.5 when omitted).
Both kinds of weight are clamped to 1.
Non-positive weights, unknown sources, unknown nutrients and non-numeric values never reach fusion.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from core.models.nutrition import (
    ALTERNATIVE_SOURCE_LABEL,
    AltSourceValue,
    IngredientRecord,
    NutrientObservation,
)
from core.ontology.nutrient_schema import convert_to_canonical, parse_nutrient
from core.sources.source_registry import SourceRegistry

logger = logging.getLogger(__name__)

DEFAULT_ALT_CONFIDENCE = 0.5


@dataclass
class ObservationSet:
    # nutrient key -> observations, in first-seen order
    by_nutrient: dict[str, List[NutrientObservation]] = field(default_factory=dict)
    ignored_nutrients: List[str] = field(default_factory=list)

    def add(self, observation: NutrientObservation) -> None:
        self.by_nutrient.setdefault(observation.nutrient, []).append(observation)

    def ignore(self, name: str) -> None:
        if name not in self.ignored_nutrients:
            self.ignored_nutrients.append(name)
            logger.info("FUSION_UNKNOWN_NUTRIENT name=%s", str(name)[:40])

    def __len__(self) -> int:
        return sum(len(v) for v in self.by_nutrient.values())


def _as_number(value) -> Optional[float]:
    # bool is an int subclass; a stored True is not 1 gram of anything
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    f = float(value)
    return f if math.isfinite(f) else None


def _collect_record(obs: ObservationSet, record: IngredientRecord, registry: SourceRegistry) -> None:
    source = registry.get(record.source_id)
    if source is None:
        logger.info("FUSION_SOURCE_MISSING record=%s source_id=%s", record.id, record.source_id)
        return
    weight = source.confidence_factor * record.confidence_score
    if weight <= 0:
        logger.info("FUSION_ZERO_WEIGHT record=%s source=%s", record.id, source.display_name)
        return
    if weight > 1:
        logger.warning(
            "FUSION_WEIGHT_CLAMPED record=%s source=%s factor=%s score=%s",
            record.id, source.display_name, source.confidence_factor, record.confidence_score,
        )
        weight = 1.0
    for name, raw in record.nutrient_map.items():
        nutrient = parse_nutrient(name)
        if nutrient is None:
            obs.ignore(name)
            continue
        value = _as_number(raw)
        if value is None:
            continue
        obs.add(NutrientObservation(nutrient.value, value, weight, source.display_name))


def _collect_alternative(obs: ObservationSet, alt: AltSourceValue) -> None:
    nutrient = parse_nutrient(alt.nutrient)
    if nutrient is None:
        obs.ignore(alt.nutrient)
        return
    value = _as_number(alt.value)
    if value is None:
        logger.info("FUSION_ALT_SKIPPED nutrient=%s reason=non_numeric", nutrient.value)
        return
    converted = convert_to_canonical(nutrient, value, alt.unit)
    if converted is None:
        logger.warning(
            "FUSION_ALT_SKIPPED nutrient=%s reason=unit unit=%s expected=%s",
            nutrient.value, alt.unit, nutrient.unit,
        )
        return
    weight = DEFAULT_ALT_CONFIDENCE if alt.confidence_score is None else float(alt.confidence_score)
    if weight <= 0:
        logger.info("FUSION_ALT_SKIPPED nutrient=%s reason=non_positive_weight", nutrient.value)
        return
    obs.add(NutrientObservation(nutrient.value, converted, min(weight, 1.0), ALTERNATIVE_SOURCE_LABEL))


def collect_observations(
    records: Iterable[IngredientRecord],
    registry: SourceRegistry,
    alt_values: Optional[Iterable[AltSourceValue]] = None,
) -> ObservationSet:
    obs = ObservationSet()
    for record in records:
        _collect_record(obs, record, registry)
    for alt in alt_values or []:
        _collect_alternative(obs, alt)
    return obs
