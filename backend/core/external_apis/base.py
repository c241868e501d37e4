"""
Types for external nutrient lookups.
"""
from dataclasses import dataclass, field
from typing import List

from core.models.nutrition import AltSourceValue


@dataclass
class NutrientLookupResult:
    """Observations pulled from an external database for one query."""
    observations: List[AltSourceValue] = field(default_factory=list)
    source: str = "usda_fdc"
    description: str = ""
    raw_response_summary: str = ""  # for logging

    @property
    def found(self) -> bool:
        return bool(self.observations)
