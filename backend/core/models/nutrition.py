"""
Structured records for nutrition fusion. Reference data (sources, ingredient records) is frozen;
fusion outputs carry to_dict() in the wire shape returned by the API.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

ALTERNATIVE_SOURCE_LABEL = "alternative_source"
FUSION_METHOD = "bayesian"


@dataclass(frozen=True)
class SourceProfile:
    source_id: str
    display_name: str
    confidence_factor: float
    priority: int = 0

    @classmethod
    def from_row(cls, row: dict) -> "SourceProfile":
        return cls(
            source_id=str(row["id"]),
            display_name=row.get("source_name") or str(row["id"]),
            confidence_factor=float(row.get("confidence_factor") or 0.0),
            priority=int(row.get("priority") or 0),
        )


@dataclass(frozen=True)
class IngredientRecord:
    """One stored nutrient observation for one ingredient from one source."""
    id: str
    raw_ingredient_text: str
    normalized_name: str
    nutrient_map: dict = field(default_factory=dict)
    source_id: Optional[str] = None
    confidence_score: float = 0.0

    @classmethod
    def from_row(cls, row: dict) -> "IngredientRecord":
        source_id = row.get("source_id")
        return cls(
            id=str(row["id"]),
            raw_ingredient_text=row.get("ingredient_text") or "",
            normalized_name=row.get("normalized_name") or "",
            nutrient_map=dict(row.get("nutrition") or {}),
            source_id=str(source_id) if source_id is not None else None,
            confidence_score=float(row.get("confidence_score") or 0.0),
        )


@dataclass(frozen=True)
class NutrientObservation:
    nutrient: str
    value: float
    weight: float
    source_label: str


@dataclass
class AltSourceValue:
    """Caller-supplied observation. confidence_score None means 'not given'."""
    nutrient: str
    value: float
    unit: Optional[str] = None
    confidence_score: Optional[float] = None


@dataclass
class CanonicalIngredient:
    id: str
    name: str
    similarity_score: float

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "similarity_score": self.similarity_score}


@dataclass
class FusedNutrient:
    nutrient: str
    fused_value: float
    unit: str
    confidence: float
    sources: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nutrient": self.nutrient,
            "fusedValue": self.fused_value,
            "unit": self.unit,
            "confidence": self.confidence,
            "sources": list(self.sources),
        }


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class FusedNutrientProfile:
    """Persisted row: one per normalized ingredient name."""
    ingredient_text: str
    normalized_name: str
    nutrient_map: dict[str, float] = field(default_factory=dict)
    confidence_map: dict[str, float] = field(default_factory=dict)
    sources_map: dict[str, list[str]] = field(default_factory=dict)
    fusion_method: str = FUSION_METHOD
    updated_at: str = field(default_factory=_utc_now_iso)

    @classmethod
    def from_fused(
        cls,
        ingredient_text: str,
        normalized_name: str,
        fused: list[FusedNutrient],
        overall_confidence: float,
    ) -> "FusedNutrientProfile":
        confidence_map = {n.nutrient: n.confidence for n in fused}
        confidence_map["overall"] = overall_confidence
        return cls(
            ingredient_text=ingredient_text,
            normalized_name=normalized_name,
            nutrient_map={n.nutrient: n.fused_value for n in fused},
            confidence_map=confidence_map,
            sources_map={n.nutrient: list(n.sources) for n in fused},
        )

    def to_row(self) -> dict[str, Any]:
        return {
            "ingredient_text": self.ingredient_text,
            "normalized_name": self.normalized_name,
            "nutrition": dict(self.nutrient_map),
            "confidence": dict(self.confidence_map),
            "sources": {k: list(v) for k, v in self.sources_map.items()},
            "fusion_method": self.fusion_method,
            "updated_at": self.updated_at,
        }


class CookingMethod(str, Enum):
    BAKE = "bake"
    BOIL = "boil"
    BRAISE = "braise"
    FRY = "fry"
    GRILL = "grill"
    ROAST = "roast"
    STEAM = "steam"
    SLOW_COOK = "slow cook"
    RAW = "raw"


@dataclass
class CookingMethodClassification:
    raw_instruction_text: str
    normalized_method: CookingMethod
    confidence_score: float = 0.8
    classified_by: str = "api"

    def to_row(self) -> dict[str, Any]:
        return {
            "instruction_text": self.raw_instruction_text,
            "normalized_method": self.normalized_method.value,
            "confidence_score": self.confidence_score,
            "classified_by": self.classified_by,
        }


@dataclass
class FusionRequest:
    ingredient_text: Optional[str]
    alt_source_values: list[AltSourceValue] = field(default_factory=list)
    cooking_method: Optional[str] = None
    override_existing: bool = False


@dataclass
class FusionResult:
    fused: list[FusedNutrient]
    overall_confidence: float
    source_count: int
    matched_ingredients_count: int
    canonical_ingredient: Optional[CanonicalIngredient] = None
    cooking_method: Optional[CookingMethod] = None
    persisted: bool = False
    ignored_nutrients: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.canonical_ingredient is not None:
            out["canonical_ingredient"] = self.canonical_ingredient.to_dict()
        out["fused"] = [n.to_dict() for n in self.fused]
        out["overall_confidence"] = self.overall_confidence
        out["source_count"] = self.source_count
        metadata: dict[str, Any] = {
            "matched_ingredients_count": self.matched_ingredients_count,
            "persisted": self.persisted,
        }
        if self.cooking_method is not None:
            metadata["cooking_method"] = self.cooking_method.value
        if self.ignored_nutrients:
            metadata["ignored_nutrients"] = list(self.ignored_nutrients)
        out["metadata"] = metadata
        return out
