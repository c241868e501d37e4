"""
Closed vocabulary of nutrients the fusion engine understands, with one canonical unit each.
calories -> kcal, sodium/potassium -> mg, everything else -> g.
Unit conversion only happens between units of the same dimension; anything else is refused.
"""
from enum import Enum
from typing import Optional


class Nutrient(str, Enum):
    CALORIES = "calories"
    PROTEIN = "protein"
    CARBS = "carbs"
    FAT = "fat"
    SATURATED_FAT = "saturated_fat"
    SUGAR = "sugar"
    FIBER = "fiber"
    SODIUM = "sodium"
    POTASSIUM = "potassium"
    CALCIUM = "calcium"
    IRON = "iron"
    VITAMIN_A = "vitaminA"
    VITAMIN_C = "vitaminC"
    VITAMIN_D = "vitaminD"

    @property
    def unit(self) -> str:
        return canonical_unit(self)


_MG_NUTRIENTS = {Nutrient.SODIUM, Nutrient.POTASSIUM}

# Factor to grams / kcal
_MASS_FACTORS = {
    "g": 1.0,
    "gram": 1.0,
    "grams": 1.0,
    "mg": 1e-3,
    "mcg": 1e-6,
    "ug": 1e-6,
    "µg": 1e-6,
}
_ENERGY_FACTORS = {
    "kcal": 1.0,
    "cal": 1.0,
    "calories": 1.0,
    "kj": 1.0 / 4.184,
}


def canonical_unit(nutrient: Nutrient) -> str:
    if nutrient is Nutrient.CALORIES:
        return "kcal"
    if nutrient in _MG_NUTRIENTS:
        return "mg"
    return "g"


def parse_nutrient(name: str) -> Optional[Nutrient]:
    """Exact key match (vitaminA style keys are case sensitive); None for unknown names."""
    if not isinstance(name, str):
        return None
    key = name.strip()
    try:
        return Nutrient(key)
    except ValueError:
        pass
    try:
        return Nutrient(key.lower())
    except ValueError:
        return None


def convert_to_canonical(nutrient: Nutrient, value: float, unit: Optional[str]) -> Optional[float]:
    """
    Convert value expressed in unit into the nutrient's canonical unit.
    Missing unit means the value is already canonical. Returns None when no conversion exists.
    """
    if not unit or not unit.strip():
        return value
    u = unit.strip().lower()
    target = canonical_unit(nutrient)
    if u == target:
        return value
    if target == "kcal":
        factor = _ENERGY_FACTORS.get(u)
        return value * factor if factor is not None else None
    src = _MASS_FACTORS.get(u)
    if src is None:
        return None
    return value * src / _MASS_FACTORS[target]
