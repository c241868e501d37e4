"""
Store contract for the fusion engine. Backends implement the primitive reads/writes;
the upsert rule (update unless override, else insert/replace) lives here once.
"""
import logging
from typing import List, Optional

from core.models.nutrition import (
    CookingMethodClassification,
    FusedNutrientProfile,
    IngredientRecord,
    SourceProfile,
)

logger = logging.getLogger(__name__)

UPSERT_UPDATED = "updated"
UPSERT_INSERTED = "inserted"
UPSERT_REPLACED = "replaced"


class NutritionStore:
    """Reads ingredient records and sources; writes fused profiles and cooking-method logs."""

    name = "base"

    # --- reads ---
    def search_ingredient_records(self, normalized_text: str, limit: int) -> List[IngredientRecord]:
        """Records whose text contains, or is contained by, normalized_text; best confidence first."""
        raise NotImplementedError

    def load_sources(self) -> List[SourceProfile]:
        raise NotImplementedError

    def get_fused_profile(self, normalized_name: str) -> Optional[FusedNutrientProfile]:
        raise NotImplementedError

    # --- writes ---
    def find_fused_id(self, normalized_name: str) -> Optional[str]:
        raise NotImplementedError

    def update_fused(self, row_id: str, profile: FusedNutrientProfile) -> None:
        """Replace nutrition/confidence/sources maps and updated_at on an existing row."""
        raise NotImplementedError

    def replace_fused(self, profile: FusedNutrientProfile) -> None:
        """Insert the full row, replacing any row with the same normalized_name."""
        raise NotImplementedError

    def append_cooking_method(self, classification: CookingMethodClassification) -> None:
        raise NotImplementedError

    def upsert_fused_profile(self, profile: FusedNutrientProfile, override_existing: bool = False) -> str:
        """
        Keyed on normalized_name. Existing row and no override -> update maps in place.
        No row, or override -> insert/replace the whole row.
        Returns which path was taken.
        """
        existing_id = self.find_fused_id(profile.normalized_name)
        if existing_id is not None and not override_existing:
            self.update_fused(existing_id, profile)
            logger.info("FUSED_UPSERT updated normalized=%s id=%s", profile.normalized_name, existing_id)
            return UPSERT_UPDATED
        self.replace_fused(profile)
        outcome = UPSERT_REPLACED if existing_id is not None else UPSERT_INSERTED
        logger.info("FUSED_UPSERT %s normalized=%s", outcome, profile.normalized_name)
        return outcome
