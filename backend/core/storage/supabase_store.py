"""
Supabase-backed store (supabase-py v2).
Tables:
    ingredient_nutrition_values   id, ingredient_text, normalized_name, nutrition (jsonb), source_id, confidence_score
    nutrition_sources             id, source_name, confidence_factor, priority
    ingredient_nutrition_fused    id, ingredient_text, normalized_name (unique), nutrition, confidence, sources,
                                  fusion_method, updated_at
    cooking_method_classifications instruction_text, normalized_method, confidence_score, classified_by
Ingredient matching runs server-side in the match_ingredient_records function
(supabase/migrations/20240601000000_match_ingredient_records.sql).
"""
import logging
from typing import List, Optional

from core.config import (
    COOKING_METHODS_TABLE,
    FUSED_TABLE,
    MATCH_RPC,
    SOURCES_TABLE,
)
from core.models.nutrition import (
    CookingMethodClassification,
    FusedNutrientProfile,
    IngredientRecord,
    SourceProfile,
)
from core.storage.base import NutritionStore

logger = logging.getLogger(__name__)

_SOURCE_COLUMNS = "id, source_name, confidence_factor, priority"


class SupabaseNutritionStore(NutritionStore):
    name = "supabase"

    def __init__(self, client):
        self.client = client

    def search_ingredient_records(self, normalized_text: str, limit: int) -> List[IngredientRecord]:
        # Containment in both directions on both text columns; ordered and limited in SQL
        resp = self.client.rpc(
            MATCH_RPC,
            {"query_text": normalized_text, "match_limit": limit},
        ).execute()
        return [IngredientRecord.from_row(r) for r in (resp.data or [])]

    def load_sources(self) -> List[SourceProfile]:
        resp = (
            self.client.table(SOURCES_TABLE)
            .select(_SOURCE_COLUMNS)
            .order("priority", desc=True)
            .execute()
        )
        return [SourceProfile.from_row(r) for r in (resp.data or [])]

    def get_fused_profile(self, normalized_name: str) -> Optional[FusedNutrientProfile]:
        resp = (
            self.client.table(FUSED_TABLE)
            .select("*")
            .eq("normalized_name", normalized_name)
            .limit(1)
            .execute()
        )
        rows = resp.data or []
        if not rows:
            return None
        row = rows[0]
        return FusedNutrientProfile(
            ingredient_text=row.get("ingredient_text") or "",
            normalized_name=row.get("normalized_name") or normalized_name,
            nutrient_map=dict(row.get("nutrition") or {}),
            confidence_map=dict(row.get("confidence") or {}),
            sources_map=dict(row.get("sources") or {}),
            fusion_method=row.get("fusion_method") or "bayesian",
            updated_at=row.get("updated_at") or "",
        )

    def find_fused_id(self, normalized_name: str) -> Optional[str]:
        resp = (
            self.client.table(FUSED_TABLE)
            .select("id")
            .eq("normalized_name", normalized_name)
            .limit(1)
            .execute()
        )
        rows = resp.data or []
        return str(rows[0]["id"]) if rows else None

    def update_fused(self, row_id: str, profile: FusedNutrientProfile) -> None:
        row = profile.to_row()
        self.client.table(FUSED_TABLE).update({
            "nutrition": row["nutrition"],
            "confidence": row["confidence"],
            "sources": row["sources"],
            "updated_at": row["updated_at"],
        }).eq("id", row_id).execute()

    def replace_fused(self, profile: FusedNutrientProfile) -> None:
        self.client.table(FUSED_TABLE).upsert(
            profile.to_row(), on_conflict="normalized_name"
        ).execute()

    def append_cooking_method(self, classification: CookingMethodClassification) -> None:
        self.client.table(COOKING_METHODS_TABLE).insert(classification.to_row()).execute()
