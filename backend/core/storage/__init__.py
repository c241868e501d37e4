"""
Nutrition stores: Supabase for production, JSON file for local runs and tests.
"""
import logging

from .base import NutritionStore, UPSERT_INSERTED, UPSERT_REPLACED, UPSERT_UPDATED
from .json_store import JsonNutritionStore
from .supabase_store import SupabaseNutritionStore

logger = logging.getLogger(__name__)

__all__ = [
    "NutritionStore",
    "JsonNutritionStore",
    "SupabaseNutritionStore",
    "UPSERT_INSERTED",
    "UPSERT_REPLACED",
    "UPSERT_UPDATED",
    "build_store",
]


def build_store() -> NutritionStore:
    """Store selected by NUTRITION_STORE / Supabase credentials (see core.config)."""
    from core.config import get_store_backend, get_supabase_key, get_supabase_url, get_json_store_path

    if get_store_backend() == "supabase":
        url, key = get_supabase_url(), get_supabase_key()
        if url and key:
            from supabase import create_client
            return SupabaseNutritionStore(create_client(url, key))
        logger.warning("Supabase credentials not found in env. Using JSON store at %s", get_json_store_path())
    return JsonNutritionStore(get_json_store_path())
