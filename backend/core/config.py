"""
Feature flags, paths, and centralized configuration.
All resolution relative to the backend directory.
"""
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Repo root: backend/core/config.py -> parent=core, parent.parent=backend, parent.parent.parent=repo
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_REPO_ROOT = _BACKEND_DIR.parent

# --- Supabase tables ---
SOURCES_TABLE = "nutrition_sources"
FUSED_TABLE = "ingredient_nutrition_fused"
COOKING_METHODS_TABLE = "cooking_method_classifications"

# --- Matching ---
MATCH_LIMIT = int(os.environ.get("MATCH_LIMIT", "5"))
# Postgres function over ingredient_nutrition_values (see supabase/migrations)
MATCH_RPC = "match_ingredient_records"


# --- Data paths ---
def get_json_store_path() -> Path:
    override = os.environ.get("NUTRITION_STORE_PATH", "").strip()
    if override:
        return Path(override)
    return _REPO_ROOT / "data" / "nutrition_store.json"


# --- Supabase (lazy read from env) ---
def get_supabase_url() -> str:
    return (os.environ.get("SUPABASE_URL") or os.environ.get("NEXT_PUBLIC_SUPABASE_URL") or "").strip()


def get_supabase_key() -> str:
    return (os.environ.get("SUPABASE_SERVICE_ROLE_KEY") or "").strip()


def get_store_backend() -> str:
    """'supabase' or 'json'. Defaults to supabase only when credentials are present."""
    explicit = os.environ.get("NUTRITION_STORE", "").strip().lower()
    if explicit in ("supabase", "json"):
        return explicit
    if explicit:
        logger.warning("CONFIG unknown NUTRITION_STORE=%s; falling back to auto-detect", explicit)
    if get_supabase_url() and get_supabase_key():
        return "supabase"
    return "json"


# --- External APIs ---
def get_usda_fdc_api_key() -> str:
    return (os.environ.get("USDA_FDC_API_KEY") or os.environ.get("FDC_API_KEY") or "").strip()


# USDA observations enter fusion as alternative values with this weight
USDA_OBSERVATION_CONFIDENCE = float(os.environ.get("USDA_OBSERVATION_CONFIDENCE", "0.8"))


# --- Startup logging ---
def log_config() -> None:
    logger.info(
        "CONFIG: store=%s supabase_url=%s supabase_key=%s json_store=%s match_limit=%d usda_key=%s",
        get_store_backend(),
        bool(get_supabase_url()), bool(get_supabase_key()),
        get_json_store_path(), MATCH_LIMIT,
        bool(get_usda_fdc_api_key()),
    )
