"""
JSON-file store for local runs and tests (data/nutrition_store.json).
Document layout mirrors the Supabase tables, one array per table:
    {"sources": [...], "ingredients": [...], "fused": [...], "cooking_methods": [...]}
Loaded on every call so that edits from the import pipeline are picked up.
Writes hold a per-file lock across load/modify/save and land via os.replace,
so concurrent requests never interleave or leave a half-written file.
"""
import json
import logging
import os
import tempfile
import threading
import uuid
from pathlib import Path
from typing import Any, List, Optional

from core.config import get_json_store_path
from core.matching.ingredient_matcher import rank_records, record_matches
from core.models.nutrition import (
    CookingMethodClassification,
    FusedNutrientProfile,
    IngredientRecord,
    SourceProfile,
)
from core.storage.base import NutritionStore

logger = logging.getLogger(__name__)

_TABLES = ("sources", "ingredients", "fused", "cooking_methods")

# resolved path -> lock; shared by every store instance on the same file
_FILE_LOCKS: dict = {}
_FILE_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path):
    key = str(path.resolve())
    with _FILE_LOCKS_GUARD:
        if key not in _FILE_LOCKS:
            _FILE_LOCKS[key] = threading.RLock()
        return _FILE_LOCKS[key]


class JsonNutritionStore(NutritionStore):
    name = "json"

    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path else get_json_store_path()
        self._lock = _lock_for(self._path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, List[dict[str, Any]]]:
        data: dict[str, Any] = {}
        if self._path.exists():
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        return {t: list(data.get(t) or []) for t in _TABLES}

    def _save(self, data: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=self._path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    # --- reads ---
    def search_ingredient_records(self, normalized_text: str, limit: int) -> List[IngredientRecord]:
        records = [IngredientRecord.from_row(r) for r in self._load()["ingredients"]]
        return rank_records([r for r in records if record_matches(r, normalized_text)], limit)

    def load_sources(self) -> List[SourceProfile]:
        sources = [SourceProfile.from_row(r) for r in self._load()["sources"]]
        return sorted(sources, key=lambda s: s.priority, reverse=True)

    def get_fused_profile(self, normalized_name: str) -> Optional[FusedNutrientProfile]:
        for row in self._load()["fused"]:
            if row.get("normalized_name") == normalized_name:
                return FusedNutrientProfile(
                    ingredient_text=row.get("ingredient_text") or "",
                    normalized_name=normalized_name,
                    nutrient_map=dict(row.get("nutrition") or {}),
                    confidence_map=dict(row.get("confidence") or {}),
                    sources_map=dict(row.get("sources") or {}),
                    fusion_method=row.get("fusion_method") or "bayesian",
                    updated_at=row.get("updated_at") or "",
                )
        return None

    def list_cooking_methods(self) -> List[dict[str, Any]]:
        return self._load()["cooking_methods"]

    # --- writes ---
    def find_fused_id(self, normalized_name: str) -> Optional[str]:
        for row in self._load()["fused"]:
            if row.get("normalized_name") == normalized_name:
                return row.get("id")
        return None

    def update_fused(self, row_id: str, profile: FusedNutrientProfile) -> None:
        with self._lock:
            data = self._load()
            new_row = profile.to_row()
            for row in data["fused"]:
                if row.get("id") == row_id:
                    for k in ("nutrition", "confidence", "sources", "updated_at"):
                        row[k] = new_row[k]
                    break
            else:
                raise KeyError(f"fused row {row_id} not found")
            self._save(data)

    def replace_fused(self, profile: FusedNutrientProfile) -> None:
        with self._lock:
            data = self._load()
            kept = [r for r in data["fused"] if r.get("normalized_name") != profile.normalized_name]
            row = {"id": str(uuid.uuid4()), **profile.to_row()}
            data["fused"] = kept + [row]
            self._save(data)

    def upsert_fused_profile(self, profile: FusedNutrientProfile, override_existing: bool = False) -> str:
        # lookup and write in one critical section: two requests for the same name cannot both insert
        with self._lock:
            return super().upsert_fused_profile(profile, override_existing=override_existing)

    def append_cooking_method(self, classification: CookingMethodClassification) -> None:
        with self._lock:
            data = self._load()
            data["cooking_methods"].append({"id": str(uuid.uuid4()), **classification.to_row()})
            self._save(data)
