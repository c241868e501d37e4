"""
Shared fixtures. Tests run against the JSON store in a temp directory; no Supabase needed.
Run from backend: python -m pytest tests -v
"""
import json
import os
import sys
import tempfile
from pathlib import Path

import pytest

# 'core' and 'app' resolve from the backend directory
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

# app.py builds its store at import time; keep it away from real credentials and data/
_SESSION_DIR = tempfile.mkdtemp(prefix="nutrition-store-")
os.environ["NUTRITION_STORE"] = "json"
os.environ["NUTRITION_STORE_PATH"] = str(Path(_SESSION_DIR) / "session_store.json")

SOURCE_A = {"id": "src_a", "source_name": "USDA SR28", "confidence_factor": 0.9, "priority": 10}
SOURCE_B = {"id": "src_b", "source_name": "Open Food Facts", "confidence_factor": 0.7, "priority": 5}

CHICKEN_A = {
    "id": "rec_a",
    "ingredient_text": "Chicken breast",
    "normalized_name": "chicken breast",
    "nutrition": {"protein": 31, "calories": 165, "fat": 3.6},
    "source_id": "src_a",
    "confidence_score": 0.9,
}
CHICKEN_B = {
    "id": "rec_b",
    "ingredient_text": "CHICKEN BREAST",
    "normalized_name": "chicken breast",
    "nutrition": {"protein": 29},
    "source_id": "src_b",
    "confidence_score": 0.8,
}


def write_store(path: Path, sources=(), ingredients=(), fused=()) -> Path:
    path.write_text(json.dumps({
        "sources": list(sources),
        "ingredients": list(ingredients),
        "fused": list(fused),
        "cooking_methods": [],
    }))
    return path


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "nutrition_store.json"


@pytest.fixture
def chicken_store(store_path):
    """Two sources, two chicken breast records (scenario: conflicting protein values)."""
    from core.storage.json_store import JsonNutritionStore
    write_store(store_path, sources=[SOURCE_A, SOURCE_B], ingredients=[CHICKEN_B, CHICKEN_A])
    return JsonNutritionStore(store_path)


@pytest.fixture
def empty_store(store_path):
    from core.storage.json_store import JsonNutritionStore
    write_store(store_path, sources=[SOURCE_A, SOURCE_B])
    return JsonNutritionStore(store_path)


@pytest.fixture
def make_store(store_path):
    """make_store(ingredients=[...], sources=[...]) -> JsonNutritionStore on a fresh file."""
    from core.storage.json_store import JsonNutritionStore

    def _make(ingredients=(), sources=(SOURCE_A, SOURCE_B), fused=()):
        write_store(store_path, sources=sources, ingredients=ingredients, fused=fused)
        return JsonNutritionStore(store_path)
    return _make
