"""
Nutrition fusion FastAPI application.

Endpoints:
    GET  /                         Health check
    POST /fuse-nutrition           Fuse nutrient observations for one ingredient
    POST /fuse-recipe-nutrition    Fuse and total every ingredient of a recipe
    POST /classify-cooking-method  Free-text instruction -> canonical cooking method
"""
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import List, Optional
import logging
from dotenv import load_dotenv
from pathlib import Path

# Load env vars
load_dotenv(Path(__file__).parent / ".env")

# Logger
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from core.config import log_config
from core.fusion import NutritionFusionEngine, FusionValidationError, fuse_recipe_nutrition
from core.models.nutrition import AltSourceValue, FusionRequest
from core.normalization.cooking_method import normalize_cooking_method
from core.storage import NutritionStore, build_store

# Initialize App
app = FastAPI(title="Nutrition Fusion API")

log_config()

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

store: NutritionStore = build_store()
engine = NutritionFusionEngine(store)


# --- Request Models ---
class AltSourceValueBody(BaseModel):
    nutrient: str
    value: float
    unit: Optional[str] = None
    confidence_score: Optional[float] = None


class FuseNutritionRequest(BaseModel):
    # Optional here so a missing field yields our 400, not a 422
    ingredient_text: Optional[str] = None
    alt_source_values: Optional[List[AltSourceValueBody]] = None
    cooking_method: Optional[str] = None
    override_existing: bool = False


class RecipeIngredientBody(BaseModel):
    item: Optional[str] = None
    qty: Optional[float] = None
    qty_metric: Optional[float] = None


class FuseRecipeRequest(BaseModel):
    ingredients: Optional[List[RecipeIngredientBody]] = None
    instructions: Optional[List[str]] = None


class CookingMethodRequest(BaseModel):
    instruction_text: str


# --- Helper Functions ---

def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body = {"error": error}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


def _to_fusion_request(body: FuseNutritionRequest) -> FusionRequest:
    return FusionRequest(
        ingredient_text=body.ingredient_text,
        alt_source_values=[
            AltSourceValue(
                nutrient=v.nutrient,
                value=v.value,
                unit=v.unit,
                confidence_score=v.confidence_score,
            )
            for v in (body.alt_source_values or [])
        ],
        cooking_method=body.cooking_method,
        override_existing=body.override_existing,
    )


# --- Endpoints ---

@app.get("/")
def health_check():
    return {"status": "ok", "service": "Nutrition Fusion", "store": store.name}


@app.post("/fuse-nutrition")
def fuse_nutrition(request: FuseNutritionRequest):
    """Match -> weight -> fuse -> upsert. Persist failures do not fail the request."""
    logger.info(
        "Fuse request ingredient=%s alt_values=%d override=%s",
        (request.ingredient_text or "")[:60], len(request.alt_source_values or []), request.override_existing,
    )
    try:
        result = engine.fuse(_to_fusion_request(request))
        return result.to_dict()
    except FusionValidationError as e:
        return _error(400, str(e))
    except Exception as e:
        logger.error("Fuse nutrition failed: %s", e, exc_info=True)
        return _error(500, "Failed to process request", str(e))


@app.post("/fuse-recipe-nutrition")
def fuse_recipe(request: FuseRecipeRequest):
    """Per-ingredient fusion scaled by quantity and summed."""
    ingredients = [i.model_dump() for i in (request.ingredients or [])]
    if not ingredients:
        return _error(400, "ingredients are required")
    logger.info("Recipe fusion ingredients=%d", len(ingredients))
    try:
        return fuse_recipe_nutrition(engine, ingredients, request.instructions)
    except Exception as e:
        logger.error("Recipe fusion failed: %s", e, exc_info=True)
        return _error(500, "Failed to process request", str(e))


@app.post("/classify-cooking-method")
def classify_cooking_method(request: CookingMethodRequest):
    return {"normalized_method": normalize_cooking_method(request.instruction_text).value}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True)
