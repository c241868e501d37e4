#!/usr/bin/env python3
"""
Run one fusion against the configured store and print the response JSON.
Usage: cd backend && python scripts/fuse_ingredient.py "chicken breast, raw" \
           [--cooking-method "grill 10 min"] [--override] [--usda] [--alt protein=31:0.7]...
--usda adds USDA FoodData Central values (needs USDA_FDC_API_KEY) as alternative observations.
"""
import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure backend is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def parse_alt(arg: str):
    """'nutrient=value[:confidence]' -> AltSourceValue."""
    from core.models.nutrition import AltSourceValue
    name, sep, rest = arg.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected nutrient=value[:confidence], got {arg!r}")
    value, _, confidence = rest.partition(":")
    try:
        return AltSourceValue(
            nutrient=name.strip(),
            value=float(value),
            confidence_score=float(confidence) if confidence else None,
        )
    except ValueError:
        raise argparse.ArgumentTypeError(f"non-numeric value in {arg!r}")


def main(argv=None, store=None) -> int:
    parser = argparse.ArgumentParser(description="Fuse nutrition data for one ingredient")
    parser.add_argument("ingredient", help="Free-text ingredient description")
    parser.add_argument("--cooking-method", default=None, help="Free-text cooking instruction")
    parser.add_argument("--override", action="store_true", help="Replace the stored fused row")
    parser.add_argument("--usda", action="store_true", help="Add USDA FDC values as alternative observations")
    parser.add_argument("--alt", action="append", type=parse_alt, default=[], help="nutrient=value[:confidence]")
    args = parser.parse_args(argv)

    from core.config import get_usda_fdc_api_key
    from core.fusion import NutritionFusionEngine, FusionValidationError
    from core.models.nutrition import FusionRequest
    from core.storage import build_store

    alt_values = list(args.alt)
    if args.usda:
        from core.external_apis.usda_fdc import fetch_usda_observations
        key = get_usda_fdc_api_key()
        if not key:
            logger.warning("--usda given but USDA_FDC_API_KEY is not set; skipping")
        else:
            lookup = fetch_usda_observations(args.ingredient, key)
            if lookup.found:
                logger.info(
                    "ALT_LOOKUP source=%s values=%d %s",
                    lookup.source, len(lookup.observations), lookup.raw_response_summary,
                )
                alt_values.extend(lookup.observations)
            else:
                logger.warning("ALT_LOOKUP source=%s no values (%s)", lookup.source, lookup.raw_response_summary)

    engine = NutritionFusionEngine(store or build_store())
    try:
        result = engine.fuse(FusionRequest(
            ingredient_text=args.ingredient,
            alt_source_values=alt_values,
            cooking_method=args.cooking_method,
            override_existing=args.override,
        ))
    except FusionValidationError as e:
        print(json.dumps({"error": str(e)}))
        return 2
    print(json.dumps(result.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
