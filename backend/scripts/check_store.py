#!/usr/bin/env python3
"""
Check that the configured nutrition store is reachable and has source profiles.
Run from backend: python scripts/check_store.py [--probe "chicken breast"]
Exit 0 if the source registry loads with at least one source; 1 otherwise.
"""
import argparse
import sys
from pathlib import Path
from typing import Tuple

# Add backend to path when run as script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

DEFAULT_PROBE = "chicken"


def check_sources(store) -> Tuple[bool, str]:
    """Return (success, message)."""
    from core.sources.source_registry import SourceRegistry
    try:
        registry = SourceRegistry.from_store(store)
    except Exception as e:
        return False, f"{type(e).__name__}: {e}"
    if len(registry) == 0:
        return False, "no sources configured"
    names = ", ".join(s.display_name for s in registry)
    return True, f"ok ({len(registry)} sources: {names[:120]})"


def check_matching(store, probe: str) -> Tuple[bool, str]:
    """Return (success, message)."""
    from core.matching.ingredient_matcher import IngredientMatcher
    try:
        matches = IngredientMatcher(store).match(probe)
    except Exception as e:
        return False, f"{type(e).__name__}: {e}"
    if not matches:
        return False, f"no records match '{probe}'"
    return True, f"ok ({len(matches)} matches, top={matches[0].normalized_name})"


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Health check for the nutrition store")
    parser.add_argument("--probe", default=DEFAULT_PROBE, help="Ingredient text used for the match check")
    args = parser.parse_args(argv)

    from core.storage import build_store
    store = build_store()
    print(f"Checking nutrition store ({store.name})...")
    sources_ok, sources_msg = check_sources(store)
    print(f"  Sources:  {'OK' if sources_ok else 'FAIL'} - {sources_msg}")
    match_ok, match_msg = check_matching(store, args.probe)
    # An empty ingredient table is a warning, not a failure
    print(f"  Matching: {'OK' if match_ok else 'WARN'} - {match_msg}")
    if sources_ok:
        print("Store is usable for fusion.")
        return 0
    print("Store is not usable: source registry failed to load.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
