"""
Deterministic normalization of ingredient text. The normalized name is the fusion/storage key:
lower-cased, trimmed, internal whitespace collapsed. Punctuation is kept so that
"chicken breast, raw" and "chicken breast raw" stay distinct keys.
The SQL function match_ingredient_records applies the same rule server-side.
"""
import re
import logging

logger = logging.getLogger(__name__)


def normalize_ingredient_name(text: str) -> str:
    """Lower-case, strip, collapse whitespace. Non-strings normalize to ''."""
    if not text or not isinstance(text, str):
        return ""
    return re.sub(r"\s+", " ", text.lower()).strip()
