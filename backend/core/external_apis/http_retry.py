"""
HTTP GET with retries and exponential backoff for external APIs.
api_key query parameters are never written to the log.
"""
import logging
import time
from typing import Any, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_BACKOFF = 1.0
_SECRET_PARAMS = ("api_key",)


def _loggable(params: dict) -> dict:
    return {k: ("***" if k in _SECRET_PARAMS else v) for k, v in params.items()}


def get_with_retries(
    url: str,
    params: Optional[dict] = None,
    timeout: int = 10,
    max_retries: int = DEFAULT_MAX_RETRIES,
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
) -> Tuple[Optional[requests.Response], Optional[str]]:
    """
    GET, retrying timeouts/connection errors with exponential backoff.
    Returns (response, None) on success, (None, error_message) on failure.
    """
    params = params or {}
    last_error: Optional[str] = None
    for attempt in range(max_retries):
        try:
            resp = requests.get(url, params=params, timeout=timeout)
            return (resp, None)
        except requests.Timeout as e:
            last_error = f"Read timed out: {e}"
        except requests.RequestException as e:
            last_error = f"{type(e).__name__}: {e}"
        logger.warning(
            "EXTERNAL_API retry attempt=%s/%s url=%s params=%s error=%s",
            attempt + 1, max_retries, url[:60], _loggable(params), last_error,
        )
        if attempt < max_retries - 1:
            delay = initial_backoff * (2 ** attempt)
            logger.info("EXTERNAL_API backoff %.1fs before retry", delay)
            time.sleep(delay)
    return (None, last_error)


def get_json_with_retries(url: str, params: Optional[dict] = None, **kwargs: Any) -> Tuple[Optional[dict], Optional[str]]:
    """get_with_retries + status check + JSON decode. Returns (data, None) or (None, error)."""
    resp, err = get_with_retries(url, params=params, **kwargs)
    if err is not None:
        return (None, err)
    try:
        resp.raise_for_status()
        return (resp.json(), None)
    except (requests.RequestException, ValueError) as e:
        return (None, f"{type(e).__name__}: {e}")
