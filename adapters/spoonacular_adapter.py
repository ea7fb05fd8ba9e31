"""Spoonacular REST client.

Responses are cached in-process for ``recipe_cache_ttl_sec`` keyed on the
endpoint and its sorted query parameters.
"""

from typing import Any, Dict, Optional, Tuple
import logging
import time

import httpx

from app.config import settings
from app.exceptions import ExternalServiceError

logger = logging.getLogger("mealplanner.spoonacular")

_client: Optional[httpx.Client] = None
_api_key: Optional[str] = None
_cache: Dict[str, Tuple[float, Any]] = {}


def connect(
    base_url: str = None,
    api_key: Optional[str] = None,
    timeout: float = None,
    transport: Optional[httpx.BaseTransport] = None,
):
    """Create the shared HTTP client. ``transport`` lets tests mock the upstream."""
    global _client, _api_key
    close()
    _api_key = api_key if api_key is not None else settings.spoonacular_api_key
    _client = httpx.Client(
        base_url=(base_url or settings.spoonacular_base_url).rstrip("/"),
        timeout=timeout or settings.http_timeout_sec,
        transport=transport,
    )
    logger.info("Spoonacular client ready (configured=%s)", bool(_api_key))


def close():
    global _client
    try:
        if _client is not None:
            _client.close()
    finally:
        _client = None


def is_configured() -> bool:
    if _client is None:
        return bool(settings.spoonacular_api_key)
    return bool(_api_key)


def clear_cache():
    _cache.clear()


def _get_client() -> httpx.Client:
    if _client is None:
        connect()
    return _client


def _cache_key(endpoint: str, params: Dict[str, Any]) -> str:
    parts = "&".join(f"{k}={params[k]}" for k in sorted(params))
    return f"{endpoint}?{parts}"


def get(endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
    """GET ``endpoint`` (relative to the recipes base URL, or absolute) and return JSON.

    Raises:
        ExternalServiceError: no API key, transport failure, quota exceeded (402)
            or any other non-2xx response
    """
    params = {k: v for k, v in (params or {}).items() if v is not None and v != ""}
    key = _cache_key(endpoint, params)
    cached = _cache.get(key)
    if cached and time.monotonic() - cached[0] < settings.recipe_cache_ttl_sec:
        return cached[1]

    client = _get_client()
    if not _api_key:
        raise ExternalServiceError(
            "Spoonacular API key not configured", service="spoonacular"
        )

    try:
        response = client.get(endpoint, params={**params, "apiKey": _api_key})
    except httpx.HTTPError as exc:
        raise ExternalServiceError(
            f"Spoonacular request failed: {exc}", service="spoonacular"
        ) from exc

    if response.status_code == 402:
        raise ExternalServiceError(
            "Spoonacular daily quota exceeded",
            service="spoonacular",
            code="QUOTA_EXCEEDED",
        )
    if response.status_code >= 400:
        raise ExternalServiceError(
            f"Spoonacular returned HTTP {response.status_code}",
            service="spoonacular",
            details={"status_code": response.status_code},
        )

    try:
        data = response.json()
    except ValueError as exc:
        raise ExternalServiceError(
            "Spoonacular returned a non-JSON body",
            service="spoonacular",
            details={"status_code": response.status_code},
        ) from exc
    _cache[key] = (time.monotonic(), data)
    return data


def api_root() -> str:
    """Base URL without the ``/recipes`` suffix, for the food endpoints"""
    base = str(_get_client().base_url).rstrip("/")
    if base.endswith("/recipes"):
        base = base[: -len("/recipes")]
    return base
