"""Walmart affiliate product search client."""

from typing import Any, Dict, List, Optional
import logging

import httpx

from app.config import settings
from app.exceptions import ExternalServiceError

logger = logging.getLogger("mealplanner.walmart")

BASE_URL = "https://developer.api.walmart.com"
SEARCH_PATH = "/api-proxy/service/affil/product/v2/search"

_client: Optional[httpx.Client] = None
_api_key: Optional[str] = None


def connect(
    api_key: Optional[str] = None,
    timeout: float = None,
    transport: Optional[httpx.BaseTransport] = None,
):
    global _client, _api_key
    close()
    _api_key = api_key if api_key is not None else settings.walmart_api_key
    _client = httpx.Client(
        base_url=BASE_URL,
        timeout=timeout or settings.http_timeout_sec,
        transport=transport,
    )


def close():
    global _client
    try:
        if _client is not None:
            _client.close()
    finally:
        _client = None


def is_configured() -> bool:
    if _client is None:
        return bool(settings.walmart_api_key)
    return bool(_api_key)


def search_products(query: str) -> List[Dict[str, Any]]:
    if _client is None:
        connect()
    if not _api_key:
        raise ExternalServiceError("Walmart API key not configured", service="walmart")

    try:
        response = _client.get(
            SEARCH_PATH,
            params={"query": query},
            headers={"WM_SEC.ACCESS_TOKEN": _api_key, "Accept": "application/json"},
        )
    except httpx.HTTPError as exc:
        raise ExternalServiceError(f"Walmart request failed: {exc}", service="walmart") from exc
    if response.status_code >= 400:
        raise ExternalServiceError(
            f"Walmart returned HTTP {response.status_code}", service="walmart"
        )
    try:
        items = response.json().get("items", [])
    except (ValueError, AttributeError) as exc:
        raise ExternalServiceError(
            "Walmart returned an unreadable body", service="walmart"
        ) from exc
    if not isinstance(items, list):
        raise ExternalServiceError("Walmart returned an unexpected body", service="walmart")
    return items
