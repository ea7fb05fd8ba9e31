"""Instacart Developer Platform client (recipe and shopping-list pages, retailers)."""

from typing import Any, Dict, Optional
import logging

import httpx

from app.config import settings
from app.exceptions import ExternalServiceError, ServiceValidationError

logger = logging.getLogger("mealplanner.instacart")

DEV_BASE_URL = "https://connect.dev.instacart.tools"
PROD_BASE_URL = "https://connect.instacart.com"

_client: Optional[httpx.Client] = None
_api_key: Optional[str] = None


def base_url_for_environment() -> str:
    return PROD_BASE_URL if settings.is_production() else DEV_BASE_URL


def connect(
    api_key: Optional[str] = None,
    base_url: str = None,
    timeout: float = None,
    transport: Optional[httpx.BaseTransport] = None,
):
    global _client, _api_key
    close()
    _api_key = api_key if api_key is not None else settings.instacart_api_key
    _client = httpx.Client(
        base_url=base_url or base_url_for_environment(),
        timeout=timeout or settings.http_timeout_sec,
        transport=transport,
        headers={"Accept": "application/json", "Content-Type": "application/json"},
    )
    logger.info("Instacart client ready (configured=%s)", bool(_api_key))


def close():
    global _client
    try:
        if _client is not None:
            _client.close()
    finally:
        _client = None


def is_configured() -> bool:
    if _client is None:
        return bool(settings.instacart_api_key)
    return bool(_api_key)


def _request(method: str, path: str, **kwargs) -> Dict[str, Any]:
    if _client is None:
        connect()
    if not _api_key:
        raise ServiceValidationError("Instacart API key not configured")

    try:
        response = _client.request(
            method, path, headers={"Authorization": f"Bearer {_api_key}"}, **kwargs
        )
    except httpx.HTTPError as exc:
        raise ExternalServiceError(
            f"Instacart request failed: {exc}", service="instacart"
        ) from exc

    if response.status_code >= 400:
        raise ExternalServiceError(
            f"Instacart returned HTTP {response.status_code}",
            service="instacart",
            details={"status_code": response.status_code, "body": response.text[:500]},
        )
    try:
        body = response.json()
    except ValueError as exc:
        raise ExternalServiceError(
            "Instacart returned a non-JSON body",
            service="instacart",
            details={"status_code": response.status_code, "body": response.text[:500]},
        ) from exc
    if not isinstance(body, dict):
        raise ExternalServiceError(
            "Instacart returned an unexpected body", service="instacart"
        )
    return body


def post(path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    return _request("POST", path, json=payload)


def get(path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return _request("GET", path, params=params)
