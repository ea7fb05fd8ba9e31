"""Kroger product API client with an OAuth2 client-credentials token cache."""

from typing import Any, Dict, List, Optional
import logging
import time

import httpx

from app.config import settings
from app.exceptions import ExternalServiceError

logger = logging.getLogger("mealplanner.kroger")

BASE_URL = "https://api.kroger.com"
TOKEN_PATH = "/v1/connect/oauth2/token"
DEFAULT_LOCATION_ID = "45202"
TOKEN_EXPIRY_MARGIN_SEC = 60

_client: Optional[httpx.Client] = None
_credentials: Optional[tuple] = None
_token: Optional[str] = None
_token_expires_at: float = 0.0


def connect(
    client_id: Optional[str] = None,
    client_secret: Optional[str] = None,
    timeout: float = None,
    transport: Optional[httpx.BaseTransport] = None,
):
    global _client, _credentials
    close()
    client_id = client_id if client_id is not None else settings.kroger_client_id
    client_secret = (
        client_secret if client_secret is not None else settings.kroger_client_secret
    )
    _credentials = (client_id, client_secret) if client_id and client_secret else None
    _client = httpx.Client(
        base_url=BASE_URL,
        timeout=timeout or settings.http_timeout_sec,
        transport=transport,
    )


def close():
    global _client, _token, _token_expires_at
    try:
        if _client is not None:
            _client.close()
    finally:
        _client = None
        _token = None
        _token_expires_at = 0.0


def is_configured() -> bool:
    if _client is None:
        return bool(settings.kroger_client_id and settings.kroger_client_secret)
    return _credentials is not None


def _ensure_token() -> str:
    global _token, _token_expires_at
    if _token and time.monotonic() < _token_expires_at:
        return _token

    try:
        response = _client.post(
            TOKEN_PATH,
            data={"grant_type": "client_credentials", "scope": "product.compact"},
            auth=_credentials,
        )
    except httpx.HTTPError as exc:
        raise ExternalServiceError(f"Kroger auth failed: {exc}", service="kroger") from exc
    if response.status_code >= 400:
        raise ExternalServiceError(
            f"Kroger auth returned HTTP {response.status_code}", service="kroger"
        )

    try:
        body = response.json()
        token = body["access_token"]
        expires_in = float(body.get("expires_in", 1800))
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        raise ExternalServiceError(
            "Kroger auth returned an unreadable token response", service="kroger"
        ) from exc
    _token = token
    _token_expires_at = time.monotonic() + max(expires_in - TOKEN_EXPIRY_MARGIN_SEC, 0)
    return _token


def search_products(term: str, zip_code: Optional[str] = None) -> List[Dict[str, Any]]:
    """Return raw Kroger product records for ``term``"""
    if _client is None:
        connect()
    if _credentials is None:
        raise ExternalServiceError("Kroger credentials not configured", service="kroger")

    token = _ensure_token()
    try:
        response = _client.get(
            "/v1/products",
            params={
                "filter.term": term,
                "filter.locationId": zip_code or DEFAULT_LOCATION_ID,
            },
            headers={"Authorization": f"Bearer {token}", "Accept": "application/json"},
        )
    except httpx.HTTPError as exc:
        raise ExternalServiceError(f"Kroger request failed: {exc}", service="kroger") from exc
    if response.status_code >= 400:
        raise ExternalServiceError(
            f"Kroger returned HTTP {response.status_code}", service="kroger"
        )
    try:
        products = response.json().get("data", [])
    except (ValueError, AttributeError) as exc:
        raise ExternalServiceError(
            "Kroger returned an unreadable body", service="kroger"
        ) from exc
    if not isinstance(products, list):
        raise ExternalServiceError("Kroger returned an unexpected body", service="kroger")
    return products
