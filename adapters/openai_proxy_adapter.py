"""HTTP client for the OpenAI proxy cloud function.

The proxy wraps chat-completion responses as ``{"success": bool, "data": ...}``.
Retry, rate limiting and caching are handled by ``services.ai_service``.
"""

from typing import Any, Dict, Optional
import logging

import httpx

from app.config import settings
from app.exceptions import ExternalServiceError

logger = logging.getLogger("mealplanner.ai_proxy")

RETRYABLE_STATUS = {429, 500, 503}

_client: Optional[httpx.Client] = None
_auth_token: Optional[str] = None


def connect(
    functions_url: str = None,
    auth_token: Optional[str] = None,
    timeout: float = None,
    transport: Optional[httpx.BaseTransport] = None,
):
    global _client, _auth_token
    close()
    _auth_token = auth_token if auth_token is not None else settings.ai_auth_token
    _client = httpx.Client(
        base_url=(functions_url or settings.functions_url).rstrip("/"),
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
    return bool(settings.functions_url)


def chat_completion(payload: Dict[str, Any]) -> str:
    """POST one chat-completion request and return the reply text the proxy wraps in ``data``.

    Raises:
        ExternalServiceError: with ``details["retryable"]`` set for network
            errors, timeouts and HTTP 429/500/503
    """
    if _client is None:
        connect()

    headers = {"Content-Type": "application/json"}
    if _auth_token:
        headers["Authorization"] = f"Bearer {_auth_token}"

    try:
        response = _client.post("/openAIProxy", json=payload, headers=headers)
    except httpx.HTTPError as exc:
        raise ExternalServiceError(
            f"AI proxy unreachable: {exc}",
            service="openai",
            details={"retryable": True, "status_code": None},
        ) from exc

    if response.status_code >= 400:
        raise ExternalServiceError(
            f"AI proxy returned HTTP {response.status_code}",
            service="openai",
            details={
                "retryable": response.status_code in RETRYABLE_STATUS,
                "status_code": response.status_code,
            },
        )

    try:
        body = response.json()
    except ValueError as exc:
        raise ExternalServiceError(
            "AI proxy returned a non-JSON body",
            service="openai",
            details={"retryable": False, "status_code": response.status_code},
        ) from exc
    if not isinstance(body, dict) or not body.get("success"):
        error = body.get("error") if isinstance(body, dict) else None
        raise ExternalServiceError(
            error or "AI proxy reported failure",
            service="openai",
            details={"retryable": False, "status_code": response.status_code},
        )
    data = body.get("data")
    if isinstance(data, dict):
        # raw completion object
        try:
            data = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ExternalServiceError(
                "AI proxy returned a completion without choices",
                service="openai",
                details={"retryable": False, "status_code": response.status_code},
            ) from exc
    return data or ""
