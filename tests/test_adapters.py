"""
Tests for the upstream HTTP clients.

This test suite covers:
- The AI proxy envelope (string data, raw completion objects, failures)
- Which AI proxy failures are marked retryable
- Kroger token caching and product search
- Walmart search headers and errors
"""

import json

import httpx
import pytest

from adapters import kroger_adapter, openai_proxy_adapter, walmart_adapter
from app.exceptions import ExternalServiceError

PAYLOAD = {"model": "gpt-4", "messages": [{"role": "user", "content": "hi"}]}


def _connect_proxy(handler, auth_token="proxy-token"):
    openai_proxy_adapter.connect(
        functions_url="https://functions.test/mealplanner",
        auth_token=auth_token,
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture(autouse=True)
def close_clients():
    yield
    openai_proxy_adapter.close()
    kroger_adapter.close()
    walmart_adapter.close()


# =============================================================================
# AI PROXY
# =============================================================================


def test_proxy_returns_string_data():
    captured = []

    def handler(request):
        captured.append(request)
        return httpx.Response(200, json={"success": True, "data": '{"meals": []}'})

    _connect_proxy(handler)

    assert openai_proxy_adapter.chat_completion(PAYLOAD) == '{"meals": []}'
    request = captured[0]
    assert request.url.path == "/mealplanner/openAIProxy"
    assert request.headers["Authorization"] == "Bearer proxy-token"
    assert json.loads(request.content) == PAYLOAD


def test_proxy_unwraps_raw_completion():
    completion = {"choices": [{"message": {"role": "assistant", "content": "[\"Chop\"]"}}]}
    _connect_proxy(lambda r: httpx.Response(200, json={"success": True, "data": completion}))

    assert openai_proxy_adapter.chat_completion(PAYLOAD) == '["Chop"]'


def test_proxy_without_token_sends_no_auth_header():
    captured = []

    def handler(request):
        captured.append(request)
        return httpx.Response(200, json={"success": True, "data": "ok"})

    _connect_proxy(handler, auth_token="")
    openai_proxy_adapter.chat_completion(PAYLOAD)

    assert "Authorization" not in captured[0].headers


@pytest.mark.parametrize(
    "status_code, retryable",
    [(429, True), (500, True), (503, True), (400, False), (401, False)],
)
def test_proxy_http_errors_flag_retryable(status_code, retryable):
    _connect_proxy(lambda r: httpx.Response(status_code, json={}))

    with pytest.raises(ExternalServiceError) as exc_info:
        openai_proxy_adapter.chat_completion(PAYLOAD)

    assert exc_info.value.service == "openai"
    assert exc_info.value.details == {"retryable": retryable, "status_code": status_code}


def test_proxy_network_error_is_retryable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    _connect_proxy(handler)

    with pytest.raises(ExternalServiceError) as exc_info:
        openai_proxy_adapter.chat_completion(PAYLOAD)
    assert exc_info.value.details["retryable"] is True


def test_proxy_failure_envelope_is_not_retryable():
    _connect_proxy(
        lambda r: httpx.Response(200, json={"success": False, "error": "model overloaded"})
    )

    with pytest.raises(ExternalServiceError) as exc_info:
        openai_proxy_adapter.chat_completion(PAYLOAD)
    assert str(exc_info.value) == "model overloaded"
    assert exc_info.value.details["retryable"] is False


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>gateway</html>"),
        httpx.Response(200, json={"success": True, "data": {"error": "x"}}),
        httpx.Response(200, json={"success": True, "data": {"choices": []}}),
    ],
)
def test_proxy_malformed_reply_raises_external_service_error(response):
    _connect_proxy(lambda r: response)

    with pytest.raises(ExternalServiceError) as exc_info:
        openai_proxy_adapter.chat_completion(PAYLOAD)
    assert exc_info.value.service == "openai"
    assert exc_info.value.details["retryable"] is False


# =============================================================================
# KROGER
# =============================================================================


def test_kroger_caches_token_between_searches():
    """
    Verifies:
    - the client-credentials token is fetched once with basic auth
    - product searches send the bearer token and location filter
    """
    captured = []

    def handler(request):
        captured.append(request)
        if request.url.path == kroger_adapter.TOKEN_PATH:
            return httpx.Response(200, json={"access_token": "kr-token", "expires_in": 1800})
        return httpx.Response(
            200, json={"data": [{"items": [{"price": {"regular": 3.49}, "size": "1 lb"}]}]}
        )

    kroger_adapter.connect("client", "secret", transport=httpx.MockTransport(handler))

    first = kroger_adapter.search_products("rice", "62704")
    kroger_adapter.search_products("beans")

    assert first[0]["items"][0]["price"]["regular"] == 3.49
    paths = [r.url.path for r in captured]
    assert paths == [kroger_adapter.TOKEN_PATH, "/v1/products", "/v1/products"]
    assert captured[0].headers["Authorization"].startswith("Basic ")
    assert captured[1].headers["Authorization"] == "Bearer kr-token"
    assert captured[1].url.params["filter.locationId"] == "62704"
    assert captured[2].url.params["filter.locationId"] == kroger_adapter.DEFAULT_LOCATION_ID


def test_kroger_requires_credentials_and_reports_auth_failure():
    kroger_adapter.connect("", "", transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    assert kroger_adapter.is_configured() is False
    with pytest.raises(ExternalServiceError):
        kroger_adapter.search_products("rice")

    kroger_adapter.connect(
        "client", "secret", transport=httpx.MockTransport(lambda r: httpx.Response(401))
    )
    with pytest.raises(ExternalServiceError) as exc_info:
        kroger_adapter.search_products("rice")
    assert exc_info.value.service == "kroger"


def test_kroger_token_without_access_token():
    kroger_adapter.connect(
        "client", "secret",
        transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"token_type": "bearer"})),
    )

    with pytest.raises(ExternalServiceError) as exc_info:
        kroger_adapter.search_products("rice")
    assert exc_info.value.service == "kroger"


# =============================================================================
# WALMART
# =============================================================================


def test_walmart_search_sends_access_token():
    captured = []

    def handler(request):
        captured.append(request)
        return httpx.Response(200, json={"items": [{"name": "Rice", "salePrice": 2.48}]})

    walmart_adapter.connect("wm-key", transport=httpx.MockTransport(handler))

    items = walmart_adapter.search_products("rice")

    assert items == [{"name": "Rice", "salePrice": 2.48}]
    assert captured[0].url.path == walmart_adapter.SEARCH_PATH
    assert captured[0].headers["WM_SEC.ACCESS_TOKEN"] == "wm-key"


def test_walmart_http_error():
    walmart_adapter.connect("wm-key", transport=httpx.MockTransport(lambda r: httpx.Response(503)))

    with pytest.raises(ExternalServiceError) as exc_info:
        walmart_adapter.search_products("rice")
    assert exc_info.value.service == "walmart"


def test_walmart_non_json_body():
    walmart_adapter.connect(
        "wm-key", transport=httpx.MockTransport(lambda r: httpx.Response(200, text="<html></html>"))
    )

    with pytest.raises(ExternalServiceError) as exc_info:
        walmart_adapter.search_products("rice")
    assert exc_info.value.service == "walmart"
