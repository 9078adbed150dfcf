"""
==============================================================================
Backend Client Tests
==============================================================================

Tests for URL building and error folding in the demo backend client.

==============================================================================
"""

import asyncio

import httpx
import pytest

from healthchain.client.backend import BackendClient
from healthchain.core.exceptions import AppException

from tests.conftest import BACKEND_URL, DEMO_IDENTIFIER, FakeBackend


def make_client(handler) -> BackendClient:
    return BackendClient(base_url=BACKEND_URL, transport=httpx.MockTransport(handler))


def unavailable_message(coro) -> str:
    with pytest.raises(AppException) as exc_info:
        asyncio.run(coro)
    assert exc_info.value.code == "BACKEND_UNAVAILABLE"
    assert exc_info.value.status_code == 502
    return exc_info.value.message


class TestEndpoints:
    """Tests for the four backend endpoints."""

    def test_health(self, backend: FakeBackend, backend_client: BackendClient):
        assert asyncio.run(backend_client.health()) == {"status": "healthy"}
        assert backend.last_request.url.path == "/health"

    def test_emergency_sends_hospital_key(self, backend: FakeBackend, backend_client: BackendClient):
        data = asyncio.run(backend_client.emergency(DEMO_IDENTIFIER))

        assert data["emergency_data"]["blood_type"] == "O+"
        request = backend.last_request
        assert request.url.path == f"/emergency/{DEMO_IDENTIFIER}"
        assert request.url.params["hospital_key"] == "HOSPITAL123"

    def test_forms_path(self, backend: FakeBackend, backend_client: BackendClient):
        asyncio.run(backend_client.forms(DEMO_IDENTIFIER, "bank_kyc"))
        assert backend.last_request.url.path == f"/forms/{DEMO_IDENTIFIER}/bank_kyc"

    def test_vault_returns_error_payload_as_is(self, backend_client: BackendClient):
        data = asyncio.run(backend_client.vault("000000000000"))
        assert data == {"error": "Patient not found"}

    def test_path_segments_are_quoted(self, backend: FakeBackend, backend_client: BackendClient):
        asyncio.run(backend_client.forms("12/34", "x y"))
        assert backend.last_request.url.raw_path == b"/forms/12%2F34/x%20y"

    def test_trailing_slash_in_base_url(self, backend: FakeBackend):
        client = BackendClient(
            base_url=BACKEND_URL + "/",
            transport=httpx.MockTransport(backend.handler),
        )
        assert client.base_url == BACKEND_URL
        asyncio.run(client.health())
        assert backend.last_request.url.path == "/health"


class TestErrorHandling:
    """Tests for transport and HTTP failures."""

    def test_connection_error(self, backend: FakeBackend, backend_client: BackendClient):
        backend.offline = True
        message = unavailable_message(backend_client.health())
        assert "Connection refused" in message

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        message = unavailable_message(make_client(handler).health())
        assert message == "Backend request timed out"

    def test_http_error_with_detail_becomes_error_payload(self):
        def handler(request):
            return httpx.Response(404, json={"detail": "Not Found"})

        data = asyncio.run(make_client(handler).vault(DEMO_IDENTIFIER))
        assert data == {"error": "Not Found"}

    def test_http_error_with_error_key_is_kept(self):
        def handler(request):
            return httpx.Response(403, json={"error": "Invalid hospital key"})

        data = asyncio.run(make_client(handler).emergency(DEMO_IDENTIFIER))
        assert data == {"error": "Invalid hospital key"}

    def test_http_error_without_json(self):
        def handler(request):
            return httpx.Response(500, text="Internal Server Error")

        message = unavailable_message(make_client(handler).health())
        assert message == "Backend returned HTTP 500"

    def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, text="<html>hello</html>")

        message = unavailable_message(make_client(handler).health())
        assert message == "Backend returned invalid JSON"

    def test_non_object_json(self):
        def handler(request):
            return httpx.Response(200, json=["healthy"])

        message = unavailable_message(make_client(handler).health())
        assert message == "Unexpected backend response"
