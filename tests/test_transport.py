"""Unit tests for the transport module."""
from urllib.parse import parse_qs

import httpx
import pytest
from pydantic import ValidationError

from companion.schedule import MedicationSchedule, Period
from companion.transport import (
    CompanionTransport,
    HTTPCompanionTransport,
    TransportError,
    create_companion_transport,
)


class TestCompanionTransport:
    """Tests for CompanionTransport interface."""

    def test_transport_is_abstract(self):
        """Test that CompanionTransport cannot be instantiated directly."""
        with pytest.raises(TypeError):
            CompanionTransport()  # type: ignore


class TestSendChat:
    """Tests for POST /chat."""

    @pytest.mark.asyncio
    async def test_posts_form_encoded_message(self, make_http_transport):
        """Test that the message is sent as a form field."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["content_type"] = request.headers["content-type"]
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(200, json={"response": "Nice to hear from you!"})

        transport = make_http_transport(handler)
        reply = await transport.send_chat("hello & good day")

        assert reply == "Nice to hear from you!"
        assert seen["method"] == "POST"
        assert seen["path"] == "/chat"
        assert seen["content_type"].startswith("application/x-www-form-urlencoded")
        assert seen["form"] == {"message": ["hello & good day"]}

    @pytest.mark.asyncio
    async def test_server_error_raises_transport_error(self, make_http_transport):
        """Test that a non-2xx status becomes TransportError."""
        transport = make_http_transport(lambda request: httpx.Response(500, text="boom"))

        with pytest.raises(TransportError) as exc_info:
            await transport.send_chat("hi")

        error = exc_info.value
        assert error.operation == "send_chat"
        assert error.status_code == 500
        assert isinstance(error.cause, httpx.HTTPStatusError)
        assert error.__cause__ is error.cause

    @pytest.mark.asyncio
    async def test_connection_error_raises_transport_error(self, make_http_transport):
        """Test that network failures become TransportError."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport = make_http_transport(handler)

        with pytest.raises(TransportError) as exc_info:
            await transport.send_chat("hi")

        assert isinstance(exc_info.value.cause, httpx.ConnectError)
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_invalid_json_raises_transport_error(self, make_http_transport):
        """Test that a non-JSON body becomes TransportError."""
        transport = make_http_transport(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(TransportError, match="invalid JSON"):
            await transport.send_chat("hi")

    @pytest.mark.asyncio
    async def test_missing_field_raises_transport_error(self, make_http_transport):
        """Test that a body without 'response' becomes TransportError."""
        transport = make_http_transport(lambda request: httpx.Response(200, json={"reply": "hi"}))

        with pytest.raises(TransportError, match="'response'"):
            await transport.send_chat("hi")


class TestFetchReminder:
    """Tests for GET /remind."""

    @pytest.mark.asyncio
    async def test_returns_reminder(self, make_http_transport):
        """Test fetching a reminder."""
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert request.url.path == "/remind"
            return httpx.Response(200, json={"reminder": "Take your blood pressure pill."})

        transport = make_http_transport(handler)
        assert await transport.fetch_reminder() == "Take your blood pressure pill."

    @pytest.mark.asyncio
    async def test_timeout_raises_transport_error(self, make_http_transport):
        """Test that timeouts become TransportError."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        transport = make_http_transport(handler)

        with pytest.raises(TransportError) as exc_info:
            await transport.fetch_reminder()

        assert exc_info.value.operation == "fetch_reminder"


class TestFetchSchedule:
    """Tests for GET /medication_schedule."""

    @pytest.mark.asyncio
    async def test_returns_schedule(self, make_http_transport, schedule_payload):
        """Test fetching and parsing the schedule."""
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/medication_schedule"
            return httpx.Response(200, json={"schedule": schedule_payload})

        transport = make_http_transport(handler)
        schedule = await transport.fetch_schedule()

        assert isinstance(schedule, MedicationSchedule)
        assert schedule.get(Period.EVENING).medications[0].name == "Atorvastatin"

    @pytest.mark.asyncio
    async def test_malformed_schedule_raises_transport_error(self, make_http_transport):
        """Test that schema violations become TransportError."""
        payload = {"schedule": {"morning": {"medications": "none"}}}
        transport = make_http_transport(lambda request: httpx.Response(200, json=payload))

        with pytest.raises(TransportError) as exc_info:
            await transport.fetch_schedule()

        assert isinstance(exc_info.value.cause, ValidationError)

    @pytest.mark.asyncio
    async def test_missing_schedule_key_raises_transport_error(self, make_http_transport):
        """Test that a body without 'schedule' becomes TransportError."""
        transport = make_http_transport(lambda request: httpx.Response(200, json=[]))

        with pytest.raises(TransportError, match="'schedule'"):
            await transport.fetch_schedule()

    @pytest.mark.asyncio
    async def test_makes_exactly_one_attempt(self, make_http_transport):
        """Test that failures are not retried."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503)

        transport = make_http_transport(handler)
        with pytest.raises(TransportError):
            await transport.fetch_schedule()

        assert len(calls) == 1


class TestDebugCallback:
    """Tests for transport logging."""

    @pytest.mark.asyncio
    async def test_failures_are_logged(self, make_http_transport):
        """Test that failed requests are reported through the debug callback."""
        entries = []
        transport = make_http_transport(lambda request: httpx.Response(404))
        transport.set_debug_callback(lambda *args: entries.append(args))

        with pytest.raises(TransportError):
            await transport.fetch_reminder()

        levels = [level for level, component, _ in entries]
        assert all(component == "Transport" for _, component, _ in entries)
        assert "debug" in levels
        assert "warning" in levels


class TestTransportFactory:
    """Tests for transport factory function."""

    def test_create_http_transport(self):
        """Test creating an HTTP transport via factory."""
        transport = create_companion_transport("http", base_url="http://example.test/")
        assert isinstance(transport, HTTPCompanionTransport)
        assert transport.base_url == "http://example.test"

    def test_kind_is_case_insensitive(self):
        """Test that the transport kind ignores case."""
        assert isinstance(create_companion_transport("HTTP"), HTTPCompanionTransport)

    def test_unknown_kind_raises_error(self):
        """Test that unknown transport kinds are rejected."""
        with pytest.raises(ValueError, match="Unsupported transport"):
            create_companion_transport("carrier-pigeon")

    def test_non_positive_timeout_raises_error(self):
        """Test that a zero timeout is rejected."""
        with pytest.raises(ValueError, match="timeout"):
            create_companion_transport("http", timeout=0)

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self):
        """Test that the owned client is closed on exit."""
        transport = create_companion_transport("http")
        async with transport:
            pass
        assert transport._client.is_closed
