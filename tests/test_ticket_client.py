"""Tests for the ATLAS ticket API client: mock transports and a fake backend."""

from __future__ import annotations

import json

import httpx
import pytest

from atlas_widget.config import WidgetConfig
from atlas_widget.context.models import DeviceContext
from atlas_widget.tickets import (
    ConnectionStatus,
    TicketClient,
    TicketForm,
    TicketSubmission,
    WidgetContext,
    build_submission,
    health_url,
)
from atlas_widget.tickets.client import CONNECTION_ERROR, LIST_FAILED, SUBMIT_FAILED

API = "https://atlas.test/api"


def _ticket() -> TicketSubmission:
    return TicketSubmission(
        email="jane.doe@example.com",
        title="[Printing] Printer offline",
        body="Printer on floor 3 is offline.",
        priority="medium",
        widget_context=WidgetContext(category="Printing", urgency="normal"),
    )


def _client(handler) -> TicketClient:
    return TicketClient(API, transport=httpx.MockTransport(handler))


def _refuse(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


# ── Helpers ───────────────────────────────────────────────────────


class TestHealthUrl:
    def test_strips_api_segment(self):
        assert health_url("https://atlas.test/api") == "https://atlas.test/health"
        assert health_url("https://atlas.test/api/") == "https://atlas.test/health"

    def test_without_api_segment(self):
        assert health_url("http://localhost:3000") == "http://localhost:3000/health"

    def test_only_trailing_segment(self):
        assert health_url("https://api.atlas.test/v1") == "https://api.atlas.test/v1/health"


class TestFromConfig:
    def test_uses_config(self):
        client = TicketClient.from_config(WidgetConfig(api_base_url="http://x/api/", timeout=3.0))
        assert client.base_url == "http://x/api"
        assert client.timeout == 3.0


# ── submit ────────────────────────────────────────────────────────


class TestSubmit:
    @pytest.mark.asyncio
    async def test_created(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={
                "ticket": {"id": "abcdef12-3456-7890-abcd-ef1234567890"},
                "enrichment": {
                    "deviceFound": True,
                    "deviceCount": 1,
                    "endUserFound": True,
                    "enrichedFields": ["organization", "location"],
                },
            })

        async with _client(handler) as client:
            result = await client.submit(_ticket())

        assert seen["method"] == "POST"
        assert seen["url"] == f"{API}/tickets"
        assert seen["body"]["widgetContext"]["category"] == "Printing"
        assert result.success is True
        assert result.reference_code == "ATLAS-ABCDEF12"
        assert result.enrichment.device_found is True
        assert result.enrichment.enriched_fields == ["organization", "location"]

    @pytest.mark.asyncio
    async def test_network_failure(self):
        async with _client(_refuse) as client:
            result = await client.submit(_ticket())
        assert result.success is False
        assert result.error == CONNECTION_ERROR

    @pytest.mark.asyncio
    async def test_timeout_is_network_failure(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with _client(handler) as client:
            result = await client.submit(_ticket())
        assert result.error == CONNECTION_ERROR

    @pytest.mark.asyncio
    async def test_server_message_used(self):
        def handler(request):
            return httpx.Response(422, json={"success": False, "error": "Title too long"})

        async with _client(handler) as client:
            result = await client.submit(_ticket())
        assert result.success is False
        assert result.error == "Title too long"

    @pytest.mark.asyncio
    async def test_generic_message_without_server_error(self):
        def handler(request):
            return httpx.Response(500, text="<html>Internal Server Error</html>")

        async with _client(handler) as client:
            result = await client.submit(_ticket())
        assert result.error == SUBMIT_FAILED

    @pytest.mark.asyncio
    async def test_submitted_once(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503, json={"message": "Maintenance"})

        async with _client(handler) as client:
            result = await client.submit(_ticket())
        assert len(calls) == 1
        assert result.error == "Maintenance"

    @pytest.mark.asyncio
    async def test_malformed_enrichment_keeps_ticket(self):
        def handler(request):
            return httpx.Response(201, json={
                "ticket": {"id": "abcdef12-3456-7890-abcd-ef1234567890"},
                "enrichment": {"deviceFound": True, "deviceCount": None, "enrichedFields": None},
            })

        async with _client(handler) as client:
            result = await client.submit(_ticket())
        assert result.success is True
        assert result.reference_code == "ATLAS-ABCDEF12"
        assert result.enrichment is None

    @pytest.mark.asyncio
    async def test_numeric_ticket_id(self):
        def handler(request):
            return httpx.Response(201, json={"success": True, "data": {"ticket": {"id": 4242}}})

        async with _client(handler) as client:
            result = await client.submit(_ticket())
        assert result.ticket_id == "4242"
        assert result.reference_code == "ATLAS-4242"


# ── list / resolve / health ───────────────────────────────────────


class TestListTickets:
    @pytest.mark.asyncio
    async def test_bare_list(self):
        def handler(request):
            assert request.url.params["email"] == "jane.doe@example.com"
            return httpx.Response(200, json=[{
                "id": "t-1",
                "title": "[Email] Outlook",
                "status": "open",
                "priority": "high",
                "category": "Email",
                "createdAt": "2026-10-01T08:00:00Z",
                "updatedAt": "2026-10-02T08:00:00Z",
            }])

        async with _client(handler) as client:
            result = await client.list_tickets("jane.doe@example.com")
        assert result.success
        assert result.tickets[0].created_at == "2026-10-01T08:00:00Z"
        assert result.tickets[0].priority == "high"

    @pytest.mark.asyncio
    async def test_wrapped_list(self):
        def handler(request):
            return httpx.Response(200, json={"tickets": [{"id": "t-2", "title": "x"}]})

        async with _client(handler) as client:
            result = await client.list_tickets("a@b.c")
        assert [t.id for t in result.tickets] == ["t-2"]

    @pytest.mark.asyncio
    async def test_numeric_id_and_null_fields(self):
        def handler(request):
            return httpx.Response(200, json=[
                {"id": 42, "title": None, "status": None, "priority": None},
            ])

        async with _client(handler) as client:
            result = await client.list_tickets("a@b.c")
        assert result.success
        ticket = result.tickets[0]
        assert ticket.id == "42"
        assert ticket.title == ""
        assert ticket.status == "open"
        assert ticket.priority == "medium"

    @pytest.mark.asyncio
    async def test_unusable_item_is_failed_result(self):
        def handler(request):
            return httpx.Response(200, json={"tickets": [{"title": "no id"}]})

        async with _client(handler) as client:
            result = await client.list_tickets("a@b.c")
        assert result.success is False
        assert result.error == LIST_FAILED

    @pytest.mark.asyncio
    async def test_offline(self):
        async with _client(_refuse) as client:
            result = await client.list_tickets("a@b.c")
        assert result.success is False
        assert result.error == CONNECTION_ERROR


class TestResolveEmail:
    @pytest.mark.asyncio
    async def test_found(self):
        def handler(request):
            assert request.url.path == "/api/devices/6699/email"
            return httpx.Response(200, json={"email": "jane.doe@example.com"})

        async with _client(handler) as client:
            result = await client.resolve_email(6699)
        assert result.email == "jane.doe@example.com"

    @pytest.mark.asyncio
    async def test_non_string_email(self):
        def handler(request):
            return httpx.Response(200, json={"email": 12345})

        async with _client(handler) as client:
            result = await client.resolve_email(6699)
        assert result.success is True
        assert result.email is None

    @pytest.mark.asyncio
    async def test_suggest_email_only_without_domain(self):
        def handler(request):
            return httpx.Response(200, json={"email": "jane.doe@example.com"})

        async with _client(handler) as client:
            assert await client.suggest_email(DeviceContext(ninja_device_id=6699)) == "jane.doe@example.com"
            assert await client.suggest_email(DeviceContext(ninja_device_id=6699, domain="CONTOSO")) is None
            assert await client.suggest_email(DeviceContext()) is None

    @pytest.mark.asyncio
    async def test_suggest_email_offline(self):
        async with _client(_refuse) as client:
            assert await client.suggest_email(DeviceContext(ninja_device_id=6699)) is None


class TestHealth:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,expected", [
        (200, ConnectionStatus.CONNECTED),
        (404, ConnectionStatus.CONNECTED),
        (499, ConnectionStatus.CONNECTED),
        (500, ConnectionStatus.LIMITED),
        (503, ConnectionStatus.LIMITED),
    ])
    async def test_status_codes(self, status, expected):
        def handler(request):
            assert str(request.url) == "https://atlas.test/health"
            return httpx.Response(status)

        async with _client(handler) as client:
            assert await client.check_health() == expected

    @pytest.mark.asyncio
    async def test_offline(self):
        async with _client(_refuse) as client:
            assert await client.check_health() == ConnectionStatus.OFFLINE


# ── End to end against a fake backend ─────────────────────────────


class TestAgainstFakeBackend:
    @pytest.mark.asyncio
    async def test_submit_then_list(self, atlas_app):
        ctx = DeviceContext(
            computer_name="DESKTOP-42",
            ip_address="192.168.3.21",
            ninja_device_id=6699,
        )
        form = TicketForm(
            name="Jane Doe",
            email="jane.doe@example.com",
            category="Printing",
            subcategory="Printer offline",
            summary="Floor 3 printer",
            description="Shows offline since this morning.",
            urgency="critical",
        )
        transport = httpx.ASGITransport(app=atlas_app)
        async with TicketClient("http://atlas.test/api", transport=transport) as client:
            assert await client.check_health() == ConnectionStatus.CONNECTED

            result = await client.submit(build_submission(form, ctx))
            assert result.success
            assert result.reference_code == "ATLAS-ABCDEF12"
            assert result.enrichment.device_found is True

            listed = await client.list_tickets("jane.doe@example.com")
            assert listed.success
            assert listed.tickets[0].priority == "urgent"
            assert listed.tickets[0].category == "Printing > Printer offline"

            assert await client.suggest_email(ctx) == "jane.doe@example.com"

        sent = atlas_app.state.received[0]
        assert sent["widgetContext"]["ipAddress"] == "192.168.3.21"
        assert sent["ninjaDeviceId"] == 6699

    @pytest.mark.asyncio
    async def test_rejected_by_backend(self, atlas_app):
        ticket = _ticket().model_copy(update={"email": "not-an-email"})
        transport = httpx.ASGITransport(app=atlas_app)
        async with TicketClient("http://atlas.test/api", transport=transport) as client:
            result = await client.submit(ticket)
        assert result.success is False
        assert result.error == "A valid email is required"

    @pytest.mark.asyncio
    async def test_unknown_device_email(self, atlas_app):
        transport = httpx.ASGITransport(app=atlas_app)
        async with TicketClient("http://atlas.test/api", transport=transport) as client:
            result = await client.resolve_email(1)
        assert result.success is False
        assert result.error == "No end user for device"
