"""ATLAS ticket API client.

Uses httpx for async HTTP.  Every call is one-shot: no retries, no queue.
A failed submission has to be triggered again by the user.  Transport
failures never escape the public methods; they come back as a failed
result carrying a connection-error message.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from atlas_widget.config import WidgetConfig
from atlas_widget.context.models import DeviceContext

from .errors import TicketConnectionError
from .models import (
    ConnectionStatus,
    EmailLookupResult,
    EnrichmentSummary,
    SubmitResult,
    TicketListResult,
    TicketSubmission,
    TicketSummary,
)

logger = logging.getLogger(__name__)

CONNECTION_ERROR = "Connection error. Please check your internet and try again."
SUBMIT_FAILED = "Failed to submit ticket. Please try again."
LIST_FAILED = "Failed to load tickets. Please try again."
LOOKUP_FAILED = "Failed to resolve email for this device."


def health_url(api_base_url: str) -> str:
    """``https://host/api`` -> ``https://host/health``."""
    base = api_base_url.rstrip("/")
    if base.endswith("/api"):
        base = base[: -len("/api")]
    return f"{base}/health"


def _json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _server_error(body: Any, fallback: str) -> str:
    if isinstance(body, dict):
        for key in ("error", "message"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return value["message"]
    return fallback


def _unwrap(body: Any) -> Any:
    """Accept both bare payloads and ``{"success": ..., "data": ...}`` envelopes."""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def _enrichment(value: Any) -> EnrichmentSummary | None:
    """Parse the enrichment summary; the ticket already exists, so a bad shape is dropped."""
    if not isinstance(value, dict):
        return None
    try:
        return EnrichmentSummary.model_validate(value)
    except ValidationError as exc:
        logger.warning("Ignoring malformed enrichment summary: %s", exc)
        return None


class TicketClient:
    """Thin async wrapper around the ATLAS ticket API.

    A single :class:`httpx.AsyncClient` is reused across calls.  Call
    :meth:`aclose` (or use as an async context manager) when done.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        health_timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.health_timeout = health_timeout
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: WidgetConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> TicketClient:
        config = config or WidgetConfig.from_env()
        return cls(
            config.api_base_url,
            timeout=config.timeout,
            health_timeout=config.health_timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> TicketClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    async def submit(self, ticket: TicketSubmission) -> SubmitResult:
        """POST the ticket to ``/tickets`` once."""
        try:
            response = await self._request("POST", "/tickets", json=ticket.to_payload())
        except TicketConnectionError as exc:
            logger.warning("Ticket submission failed: %s", exc)
            return SubmitResult(success=False, error=CONNECTION_ERROR)

        body = _json(response)
        if not response.is_success:
            logger.warning("Ticket rejected with HTTP %d", response.status_code)
            return SubmitResult(success=False, error=_server_error(body, SUBMIT_FAILED))

        data = _unwrap(body)
        ticket_data = data.get("ticket") if isinstance(data, dict) else None
        ticket_id = ticket_data.get("id") if isinstance(ticket_data, dict) else None
        if not ticket_id:
            logger.warning("Ticket accepted but response carried no ticket id")
            return SubmitResult(success=False, error=SUBMIT_FAILED)

        logger.info("Ticket %s created", ticket_id)
        return SubmitResult(
            success=True,
            ticket_id=str(ticket_id),
            enrichment=_enrichment(data.get("enrichment")),
        )

    async def list_tickets(self, email: str) -> TicketListResult:
        """GET the tickets previously submitted for *email*."""
        try:
            response = await self._request("GET", "/tickets", params={"email": email})
        except TicketConnectionError as exc:
            logger.warning("Ticket list failed: %s", exc)
            return TicketListResult(success=False, error=CONNECTION_ERROR)

        body = _json(response)
        if not response.is_success:
            return TicketListResult(success=False, error=_server_error(body, LIST_FAILED))

        items = _unwrap(body)
        if isinstance(items, dict):
            items = items.get("tickets", [])
        if not isinstance(items, list):
            return TicketListResult(success=False, error=LIST_FAILED)
        try:
            tickets = [TicketSummary.model_validate(item) for item in items if isinstance(item, dict)]
        except ValidationError as exc:
            logger.warning("Unexpected ticket list shape: %s", exc)
            return TicketListResult(success=False, error=LIST_FAILED)
        return TicketListResult(success=True, tickets=tickets)

    async def resolve_email(self, ninja_device_id: int) -> EmailLookupResult:
        """Map a NinjaOne device id to its end user's email, if the server knows one."""
        try:
            response = await self._request("GET", f"/devices/{ninja_device_id}/email")
        except TicketConnectionError as exc:
            logger.debug("Email lookup failed: %s", exc)
            return EmailLookupResult(success=False, error=CONNECTION_ERROR)

        body = _json(response)
        if not response.is_success:
            return EmailLookupResult(success=False, error=_server_error(body, LOOKUP_FAILED))

        data = _unwrap(body)
        email = data.get("email") if isinstance(data, dict) else None
        if not isinstance(email, str):
            email = None
        return EmailLookupResult(success=True, email=email or None)

    async def suggest_email(self, context: DeviceContext) -> str | None:
        """Backfill the contact email when the machine has no domain to derive it from."""
        if context.domain is not None or context.ninja_device_id is None:
            return None
        result = await self.resolve_email(context.ninja_device_id)
        return result.email if result.success else None

    async def check_health(self) -> ConnectionStatus:
        """Probe the API's health endpoint; any status below 500 counts as reachable."""
        url = health_url(self.base_url)
        try:
            response = await self._client.get(url, timeout=self.health_timeout)
        except httpx.TransportError as exc:
            logger.debug("Health check to %s failed: %s", url, exc)
            return ConnectionStatus.OFFLINE
        if response.status_code < 500:
            return ConnectionStatus.CONNECTED
        return ConnectionStatus.LIMITED

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            raise TicketConnectionError(f"Cannot reach ATLAS API at {url}: {exc}") from exc
