"""atlas_widget.tickets: support ticket form and API client.

Exports:
    TicketClient: async client for the ATLAS ticket API
    TicketForm: user-entered fields with validation
    build_submission: form + device context -> TicketSubmission
"""

from __future__ import annotations

from atlas_widget.tickets.client import TicketClient, health_url
from atlas_widget.tickets.errors import FormValidationError, TicketConnectionError, TicketError
from atlas_widget.tickets.form import (
    CATEGORIES,
    TicketForm,
    build_submission,
    format_ticket_body,
    map_urgency_to_priority,
    prefill_name,
)
from atlas_widget.tickets.models import (
    ConnectionStatus,
    EmailLookupResult,
    EnrichmentSummary,
    SubmitResult,
    TicketListResult,
    TicketSubmission,
    TicketSummary,
    WidgetContext,
)

__all__ = [
    "CATEGORIES",
    "ConnectionStatus",
    "EmailLookupResult",
    "EnrichmentSummary",
    "FormValidationError",
    "SubmitResult",
    "TicketClient",
    "TicketConnectionError",
    "TicketError",
    "TicketForm",
    "TicketListResult",
    "TicketSubmission",
    "TicketSummary",
    "WidgetContext",
    "build_submission",
    "format_ticket_body",
    "health_url",
    "map_urgency_to_priority",
    "prefill_name",
]
