"""Wire models for the ATLAS ticket API.

The API speaks camelCase JSON; the models use snake_case attributes with
camelCase aliases, so ``model_dump(by_alias=True)`` produces the body the
server expects and ``model_validate`` accepts what it returns.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from atlas_widget import __version__

SUBMITTED_VIA = "atlas-widget-python"
REFERENCE_PREFIX = "ATLAS"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WidgetContext(_CamelModel):
    """Copy of device facts the server uses for enrichment."""

    category: str
    urgency: str
    submitted_via: str = SUBMITTED_VIA
    widget_version: str = __version__
    os_version: str | None = None
    ip_address: str | None = None
    domain: str | None = None
    teamviewer_version: str | None = None


class TicketSubmission(_CamelModel):
    email: str
    title: str
    body: str
    priority: str = "medium"
    user_name: str | None = None
    ninja_device_id: int | None = None
    computer_name: str | None = None
    teamviewer_id: str | None = None
    widget_context: WidgetContext

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class EnrichmentSummary(_CamelModel):
    device_found: bool = False
    device_count: int = 0
    end_user_found: bool = False
    enriched_fields: list[str] = Field(default_factory=list)


class SubmitResult(_CamelModel):
    success: bool
    ticket_id: str | None = None
    enrichment: EnrichmentSummary | None = None
    error: str | None = None

    @property
    def reference_code(self) -> str | None:
        """Short code shown to the user, e.g. ``ATLAS-ABCDEF12``."""
        if not self.success or not self.ticket_id:
            return None
        return f"{REFERENCE_PREFIX}-{self.ticket_id[:8].upper()}"


class TicketSummary(_CamelModel):
    id: str
    title: str = ""
    status: str = "open"
    priority: str = "medium"
    category: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("title", "status", "priority", mode="before")
    @classmethod
    def _null_as_default(cls, value: object, info: ValidationInfo) -> object:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class TicketListResult(_CamelModel):
    success: bool
    tickets: list[TicketSummary] = Field(default_factory=list)
    error: str | None = None


class EmailLookupResult(_CamelModel):
    success: bool
    email: str | None = None
    error: str | None = None


class ConnectionStatus(str, Enum):
    CONNECTED = "connected"
    LIMITED = "limited"
    OFFLINE = "offline"
