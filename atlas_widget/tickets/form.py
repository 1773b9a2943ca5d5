"""Ticket form: validation and payload construction."""

from __future__ import annotations

import re
from dataclasses import dataclass

from atlas_widget import __version__
from atlas_widget.context.models import DeviceContext

from .errors import FormValidationError
from .models import TicketSubmission, WidgetContext

SEPARATOR = "─" * 31

URGENCIES = ("low", "normal", "high", "critical")

_PRIORITY_BY_URGENCY = {
    "low": "low",
    "normal": "medium",
    "high": "high",
    "critical": "urgent",
}

CATEGORIES: dict[str, list[str]] = {
    "Login & Access": ["Can't login", "Password expired", "Account locked", "MFA / 2FA issue"],
    "Email": ["Can't send", "Can't receive", "Outlook crash", "Missing emails", "Calendar issue"],
    "Printing": ["Printer offline", "Print quality", "Wrong printer", "Scanner issue"],
    "Network & Internet": ["No internet", "Slow connection", "VPN issues", "WiFi problems"],
    "Software": ["Won't open", "Crashing", "Need installation", "Running slow", "Update needed"],
    "Hardware": ["Monitor", "Keyboard / Mouse", "Laptop", "Docking station", "Audio / Headset"],
    "Other": [],
}


def map_urgency_to_priority(urgency: str) -> str:
    return _PRIORITY_BY_URGENCY.get(urgency, "medium")


def prefill_name(logged_in_user: str) -> str:
    """``john.doe`` -> ``John Doe``."""
    spaced = logged_in_user.replace(".", " ")
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced)


@dataclass
class TicketForm:
    """Fields the user fills in before submitting."""

    name: str = ""
    email: str = ""
    category: str = ""
    subcategory: str = ""
    summary: str = ""
    description: str = ""
    urgency: str = "normal"

    def validate(self) -> list[str]:
        """Return the names of invalid fields (empty when the form is valid)."""
        invalid = []
        if not self.name.strip():
            invalid.append("name")
        email = self.email.strip()
        if not email or "@" not in email:
            invalid.append("email")
        if not self.category.strip():
            invalid.append("category")
        if not self.summary.strip():
            invalid.append("summary")
        if not self.description.strip():
            invalid.append("description")
        return invalid

    @property
    def full_category(self) -> str:
        category = self.category.strip()
        subcategory = self.subcategory.strip()
        return f"{category} > {subcategory}" if subcategory else category


def format_ticket_body(
    description: str,
    category: str,
    urgency: str,
    context: DeviceContext | None,
    widget_version: str = __version__,
) -> str:
    """Description followed by a block of category and device details."""

    def show(value: object, fallback: str) -> str:
        return fallback if value is None else str(value)

    ctx = context
    lines = [
        description,
        "",
        SEPARATOR,
        f"Category: {category}",
        f"Urgency: {urgency.upper()}",
        "",
        "Device Information:",
        f"  Computer: {show(ctx.computer_name if ctx else None, 'Unknown')}",
        f"  User: {show(ctx.logged_in_user if ctx else None, 'Unknown')}",
        f"  OS: {show(ctx.os_version if ctx else None, 'Unknown')}",
        f"  IP: {show(ctx.ip_address if ctx else None, 'Unknown')}",
        f"  Ninja ID: {show(ctx.ninja_device_id if ctx else None, 'Not found')}",
        f"  TeamViewer: {show(ctx.teamviewer_id if ctx else None, 'Not installed')}",
        f"  Domain: {show(ctx.domain if ctx else None, 'N/A')}",
        SEPARATOR,
        f"Submitted via ATLAS Widget v{widget_version}",
    ]
    return "\n".join(lines)


def build_submission(
    form: TicketForm,
    context: DeviceContext | None = None,
    widget_version: str = __version__,
) -> TicketSubmission:
    """Validate *form* and package it with *context* for the API.

    Raises :class:`FormValidationError` without building anything when a
    required field is missing.
    """
    invalid = form.validate()
    if invalid:
        raise FormValidationError(invalid)

    category = form.full_category
    urgency = form.urgency if form.urgency in URGENCIES else "normal"
    ctx = context

    return TicketSubmission(
        email=form.email.strip(),
        title=f"[{category}] {form.summary.strip()}",
        body=format_ticket_body(form.description.strip(), category, urgency, ctx, widget_version),
        priority=map_urgency_to_priority(urgency),
        user_name=form.name.strip(),
        ninja_device_id=ctx.ninja_device_id if ctx else None,
        computer_name=ctx.computer_name if ctx else None,
        teamviewer_id=ctx.teamviewer_id if ctx else None,
        widget_context=WidgetContext(
            category=category,
            urgency=urgency,
            widget_version=widget_version,
            os_version=ctx.os_version if ctx else None,
            ip_address=ctx.ip_address if ctx else None,
            domain=ctx.domain if ctx else None,
            teamviewer_version=ctx.teamviewer_version if ctx else None,
        ),
    )
