"""Exceptions raised by the ticket layer."""

from __future__ import annotations


class TicketError(Exception):
    """Base error for ticket submission failures."""


class TicketConnectionError(TicketError):
    """Raised when the ATLAS API gave no response (DNS, refused, timeout)."""


class FormValidationError(TicketError):
    """Raised when required ticket form fields are missing or malformed."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"Please fill in all required fields: {', '.join(fields)}")
