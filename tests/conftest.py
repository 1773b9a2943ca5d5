"""pytest configuration for ATLAS Widget tests."""

from __future__ import annotations

import pytest
from fastapi import Body, FastAPI
from fastapi.responses import JSONResponse

from atlas_widget.context.shell import CommandResult

TICKET_ID = "abcdef12-3456-7890-abcd-ef1234567890"


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


# ── Command runner fake ───────────────────────────────────────────


class FakeRunner:
    """Stands in for ``shell.run``: returns canned output per command line."""

    def __init__(self, responses: dict[str, CommandResult] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[list[str]] = []
        self._default = CommandResult(returncode=1)

    def __call__(self, cmd: list[str]) -> CommandResult:
        self.calls.append(cmd)
        line = " ".join(cmd)
        if line in self.responses:
            return self.responses[line]
        for key, val in self.responses.items():
            if line.startswith(key):
                return val
        return self._default

    def add(self, line: str, stdout: str = "", returncode: int = 0) -> None:
        self.responses[line] = CommandResult(stdout=stdout, returncode=returncode)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


# ── Fake ATLAS API ────────────────────────────────────────────────


@pytest.fixture
def atlas_app() -> FastAPI:
    """In-process stand-in for the ATLAS backend."""
    app = FastAPI()
    app.state.received = []

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.post("/api/tickets", status_code=201)
    async def create_ticket(payload: dict = Body(...)):
        if "@" not in payload.get("email", ""):
            return JSONResponse(status_code=400, content={"success": False, "error": "A valid email is required"})
        app.state.received.append(payload)
        ticket = {
            "id": TICKET_ID,
            "title": payload["title"],
            "status": "open",
            "priority": payload["priority"],
            "category": payload["widgetContext"]["category"],
            "createdAt": "2026-10-18T09:00:00Z",
            "updatedAt": "2026-10-18T09:00:00Z",
        }
        enriched = ["organization"] if payload.get("ninjaDeviceId") else []
        return {
            "success": True,
            "data": {
                "ticket": ticket,
                "enrichment": {
                    "deviceFound": bool(payload.get("ninjaDeviceId")),
                    "deviceCount": 1 if payload.get("ninjaDeviceId") else 0,
                    "endUserFound": False,
                    "enrichedFields": enriched,
                },
            },
        }

    @app.get("/api/tickets")
    async def list_tickets(email: str):
        tickets = [
            {
                "id": TICKET_ID,
                "title": p["title"],
                "status": "open",
                "priority": p["priority"],
                "category": p["widgetContext"]["category"],
                "createdAt": "2026-10-18T09:00:00Z",
                "updatedAt": "2026-10-18T09:00:00Z",
            }
            for p in app.state.received
            if p["email"] == email
        ]
        return {"success": True, "data": tickets}

    @app.get("/api/devices/{device_id}/email")
    async def device_email(device_id: int):
        if device_id == 6699:
            return {"email": "jane.doe@example.com"}
        return JSONResponse(status_code=404, content={"error": "No end user for device"})

    return app
