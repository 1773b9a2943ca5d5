"""ATLAS Widget command-line entry point.

Usage::

    python -m atlas_widget context [--json]
    python -m atlas_widget health
    python -m atlas_widget tickets --email you@example.com
    python -m atlas_widget submit --category Email --summary "..." --description "..."
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from atlas_widget.config import WidgetConfig
from atlas_widget.context import DeviceContext, collect
from atlas_widget.tickets import (
    CATEGORIES,
    FormValidationError,
    TicketClient,
    TicketForm,
    build_submission,
    prefill_name,
)
from atlas_widget.tickets.form import URGENCIES

logger = logging.getLogger(__name__)


def _print_context(ctx: DeviceContext, as_json: bool) -> None:
    if as_json:
        print(json.dumps(ctx.to_dict(), indent=2))
        return
    rows = ctx.display_rows()
    width = max(len(label) for label, _ in rows)
    for label, value in rows:
        print(f"{label:<{width}}  {value}")


async def _health(config: WidgetConfig) -> int:
    async with TicketClient.from_config(config) as client:
        status = await client.check_health()
    print(f"{config.api_base_url}: {status.value}")
    return 0


async def _tickets(config: WidgetConfig, email: str) -> int:
    async with TicketClient.from_config(config) as client:
        result = await client.list_tickets(email)
    if not result.success:
        print(result.error, file=sys.stderr)
        return 1
    if not result.tickets:
        print("No tickets found.")
    for t in result.tickets:
        print(f"{t.id[:8].upper()}  [{t.status}] [{t.priority}] {t.title}  ({t.created_at or '-'})")
    return 0


async def _submit(config: WidgetConfig, args: argparse.Namespace) -> int:
    ctx = collect()
    form = TicketForm(
        name=args.name or prefill_name(ctx.logged_in_user),
        email=args.email or "",
        category=args.category,
        subcategory=args.subcategory or "",
        summary=args.summary,
        description=args.description,
        urgency=args.urgency,
    )
    # Email may still come from the device lookup below
    missing = [name for name in form.validate() if name != "email"]
    if missing:
        print(str(FormValidationError(missing)), file=sys.stderr)
        return 2

    async with TicketClient.from_config(config) as client:
        if not form.email:
            form.email = await client.suggest_email(ctx) or ""
            if form.email:
                logger.info("Using email %s resolved from NinjaOne device", form.email)

        try:
            ticket = build_submission(form, ctx, widget_version=config.widget_version)
        except FormValidationError as exc:
            print(str(exc), file=sys.stderr)
            return 2

        result = await client.submit(ticket)

    if not result.success:
        print(result.error, file=sys.stderr)
        return 1
    print(f"Ticket submitted. Reference: {result.reference_code}")
    if result.enrichment and result.enrichment.enriched_fields:
        print(f"Enriched: {', '.join(result.enrichment.enriched_fields)}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="python -m atlas_widget",
        description="ATLAS support widget",
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help="ATLAS API base URL (default: ATLAS_API_URL env var or production)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    ctx_cmd = sub.add_parser("context", help="Show collected device context")
    ctx_cmd.add_argument("--json", action="store_true", help="Print as JSON")

    sub.add_parser("health", help="Check API connectivity")

    list_cmd = sub.add_parser("tickets", help="List tickets submitted for an email")
    list_cmd.add_argument("--email", required=True)

    submit_cmd = sub.add_parser("submit", help="Submit a support ticket")
    submit_cmd.add_argument("--name", default=None, help="Your name (default: from login)")
    submit_cmd.add_argument("--email", default=None)
    submit_cmd.add_argument("--category", default="", choices=list(CATEGORIES))
    submit_cmd.add_argument("--subcategory", default=None)
    submit_cmd.add_argument("--summary", default="")
    submit_cmd.add_argument("--description", default="")
    submit_cmd.add_argument("--urgency", default="normal", choices=URGENCIES)

    args = parser.parse_args()

    level = logging.DEBUG if args.debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = WidgetConfig.from_env()
    if args.api_url:
        config.api_base_url = args.api_url.rstrip("/")

    if args.command == "context":
        _print_context(collect(), args.json)
        code = 0
    elif args.command == "health":
        code = asyncio.run(_health(config))
    elif args.command == "tickets":
        code = asyncio.run(_tickets(config, args.email))
    else:
        code = asyncio.run(_submit(config, args))
    sys.exit(code)


if __name__ == "__main__":
    main()
