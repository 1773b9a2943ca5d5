"""ATLAS Widget: device context and support-ticket core.

Quickstart::

    from atlas_widget.context import collect
    from atlas_widget.tickets import TicketClient, TicketForm, build_submission

    ctx = collect()
    ticket = build_submission(form, ctx)
    async with TicketClient.from_config() as client:
        result = await client.submit(ticket)
"""

__version__ = "1.0.0"
