"""
Reservation bot entry point.

Runs the HTTP API under uvicorn, or the offline console demo for
development.

Usage:
    HTTP API:     python main.py serve
    Console mode: python main.py console
"""

import logging
import sys

from reservation_bot.config import settings

logger = logging.getLogger(__name__)


def _run_server() -> None:
    """Start the FastAPI app (Supabase and the LLM are used when configured)."""
    import uvicorn

    from reservation_bot.api.app import create_app

    app = create_app()
    logger.info("Serving on http://%s:%d", settings.server.host, settings.server.port)
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.log_level.lower(),
    )


def _run_console_mode() -> None:
    """Start the offline console demo (no API keys required)."""
    import asyncio

    from console_demo import ConsoleSession

    session = ConsoleSession()
    asyncio.run(session.run())


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "console":
        _run_console_mode()
    else:
        _run_server()
