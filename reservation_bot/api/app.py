"""
FastAPI application factory.

``create_app()`` wires services from configuration unless a prepared
``Services`` bundle is passed in (tests and the console use their own).
The lifespan starts a background task that sweeps expired sessions.
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from reservation_bot.api.routes import MISSING_FIELDS_MESSAGE, error_response, router
from reservation_bot.factory import Services, build_services

logger = logging.getLogger(__name__)


async def sweep_sessions(services: Services) -> None:
    """Remove expired sessions on a fixed interval until cancelled."""
    interval = services.config.session.sweep_interval_seconds
    while True:
        await asyncio.sleep(interval)
        try:
            services.store.sweep()
        except Exception:
            logger.exception("Session sweep failed")


def create_app(services: Optional[Services] = None) -> FastAPI:
    services = services or build_services()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        sweeper = asyncio.create_task(sweep_sessions(services))
        logger.info(
            "Reservation API started (storage: %s, generator: %s)",
            type(services.sink).__name__, type(services.generator).__name__,
        )
        yield
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper

    app = FastAPI(
        title="Restaurant Reservation Bot",
        description="Guided table-reservation chatbot",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        logger.debug("Rejected malformed request to %s: %s", request.url.path, exc.errors())
        return error_response(status.HTTP_400_BAD_REQUEST, MISSING_FIELDS_MESSAGE)

    app.include_router(router)
    return app
