"""HTTP routes: chat turns, reservation lookup and cancellation, health."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from reservation_bot.factory import Services
from reservation_bot.generation.utterance import UtteranceGenerationError
from reservation_bot.schemas.chat_schema import (
    ChatRequest,
    ChatResponse,
    ReservationListResponse,
    ReservationResponse,
    StatusResponse,
)
from reservation_bot.schemas.reservation_schema import ReservationStatus
from reservation_bot.storage.base import DEFAULT_LIST_LIMIT, ReservationSinkError

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "sessionId dan message harus diisi"
GENERIC_ERROR_MESSAGE = "Terjadi kesalahan. Silakan coba lagi."
NOT_FOUND_MESSAGE = "Reservasi tidak ditemukan"
CANCELLED_MESSAGE = "Reservasi berhasil dibatalkan"

router = APIRouter()


def get_services(request: Request) -> Services:
    return request.app.state.services


def error_response(status_code: int, message: str) -> JSONResponse:
    body = StatusResponse(success=False, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.get("/")
async def health(request: Request):
    return {
        "status": "OK",
        "message": f"{get_services(request).config.restaurant.name} reservation API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.post("/api/chat")
async def chat(body: ChatRequest, request: Request):
    """
    Handle one guest utterance.

    Returns 400 for a missing or blank ``sessionId``/``message`` or an
    over-long message, 503 when the reservation could not be written at
    confirmation, and 500 for any other failure.
    """
    services = get_services(request)
    session_id = (body.session_id or "").strip()
    message = (body.message or "").strip()
    if not session_id or not message:
        return error_response(status.HTTP_400_BAD_REQUEST, MISSING_FIELDS_MESSAGE)

    max_length = services.config.server.max_message_length
    if len(message) > max_length:
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            f"Pesan terlalu panjang (maksimal {max_length} karakter)",
        )

    try:
        result = await services.engine.handle_turn(session_id, message)
    except (UtteranceGenerationError, ReservationSinkError):
        logger.exception("Chat turn failed for session %s", session_id)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)
    except Exception:
        logger.exception("Unexpected error in chat turn for session %s", session_id)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)

    response = ChatResponse(
        success=result.success,
        message=result.message,
        session_id=result.session_id,
        is_complete=result.is_complete,
        reservation_code=result.reservation_code,
    )
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE if result.save_failed else status.HTTP_200_OK
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(by_alias=True, exclude_none=True),
    )


@router.get("/api/reservations")
async def list_reservations(request: Request):
    try:
        reservations = await get_services(request).sink.list_recent(DEFAULT_LIST_LIMIT, newest_first=True)
    except ReservationSinkError:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)
    rows = [r.to_row() for r in reservations]
    return ReservationListResponse(count=len(rows), data=rows).model_dump()


@router.get("/api/reservations/{code}")
async def get_reservation(code: str, request: Request):
    try:
        reservation = await get_services(request).sink.get_by_code(code)
    except ReservationSinkError:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)
    if reservation is None:
        return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
    return ReservationResponse(data=reservation.to_row()).model_dump()


@router.delete("/api/reservations/{code}")
async def cancel_reservation(code: str, request: Request):
    """Mark a reservation cancelled. Cancelling twice is not an error."""
    try:
        updated = await get_services(request).sink.update_status(code, ReservationStatus.CANCELLED)
    except ReservationSinkError:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)
    if updated is None:
        return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
    logger.info("Reservation cancelled: %s", code)
    return StatusResponse(success=True, message=CANCELLED_MESSAGE).model_dump()
