"""HTTP request and response bodies for the chat and reservation endpoints."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """Inbound chat turn. Both fields are checked at the boundary, not here."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId")
    message: Optional[str] = None


class ChatResponse(BaseModel):
    """Reply to one chat turn."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    is_complete: bool = Field(default=False, alias="isComplete")
    reservation_code: Optional[str] = Field(default=None, alias="reservationCode")


class ReservationListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[dict[str, Any]]


class ReservationResponse(BaseModel):
    success: bool = True
    data: dict[str, Any]


class StatusResponse(BaseModel):
    success: bool
    message: str
