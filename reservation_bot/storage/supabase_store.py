"""Supabase-backed reservation storage and conversation log."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

from supabase import Client, create_client

from reservation_bot.config import StorageConfig, settings
from reservation_bot.schemas.reservation_schema import Reservation, ReservationStatus
from reservation_bot.storage.base import (
    DEFAULT_LIST_LIMIT,
    ConversationLog,
    ReservationSink,
    ReservationSinkError,
)

logger = logging.getLogger(__name__)


class _SupabaseTable:
    """Lazily-created Supabase client bound to one table."""

    def __init__(
        self,
        table: str,
        config: StorageConfig = settings.storage,
        client: Optional[Client] = None,
    ) -> None:
        self._config = config
        self._table = table
        self._client = client

    def _ensure_client(self) -> Client:
        if self._client is None:
            if not self._config.supabase_enabled:
                raise RuntimeError("Supabase credentials missing; set SUPABASE_URL and SUPABASE_KEY")
            self._client = create_client(self._config.supabase_url, self._config.supabase_key)
        return self._client

    async def run(self, fn: Callable[[Any], Any]) -> Any:
        """Run a blocking query builder chain against the table in a worker thread."""
        return await asyncio.to_thread(lambda: fn(self._ensure_client().table(self._table)))


def _rows(result: Any) -> list[dict[str, Any]]:
    data = getattr(result, "data", None)
    if isinstance(data, list):
        return [row for row in data if isinstance(row, dict)]
    if isinstance(data, dict):
        return [data]
    return []


class SupabaseReservationSink(ReservationSink):
    """Reservations stored in the Supabase ``reservations`` table."""

    def __init__(
        self,
        config: StorageConfig = settings.storage,
        client: Optional[Client] = None,
    ) -> None:
        self._table = _SupabaseTable(config.reservations_table, config, client)

    async def _query(self, operation: str, fn: Callable[[Any], Any]) -> list[dict[str, Any]]:
        try:
            result = await self._table.run(fn)
        except Exception as exc:
            logger.exception("Supabase %s failed", operation)
            raise ReservationSinkError(f"Supabase {operation} failed") from exc
        return _rows(result)

    async def insert(self, reservation: Reservation) -> Reservation:
        payload = reservation.to_row()
        rows = await self._query("insert", lambda t: t.insert(payload).execute())
        logger.info("Reservation stored: %s", reservation.reservation_code)
        return Reservation.model_validate(rows[0]) if rows else reservation

    async def list_recent(
        self, limit: int = DEFAULT_LIST_LIMIT, newest_first: bool = True
    ) -> list[Reservation]:
        rows = await self._query(
            "list",
            lambda t: t.select("*").order("created_at", desc=newest_first).limit(limit).execute(),
        )
        return [Reservation.model_validate(row) for row in rows]

    async def get_by_code(self, code: str) -> Optional[Reservation]:
        rows = await self._query(
            "get",
            lambda t: t.select("*").eq("reservation_code", code).limit(1).execute(),
        )
        return Reservation.model_validate(rows[0]) if rows else None

    async def update_status(
        self, code: str, status: ReservationStatus
    ) -> Optional[Reservation]:
        rows = await self._query(
            "update",
            lambda t: t.update({"status": status.value}).eq("reservation_code", code).execute(),
        )
        if not rows:
            return None
        logger.info("Reservation %s status -> %s", code, status.value)
        return Reservation.model_validate(rows[0])


class SupabaseConversationLog(ConversationLog):
    """Audit trail in the Supabase ``conversation_logs`` table."""

    def __init__(
        self,
        config: StorageConfig = settings.storage,
        client: Optional[Client] = None,
    ) -> None:
        self._table = _SupabaseTable(config.conversation_log_table, config, client)

    async def append(self, session_id: str, user_message: str, bot_response: str) -> None:
        payload = {
            "session_id": session_id,
            "user_message": user_message,
            "bot_response": bot_response,
        }
        try:
            await self._table.run(lambda t: t.insert(payload).execute())
        except Exception:
            logger.exception("Supabase conversation log insert failed")
