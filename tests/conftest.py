"""Shared test fixtures and helpers."""

from collections import defaultdict
from datetime import date, datetime, timedelta
from types import SimpleNamespace
from typing import Any, Optional

import pytest

from reservation_bot.conversation.commit import ReservationCommitter
from reservation_bot.conversation.dialogue_engine import DialogueEngine, TurnResult
from reservation_bot.conversation.session_store import InMemorySessionStore
from reservation_bot.generation.utterance import (
    TemplateUtteranceGenerator,
    UtteranceGenerationError,
    UtteranceGenerator,
)
from reservation_bot.storage.base import ReservationSinkError
from reservation_bot.storage.memory import InMemoryConversationLog, InMemoryReservationSink

# "Today" for every test; keeps example dates such as 15 Maret 2026 in the future.
TODAY = date(2026, 1, 10)

GRACE = timedelta(minutes=5)
IDLE_TTL = timedelta(hours=1)

GUIDED_BOOKING = ["15 Maret 2026", "19:00", "4 orang", "Budi", "081234567890", "ya"]


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(TODAY.year, TODAY.month, TODAY.day, 12, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FailingSink(InMemoryReservationSink):
    """In-memory sink whose inserts fail until ``fail`` is switched off."""

    def __init__(self) -> None:
        super().__init__()
        self.fail = True

    async def insert(self, reservation):
        if self.fail:
            self.insert_calls += 1
            raise ReservationSinkError("storage unavailable")
        return await super().insert(reservation)


class FailingGenerator(UtteranceGenerator):
    def __init__(self) -> None:
        self.calls = 0

    async def generate(self, prior_messages, directive) -> str:
        self.calls += 1
        raise UtteranceGenerationError("generation service down")


class RecordingGenerator(UtteranceGenerator):
    """Prefixes the literal line so tests can tell the generator ran."""

    def __init__(self) -> None:
        self.calls: list[tuple[list[dict[str, str]], Any]] = []

    async def generate(self, prior_messages, directive) -> str:
        self.calls.append((list(prior_messages), directive))
        return f"[styled] {directive.line}"


# --------------------------------------------------------------------- #
# Fake OpenAI-compatible client
# --------------------------------------------------------------------- #

class FakeCompletions:
    def __init__(self, replies: list[Any]) -> None:
        self._replies = list(replies)
        self.requests: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any):
        self.requests.append(kwargs)
        reply = self._replies.pop(0) if self._replies else "Baik."
        if isinstance(reply, Exception):
            raise reply
        message = SimpleNamespace(content=reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAIClient:
    def __init__(self, replies: Optional[list[Any]] = None) -> None:
        self.completions = FakeCompletions(replies or [])
        self.chat = SimpleNamespace(completions=self.completions)


# --------------------------------------------------------------------- #
# Fake Supabase client
# --------------------------------------------------------------------- #

class FakeTable:
    def __init__(self) -> None:
        self.rows: list[dict[str, Any]] = []
        self.fail = False


class FakeQuery:
    """Just enough of the postgrest query builder for the storage adapters."""

    def __init__(self, table: FakeTable) -> None:
        self._table = table
        self._op = "select"
        self._payload: dict[str, Any] = {}
        self._filters: list[tuple[str, Any]] = []
        self._order: Optional[tuple[str, bool]] = None
        self._limit: Optional[int] = None

    def insert(self, payload):
        self._op, self._payload = "insert", dict(payload)
        return self

    def update(self, payload):
        self._op, self._payload = "update", dict(payload)
        return self

    def select(self, columns="*"):
        self._op = "select"
        return self

    def eq(self, column, value):
        self._filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def execute(self):
        if self._table.fail:
            raise RuntimeError("connection refused")
        if self._op == "insert":
            self._table.rows.append(dict(self._payload))
            return SimpleNamespace(data=[dict(self._payload)])

        matched = [
            row for row in self._table.rows
            if all(row.get(column) == value for column, value in self._filters)
        ]
        if self._op == "update":
            for row in matched:
                row.update(self._payload)
        if self._order is not None:
            column, desc = self._order
            matched = sorted(matched, key=lambda row: row[column], reverse=desc)
        if self._limit is not None:
            matched = matched[: self._limit]
        return SimpleNamespace(data=[dict(row) for row in matched])


class FakeSupabaseClient:
    def __init__(self) -> None:
        self.tables: defaultdict[str, FakeTable] = defaultdict(FakeTable)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.tables[name])


# --------------------------------------------------------------------- #
# Fixtures
# --------------------------------------------------------------------- #

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemorySessionStore(clock=clock, completion_grace=GRACE, idle_ttl=IDLE_TTL)


@pytest.fixture
def sink():
    return InMemoryReservationSink()


@pytest.fixture
def failing_sink():
    return FailingSink()


@pytest.fixture
def conversation_log():
    return InMemoryConversationLog()


@pytest.fixture
def make_engine(store, clock, conversation_log):
    """Factory for guided engines sharing the test clock and store."""

    def _make(sink, generator: Optional[UtteranceGenerator] = None) -> DialogueEngine:
        return DialogueEngine(
            store=store,
            committer=ReservationCommitter(sink, clock),
            generator=generator or TemplateUtteranceGenerator(),
            conversation_log=conversation_log,
            clock=clock,
        )

    return _make


@pytest.fixture
def engine(make_engine, sink):
    return make_engine(sink)


async def run_turns(engine, session_id: str, utterances: list[str]) -> list[TurnResult]:
    results = []
    for text in utterances:
        results.append(await engine.handle_turn(session_id, text))
    return results
