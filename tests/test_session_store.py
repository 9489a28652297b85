"""Tests for the in-memory session store."""

import asyncio

import pytest

from reservation_bot.conversation.state_machine import DialogueStep
from reservation_bot.schemas.session_schema import CollectedFields, FieldAlreadySetError
from tests.conftest import GRACE, IDLE_TTL


class TestLifecycle:
    def test_get_unknown_returns_none(self, store):
        assert store.get("nobody") is None

    def test_get_or_create_creates_once(self, store):
        first = store.get_or_create("s1")
        second = store.get_or_create("s1")
        assert first.created_at == second.created_at
        assert len(store) == 1

    def test_new_session_starts_at_first_step(self, store):
        session = store.create("s1")
        assert session.step == DialogueStep.ASK_DATE
        assert session.collected.is_empty()
        assert not session.is_complete

    def test_get_returns_a_copy(self, store):
        store.create("s1")
        session = store.get("s1")
        session.step = DialogueStep.SUMMARY
        assert store.get("s1").step == DialogueStep.ASK_DATE

    def test_save_replaces_state_and_touches(self, store, clock):
        session = store.create("s1")
        clock.advance(seconds=30)
        session.step = DialogueStep.VALIDATE_DATE
        store.save(session)
        stored = store.get("s1")
        assert stored.step == DialogueStep.VALIDATE_DATE
        assert stored.updated_at == clock()

    def test_delete(self, store):
        store.create("s1")
        store.delete("s1")
        assert "s1" not in store
        store.delete("s1")  # absent is a no-op


class TestExpiry:
    def _complete(self, store, clock, session_id="s1"):
        session = store.create(session_id)
        session.is_complete = True
        session.reservation_code = "RES12345678001"
        session.completed_at = clock()
        store.save(session)

    def test_completed_session_kept_within_grace(self, store, clock):
        self._complete(store, clock)
        clock.advance(seconds=GRACE.total_seconds() - 1)
        assert store.get("s1") is not None

    def test_completed_session_removed_after_grace(self, store, clock):
        self._complete(store, clock)
        clock.advance(seconds=GRACE.total_seconds())
        assert store.get("s1") is None
        assert "s1" not in store

    def test_fresh_session_after_expiry(self, store, clock):
        self._complete(store, clock)
        clock.advance(minutes=10)
        session = store.get_or_create("s1")
        assert not session.is_complete
        assert session.reservation_code is None

    def test_idle_session_expires(self, store, clock):
        store.create("s1")
        clock.advance(seconds=IDLE_TTL.total_seconds())
        assert store.get("s1") is None

    def test_activity_extends_idle_lifetime(self, store, clock):
        session = store.create("s1")
        clock.advance(minutes=50)
        store.save(session)
        clock.advance(minutes=50)
        assert store.get("s1") is not None

    def test_sweep_removes_only_expired(self, store, clock):
        self._complete(store, clock, "done")
        store.create("idle")
        clock.advance(minutes=6)
        store.create("active")
        assert store.sweep() == 1
        assert "done" not in store
        assert "idle" in store
        assert "active" in store


class TestLocks:
    def test_same_lock_per_session(self, store):
        assert store.lock("s1") is store.lock("s1")
        assert store.lock("s1") is not store.lock("s2")

    def test_lock_dropped_with_expired_session(self, store, clock):
        store.create("s1")
        first = store.lock("s1")
        clock.advance(hours=2)
        store.sweep()
        assert store.lock("s1") is not first

    @pytest.mark.asyncio
    async def test_lock_serializes_turns(self, store):
        order = []

        async def turn(name):
            async with store.lock("s1"):
                order.append(f"{name}-start")
                await asyncio.sleep(0.01)
                order.append(f"{name}-end")

        await asyncio.gather(turn("a"), turn("b"))
        assert order in (
            ["a-start", "a-end", "b-start", "b-end"],
            ["b-start", "b-end", "a-start", "a-end"],
        )


class TestCollectedFields:
    def test_field_is_written_once_per_attempt(self):
        collected = CollectedFields()
        collected.record("guest_count", 4)
        with pytest.raises(FieldAlreadySetError):
            collected.record("guest_count", 5)
        assert collected.guest_count == 4

    def test_clear_allows_a_new_attempt(self):
        collected = CollectedFields()
        collected.record("phone", "081234567890")
        collected.clear()
        assert collected.is_empty()
        collected.record("phone", "081298765432")
        assert collected.phone == "081298765432"
