"""
Guided reservation dialogue engine.

Drives one turn of the intake sequence: load or create the session under
its lock, run the current step's validator, transition the state
machine, and, on an affirmative reply to the summary, commit exactly
one reservation.

The pure part of a turn is ``advance(session, utterance)``, which
returns a new session plus a ReplyDirective and never touches storage.
``handle_turn`` wraps it with locking, rendering, the commit write and
persistence of the new state.

Usage:
    engine = DialogueEngine(store, committer, TemplateUtteranceGenerator())
    result = await engine.handle_turn("web-42", "besok jam 7 malam")
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from reservation_bot.config import settings
from reservation_bot.conversation import validators
from reservation_bot.conversation.commit import ReservationCommitter
from reservation_bot.conversation.session_store import SessionStore
from reservation_bot.conversation.state_machine import (
    DialogueStep,
    IntakeStateMachine,
    TransitionTrigger,
)
from reservation_bot.generation.utterance import (
    Message,
    UtteranceGenerationError,
    UtteranceGenerator,
)
from reservation_bot.logging_context import (
    get_session_logger,
    reset_session_id,
    set_session_id,
)
from reservation_bot.prompts import prompt_templates as lines
from reservation_bot.schemas.reply_schema import ReplyDirective, ReplyIntent
from reservation_bot.schemas.reservation_schema import Reservation
from reservation_bot.schemas.session_schema import Session
from reservation_bot.storage.base import (
    ConversationLog,
    NullConversationLog,
    ReservationSinkError,
)
from reservation_bot.utils import Clock, make_clock

logger = get_session_logger(__name__)


@dataclass
class TurnResult:
    """Outcome of one handled utterance, as returned to the HTTP layer."""
    session_id: str
    message: str
    step: DialogueStep
    intent: ReplyIntent
    is_complete: bool = False
    reservation_code: Optional[str] = None

    @property
    def save_failed(self) -> bool:
        return self.intent == ReplyIntent.SAVE_FAILED

    @property
    def success(self) -> bool:
        return not self.save_failed


class BaseDialogueEngine(ABC):
    """
    Turn handling shared by the guided and freeform engines.

    Subclasses implement ``_run_turn``, which receives a copy of the live
    session and is responsible for saving it when the turn succeeds.
    """

    def __init__(
        self,
        store: SessionStore,
        committer: ReservationCommitter,
        conversation_log: Optional[ConversationLog] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._store = store
        self._committer = committer
        self._conversation_log = conversation_log or NullConversationLog()
        self._clock = clock or make_clock(settings.restaurant.timezone)

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def committer(self) -> ReservationCommitter:
        return self._committer

    async def handle_turn(self, session_id: str, utterance: str) -> TurnResult:
        """
        Process one guest utterance for one session.

        Args:
            session_id: Caller-supplied conversation key.
            utterance: Raw guest text.

        Returns:
            The TurnResult for this turn. A failed reservation write is
            reported through ``TurnResult.save_failed``, not raised.

        Raises:
            ValueError: If either argument is missing or blank.
            UtteranceGenerationError: If the reply could not be rendered
                on a non-commit turn. The session is left unchanged.
        """
        if not session_id or not session_id.strip():
            raise ValueError("session_id is required")
        if not utterance or not utterance.strip():
            raise ValueError("utterance is required")

        utterance = utterance.strip()
        token = set_session_id(session_id)
        try:
            async with self._store.lock(session_id):
                session = self._store.get_or_create(session_id)
                result = await self._run_turn(session, utterance)
            await self._conversation_log.append(session_id, utterance, result.message)
            return result
        finally:
            reset_session_id(token)

    @abstractmethod
    async def _run_turn(self, session: Session, utterance: str) -> TurnResult:
        ...

    def _already_complete(self, session: Session, utterance: str) -> TurnResult:
        """Turns after a commit repeat the existing code and never write again."""
        message = lines.already_complete_line(session.reservation_code)
        session.add_message("user", utterance)
        session.add_message("assistant", message)
        self._store.save(session)
        return TurnResult(
            session_id=session.session_id,
            message=message,
            step=session.step,
            intent=ReplyIntent.ALREADY_COMPLETE,
            is_complete=True,
            reservation_code=session.reservation_code,
        )

    async def _write(self, reservation: Reservation) -> Optional[Reservation]:
        """Issue the single commit write; None when storage rejected it."""
        try:
            return await self._committer.commit(reservation)
        except ReservationSinkError:
            logger.exception("Reservation write failed; session left unconfirmed")
            return None

    def _save_failed(self, session: Session) -> TurnResult:
        return TurnResult(
            session_id=session.session_id,
            message=lines.save_failed_line(),
            step=session.step,
            intent=ReplyIntent.SAVE_FAILED,
        )

    def _mark_complete(self, session: Session, stored: Reservation) -> None:
        session.is_complete = True
        session.reservation_code = stored.reservation_code
        session.completed_at = self._clock()


StepHandler = Callable[[Session, IntakeStateMachine, str], ReplyDirective]


class DialogueEngine(BaseDialogueEngine):
    """Explicit state machine engine; the generator only restyles fixed lines."""

    def __init__(
        self,
        store: SessionStore,
        committer: ReservationCommitter,
        generator: UtteranceGenerator,
        conversation_log: Optional[ConversationLog] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(store, committer, conversation_log, clock)
        self._generator = generator
        self._handlers: dict[DialogueStep, StepHandler] = {
            DialogueStep.ASK_DATE: self._on_ask_date,
            DialogueStep.VALIDATE_DATE: self._on_validate_date,
            DialogueStep.ASK_TIME: self._on_ask_time,
            DialogueStep.ASK_GUESTS: self._on_ask_guests,
            DialogueStep.ASK_NAME: self._on_ask_name,
            DialogueStep.ASK_CONTACT: self._on_ask_contact,
            DialogueStep.SUMMARY: self._on_summary,
        }

    def advance(self, session: Session, utterance: str) -> tuple[Session, ReplyDirective]:
        """
        Apply one utterance to a session without side effects.

        Returns a new Session and the directive describing the reply. A
        rejected answer returns an unchanged copy and an ``invalid_*``
        directive. ``ReplyIntent.CONFIRMED`` means the caller must commit.
        """
        new = session.copy()
        machine = IntakeStateMachine(new.step)
        directive = self._handlers[new.step](new, machine, utterance.strip())
        new.step = machine.current_step
        return new, directive

    async def _run_turn(self, session: Session, utterance: str) -> TurnResult:
        if session.is_complete:
            return self._already_complete(session, utterance)

        new, directive = self.advance(session, utterance)
        prior = session.history + [{"role": "user", "content": utterance}]

        if directive.intent == ReplyIntent.CONFIRMED:
            return await self._commit_turn(new, utterance, prior)

        message = await self._generator.generate(prior, directive)
        new.add_message("user", utterance)
        new.add_message("assistant", message)
        self._store.save(new)
        return TurnResult(
            session_id=new.session_id,
            message=message,
            step=new.step,
            intent=directive.intent,
        )

    async def _commit_turn(self, new: Session, utterance: str, prior: list[Message]) -> TurnResult:
        collected = new.collected
        reservation = self._committer.build(
            customer_name=collected.customer_name,
            phone=collected.phone,
            reservation_date=collected.reservation_date,
            reservation_time=collected.reservation_time,
            guest_count=collected.guest_count,
        )
        stored = await self._write(reservation)
        if stored is None:
            return self._save_failed(new)

        self._mark_complete(new, stored)
        directive = ReplyDirective(
            intent=ReplyIntent.CONFIRMED,
            line=lines.confirmed_line(collected.customer_name),
            suffix=lines.reservation_code_suffix(stored.reservation_code),
        )
        message = await self._render_after_commit(prior, directive)
        new.add_message("user", utterance)
        new.add_message("assistant", message)
        self._store.save(new)
        return TurnResult(
            session_id=new.session_id,
            message=message,
            step=new.step,
            intent=ReplyIntent.CONFIRMED,
            is_complete=True,
            reservation_code=stored.reservation_code,
        )

    async def _render_after_commit(self, prior: list[Message], directive: ReplyDirective) -> str:
        # The reservation is already durable here, so rendering must not fail the turn.
        try:
            text = await self._generator.generate(prior, directive)
        except UtteranceGenerationError:
            logger.warning("Confirmation rephrase failed; using literal line")
            text = directive.line
        return text + directive.suffix

    # --- Step handlers ---

    def _on_ask_date(self, session: Session, machine: IntakeStateMachine, text: str) -> ReplyDirective:
        machine.transition(TransitionTrigger.WELCOME_SENT)
        if validators.looks_like_date(text):
            return self._on_validate_date(session, machine, text)
        if not session.history:
            return ReplyDirective(ReplyIntent.WELCOME, lines.welcome_line())
        return ReplyDirective(ReplyIntent.ASK_DATE, lines.ask_date_line())

    def _on_validate_date(self, session: Session, machine: IntakeStateMachine, text: str) -> ReplyDirective:
        today = self._clock().date()
        parsed = validators.parse_date(text, today) if validators.is_future_date(text, today) else None
        if parsed is None:
            logger.debug("Date rejected: %r", text)
            return ReplyDirective(ReplyIntent.INVALID_DATE, lines.invalid_date_line())
        session.collected.record("reservation_date", parsed)
        machine.transition(TransitionTrigger.DATE_ACCEPTED)
        return ReplyDirective(ReplyIntent.ASK_TIME, lines.ask_time_line(parsed))

    def _on_ask_time(self, session: Session, machine: IntakeStateMachine, text: str) -> ReplyDirective:
        parsed = validators.parse_time(text) if validators.is_valid_time(text) else None
        if parsed is None:
            logger.debug("Time rejected: %r", text)
            return ReplyDirective(ReplyIntent.INVALID_TIME, lines.invalid_time_line())
        session.collected.record("reservation_time", parsed)
        machine.transition(TransitionTrigger.TIME_ACCEPTED)
        return ReplyDirective(ReplyIntent.ASK_GUESTS, lines.ask_guests_line(parsed))

    def _on_ask_guests(self, session: Session, machine: IntakeStateMachine, text: str) -> ReplyDirective:
        if not validators.is_valid_guest_count(text):
            logger.debug("Guest count rejected: %r", text)
            return ReplyDirective(ReplyIntent.INVALID_GUESTS, lines.invalid_guests_line())
        count = validators.parse_guest_count(text)
        session.collected.record("guest_count", count)
        machine.transition(TransitionTrigger.GUESTS_ACCEPTED)
        return ReplyDirective(ReplyIntent.ASK_NAME, lines.ask_name_line(count))

    def _on_ask_name(self, session: Session, machine: IntakeStateMachine, text: str) -> ReplyDirective:
        session.collected.record("customer_name", text)
        machine.transition(TransitionTrigger.NAME_ACCEPTED)
        return ReplyDirective(ReplyIntent.ASK_CONTACT, lines.ask_contact_line(text))

    def _on_ask_contact(self, session: Session, machine: IntakeStateMachine, text: str) -> ReplyDirective:
        phone = validators.parse_phone(text)
        if phone is None:
            logger.debug("Phone rejected: %r", text)
            return ReplyDirective(ReplyIntent.INVALID_PHONE, lines.invalid_phone_line())
        session.collected.record("phone", phone)
        machine.transition(TransitionTrigger.CONTACT_ACCEPTED)
        return ReplyDirective(ReplyIntent.SUMMARY, lines.build_summary(session.collected))

    def _on_summary(self, session: Session, machine: IntakeStateMachine, text: str) -> ReplyDirective:
        if validators.is_affirmative(text):
            machine.transition(TransitionTrigger.GUEST_CONFIRMED)
            return ReplyDirective(
                ReplyIntent.CONFIRMED, lines.confirmed_line(session.collected.customer_name)
            )
        machine.transition(TransitionTrigger.GUEST_REJECTED)
        session.collected.clear()
        logger.info("Summary rejected; collected fields cleared")
        return ReplyDirective(ReplyIntent.RESTART, lines.restart_line())
