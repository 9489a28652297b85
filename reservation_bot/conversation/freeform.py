"""
Freeform dialogue engine.

The language model leads the whole conversation from the freeform system
prompt and the session history. The engine only watches for the moment
the guest says yes to a confirmation request; it then recovers the
reservation from the guest's utterances with the field extractor and
commits it through the same single-write protocol as the guided engine.
"""

from typing import Optional

from reservation_bot.conversation import validators
from reservation_bot.conversation.commit import ReservationCommitter
from reservation_bot.conversation.dialogue_engine import BaseDialogueEngine, TurnResult
from reservation_bot.conversation.extractor import ExtractedFields, extract_reservation_fields
from reservation_bot.conversation.session_store import SessionStore
from reservation_bot.generation.utterance import LLMUtteranceGenerator, UtteranceGenerationError
from reservation_bot.logging_context import get_session_logger
from reservation_bot.prompts import prompt_templates as lines
from reservation_bot.prompts.system_prompts import FREEFORM_SYSTEM_PROMPT
from reservation_bot.schemas.reply_schema import ReplyIntent
from reservation_bot.schemas.session_schema import Session
from reservation_bot.storage.base import ConversationLog
from reservation_bot.utils import Clock

logger = get_session_logger(__name__)

# Words in an assistant message that mark it as a request for confirmation
CONFIRMATION_MARKERS = ("konfirmasi", "benar")


def is_confirmation_request(message: Optional[str]) -> bool:
    if not message:
        return False
    lower = message.lower()
    return any(marker in lower for marker in CONFIRMATION_MARKERS)


class FreeformDialogueEngine(BaseDialogueEngine):
    """Model-led conversation with an extractor-backed commit."""

    def __init__(
        self,
        store: SessionStore,
        committer: ReservationCommitter,
        llm: LLMUtteranceGenerator,
        conversation_log: Optional[ConversationLog] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(store, committer, conversation_log, clock)
        self._llm = llm

    async def _run_turn(self, session: Session, utterance: str) -> TurnResult:
        if session.is_complete:
            return self._already_complete(session, utterance)

        new = session.copy()
        new.add_message("user", utterance)

        if is_confirmation_request(session.last_assistant_message()) and validators.is_affirmative(utterance):
            fields = extract_reservation_fields(new.user_utterances(), today=self._clock().date())
            if self._committable(fields):
                return await self._commit_turn(session, new, fields)
            logger.info("Guest confirmed but phone or party size is missing; not committing")

        reply = await self._llm.complete(FREEFORM_SYSTEM_PROMPT, new.history)
        new.add_message("assistant", reply)
        self._store.save(new)
        return TurnResult(
            session_id=new.session_id,
            message=reply,
            step=new.step,
            intent=ReplyIntent.FREEFORM,
        )

    @staticmethod
    def _committable(fields: ExtractedFields) -> bool:
        return fields.has_minimum() and validators.MIN_GUESTS <= fields.guest_count <= validators.MAX_GUESTS

    async def _commit_turn(self, session: Session, new: Session, fields: ExtractedFields) -> TurnResult:
        reservation = self._committer.build(
            customer_name=fields.customer_name,
            phone=fields.phone,
            reservation_date=fields.reservation_date,
            reservation_time=fields.reservation_time,
            guest_count=fields.guest_count,
        )
        stored = await self._write(reservation)
        if stored is None:
            return self._save_failed(session)

        self._mark_complete(new, stored)
        try:
            reply = await self._llm.complete(FREEFORM_SYSTEM_PROMPT, new.history)
        except UtteranceGenerationError:
            logger.warning("Confirmation reply failed; using literal line")
            reply = lines.confirmed_line(stored.customer_name)
        message = reply + lines.reservation_code_suffix(stored.reservation_code)

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
