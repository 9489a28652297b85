"""
Service wiring.

Builds the collaborators for one process from configuration: the clock,
session store, reservation sink, conversation log, utterance generator
and the dialogue engine for the configured mode. Supabase is used when
credentials are present and the language model when an API key is set;
otherwise everything falls back to in-process implementations.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta

from reservation_bot.config import AppConfig, settings
from reservation_bot.conversation.commit import ReservationCommitter
from reservation_bot.conversation.dialogue_engine import BaseDialogueEngine, DialogueEngine
from reservation_bot.conversation.freeform import FreeformDialogueEngine
from reservation_bot.conversation.session_store import InMemorySessionStore
from reservation_bot.generation.utterance import (
    LLMUtteranceGenerator,
    TemplateUtteranceGenerator,
    UtteranceGenerator,
)
from reservation_bot.storage.base import ConversationLog, ReservationSink
from reservation_bot.storage.memory import InMemoryConversationLog, InMemoryReservationSink
from reservation_bot.storage.supabase_store import SupabaseConversationLog, SupabaseReservationSink
from reservation_bot.utils import Clock, make_clock

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything the HTTP layer and the console demo need."""
    config: AppConfig
    clock: Clock
    store: InMemorySessionStore
    sink: ReservationSink
    conversation_log: ConversationLog
    generator: UtteranceGenerator
    engine: BaseDialogueEngine


def _build_storage(config: AppConfig) -> tuple[ReservationSink, ConversationLog]:
    if config.storage.supabase_enabled:
        logger.info("Using Supabase storage")
        return SupabaseReservationSink(config.storage), SupabaseConversationLog(config.storage)
    logger.warning("Supabase credentials missing; reservations are kept in memory only")
    return InMemoryReservationSink(), InMemoryConversationLog()


def _build_generator(config: AppConfig) -> UtteranceGenerator:
    if config.model.api_key:
        return LLMUtteranceGenerator(config.model, max_history=config.session.max_history_messages)
    logger.warning("No API key configured; replies use the literal template lines")
    return TemplateUtteranceGenerator()


def build_services(config: AppConfig = settings) -> Services:
    """Wire a complete set of services from configuration."""
    clock = make_clock(config.restaurant.timezone)
    store = InMemorySessionStore(
        clock=clock,
        completion_grace=timedelta(seconds=config.session.completion_grace_seconds),
        idle_ttl=timedelta(seconds=config.session.idle_ttl_seconds),
    )
    sink, conversation_log = _build_storage(config)
    generator = _build_generator(config)
    committer = ReservationCommitter(sink, clock)

    engine: BaseDialogueEngine
    if config.session.dialogue_mode == "freeform":
        if not isinstance(generator, LLMUtteranceGenerator):
            raise ValueError("DIALOGUE_MODE=freeform requires GROQ_API_KEY")
        engine = FreeformDialogueEngine(store, committer, generator, conversation_log, clock)
    else:
        engine = DialogueEngine(store, committer, generator, conversation_log, clock)

    logger.info("Dialogue engine ready (mode: %s)", config.session.dialogue_mode)
    return Services(
        config=config,
        clock=clock,
        store=store,
        sink=sink,
        conversation_log=conversation_log,
        generator=generator,
        engine=engine,
    )
