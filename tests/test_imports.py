"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""


class TestPackageImports:
    def test_import_schemas_package(self):
        from reservation_bot.schemas import CollectedFields, ReplyIntent, ReservationStatus
        assert CollectedFields().is_empty()
        assert ReservationStatus.CANCELLED == "cancelled"
        assert ReplyIntent.SAVE_FAILED == "save_failed"

    def test_import_conversation_package(self):
        from reservation_bot.conversation import DialogueStep, IntakeStateMachine
        assert IntakeStateMachine().current_step == DialogueStep.ASK_DATE

    def test_session_schema_imported_first(self):
        from reservation_bot.schemas.session_schema import Session
        from reservation_bot.conversation.dialogue_engine import DialogueEngine
        assert Session is not None
        assert DialogueEngine is not None

    def test_import_storage_package(self):
        from reservation_bot.storage import InMemoryReservationSink, NullConversationLog
        assert len(InMemoryReservationSink()) == 0
        assert NullConversationLog() is not None

    def test_import_generation_package(self):
        from reservation_bot.generation import TemplateUtteranceGenerator
        assert TemplateUtteranceGenerator() is not None

    def test_import_api_package(self):
        from reservation_bot.api import create_app
        assert callable(create_app)


class TestPromptImports:
    def test_import_system_prompts(self):
        from reservation_bot.prompts.system_prompts import (
            FREEFORM_SYSTEM_PROMPT,
            REPHRASE_SYSTEM_PROMPT,
        )
        assert "reservasi" in FREEFORM_SYSTEM_PROMPT.lower()
        assert "tulis ulang" in REPHRASE_SYSTEM_PROMPT.lower()

    def test_welcome_mentions_restaurant(self):
        from reservation_bot.config import settings
        from reservation_bot.prompts.prompt_templates import welcome_line
        assert settings.restaurant.name in welcome_line()


class TestConfigImport:
    def test_import_config(self):
        from reservation_bot.config import settings
        assert settings.restaurant.name
        assert settings.model.llm_model
        assert settings.session.dialogue_mode in ("guided", "freeform")


class TestEntryPoints:
    def test_console_session_uses_guided_engine(self):
        from console_demo import ConsoleSession
        from reservation_bot.conversation.dialogue_engine import DialogueEngine
        session = ConsoleSession()
        assert isinstance(session.engine, DialogueEngine)
        assert set(session.SCENARIOS) == {"booking", "restart", "invalid"}

    def test_main_module_imports(self):
        import main
        assert callable(main._run_server)
