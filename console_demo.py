"""
Offline console demo: runs a full reservation dialogue without any API keys.

Uses the real guided dialogue engine, session store and commit path with
in-memory storage and the template generator. No LLM, no Supabase, no
network calls.

Usage:
    python console_demo.py
    python console_demo.py --scenario restart
    python console_demo.py --scenario invalid
"""

import argparse
import asyncio
from typing import Optional

from reservation_bot.config import settings
from reservation_bot.conversation.commit import ReservationCommitter
from reservation_bot.conversation.dialogue_engine import DialogueEngine, TurnResult
from reservation_bot.conversation.session_store import InMemorySessionStore
from reservation_bot.generation.utterance import TemplateUtteranceGenerator
from reservation_bot.storage.memory import InMemoryReservationSink
from reservation_bot.utils import make_clock

BLUE = "\033[94m"
GREEN = "\033[92m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

CONSOLE_SESSION_ID = "console"


class ConsoleSession:
    """Plays a reservation dialogue in the terminal."""

    # Pre-scripted scenarios for --scenario flag
    SCENARIOS: dict[str, list[str]] = {
        "booking": [
            "Halo, saya mau pesan meja",
            "besok",
            "jam 7 malam",
            "4 orang",
            "Budi Santoso",
            "0812-3456-7890",
            "ya",
            "terima kasih",
        ],
        "restart": [
            "lusa",
            "19:00",
            "2 orang",
            "Sari",
            "081298765432",
            "tidak, salah tanggal",
            "besok",
            "20.00",
            "2 orang",
            "Sari",
            "081298765432",
            "ya benar",
        ],
        "invalid": [
            "01/01/2020",
            "besok",
            "jam 8 pagi",
            "23:00",
            "12.30",
            "30 orang",
            "banyak",
            "6",
            "Andi",
            "1234567",
            "+62 812 3456 7890",
            "oke",
        ],
    }

    def __init__(self) -> None:
        clock = make_clock(settings.restaurant.timezone)
        self.sink = InMemoryReservationSink()
        self.store = InMemorySessionStore(clock=clock)
        self.engine = DialogueEngine(
            store=self.store,
            committer=ReservationCommitter(self.sink, clock),
            generator=TemplateUtteranceGenerator(),
            clock=clock,
        )
        self.session_id = CONSOLE_SESSION_ID

    def bot_say(self, text: str) -> None:
        print(f"{GREEN}{BOLD}[{settings.restaurant.name}]{RESET} {GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def _banner(self, title: str, footer: Optional[str] = None) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  RESERVATION BOT - {title}{RESET}")
        print(f"{BOLD}  Restaurant: {settings.restaurant.name}{RESET}")
        if footer:
            print(f"{BOLD}  {footer}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

    def _summary(self, label: str) -> None:
        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {label}{RESET}")
        print(f"{DIM}  Reservations written: {self.sink.insert_calls}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    async def _process_input(self, text: str) -> TurnResult:
        result = await self.engine.handle_turn(self.session_id, text)
        colour = RED if result.save_failed else GREEN
        print(f"{colour}{BOLD}[{settings.restaurant.name}]{RESET} {colour}{result.message}{RESET}")
        self.system_log(f"Step: {result.step.value} | intent: {result.intent.value}")
        if result.reservation_code:
            self.system_log(f"Reservation code: {result.reservation_code}")
        return result

    async def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        steps = self.SCENARIOS.get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        self._banner(f"Scenario: {scenario}")
        for step in steps:
            print(f"\n{BLUE}[Tamu] {RESET}{step}")
            await self._process_input(step)
        self._summary(f"Scenario '{scenario}' complete.")

    async def run(self) -> None:
        self._banner("Console Demo", footer="Type 'quit' to exit")
        while True:
            user_input = (await asyncio.to_thread(input, f"\n{BLUE}[Tamu] {RESET}")).strip()
            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit", "q"):
                print(f"\n{DIM}Session ended.{RESET}")
                return

            if len(user_input) > settings.server.max_message_length:
                self.bot_say("Pesan Anda terlalu panjang. Bisa dipersingkat?")
                continue

            result = await self._process_input(user_input)
            if result.is_complete:
                break
        self._summary("Conversation complete.")


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline console demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    args = parser.parse_args()

    session = ConsoleSession()
    if args.scenario:
        asyncio.run(session.run_scenario(args.scenario))
    else:
        asyncio.run(session.run())


if __name__ == "__main__":
    main()
