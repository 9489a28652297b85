"""
Finite state machine for the reservation intake sequence.

Defines the seven intake steps and the explicit transitions between
them. A step only moves forward one position at a time, or back to the
first step when the guest rejects the summary; every other move is
rejected with InvalidTransitionError.

Usage:
    sm = IntakeStateMachine()
    sm.transition(TransitionTrigger.WELCOME_SENT)
    assert sm.current_step == DialogueStep.VALIDATE_DATE
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class DialogueStep(str, Enum):
    """Intake steps, in their fixed order."""
    ASK_DATE = "ask_date"
    VALIDATE_DATE = "validate_date"
    ASK_TIME = "ask_time"
    ASK_GUESTS = "ask_guests"
    ASK_NAME = "ask_name"
    ASK_CONTACT = "ask_contact"
    SUMMARY = "summary"

    @property
    def position(self) -> int:
        return STEP_ORDER.index(self)


STEP_ORDER: tuple[DialogueStep, ...] = tuple(DialogueStep)


class TransitionTrigger(str, Enum):
    """Events that cause step transitions."""
    WELCOME_SENT = "welcome_sent"
    DATE_ACCEPTED = "date_accepted"
    TIME_ACCEPTED = "time_accepted"
    GUESTS_ACCEPTED = "guests_accepted"
    NAME_ACCEPTED = "name_accepted"
    CONTACT_ACCEPTED = "contact_accepted"
    GUEST_CONFIRMED = "guest_confirmed"
    GUEST_REJECTED = "guest_rejected"


@dataclass
class Transition:
    """A single valid step transition."""
    from_step: DialogueStep
    to_step: DialogueStep
    trigger: TransitionTrigger


@dataclass
class StepEntry:
    """Recorded history entry for a step visit."""
    step: DialogueStep
    entered_at: datetime
    trigger: Optional[TransitionTrigger] = None


class InvalidTransitionError(Exception):
    """Raised when a transition is not valid from the current step."""


class IntakeStateMachine:
    """
    Deterministic step machine for one reservation dialogue.

    The dialogue engine rebuilds a machine from the session's stored step
    at the start of every turn, so the transition table is the only place
    that decides which step may follow which.
    """

    TRANSITIONS: list[Transition] = [
        Transition(DialogueStep.ASK_DATE, DialogueStep.VALIDATE_DATE,
                   TransitionTrigger.WELCOME_SENT),
        Transition(DialogueStep.VALIDATE_DATE, DialogueStep.ASK_TIME,
                   TransitionTrigger.DATE_ACCEPTED),
        Transition(DialogueStep.ASK_TIME, DialogueStep.ASK_GUESTS,
                   TransitionTrigger.TIME_ACCEPTED),
        Transition(DialogueStep.ASK_GUESTS, DialogueStep.ASK_NAME,
                   TransitionTrigger.GUESTS_ACCEPTED),
        Transition(DialogueStep.ASK_NAME, DialogueStep.ASK_CONTACT,
                   TransitionTrigger.NAME_ACCEPTED),
        Transition(DialogueStep.ASK_CONTACT, DialogueStep.SUMMARY,
                   TransitionTrigger.CONTACT_ACCEPTED),

        # --- Confirmation gate ---
        Transition(DialogueStep.SUMMARY, DialogueStep.SUMMARY,
                   TransitionTrigger.GUEST_CONFIRMED),
        Transition(DialogueStep.SUMMARY, DialogueStep.ASK_DATE,
                   TransitionTrigger.GUEST_REJECTED),
    ]

    def __init__(self, initial: DialogueStep = DialogueStep.ASK_DATE) -> None:
        self._current_step = initial
        self._history: list[StepEntry] = [
            StepEntry(step=initial, entered_at=datetime.now(timezone.utc))
        ]

    @property
    def current_step(self) -> DialogueStep:
        return self._current_step

    def transition(self, trigger: TransitionTrigger) -> DialogueStep:
        """
        Execute a step transition.

        Args:
            trigger: The event triggering the transition.

        Returns:
            The new dialogue step.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        for t in self.TRANSITIONS:
            if t.from_step == self._current_step and t.trigger == trigger:
                old_step = self._current_step
                self._current_step = t.to_step

                self._history.append(StepEntry(
                    step=self._current_step,
                    entered_at=datetime.now(timezone.utc),
                    trigger=trigger,
                ))

                logger.debug(
                    "Step transition: %s -> %s (trigger: %s)",
                    old_step.value, self._current_step.value, trigger.value,
                )
                return self._current_step

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_step.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def get_valid_triggers(self) -> list[TransitionTrigger]:
        """Return all triggers valid from the current step."""
        return [t.trigger for t in self.TRANSITIONS if t.from_step == self._current_step]

    def get_history(self) -> list[StepEntry]:
        """Return the full step transition history."""
        return list(self._history)

    def get_step_trace(self) -> list[str]:
        """Return ordered list of step names visited."""
        return [entry.step.value for entry in self._history]

    def is_awaiting_confirmation(self) -> bool:
        return self._current_step == DialogueStep.SUMMARY
