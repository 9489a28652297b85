from reservation_bot.conversation.state_machine import (
    DialogueStep,
    IntakeStateMachine,
    InvalidTransitionError,
    TransitionTrigger,
)

__all__ = [
    "DialogueStep",
    "IntakeStateMachine",
    "InvalidTransitionError",
    "TransitionTrigger",
]
