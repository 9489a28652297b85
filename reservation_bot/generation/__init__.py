from reservation_bot.generation.utterance import (
    LLMUtteranceGenerator,
    TemplateUtteranceGenerator,
    UtteranceGenerationError,
    UtteranceGenerator,
)

__all__ = [
    "UtteranceGenerator", "UtteranceGenerationError",
    "TemplateUtteranceGenerator", "LLMUtteranceGenerator",
]
