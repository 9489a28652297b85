"""
Utterance generators: turn a reply directive into the text a guest sees.

The template generator returns the literal line and needs no network.
The LLM generator talks to any OpenAI-compatible chat-completions
endpoint (Groq by default) and is used both to restyle fixed lines in
guided mode and to drive the whole conversation in freeform mode.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from reservation_bot.config import ModelConfig, settings
from reservation_bot.prompts.prompt_templates import build_rephrase_request
from reservation_bot.prompts.system_prompts import REPHRASE_SYSTEM_PROMPT
from reservation_bot.schemas.reply_schema import ReplyDirective

logger = logging.getLogger(__name__)

Message = dict[str, str]


class UtteranceGenerationError(Exception):
    """The text-generation service failed, timed out, or returned nothing."""


class UtteranceGenerator(ABC):
    """Renders a directive into natural language given prior messages."""

    @abstractmethod
    async def generate(self, prior_messages: list[Message], directive: ReplyDirective) -> str:
        ...


class TemplateUtteranceGenerator(UtteranceGenerator):
    """Returns the directive's literal line unchanged."""

    async def generate(self, prior_messages: list[Message], directive: ReplyDirective) -> str:
        return directive.line


class LLMUtteranceGenerator(UtteranceGenerator):
    """Chat-completion backed generator."""

    def __init__(
        self,
        config: ModelConfig = settings.model,
        client: Optional[AsyncOpenAI] = None,
        max_history: int = settings.session.max_history_messages,
    ) -> None:
        self._config = config
        self._max_history = max_history
        self._client = client or AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout_sec,
            max_retries=config.max_retries,
        )

    async def complete(self, system_prompt: str, messages: list[Message]) -> str:
        """
        Run one chat completion.

        Args:
            system_prompt: Instructions for the model.
            messages: ``{"role": "user"|"assistant", "content": ...}`` history,
                trimmed to the most recent ``max_history`` entries.

        Returns:
            The model's reply text, stripped.

        Raises:
            UtteranceGenerationError: On any client error or an empty reply.
        """
        full_messages = [{"role": "system", "content": system_prompt}]
        full_messages += messages[-self._max_history:]
        try:
            response = await self._client.chat.completions.create(
                model=self._config.llm_model,
                messages=full_messages,
                temperature=self._config.llm_temperature,
                max_tokens=self._config.max_tokens,
            )
        except OpenAIError as exc:
            logger.exception("Chat completion failed")
            raise UtteranceGenerationError("Text generation failed") from exc

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise UtteranceGenerationError("Text generation returned an empty reply")
        return content.strip()

    async def generate(self, prior_messages: list[Message], directive: ReplyDirective) -> str:
        request = {"role": "user", "content": build_rephrase_request(directive.line)}
        return await self.complete(REPHRASE_SYSTEM_PROMPT, prior_messages + [request])
