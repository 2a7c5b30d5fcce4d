"""Completion service clients.

Each service exposes one coroutine, ``complete(system, user_text, json_mode)``,
returning the model's raw text. Provider failures are re-raised as
CompletionError so callers only need to handle one exception type.
"""
import logging
from typing import Optional, Protocol

import anthropic
import openai

import config

logger = logging.getLogger(__name__)

JSON_ONLY_INSTRUCTION = "\n\nOnly respond with valid JSON, no other text."


class CompletionError(Exception):
    """Raised when the completion provider fails or returns nothing usable."""


class ConfigurationError(Exception):
    """Raised when a completion provider cannot be built from configuration."""


class CompletionService(Protocol):
    name: str

    async def complete(self, system: str, user_text: str, json_mode: bool = False) -> str:
        ...


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code block (```json ... ```) if present."""
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        lines = lines[1:]  # Remove first line (```json)
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        text = "\n".join(lines)
    return text


class AnthropicCompletionService:
    """Completion service backed by the Anthropic Messages API.

    The Messages API has no JSON response mode, so json_mode tightens the
    system prompt and strips markdown fences from the reply instead.
    """

    name = "anthropic"

    def __init__(self, client: anthropic.AsyncAnthropic, model: str, max_tokens: int = 1024):
        self._client = client
        self.model = model
        self.max_tokens = max_tokens

    async def complete(self, system: str, user_text: str, json_mode: bool = False) -> str:
        if json_mode:
            system = system + JSON_ONLY_INSTRUCTION
        try:
            response = await self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=system,
                messages=[{"role": "user", "content": user_text}],
            )
        except anthropic.AnthropicError as e:
            raise CompletionError(f"AI request failed: {e}") from e

        text = "".join(block.text for block in response.content if block.type == "text")
        if not text.strip():
            raise CompletionError("AI request returned no text")
        logger.debug("Anthropic response: %s", text)
        return strip_code_fence(text) if json_mode else text


class OpenAICompletionService:
    """Completion service for OpenAI and OpenAI-compatible endpoints (Groq)."""

    def __init__(self, client: openai.AsyncOpenAI, model: str, temperature: float = 0.7, name: str = "openai"):
        self._client = client
        self.model = model
        self.temperature = temperature
        self.name = name

    async def complete(self, system: str, user_text: str, json_mode: bool = False) -> str:
        params = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user_text},
            ],
            "temperature": self.temperature,
        }
        if json_mode:
            params["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.chat.completions.create(**params)
        except openai.OpenAIError as e:
            raise CompletionError(f"AI request failed: {e}") from e

        text = response.choices[0].message.content if response.choices else None
        if not text:
            raise CompletionError("AI request returned no text")
        logger.debug("%s response: %s", self.name, text)
        return text


def build_completion_service(provider: Optional[str] = None) -> CompletionService:
    """Create the completion service selected by AI_PROVIDER."""
    provider = (provider or config.AI_PROVIDER).lower()

    if provider == "anthropic":
        if not config.ANTHROPIC_API_KEY or config.ANTHROPIC_API_KEY == "your-api-key-here":
            raise ConfigurationError("ANTHROPIC_API_KEY is required when using the anthropic provider")
        client = anthropic.AsyncAnthropic(api_key=config.ANTHROPIC_API_KEY)
        service = AnthropicCompletionService(client, config.ANTHROPIC_MODEL, config.AI_MAX_TOKENS)
    elif provider == "openai":
        if not config.OPENAI_API_KEY:
            raise ConfigurationError("OPENAI_API_KEY is required when using the openai provider")
        client = openai.AsyncOpenAI(api_key=config.OPENAI_API_KEY)
        service = OpenAICompletionService(client, config.OPENAI_MODEL, config.AI_TEMPERATURE)
    elif provider == "groq":
        if not config.GROQ_API_KEY:
            raise ConfigurationError("GROQ_API_KEY is required when using the groq provider")
        client = openai.AsyncOpenAI(api_key=config.GROQ_API_KEY, base_url=config.GROQ_BASE_URL)
        service = OpenAICompletionService(client, config.GROQ_MODEL, config.AI_TEMPERATURE, name="groq")
    else:
        raise ConfigurationError(f"Unsupported AI provider: {provider}")

    logger.info("AI client initialized: %s (%s)", provider, service.model)
    return service
