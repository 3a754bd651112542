from __future__ import annotations

import asyncio
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, cast

from openai import AsyncOpenAI

from newslens.core.config import get_settings
from newslens.core.exceptions import LLMServiceError

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{[\s\S]*\})\s*```")
_CHAT_COMPLETIONS_SUFFIX = "/chat/completions"


@dataclass
class GenerationResult:
    """Outcome of parsing a generation response: a JSON object or an error."""

    ok: bool
    payload: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @classmethod
    def success(cls, payload: dict[str, Any]) -> "GenerationResult":
        return cls(ok=True, payload=payload)

    @classmethod
    def failure(cls, error: str) -> "GenerationResult":
        return cls(ok=False, error=error)


def _load_object(text: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    return cast(dict[str, Any], parsed) if isinstance(parsed, dict) else None


def parse_generation_response(content: str | None) -> GenerationResult:
    """
    Parse a model reply into a JSON object.

    Strict JSON is tried first, then the first ```json fenced block. Anything
    that is not a JSON object is reported as a failure; nothing is raised.
    """
    if not content or not content.strip():
        return GenerationResult.failure("Empty response")

    parsed = _load_object(content)
    if parsed is not None:
        return GenerationResult.success(parsed)

    match = _FENCED_JSON.search(content)
    if match:
        parsed = _load_object(match.group(1))
        if parsed is not None:
            return GenerationResult.success(parsed)
        return GenerationResult.failure("Fenced block is not a valid JSON object")

    return GenerationResult.failure("Could not parse JSON from response")


def _base_url(api_url: str | None) -> str | None:
    """Accept either an API base URL or a full chat-completions endpoint."""
    if not api_url:
        return None
    api_url = api_url.rstrip("/")
    if api_url.endswith(_CHAT_COMPLETIONS_SUFFIX):
        return api_url[: -len(_CHAT_COMPLETIONS_SUFFIX)]
    return api_url


class LLMService:
    """
    OpenAI-compatible text-generation client used for story synthesis.

    Stateless: every call carries the full group context. When no API key is
    configured the client is not created and callers are expected to fall
    back to deterministic synthesis.
    """

    def __init__(self, settings: Any = None) -> None:
        """
        Initialise the LLM service.

        Args:
            settings: Application settings with the API key, model and
                      generation limits. Falls back to global settings.
        """
        self.settings = settings or get_settings()
        self.client: AsyncOpenAI | None
        if self.settings.OPENAI_API_KEY:
            self.client = AsyncOpenAI(
                api_key=self.settings.OPENAI_API_KEY,
                base_url=_base_url(self.settings.LLM_API_URL),
            )
        else:
            self.client = None
            logger.warning("LLMService initialized without OPENAI_API_KEY. Basic synthesis will be used.")
        self.model = self.settings.LLM_MODEL
        self.timeout = float(self.settings.LLM_TIMEOUT_SECONDS)

    @property
    def available(self) -> bool:
        return self.client is not None

    async def generate(
        self, system_instruction: str, user_prompt: str, max_tokens: int | None = None
    ) -> GenerationResult:
        """
        Request a structured JSON object from the model.

        Args:
            system_instruction: System message for the model.
            user_prompt: User message carrying the articles and instructions.
            max_tokens: Reply budget; defaults to ``LLM_MAX_TOKENS``.

        Returns:
            Tagged parse result of the model's reply.

        Raises:
            LLMServiceError: If the client is not configured, the call times
                out, the API errors, or the reply is empty.
        """
        if not self.client:
            raise LLMServiceError("LLM client is not configured", model=self.model)

        messages = [
            {"role": "system", "content": system_instruction},
            {"role": "user", "content": user_prompt},
        ]

        try:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=self.model,
                    messages=cast(Any, messages),
                    max_tokens=max_tokens or self.settings.LLM_MAX_TOKENS,
                    temperature=self.settings.LLM_TEMPERATURE,
                    response_format=cast(Any, {"type": "json_object"}),
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.warning("LLM call timed out after %.0fs", self.timeout)
            raise LLMServiceError(f"LLM call timed out after {self.timeout:.0f}s", model=self.model) from e
        except Exception as e:
            logger.error("LLM call failed: %s", e, exc_info=True)
            raise LLMServiceError(f"LLM call failed: {str(e)}", model=self.model) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMServiceError("LLM returned an empty response", model=self.model)
        return parse_generation_response(content)
