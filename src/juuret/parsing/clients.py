"""Async LLM clients used by the family parser."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from juuret.config import CONFIG

if TYPE_CHECKING:
    from anthropic import AsyncAnthropic


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_message: str,
        temperature: float = 0.0,
    ) -> str:
        """Send a completion request to the LLM.

        Args:
            system_prompt: Instructions describing the extraction task
            user_message: The family block to extract
            temperature: Sampling temperature (0.0 for deterministic)

        Returns:
            The raw text response from the LLM
        """
        ...


class AnthropicClient(LLMClient):
    """Anthropic Claude client implementation."""

    def __init__(
        self,
        client: AsyncAnthropic | None = None,
        model: str = CONFIG.llm_model,
        max_tokens: int = CONFIG.llm_max_tokens,
    ):
        if client is None:
            from anthropic import AsyncAnthropic
            client = AsyncAnthropic()
        self._client = client
        self._model = model
        self._max_tokens = max_tokens

    async def complete(
        self,
        system_prompt: str,
        user_message: str,
        temperature: float = 0.0,
    ) -> str:
        response = await self._client.messages.create(
            model=self._model,
            max_tokens=self._max_tokens,
            temperature=temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": user_message}],
        )
        if response.content and len(response.content) > 0:
            return response.content[0].text
        return ""


class MockLLMClient(LLMClient):
    """Mock client for testing.

    ``responses`` maps a substring of the user message (usually a family id)
    to the raw text to return. A list value is consumed one item per call,
    which lets tests script a malformed first answer.
    """

    def __init__(self, responses: dict[str, str | list[str]] | None = None):
        self._responses = {key: list(v) if isinstance(v, list) else v for key, v in (responses or {}).items()}
        self._call_history: list[tuple[str, str]] = []

    @property
    def call_history(self) -> list[tuple[str, str]]:
        return list(self._call_history)

    async def complete(
        self,
        system_prompt: str,
        user_message: str,
        temperature: float = 0.0,
    ) -> str:
        self._call_history.append((system_prompt, user_message))
        for key, response in self._responses.items():
            if key in user_message:
                if isinstance(response, list):
                    return response.pop(0) if len(response) > 1 else response[0]
                return response
        return "{}"
