"""External parser collaborator: text block -> Family."""
from __future__ import annotations

import json
import logging
from typing import Protocol, runtime_checkable

from pydantic import ValidationError

from juuret.config import CONFIG, ResolverConfig
from juuret.corpus.locator import normalize_family_id
from juuret.exceptions import FamilyParseError
from juuret.models import Family
from juuret.parsing.clients import LLMClient
from juuret.parsing.prompts import FAMILY_EXTRACTION_PROMPT, build_user_message

logger = logging.getLogger(__name__)


@runtime_checkable
class FamilyParser(Protocol):
    """Turns one located family block into a structured record.

    Implementations may be remote and slow. They raise
    :class:`~juuret.exceptions.FamilyParseError` on malformed text.
    """

    async def parse(self, family_id: str, text: str) -> Family: ...


def strip_code_fences(response: str) -> str:
    """Remove a surrounding ```json ... ``` block if present."""
    response = response.strip()
    if not response.startswith("```"):
        return response
    json_lines = []
    in_block = False
    for line in response.split("\n"):
        if line.startswith("```") and not in_block:
            in_block = True
            continue
        elif line.startswith("```") and in_block:
            break
        elif in_block:
            json_lines.append(line)
    return "\n".join(json_lines)


class LLMFamilyParser:
    """FamilyParser backed by an LLM returning Family-shaped JSON.

    Example:
        >>> parser = LLMFamilyParser(AnthropicClient())
        >>> family = await parser.parse("KORPI 6", block_text)
        >>> family.father.display_name
        'Matti Erikinp.'
    """

    def __init__(self, client: LLMClient, config: ResolverConfig = CONFIG):
        self._client = client
        self._temperature = config.llm_temperature
        self._max_retries = config.parse_retries

    def _parse_response(self, family_id: str, response: str) -> Family:
        try:
            data = json.loads(strip_code_fences(response))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in LLM response: {e}") from e
        if not isinstance(data, dict):
            raise ValueError("LLM response is not a JSON object")

        try:
            family = Family.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"LLM response doesn't match schema: {e}") from e

        # The block was located by this id, so it wins over what the model read
        expected = normalize_family_id(family_id)
        if normalize_family_id(family.family_id) != expected:
            logger.warning("Parser returned id %r for block %s", family.family_id, expected)
        return family.model_copy(update={"family_id": expected})

    async def parse(self, family_id: str, text: str) -> Family:
        user_message = build_user_message(family_id, text)
        temperature = self._temperature

        last_error: Exception | None = None
        for attempt in range(self._max_retries + 1):
            try:
                response = await self._client.complete(
                    system_prompt=FAMILY_EXTRACTION_PROMPT,
                    user_message=user_message,
                    temperature=temperature,
                )
                return self._parse_response(family_id, response)
            except ValueError as e:
                last_error = e
                logger.warning("Parse attempt %d for %s failed: %s", attempt + 1, family_id, e)
                if attempt < self._max_retries:
                    # Slightly increase temperature for retry
                    temperature = min(0.3, temperature + 0.1)

        raise FamilyParseError(
            family_id, f"no valid response after {self._max_retries + 1} attempts: {last_error}"
        )
