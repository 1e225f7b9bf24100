"""External parser collaborator and its LLM-backed implementation."""

from juuret.parsing.clients import AnthropicClient, LLMClient, MockLLMClient
from juuret.parsing.parser import FamilyParser, LLMFamilyParser, strip_code_fences

__all__ = [
    "AnthropicClient",
    "FamilyParser",
    "LLMClient",
    "LLMFamilyParser",
    "MockLLMClient",
    "strip_code_fences",
]
