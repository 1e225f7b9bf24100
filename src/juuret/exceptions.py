"""Error taxonomy.

Only precondition failures and malformed located text are raised. A
cross-reference that cannot be found or is ambiguous is an outcome, see
:mod:`juuret.resolution.outcomes`.
"""
from __future__ import annotations

from dataclasses import dataclass


class JuuretError(Exception):
    """Base class for fatal errors surfaced to the top-level caller."""


@dataclass
class CorpusNotLoadedError(JuuretError):
    """Raised when the corpus is consulted before one has been set."""

    operation: str = "resolve"

    def __str__(self) -> str:
        return f"No corpus loaded (needed by {self.operation})"


@dataclass
class FamilyParseError(JuuretError):
    """Raised by a parser when a text block cannot become a Family."""

    family_id: str
    reason: str

    def __str__(self) -> str:
        return f"Could not parse family {self.family_id}: {self.reason}"


@dataclass
class CrossReferenceParseError(JuuretError):
    """Raised when a located cross-referenced block fails to parse.

    Aborts the whole ``resolve`` call; ``family_id`` names the offending block.
    """

    family_id: str
    reason: str

    def __str__(self) -> str:
        return f"Cross-reference parse failure for {self.family_id}: {self.reason}"


@dataclass
class FamilyNotFoundError(JuuretError):
    """Raised when the family requested for processing is absent from the corpus."""

    family_id: str

    def __str__(self) -> str:
        return f"Family {self.family_id} not found in corpus"
