"""Resolution outcomes and statistics.

Unresolved cross-references are ordinary results here, never exceptions.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field

from juuret.models import Family


class ResolutionKind(str, Enum):
    """The three classes of cross-reference."""
    AS_CHILD = "as_child"
    AS_PARENT = "as_parent"
    SPOUSE_AS_CHILD = "spouse_as_child"


class ResolutionStatus(str, Enum):
    """How a single cross-reference attempt ended."""
    RESOLVED = "resolved"
    NOT_FOUND = "not_found"              # reference token has no block in the corpus
    NO_BIRTH_DATE = "no_birth_date"      # nothing to search by
    NO_CANDIDATES = "no_candidates"      # birth-date search matched nobody
    AMBIGUOUS = "ambiguous"              # several candidates; never auto-picked
    SELF_REFERENCE = "self_reference"    # token points back at the main family
    NOT_IMPLEMENTED = "not_implemented"  # open extension point


@dataclass
class ResolutionOutcome:
    """Result of resolving one person's cross-reference."""
    kind: ResolutionKind
    person: str
    status: ResolutionStatus
    reference: str | None = None
    family: Family | None = None
    candidates: list[str] = field(default_factory=list)

    @property
    def resolved(self) -> bool:
        return self.status == ResolutionStatus.RESOLVED and self.family is not None

    def describe(self) -> str:
        target = self.reference or "birth-date search"
        if self.resolved:
            return f"{self.kind.value}: {self.person} -> {self.family.family_id}"
        detail = f" ({', '.join(self.candidates)})" if self.candidates else ""
        return f"{self.kind.value}: {self.person} via {target}: {self.status.value}{detail}"


@dataclass
class ResolutionReport:
    """Every outcome produced by one ``resolve`` call, in pass order."""
    family_id: str
    outcomes: list[ResolutionOutcome] = field(default_factory=list)

    def by_kind(self, kind: ResolutionKind) -> list[ResolutionOutcome]:
        return [o for o in self.outcomes if o.kind == kind]

    @property
    def unresolved(self) -> list[ResolutionOutcome]:
        return [o for o in self.outcomes if not o.resolved]


class KindCounts(BaseModel):
    """Attempt counters for one resolution kind."""

    attempted: int = Field(default=0, ge=0)
    resolved: int = Field(default=0, ge=0)

    @property
    def unresolved(self) -> int:
        return self.attempted - self.resolved


class ResolutionStatistics(BaseModel):
    """Running counters across ``resolve`` calls."""

    as_child: KindCounts = Field(default_factory=KindCounts)
    as_parent: KindCounts = Field(default_factory=KindCounts)
    spouse_as_child: KindCounts = Field(default_factory=KindCounts)

    def counts_for(self, kind: ResolutionKind) -> KindCounts:
        return getattr(self, kind.value)

    def record(self, outcome: ResolutionOutcome) -> None:
        counts = self.counts_for(outcome.kind)
        counts.attempted += 1
        if outcome.resolved:
            counts.resolved += 1

    @property
    def total_attempted(self) -> int:
        return self.as_child.attempted + self.as_parent.attempted + self.spouse_as_child.attempted

    @property
    def total_resolved(self) -> int:
        return self.as_child.resolved + self.as_parent.resolved + self.spouse_as_child.resolved

    @property
    def success_rate(self) -> float:
        """Share of attempts that resolved, 0.0 when nothing was attempted."""
        if self.total_attempted == 0:
            return 0.0
        return self.total_resolved / self.total_attempted

    def reset(self) -> None:
        self.as_child = KindCounts()
        self.as_parent = KindCounts()
        self.spouse_as_child = KindCounts()
