"""Cross-reference resolution engine.

Example:
    >>> from juuret.resolution import FamilyResolver
    >>> resolver = FamilyResolver(parser, corpus=text)
    >>> network = await resolver.resolve(family)
"""

from juuret.resolution.outcomes import (
    KindCounts,
    ResolutionKind,
    ResolutionOutcome,
    ResolutionReport,
    ResolutionStatistics,
    ResolutionStatus,
)
from juuret.resolution.resolver import FamilyResolver

__all__ = [
    # Engine
    "FamilyResolver",
    # Outcomes
    "ResolutionKind",
    "ResolutionOutcome",
    "ResolutionReport",
    "ResolutionStatus",
    # Statistics
    "KindCounts",
    "ResolutionStatistics",
]
