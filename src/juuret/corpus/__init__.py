"""Corpus index and family-block locator."""

from juuret.corpus.locator import (
    FAMILY_HEADER_PATTERN,
    CorpusBlock,
    CorpusIndex,
    header_family_id,
    normalize_family_id,
)

__all__ = [
    "FAMILY_HEADER_PATTERN",
    "CorpusBlock",
    "CorpusIndex",
    "header_family_id",
    "normalize_family_id",
]
