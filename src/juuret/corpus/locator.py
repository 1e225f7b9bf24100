"""Locate family blocks inside the raw archive text.

A family block starts with a header line such as ``KORPI 6, pages 105-106``
or ``ISO-PEITSO III 2`` and runs until the first blank line.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Uppercase place name, optional Roman-numeral qualifier, number, optional letter
FAMILY_HEADER_PATTERN = re.compile(r"^([A-ZÄÖÅ-]+(?:\s+[IVX]+)?\s+\d+[A-Z]?)(?![\w])")


def normalize_family_id(family_id: str) -> str:
    """Uppercase, trim and collapse internal whitespace: ``' korpi  6 '`` -> ``'KORPI 6'``."""
    return " ".join(family_id.split()).upper()


def header_family_id(line: str) -> str | None:
    """Return the normalized family id if ``line`` is a family header."""
    match = FAMILY_HEADER_PATTERN.match(line.strip())
    if match is None:
        return None
    return normalize_family_id(match.group(1))


@dataclass(frozen=True)
class CorpusBlock:
    """One family block as it appears in the corpus."""

    family_id: str
    text: str


class CorpusIndex:
    """Read-only view over one loaded corpus.

    Safe to share between concurrent resolution tasks; nothing here mutates
    after construction.

    Example:
        >>> index = CorpusIndex(text)
        >>> index.extract_family_text("korpi 6")
        'KORPI 6, pages 105-106\\n★ 09.10.1726 Matti Erikinp. ...'
    """

    def __init__(self, text: str):
        self._text = text
        self._lines = text.splitlines()
        self._blocks = self._segment(self._lines)

    @property
    def text(self) -> str:
        return self._text

    @staticmethod
    def _segment(lines: list[str]) -> list[CorpusBlock]:
        blocks: list[CorpusBlock] = []
        current_id: str | None = None
        current: list[str] = []
        for line in lines:
            family_id = header_family_id(line)
            if family_id is not None:
                if current_id is not None:
                    blocks.append(CorpusBlock(current_id, "\n".join(current).rstrip()))
                current_id, current = family_id, [line]
            elif current_id is not None:
                current.append(line)
        if current_id is not None:
            blocks.append(CorpusBlock(current_id, "\n".join(current).rstrip()))
        return blocks

    @staticmethod
    def _is_header_for(line: str, family_id: str) -> bool:
        stripped = normalize_family_id(line)
        if not stripped.startswith(family_id):
            return False
        rest = stripped[len(family_id):]
        # "KORPI 6" must not claim "KORPI 61" or "KORPI 6A"
        return not rest or not rest[0].isalnum()

    def extract_family_text(self, family_id: str) -> str | None:
        """Return the contiguous block for ``family_id`` or None when absent.

        Collection starts at the header line and stops at the first blank
        line after it, or at the next family header.
        """
        target = normalize_family_id(family_id)
        if not target:
            return None
        collected: list[str] = []
        for line in self._lines:
            if not collected:
                if self._is_header_for(line, target):
                    collected.append(line)
                continue
            if not line.strip() or header_family_id(line) is not None:
                break
            collected.append(line)
        if not collected:
            logger.debug("Family %s not found in corpus", target)
            return None
        return "\n".join(collected)

    def find_blocks_containing(self, token: str) -> list[CorpusBlock]:
        """Every family block whose raw text contains ``token`` verbatim.

        A token can also match an unrelated field such as a page number;
        callers are expected to disambiguate.
        """
        if not token.strip():
            return []
        return [block for block in self._blocks if token in block.text]

    def family_ids(self) -> list[str]:
        """Family ids in document order, duplicates removed."""
        return list(dict.fromkeys(block.family_id for block in self._blocks))

    def next_family_id(self, family_id: str) -> str | None:
        ids = self.family_ids()
        target = normalize_family_id(family_id)
        if target not in ids:
            return None
        position = ids.index(target)
        return ids[position + 1] if position + 1 < len(ids) else None

    def __contains__(self, family_id: object) -> bool:
        return isinstance(family_id, str) and self.extract_family_text(family_id) is not None
