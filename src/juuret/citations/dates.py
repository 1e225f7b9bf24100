"""Date rendering helpers for citation text."""
from __future__ import annotations

import re

from juuret.models.person import FULL_DATE_PATTERN

YEAR_PATTERN = re.compile(r"^\d{4}$")
FOUR_DIGIT_TOKEN = re.compile(r"\b(\d{4})\b")
TWO_DIGIT_TOKEN = re.compile(r"\b(\d{2})\b")

# Partial marriage years in this archive all fall in the 1800s
PARTIAL_YEAR_CENTURY = 1800


def normalize_date(date: str) -> str:
    """Render a recorded date for citation text.

    ``d.m.yyyy`` and bare years pass through; a leading ``n `` (about)
    becomes ``about``.

    >>> normalize_date("n 1850")
    'about 1850'
    """
    trimmed = date.strip()
    if FULL_DATE_PATTERN.match(trimmed) or YEAR_PATTERN.match(trimmed):
        return trimmed
    if trimmed.startswith("n "):
        return f"about {trimmed[2:]}"
    return trimmed


def extract_marriage_year(date: str | None) -> str | None:
    """Year of a recorded marriage date, or None when no year can be read.

    >>> extract_marriage_year("04.03.1867")
    '1867'
    >>> extract_marriage_year("14")
    '1814'
    """
    if not date:
        return None
    match = FOUR_DIGIT_TOKEN.search(date)
    if match:
        return match.group(1)
    tokens = TWO_DIGIT_TOKEN.findall(date)
    if tokens:
        return str(PARTIAL_YEAR_CENTURY + int(tokens[-1]))
    return None
