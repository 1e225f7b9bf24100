"""Name-equivalence lookup used during name matching.

Finnish registers spell the same given name several ways (Liisa, Elisabet,
Lisa). Matching consults an equivalence lookup when one is supplied and
otherwise compares names case-insensitively.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

# Built-in groups; every name in a group is equivalent to every other
FINNISH_EQUIVALENTS: list[set[str]] = [
    {"liisa", "elisabet", "lisa", "elisa"},
    {"johan", "juho", "johannes", "juhana"},
    {"maria", "maija", "mari"},
    {"erik", "eero", "erkki"},
    {"kristina", "kirsti", "kirstin"},
    {"henrik", "heikki", "henrikki"},
    {"margareta", "margeta", "marketta"},
    {"katharina", "katariina", "kaarina"},
    {"gertrud", "kerttu", "kerttuli"},
]

_FOLD = str.maketrans({"ä": "a", "ö": "o", "å": "a"})


def fold_name(name: str) -> str:
    """Lowercase, trim and fold Nordic vowels: ``'Päivi '`` -> ``'paivi'``."""
    return name.strip().lower().translate(_FOLD)


@runtime_checkable
class NameEquivalence(Protocol):
    """Lookup collaborator; consulted, never modified, by the resolver."""

    def are_equivalent(self, first: str, second: str) -> bool: ...


class BuiltinNameEquivalence:
    """Equivalence table seeded with common Finnish and Swedish variants."""

    def __init__(self, groups: list[set[str]] | None = None):
        self._group_of: dict[str, int] = {}
        for index, group in enumerate(groups if groups is not None else FINNISH_EQUIVALENTS):
            for name in group:
                self._group_of[fold_name(name)] = index

    def equivalents(self, name: str) -> set[str]:
        folded = fold_name(name)
        group = self._group_of.get(folded)
        if group is None:
            return {folded}
        return {n for n, g in self._group_of.items() if g == group}

    def are_equivalent(self, first: str, second: str) -> bool:
        a, b = fold_name(first), fold_name(second)
        if a == b:
            return True
        group = self._group_of.get(a)
        return group is not None and group == self._group_of.get(b)


def names_match(first: str, second: str, equivalence: NameEquivalence | None = None) -> bool:
    """Case-insensitive equality, widened by ``equivalence`` when available."""
    if first.strip().casefold() == second.strip().casefold():
        return True
    if equivalence is None:
        return False
    return equivalence.are_equivalent(first, second)
