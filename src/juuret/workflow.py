"""Processing a family end to end: locate, parse, resolve, cite.

This is the single orchestration path; CLI commands and library callers
both go through :class:`FamilyNetworkWorkflow`.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from juuret.cache import CachedNetwork, NetworkCache
from juuret.citations import enrich_children, nuclear_supplement, render_as_child, render_family
from juuret.corpus.locator import normalize_family_id
from juuret.exceptions import FamilyNotFoundError
from juuret.models import FamilyNetwork, Person, PersonRef, identity_key, lookup_keys
from juuret.resolution import FamilyResolver, ResolutionReport

logger = logging.getLogger(__name__)


@dataclass
class CitationSet:
    """Rendered citations for one family network.

    Person citations are stored once, under the normalized display name;
    :meth:`lookup` falls back to the bare name when that is unambiguous.
    """
    family_id: str
    family_citation: str
    _entries: dict[str, tuple[Person, str]] = field(default_factory=dict, repr=False)

    def add(self, person: Person, citation: str) -> None:
        key = identity_key(person.display_name)
        if key in self._entries:
            logger.warning("Duplicate citation key %r in %s; keeping first", person.display_name, self.family_id)
            return
        self._entries[key] = (person, citation)

    def lookup(self, who: PersonRef) -> str | None:
        for key in lookup_keys(who):
            if key in self._entries:
                return self._entries[key][1]
        bare = identity_key(who.name if isinstance(who, Person) else who)
        matches = [text for person, text in self._entries.values() if identity_key(person.name) == bare]
        return matches[0] if len(matches) == 1 else None

    def persons(self) -> list[Person]:
        return [person for person, _ in self._entries.values()]

    def as_dict(self) -> dict[str, str]:
        """Flat export: family id, display names, and unambiguous bare names."""
        exported = {self.family_id: self.family_citation}
        bare_counts: dict[str, int] = {}
        for person, _ in self._entries.values():
            bare_counts[person.name] = bare_counts.get(person.name, 0) + 1
        for person, text in self._entries.values():
            exported[person.display_name] = text
        for person, text in self._entries.values():
            if bare_counts[person.name] == 1:
                exported.setdefault(person.name, text)
        return exported

    def __len__(self) -> int:
        return len(self._entries)


def build_citations(network: FamilyNetwork) -> CitationSet:
    """Render the family citation and one citation per member.

    - family: children enriched from their own households, followed by
      notes on where those extra dates came from
    - parents: their line in the family they grew up in, or the family
      citation when that family was not resolved
    - children: their marked line in this family, with dates from the
      household they later headed
    """
    family = network.main_family
    body = render_family(enrich_children(family, network)) + nuclear_supplement(family, network)
    citations = CitationSet(family_id=family.family_id, family_citation=body)

    for parent in family.all_parents:
        as_child = network.as_child_family(parent)
        if as_child is None:
            citations.add(parent, body)
            continue
        # the parent's own household serves as their as-parent record
        overlay = network.with_as_parent(parent, family)
        citations.add(parent, render_as_child(parent, as_child, overlay))

    for child in family.all_children:
        citations.add(child, render_as_child(child, family, network))
    return citations


@dataclass
class WorkflowResult:
    """Everything produced for one family."""
    network: FamilyNetwork
    citations: CitationSet
    report: ResolutionReport | None = None
    from_cache: bool = False


class FamilyNetworkWorkflow:
    """Locate, parse, resolve and cite one family at a time.

    Example:
        >>> workflow = FamilyNetworkWorkflow(FamilyResolver(parser, corpus=text))
        >>> result = await workflow.process("KORPI 6")
        >>> print(result.citations.family_citation)
    """

    def __init__(self, resolver: FamilyResolver, cache: NetworkCache | None = None):
        self._resolver = resolver
        self._cache = cache

    @property
    def resolver(self) -> FamilyResolver:
        return self._resolver

    async def process(self, family_id: str, use_cache: bool = True) -> WorkflowResult:
        """Process ``family_id``.

        Raises:
            CorpusNotLoadedError: no corpus has been set
            FamilyNotFoundError: the family is not in the corpus
            FamilyParseError: the family's own block could not be parsed
            CrossReferenceParseError: a linked block could not be parsed
        """
        target = normalize_family_id(family_id)
        if use_cache and self._cache is not None:
            cached = self._cache.get(target)
            if cached is not None:
                logger.debug("Using cached network for %s", target)
                return WorkflowResult(cached.network, cached.citations, from_cache=True)

        started = time.perf_counter()
        text = self._resolver.corpus.extract_family_text(target)
        if text is None:
            raise FamilyNotFoundError(target)

        family = await self._resolver.parser.parse(target, text)
        warnings = family.validate_structure()
        if warnings:
            logger.warning("Family %s has structural issues: %s", target, "; ".join(warnings))

        network = await self._resolver.resolve(family)
        citations = build_citations(network)
        elapsed = time.perf_counter() - started
        logger.info("Processed %s in %.2fs (%d citations)", target, elapsed, len(citations) + 1)

        if self._cache is not None:
            self._cache.put(CachedNetwork(network, citations, extraction_seconds=elapsed))
        return WorkflowResult(network, citations, report=self._resolver.last_report)
