"""Cross-reference resolution engine.

Given a parsed main family, finds the families describing its members at
other life stages and returns them as a :class:`FamilyNetwork`:

1. as-child: each parent's family of origin, by reference token or, when the
   token is missing, by a conservative birth-date search;
2. as-parent: the family each married child founded;
3. spouse-as-child: the spouse's family of origin (not yet resolvable).

Misses are reported as outcomes. Only a missing corpus or a located block
that fails to parse raises.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from juuret.config import CONFIG, ResolverConfig
from juuret.corpus.locator import CorpusIndex, normalize_family_id
from juuret.exceptions import CorpusNotLoadedError, CrossReferenceParseError
from juuret.models import Family, FamilyNetwork, Person, identity_key
from juuret.names import NameEquivalence, names_match
from juuret.parsing.parser import FamilyParser
from juuret.resolution.outcomes import (
    ResolutionKind,
    ResolutionOutcome,
    ResolutionReport,
    ResolutionStatistics,
    ResolutionStatus,
)

logger = logging.getLogger(__name__)

Job = Callable[[], Awaitable[ResolutionOutcome]]


class FamilyResolver:
    """Resolves the cross-references of one family at a time.

    The loaded corpus is shared read-only by every task; parsed families are
    memoized per normalized id until a new corpus is set.

    Example:
        >>> resolver = FamilyResolver(parser, corpus=text)
        >>> network = await resolver.resolve(family)
        >>> network.as_child_family(family.father).family_id
        'KORPI 5'
    """

    def __init__(
        self,
        parser: FamilyParser,
        corpus: CorpusIndex | str | None = None,
        name_equivalence: NameEquivalence | None = None,
        config: ResolverConfig = CONFIG,
    ):
        self._parser = parser
        self._names = name_equivalence
        self._max_concurrency = max(1, config.max_concurrency)
        self._corpus: CorpusIndex | None = None
        self._families: dict[str, Family] = {}
        self._inflight: dict[str, asyncio.Future[Family]] = {}
        self.statistics = ResolutionStatistics()
        self.last_report: ResolutionReport | None = None
        if corpus is not None:
            self.set_corpus(corpus)

    @property
    def parser(self) -> FamilyParser:
        return self._parser

    # -- corpus ------------------------------------------------------------

    def set_corpus(self, corpus: CorpusIndex | str) -> None:
        """Load a new corpus; parsed families from the old one are discarded."""
        self._corpus = corpus if isinstance(corpus, CorpusIndex) else CorpusIndex(corpus)
        self.clear_cache()

    @property
    def corpus(self) -> CorpusIndex:
        if self._corpus is None:
            raise CorpusNotLoadedError("corpus access")
        return self._corpus

    @property
    def has_corpus(self) -> bool:
        return self._corpus is not None

    def clear_cache(self) -> None:
        self._families.clear()
        self._inflight.clear()

    # -- public operation --------------------------------------------------

    async def resolve(self, family: Family) -> FamilyNetwork:
        """Resolve every cross-reference of ``family``.

        Raises:
            CorpusNotLoadedError: no corpus has been set
            CrossReferenceParseError: a located block could not be parsed
        """
        if self._corpus is None:
            raise CorpusNotLoadedError("resolve")
        corpus = self._corpus
        main_id = normalize_family_id(family.family_id)
        report = ResolutionReport(family_id=main_id)
        self.last_report = report
        logger.info("Resolving cross-references for %s", main_id)

        as_child: dict[str, Family] = {}
        as_parent: dict[str, Family] = {}
        spouse_as_child: dict[str, Family] = {}

        passes: list[tuple[list[Job], dict[str, Family]]] = [
            (
                [self._job(self._resolve_as_child, corpus, main_id, p) for p in family.all_parents],
                as_child,
            ),
            (
                [self._job(self._resolve_as_parent, corpus, main_id, c) for c in family.married_children],
                as_parent,
            ),
            (
                [self._job(self._resolve_spouse_as_child, c) for c in family.married_children],
                spouse_as_child,
            ),
        ]
        for jobs, resolved in passes:
            for outcome in await self._run_bounded(jobs):
                report.outcomes.append(outcome)
                self.statistics.record(outcome)
                self._accumulate(outcome, resolved)

        network = FamilyNetwork(
            main_family=family,
            as_child_families=as_child,
            as_parent_families=as_parent,
            spouse_as_child_families=spouse_as_child,
        )
        logger.info(
            "Resolved %s: %d as-child, %d as-parent, %d spouse as-child, %d unresolved",
            main_id,
            len(as_child),
            len(as_parent),
            len(spouse_as_child),
            len(report.unresolved),
        )
        return network

    # -- passes ------------------------------------------------------------

    async def _resolve_as_child(self, corpus: CorpusIndex, main_id: str, parent: Person) -> ResolutionOutcome:
        kind = ResolutionKind.AS_CHILD
        if parent.as_child_reference and parent.as_child_reference.strip():
            return await self._resolve_reference(kind, corpus, main_id, parent.display_name, parent.as_child_reference)
        return await self._search_by_birth_date(kind, corpus, main_id, parent)

    async def _resolve_as_parent(self, corpus: CorpusIndex, main_id: str, child: Person) -> ResolutionOutcome:
        kind = ResolutionKind.AS_PARENT
        if child.as_parent_reference and child.as_parent_reference.strip():
            return await self._resolve_reference(kind, corpus, main_id, child.display_name, child.as_parent_reference)
        # TODO: search the corpus for a block listing the recorded spouse as a parent
        return ResolutionOutcome(kind, child.display_name, ResolutionStatus.NOT_IMPLEMENTED)

    async def _resolve_spouse_as_child(self, child: Person) -> ResolutionOutcome:
        # The child's record carries only the spouse's name, with no birth
        # date or reference token to search by.
        return ResolutionOutcome(
            ResolutionKind.SPOUSE_AS_CHILD,
            (child.spouse or "").strip(),
            ResolutionStatus.NOT_IMPLEMENTED,
        )

    # -- strategies --------------------------------------------------------

    async def _resolve_reference(
        self,
        kind: ResolutionKind,
        corpus: CorpusIndex,
        main_id: str,
        person: str,
        token: str,
    ) -> ResolutionOutcome:
        reference = normalize_family_id(token)
        if reference == main_id:
            return ResolutionOutcome(kind, person, ResolutionStatus.SELF_REFERENCE, reference=reference)

        text = corpus.extract_family_text(reference)
        if text is None:
            return ResolutionOutcome(kind, person, ResolutionStatus.NOT_FOUND, reference=reference)

        family = await self._parse(reference, text)
        return ResolutionOutcome(kind, person, ResolutionStatus.RESOLVED, reference=reference, family=family)

    async def _search_by_birth_date(
        self,
        kind: ResolutionKind,
        corpus: CorpusIndex,
        main_id: str,
        person: Person,
    ) -> ResolutionOutcome:
        birth_date = (person.birth_date or "").strip()
        if not birth_date:
            return ResolutionOutcome(kind, person.display_name, ResolutionStatus.NO_BIRTH_DATE)

        matches: dict[str, Family] = {}
        for block in corpus.find_blocks_containing(birth_date):
            # the main family always lists its own parents' birth dates
            if block.family_id == main_id or block.family_id in matches:
                continue
            candidate = await self._parse(block.family_id, block.text)
            if any(names_match(p.name, person.name, self._names) for p in candidate.all_persons):
                matches[block.family_id] = candidate

        if not matches:
            return ResolutionOutcome(kind, person.display_name, ResolutionStatus.NO_CANDIDATES)
        if len(matches) > 1:
            return ResolutionOutcome(
                kind,
                person.display_name,
                ResolutionStatus.AMBIGUOUS,
                candidates=sorted(matches),
            )
        family_id, family = next(iter(matches.items()))
        return ResolutionOutcome(kind, person.display_name, ResolutionStatus.RESOLVED, reference=family_id, family=family)

    # -- plumbing ----------------------------------------------------------

    @staticmethod
    def _job(func: Callable[..., Awaitable[ResolutionOutcome]], *args: object) -> Job:
        return lambda: func(*args)

    async def _run_bounded(self, jobs: list[Job]) -> list[ResolutionOutcome]:
        """Run one pass with at most ``max_concurrency`` jobs in flight."""
        sem = asyncio.Semaphore(self._max_concurrency)

        async def run_one(job: Job) -> ResolutionOutcome:
            async with sem:
                return await job()

        tasks = [asyncio.ensure_future(run_one(job)) for job in jobs]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            for future in self._inflight.values():
                future.cancel()
            self._inflight.clear()
            raise

    async def _parse(self, family_id: str, text: str) -> Family:
        """Parse a located block once per id; concurrent callers share the call."""
        cached = self._families.get(family_id)
        if cached is not None:
            return cached

        future = self._inflight.get(family_id)
        if future is None:
            future = asyncio.ensure_future(self._parser.parse(family_id, text))
            self._inflight[family_id] = future
        try:
            family = await asyncio.shield(future)
        except Exception as e:
            logger.error("Failed to parse referenced family %s: %s", family_id, e)
            raise CrossReferenceParseError(family_id, str(e)) from e
        finally:
            if future.done():
                self._inflight.pop(family_id, None)

        self._families[family_id] = family
        return family

    @staticmethod
    def _accumulate(outcome: ResolutionOutcome, resolved: dict[str, Family]) -> None:
        if outcome.status == ResolutionStatus.NOT_IMPLEMENTED:
            logger.debug("Skipped %s", outcome.describe())
            return
        if not outcome.resolved:
            logger.warning("Unresolved %s", outcome.describe())
            return
        key = identity_key(outcome.person)
        if key in resolved:
            logger.warning("Duplicate identity %r in %s pass; keeping first", outcome.person, outcome.kind.value)
            return
        logger.debug("Resolved %s", outcome.describe())
        resolved[key] = outcome.family
