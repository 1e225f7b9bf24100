"""Shared fixtures."""
from __future__ import annotations

import pytest

from juuret.corpus import CorpusIndex
from juuret.resolution import FamilyResolver

from sample_data import KORPI_CORPUS, FakeParser, korpi_families


@pytest.fixture
def corpus() -> CorpusIndex:
    return CorpusIndex(KORPI_CORPUS)


@pytest.fixture
def parser() -> FakeParser:
    return FakeParser(korpi_families())


@pytest.fixture
def resolver(parser: FakeParser, corpus: CorpusIndex) -> FamilyResolver:
    return FamilyResolver(parser, corpus=corpus)
