"""Shared fixtures for search module tests."""

import pytest

from versesearch.search import IndexBuilder, QueryEngine, SearchService


@pytest.fixture
def index(sample_records):
    """Index built from the sample corpus."""
    return IndexBuilder().build(sample_records)


@pytest.fixture
def engine():
    return QueryEngine()


@pytest.fixture
def service(sample_records):
    """Search service over the sample corpus, not yet built."""
    return SearchService(sample_records)
