"""Exceptions raised by the search subsystem."""


class SearchError(Exception):
    """Base exception for search-related errors."""


class CorpusUnavailable(SearchError):
    """The corpus could not be loaded, so no index can be built.

    Callers must treat this as "search unavailable", which is distinct from a
    query that simply has no matches.
    """


class IndexNotReady(SearchError):
    """A query arrived while the one-time index build was still running."""
