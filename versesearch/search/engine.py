"""Search service: the single entry point for callers.

The service owns the one piece of long-lived state in the search subsystem,
the built :class:`VerseIndex`. It is created lazily on first use, at most once,
and can be rebuilt or discarded explicitly.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import threading
from collections.abc import Callable, Iterable
from functools import partial
from pathlib import Path
from typing import Any, Union

from ..core.corpus import load_corpus
from ..core.models import VerseRecord
from ..core.references import Reference, parse_reference
from ..errors import CorpusUnavailable, IndexNotReady
from .autocomplete import AutocompleteProvider
from .highlighting import Highlighter
from .indexing import IndexBuilder, VerseIndex, normalize_query
from .query import QueryEngine, QueryOptions
from .results import SearchResult

logger = logging.getLogger(__name__)

CorpusSource = Union[Iterable[VerseRecord], Callable[[], Iterable[VerseRecord]], None]


class SearchService:
    """Lazily built, thread-safe verse search.

    Queries never observe a partially built index: the first caller builds
    while later callers wait on the build lock. Once built, the index is only
    read, so concurrent queries need no coordination.
    """

    def __init__(
        self,
        corpus_source: CorpusSource = None,
        builder: IndexBuilder | None = None,
        engine: QueryEngine | None = None,
        highlighter: Highlighter | None = None,
        autocomplete: AutocompleteProvider | None = None,
    ):
        """Initialize search service.

        Args:
            corpus_source: Loaded verse records, or a zero-argument callable
                returning them (called once per build). Records given
                directly are copied into a tuple, so a generator can back
                any number of rebuilds.
            builder: Index builder (default: IndexBuilder)
            engine: Query engine (default: one sharing the builder's analyzer)
            highlighter: Result highlighter
            autocomplete: Suggestion provider
        """
        if corpus_source is not None and not callable(corpus_source):
            corpus_source = tuple(corpus_source)
        self.corpus_source = corpus_source
        self.builder = builder or IndexBuilder()
        self.engine = engine or QueryEngine(self.builder.analyzer)
        self.highlighter = highlighter or Highlighter(analyzer=self.builder.analyzer)
        self.autocomplete = autocomplete or AutocompleteProvider()

        self._index: VerseIndex | None = None
        self._build_lock = threading.Lock()
        self._build_count = 0

    @property
    def is_ready(self) -> bool:
        return self._index is not None

    @property
    def index(self) -> VerseIndex | None:
        """The current index, or None if it has not been built."""
        return self._index

    @property
    def build_count(self) -> int:
        return self._build_count

    def ensure_index(self, wait: bool = True, timeout: float | None = None) -> VerseIndex:
        """Return the index, building it first if needed.

        Args:
            wait: Block while another thread is building
            timeout: Maximum seconds to wait when ``wait`` is true

        Raises:
            CorpusUnavailable: If the corpus cannot be loaded
            IndexNotReady: If a build is in progress and waiting was declined
                or timed out
        """
        index = self._index
        if index is not None:
            return index

        if not wait:
            acquired = self._build_lock.acquire(blocking=False)
        elif timeout is None:
            acquired = self._build_lock.acquire()
        else:
            acquired = self._build_lock.acquire(timeout=timeout)

        if not acquired:
            raise IndexNotReady("Search index is still being built")

        try:
            if self._index is None:
                self._index = self._build()
            return self._index
        finally:
            self._build_lock.release()

    def rebuild(self) -> VerseIndex:
        """Build a new index and make it current.

        Queries already running keep the index they started with.
        """
        with self._build_lock:
            index = self._build()
            self._index = index
            return index

    def discard(self) -> None:
        """Drop the cached index; the next query builds a fresh one."""
        with self._build_lock:
            self._index = None

    def search(
        self,
        query: Any,
        options: QueryOptions | dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> list[SearchResult]:
        """Search the corpus.

        Args:
            query: Free-text query; partial words match as prefixes
            options: Query options, as :class:`QueryOptions` or a dict
            **kwargs: Option fields given directly (``limit=3, book="John"``)

        Returns:
            Ranked results, possibly empty

        Raises:
            CorpusUnavailable: If the index has to be built and cannot be
        """
        if not normalize_query(query, self.engine.max_query_length):
            return []

        options = self._resolve_options(options, kwargs)

        index = self.ensure_index()
        return self._search_index(index, query, options)

    def suggest(self, query: str, limit: int = 5) -> list[str]:
        """Autocomplete book names and common references."""
        return self.autocomplete.suggest(query, limit)

    def highlight(self, text: str, terms: Iterable[str]) -> list[str]:
        """Matched spans of ``text`` for the given query terms."""
        return self.highlighter.highlight(text, terms)

    def lookup(self, reference: str | Reference) -> list[SearchResult]:
        """Fetch the verses a reference such as ``John 3:16-18`` points to."""
        if not isinstance(reference, Reference):
            reference = parse_reference(reference)
            if reference is None:
                return []

        index = self.ensure_index()
        return [
            SearchResult.from_record(record)
            for record in index.chapter(reference.book, reference.chapter)
            if reference.contains(record.chapter, record.verse)
        ]

    async def search_async(
        self,
        query: Any,
        options: QueryOptions | dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> list[SearchResult]:
        """Run :meth:`search` in a worker thread."""
        return await asyncio.to_thread(self.search, query, options, **kwargs)

    async def suggest_async(self, query: str, limit: int = 5) -> list[str]:
        return await asyncio.to_thread(self.suggest, query, limit)

    def get_statistics(self) -> dict[str, Any]:
        index = self._index
        return {
            "ready": index is not None,
            "builds": self._build_count,
            "index": index.statistics() if index is not None else None,
        }

    def _search_index(
        self, index: VerseIndex, query: Any, options: QueryOptions
    ) -> list[SearchResult]:
        terms = self.engine.terms(query)
        results = []
        for verse_id, score in self.engine.query(index, query, options):
            record = index.get(verse_id)
            highlights = self.highlighter.highlight(record.text, terms)
            results.append(SearchResult.from_record(record, highlights, score))
        return results

    def _build(self) -> VerseIndex:
        corpus = self._load_corpus()
        index = self.builder.build(corpus)
        self._build_count += 1
        return index

    def _load_corpus(self) -> Iterable[VerseRecord] | None:
        source = self.corpus_source
        if not callable(source):
            return source

        try:
            return source()
        except CorpusUnavailable:
            raise
        except OSError as e:
            raise CorpusUnavailable(f"Corpus source failed: {e}") from e

    @staticmethod
    def _resolve_options(
        options: QueryOptions | dict[str, Any] | None, overrides: dict[str, Any]
    ) -> QueryOptions:
        if isinstance(options, QueryOptions):
            if not overrides:
                return options
            options = {
                "limit": options.limit,
                "book": options.book,
                "chapter": options.chapter,
                "current_chapter_only": options.current_chapter_only,
                "testament": options.testament,
            }
        return QueryOptions.from_dict({**(options or {}), **overrides})


class SearchSession:
    """Sequence numbers for one search-as-you-type session.

    Each query gets a number higher than every earlier one; a response is only
    worth showing while its number is still the latest issued. The service
    itself never cancels work, so stale responses are simply dropped here.
    """

    def __init__(self, service: SearchService):
        self.service = service
        self._counter = itertools.count(1)
        self._latest = 0
        self._lock = threading.Lock()

    @property
    def latest(self) -> int:
        return self._latest

    def next_sequence(self) -> int:
        with self._lock:
            self._latest = next(self._counter)
            return self._latest

    def is_current(self, sequence: int) -> bool:
        return sequence == self._latest

    def search(
        self, query: Any, options: QueryOptions | dict[str, Any] | None = None, **kwargs
    ) -> tuple[int, list[SearchResult]]:
        """Run a query and return it tagged with its sequence number."""
        sequence = self.next_sequence()
        return sequence, self.service.search(query, options, **kwargs)

    async def search_async(
        self, query: Any, options: QueryOptions | dict[str, Any] | None = None, **kwargs
    ) -> list[SearchResult] | None:
        """Run a query off-thread; None if a newer query was issued meanwhile."""
        sequence = self.next_sequence()
        results = await self.service.search_async(query, options, **kwargs)
        if not self.is_current(sequence):
            logger.debug("Discarding stale results for query #%d", sequence)
            return None
        return results


def create_search_service(corpus_path: Path | str) -> SearchService:
    """Create a service that loads its corpus from a JSON file on first use."""
    return SearchService(partial(load_corpus, Path(corpus_path)))
