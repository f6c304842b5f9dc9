"""Query execution against a built verse index.

Every query term is matched as a prefix of indexed tokens, so partially typed
words already find results. A verse scores one point per distinct query term
it matches, in any indexed field. Equal scores are ordered by verse id, which
is canonical book/chapter/verse order.
"""

from __future__ import annotations

import heapq
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, NamedTuple

from ..core.books import NEW_TESTAMENT, OLD_TESTAMENT, resolve_book
from ..core.models import Testament
from .indexing.analyzers import MAX_QUERY_LENGTH, TextAnalyzer, normalize_query
from .indexing.index import BOOK_FIELD, TEXT_FIELD, VerseIndex

DEFAULT_LIMIT = 10
MIN_TERM_LENGTH = 2

_TESTAMENT_BOOKS = {
    Testament.OLD: frozenset(OLD_TESTAMENT),
    Testament.NEW: frozenset(NEW_TESTAMENT),
}


@dataclass(frozen=True)
class QueryOptions:
    """Result limit and scoping for one query.

    ``chapter`` restricts results whenever it is set. ``current_chapter_only``
    discards everything outside the chapter named by ``book`` and ``chapter``;
    with either of them missing it has no effect and the other filters apply
    as given.
    """

    limit: int = DEFAULT_LIMIT
    book: str | None = None
    chapter: int | None = None
    current_chapter_only: bool = False
    testament: Testament | None = None

    def __post_init__(self):
        if self.testament is not None and not isinstance(self.testament, Testament):
            object.__setattr__(self, "testament", Testament(self.testament))

    @classmethod
    def from_dict(cls, options: dict[str, Any] | None) -> QueryOptions:
        """Build options from a plain dict, accepting camelCase keys."""
        if not options:
            return cls()

        aliases = {"currentChapterOnly": "current_chapter_only"}
        return cls(**{aliases.get(key, key): value for key, value in options.items()})


class ScoredVerse(NamedTuple):
    verse_id: int
    score: int


class QueryEngine:
    """Executes queries against a :class:`VerseIndex`.

    The engine is stateless; the same instance may serve many indexes and many
    threads at once.
    """

    def __init__(
        self,
        analyzer: TextAnalyzer | None = None,
        fields: tuple[str, ...] = (TEXT_FIELD, BOOK_FIELD),
        max_query_length: int = MAX_QUERY_LENGTH,
    ):
        self.analyzer = analyzer or TextAnalyzer()
        self.fields = fields
        self.max_query_length = max_query_length

    def terms(self, text: Any) -> list[str]:
        """Distinct normalized query terms long enough to be matched."""
        normalized = normalize_query(text, self.max_query_length)
        if not normalized:
            return []
        return [t for t in self.analyzer.terms(normalized) if len(t) >= MIN_TERM_LENGTH]

    def query(
        self,
        index: VerseIndex,
        text: Any,
        options: QueryOptions | None = None,
    ) -> list[ScoredVerse]:
        """Find, rank, scope, deduplicate and limit matching verses.

        Args:
            index: Built index to search
            text: Raw query text
            options: Limit and scoping (default: top 10 over the whole corpus)

        Returns:
            Scored verse ids, best first
        """
        options = options or QueryOptions()
        limit = max(0, options.limit)
        if limit == 0:
            return []

        terms = self.terms(text)
        if not terms:
            return []

        scores = self._score(index, terms)
        if not scores:
            return []

        candidates = self._apply_filters(index, scores, options)

        # Top-k selection; equal scores pop in verse id order.
        heap = [(-score, verse_id) for verse_id, score in candidates]
        heapq.heapify(heap)

        results: list[ScoredVerse] = []
        seen: set[tuple[str, int, int]] = set()
        while heap:
            negative_score, verse_id = heapq.heappop(heap)
            score = -negative_score
            key = index.get(verse_id).key
            if key in seen:
                continue
            seen.add(key)
            results.append(ScoredVerse(verse_id, score))
            if len(results) >= limit:
                break

        return results

    def _score(self, index: VerseIndex, terms: list[str]) -> Counter[int]:
        fields = [index.fields[name] for name in self.fields if name in index.fields]
        scores: Counter[int] = Counter()

        for term in terms:
            # A term matching both text and book name still counts once.
            scores.update(
                frozenset().union(*(f.verses_with_prefix(term) for f in fields))
            )

        return scores

    def _apply_filters(
        self,
        index: VerseIndex,
        scores: Mapping[int, int],
        options: QueryOptions,
    ) -> Iterable[tuple[int, int]]:
        book = None
        if options.book is not None:
            book = resolve_book(options.book)
            if book is None:
                return []

        allowed_books = _TESTAMENT_BOOKS.get(options.testament)

        if book is None and options.chapter is None and allowed_books is None:
            return scores.items()

        filtered = []
        for verse_id, score in scores.items():
            record = index.records[verse_id]
            if book is not None and record.book != book:
                continue
            if options.chapter is not None and record.chapter != options.chapter:
                continue
            if allowed_books is not None and record.book not in allowed_books:
                continue
            filtered.append((verse_id, score))

        return filtered
