"""Immutable inverted index over the verse corpus."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, NamedTuple

from ...core.models import VerseRecord

TEXT_FIELD = "text"
BOOK_FIELD = "book"
PREFIX_CACHE_SIZE = 4096


class Posting(NamedTuple):
    """Occurrence of a token: the verse id and the token's position in it."""

    verse_id: int
    position: int


@dataclass(frozen=True)
class FieldIndex:
    """Token -> postings mapping for one searchable field.

    ``vocabulary`` is the sorted list of distinct tokens, so every token that
    starts with a given prefix lies in one contiguous slice of it.
    ``verse_ids`` holds, per token, the distinct verses it occurs in.
    """

    name: str
    postings: Mapping[str, tuple[Posting, ...]]
    vocabulary: tuple[str, ...]
    verse_ids: Mapping[str, frozenset[int]]
    _prefix_cache: dict[str, frozenset[int]] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    @classmethod
    def freeze(cls, name: str, postings: dict[str, list[Posting]]) -> FieldIndex:
        """Build a read-only field index from mutable build-time postings."""
        frozen = {token: tuple(plist) for token, plist in postings.items()}
        verse_ids = {
            token: frozenset(posting.verse_id for posting in plist)
            for token, plist in frozen.items()
        }
        return cls(
            name=name,
            postings=MappingProxyType(frozen),
            vocabulary=tuple(sorted(frozen)),
            verse_ids=MappingProxyType(verse_ids),
        )

    def tokens_with_prefix(self, prefix: str) -> Iterator[str]:
        """Yield every indexed token starting with ``prefix``, in sorted order."""
        if not prefix:
            return

        vocabulary = self.vocabulary
        i = bisect_left(vocabulary, prefix)
        while i < len(vocabulary) and vocabulary[i].startswith(prefix):
            yield vocabulary[i]
            i += 1

    def verses_with_prefix(self, prefix: str) -> frozenset[int]:
        """Ids of all verses containing a token that starts with ``prefix``.

        Results are cached per prefix for the lifetime of the index.
        """
        cached = self._prefix_cache.get(prefix)
        if cached is not None:
            return cached

        matched = frozenset().union(
            *(self.verse_ids[token] for token in self.tokens_with_prefix(prefix))
        )

        if len(self._prefix_cache) >= PREFIX_CACHE_SIZE:
            self._prefix_cache.clear()
        self._prefix_cache[prefix] = matched
        return matched

    def get_postings(self, token: str) -> tuple[Posting, ...]:
        return self.postings.get(token, ())

    def __len__(self) -> int:
        return len(self.vocabulary)


@dataclass(frozen=True)
class VerseIndex:
    """The built search index.

    A value object: it is never modified after the builder returns it. A
    rebuild produces a new ``VerseIndex``; holders of the old one keep a
    consistent view. Record ``i`` in ``records`` has ``id == i``.
    """

    records: tuple[VerseRecord, ...]
    fields: Mapping[str, FieldIndex]
    skipped: int = 0
    build_time_ms: float = 0.0
    _by_key: Mapping[tuple[str, int, int], int] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self):
        by_key = {record.key: record.id for record in self.records}
        object.__setattr__(self, "_by_key", MappingProxyType(by_key))

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, verse_id: object) -> bool:
        return isinstance(verse_id, int) and 0 <= verse_id < len(self.records)

    def get(self, verse_id: int) -> VerseRecord:
        """Fetch a record by the id this index assigned to it.

        Raises:
            KeyError: If the id does not belong to this index
        """
        if verse_id not in self:
            raise KeyError(verse_id)
        return self.records[verse_id]

    def lookup(self, book: str, chapter: int, verse: int) -> VerseRecord | None:
        """Fetch a record by its canonical reference."""
        verse_id = self._by_key.get((book, chapter, verse))
        return None if verse_id is None else self.records[verse_id]

    def chapter(self, book: str, chapter: int) -> list[VerseRecord]:
        """All indexed verses of one chapter, in verse order."""
        return [r for r in self.records if r.book == book and r.chapter == chapter]

    def field_index(self, name: str) -> FieldIndex:
        return self.fields[name]

    def statistics(self) -> dict[str, Any]:
        return {
            "total_verses": len(self.records),
            "skipped_records": self.skipped,
            "total_books": len({record.book for record in self.records}),
            "distinct_tokens": {name: len(f) for name, f in self.fields.items()},
            "build_time_ms": round(self.build_time_ms, 2),
        }
