"""Core data models using msgspec for performance."""

from __future__ import annotations

from enum import Enum

import msgspec


class Testament(str, Enum):
    """Division of the canon a book belongs to."""

    OLD = "old"
    NEW = "new"

    @property
    def display_name(self) -> str:
        return "Old Testament" if self is Testament.OLD else "New Testament"


class VerseRecord(msgspec.Struct, frozen=True, kw_only=True):
    """A single verse of the corpus.

    Records are immutable. The ``id`` is a dense surrogate key assigned by the
    index builder and is only meaningful within the index that assigned it;
    records straight from the corpus source carry ``None``.
    """

    book: str
    chapter: int
    verse: int
    text: str | None = None
    id: int | None = None

    @property
    def key(self) -> tuple[str, int, int]:
        """The ``(book, chapter, verse)`` triple identifying this verse."""
        return (self.book, self.chapter, self.verse)

    @property
    def reference(self) -> str:
        return f"{self.book} {self.chapter}:{self.verse}"
