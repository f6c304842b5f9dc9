"""Search result types returned to callers."""

from __future__ import annotations

import msgspec

from ..core.models import VerseRecord


class SearchResult(msgspec.Struct, frozen=True, kw_only=True):
    """One matching verse with the text spans the query matched.

    Built fresh for every query and never cached by the search service.
    """

    book: str
    chapter: int
    verse: int
    text: str
    highlights: tuple[str, ...] = ()
    score: int = 0

    @classmethod
    def from_record(
        cls,
        record: VerseRecord,
        highlights: list[str] | tuple[str, ...] = (),
        score: int = 0,
    ) -> SearchResult:
        return cls(
            book=record.book,
            chapter=record.chapter,
            verse=record.verse,
            text=record.text or "",
            highlights=tuple(highlights),
            score=score,
        )

    @property
    def key(self) -> tuple[str, int, int]:
        return (self.book, self.chapter, self.verse)

    @property
    def reference(self) -> str:
        return f"{self.book} {self.chapter}:{self.verse}"

    def to_dict(self) -> dict:
        """Plain-dict form for JSON output."""
        return msgspec.to_builtins(self)
