"""Parsing and formatting of scripture references like ``John 3:16``."""

import re
from dataclasses import dataclass

from .books import get_book_info

REFERENCE_PATTERN = re.compile(
    r"^\s*(?P<book>\d?\s*[A-Za-z][A-Za-z\s]*?)\s+(?P<chapter>\d+)"
    r"(?::(?P<start>\d+)(?:\s*-\s*(?P<end>\d+))?)?\s*$"
)


@dataclass(frozen=True)
class Reference:
    """A parsed reference to a chapter, a verse, or a verse range."""

    book: str
    chapter: int
    verse_start: int | None = None
    verse_end: int | None = None

    @property
    def display(self) -> str:
        return format_reference(
            self.book, self.chapter, self.verse_start, self.verse_end
        )

    def contains(self, chapter: int, verse: int) -> bool:
        """Check whether a verse of the same book falls inside the reference."""
        if chapter != self.chapter:
            return False
        if self.verse_start is None:
            return True
        end = self.verse_end if self.verse_end is not None else self.verse_start
        return self.verse_start <= verse <= end

    def __str__(self) -> str:
        return self.display


def parse_reference(text: str) -> Reference | None:
    """Parse ``Book C``, ``Book C:V`` or ``Book C:V-W``.

    Returns None for unknown books or text that is not a reference.
    """
    if not text:
        return None

    match = REFERENCE_PATTERN.match(text)
    if not match:
        return None

    info = get_book_info(match.group("book"))
    if info is None:
        return None

    chapter = int(match.group("chapter"))
    verse_start = int(match.group("start")) if match.group("start") else None
    verse_end = int(match.group("end")) if match.group("end") else None

    if verse_end is not None and verse_end == verse_start:
        verse_end = None
    if verse_end is not None and verse_start is not None and verse_end < verse_start:
        return None

    return Reference(
        book=info.name,
        chapter=chapter,
        verse_start=verse_start,
        verse_end=verse_end,
    )


def format_reference(
    book: str,
    chapter: int,
    verse_start: int | None = None,
    verse_end: int | None = None,
) -> str:
    reference = f"{book} {chapter}"

    if verse_start:
        reference += f":{verse_start}"
        if verse_end and verse_end != verse_start:
            reference += f"-{verse_end}"

    return reference
