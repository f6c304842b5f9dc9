"""Canonical book list and book-name normalization."""

import re
from dataclasses import dataclass

from .models import Testament

OLD_TESTAMENT: tuple[str, ...] = (
    "Genesis", "Exodus", "Leviticus", "Numbers", "Deuteronomy",
    "Joshua", "Judges", "Ruth", "1 Samuel", "2 Samuel",
    "1 Kings", "2 Kings", "1 Chronicles", "2 Chronicles", "Ezra",
    "Nehemiah", "Esther", "Job", "Psalms", "Proverbs",
    "Ecclesiastes", "Song of Solomon", "Isaiah", "Jeremiah", "Lamentations",
    "Ezekiel", "Daniel", "Hosea", "Joel", "Amos",
    "Obadiah", "Jonah", "Micah", "Nahum", "Habakkuk",
    "Zephaniah", "Haggai", "Zechariah", "Malachi",
)  # fmt: skip

NEW_TESTAMENT: tuple[str, ...] = (
    "Matthew", "Mark", "Luke", "John", "Acts",
    "Romans", "1 Corinthians", "2 Corinthians", "Galatians", "Ephesians",
    "Philippians", "Colossians", "1 Thessalonians", "2 Thessalonians", "1 Timothy",
    "2 Timothy", "Titus", "Philemon", "Hebrews", "James",
    "1 Peter", "2 Peter", "1 John", "2 John", "3 John",
    "Jude", "Revelation",
)  # fmt: skip

BOOKS: tuple[str, ...] = OLD_TESTAMENT + NEW_TESTAMENT

CHAPTER_COUNTS: dict[str, int] = {
    "Genesis": 50, "Exodus": 40, "Leviticus": 27, "Numbers": 36,
    "Deuteronomy": 34, "Joshua": 24, "Judges": 21, "Ruth": 4,
    "1 Samuel": 31, "2 Samuel": 24, "1 Kings": 22, "2 Kings": 25,
    "1 Chronicles": 29, "2 Chronicles": 36, "Ezra": 10, "Nehemiah": 13,
    "Esther": 10, "Job": 42, "Psalms": 150, "Proverbs": 31,
    "Ecclesiastes": 12, "Song of Solomon": 8, "Isaiah": 66, "Jeremiah": 52,
    "Lamentations": 5, "Ezekiel": 48, "Daniel": 12, "Hosea": 14,
    "Joel": 3, "Amos": 9, "Obadiah": 1, "Jonah": 4,
    "Micah": 7, "Nahum": 3, "Habakkuk": 3, "Zephaniah": 3,
    "Haggai": 2, "Zechariah": 14, "Malachi": 4,
    "Matthew": 28, "Mark": 16, "Luke": 24, "John": 21,
    "Acts": 28, "Romans": 16, "1 Corinthians": 16, "2 Corinthians": 13,
    "Galatians": 6, "Ephesians": 6, "Philippians": 4, "Colossians": 4,
    "1 Thessalonians": 5, "2 Thessalonians": 3, "1 Timothy": 6, "2 Timothy": 4,
    "Titus": 3, "Philemon": 1, "Hebrews": 13, "James": 5,
    "1 Peter": 5, "2 Peter": 3, "1 John": 5, "2 John": 1,
    "3 John": 1, "Jude": 1, "Revelation": 22,
}  # fmt: skip

BOOK_VARIATIONS: dict[str, str] = {
    "song of songs": "Song of Solomon",
    "songs": "Song of Solomon",
    "psalm": "Psalms",
    "first samuel": "1 Samuel",
    "second samuel": "2 Samuel",
    "first kings": "1 Kings",
    "second kings": "2 Kings",
    "first chronicles": "1 Chronicles",
    "second chronicles": "2 Chronicles",
    "first corinthians": "1 Corinthians",
    "second corinthians": "2 Corinthians",
    "first thessalonians": "1 Thessalonians",
    "second thessalonians": "2 Thessalonians",
    "first timothy": "1 Timothy",
    "second timothy": "2 Timothy",
    "first peter": "1 Peter",
    "second peter": "2 Peter",
    "first john": "1 John",
    "second john": "2 John",
    "third john": "3 John",
}

_BOOKS_BY_LOWER = {book.lower(): book for book in BOOKS}
_OLD_TESTAMENT_SET = frozenset(OLD_TESTAMENT)


@dataclass(frozen=True)
class BookInfo:
    """Static facts about one book of the canon."""

    name: str
    testament: Testament
    index: int  # 1-based within its testament
    total_chapters: int

    @property
    def canonical_index(self) -> int:
        """0-based position in the full canon."""
        return BOOKS.index(self.name)


def format_book_name(book: str) -> str:
    """Normalize user or URL supplied book names.

    ``song-of-songs`` becomes ``Song of Solomon``, ``first_john`` becomes
    ``1 John``. Names that are not recognised are still title-cased.
    """
    words = re.sub(r"[-_\s]+", " ", book).strip().lower().split(" ")

    formatted = []
    for word in words:
        if word.isdigit() or word == "of":
            formatted.append(word)
        else:
            formatted.append(word[:1].upper() + word[1:])
    result = " ".join(formatted)

    return BOOK_VARIATIONS.get(result.lower(), result)


def get_book_info(book: str) -> BookInfo | None:
    """Look up a book by any reasonable spelling of its name."""
    if not book or not book.strip():
        return None

    name = _BOOKS_BY_LOWER.get(format_book_name(book).lower())
    if name is None:
        return None

    if name in _OLD_TESTAMENT_SET:
        testament = Testament.OLD
        index = OLD_TESTAMENT.index(name) + 1
    else:
        testament = Testament.NEW
        index = NEW_TESTAMENT.index(name) + 1

    return BookInfo(
        name=name,
        testament=testament,
        index=index,
        total_chapters=CHAPTER_COUNTS[name],
    )


def resolve_book(book: str) -> str | None:
    """Return the canonical book name, or None when unknown."""
    info = get_book_info(book)
    return info.name if info else None


def testament_of(book: str) -> Testament | None:
    info = get_book_info(book)
    return info.testament if info else None


def book_slug(book: str) -> str:
    """URL-friendly form of a book name (``1 John`` -> ``1-john``)."""
    return re.sub(r"\s+", "-", book.strip().lower())
