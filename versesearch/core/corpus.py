"""Loading the verse corpus from its JSON source file.

The file maps book names to chapters, and chapters to lists of verses::

    {"Genesis": {"1": [{"verse": 1, "text": "In the beginning ..."}]}}

Records are returned in canonical order (books in canon order, chapters
numerically, verses as listed), which is the order the index builder relies on
for deterministic tie-breaking.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import msgspec

from ..errors import CorpusUnavailable
from .books import BOOKS, resolve_book
from .models import VerseRecord

logger = logging.getLogger(__name__)


class RawVerse(msgspec.Struct, kw_only=True):
    """One verse as stored in the corpus file."""

    verse: int
    text: str | None = None


CorpusFile = dict[str, dict[str, list[RawVerse]]]

_decoder = msgspec.json.Decoder(CorpusFile)


def load_corpus(path: Path | str) -> list[VerseRecord]:
    """Load and flatten a corpus file.

    Raises:
        CorpusUnavailable: If the file is missing, unreadable or not a valid
            corpus document
    """
    path = Path(path)

    try:
        data = path.read_bytes()
    except OSError as e:
        raise CorpusUnavailable(f"Cannot read corpus file {path}: {e}") from e

    try:
        decoded = _decoder.decode(data)
    except msgspec.DecodeError as e:
        raise CorpusUnavailable(f"Invalid corpus file {path}: {e}") from e

    records = records_from_mapping(decoded)
    logger.debug("Loaded %d verses from %s", len(records), path)
    return records


def records_from_mapping(data: Mapping[str, Any]) -> list[VerseRecord]:
    """Flatten a ``{book: {chapter: [verse, ...]}}`` mapping into records.

    Verses may be :class:`RawVerse` instances or plain dicts. Unknown books
    and duplicate references are dropped with a warning.
    """
    books: dict[str, Mapping[str, Any]] = {}
    for name, chapters in data.items():
        canonical = resolve_book(name)
        if canonical is None:
            logger.warning("Skipping unknown book %r in corpus", name)
            continue
        if not isinstance(chapters, Mapping):
            logger.warning("Skipping book %r: chapters are not a mapping", name)
            continue
        books[canonical] = chapters

    records: list[VerseRecord] = []
    seen: set[tuple[str, int, int]] = set()

    for book in BOOKS:
        chapters = books.get(book)
        if not chapters:
            continue

        for chapter, verses in _sorted_chapters(book, chapters):
            for raw in verses or ():
                record = _make_record(book, chapter, raw)
                if record is None:
                    continue
                if record.key in seen:
                    logger.warning("Dropping duplicate verse %s", record.reference)
                    continue
                seen.add(record.key)
                records.append(record)

    return records


def _sorted_chapters(
    book: str, chapters: Mapping[str, Any]
) -> Iterable[tuple[int, Any]]:
    numbered = []
    for chapter, verses in chapters.items():
        try:
            number = int(chapter)
        except (TypeError, ValueError):
            logger.warning("Skipping non-numeric chapter %r in %s", chapter, book)
            continue
        if number < 1:
            logger.warning("Skipping invalid chapter %r in %s", chapter, book)
            continue
        numbered.append((number, verses))

    return sorted(numbered, key=lambda item: item[0])


def _make_record(book: str, chapter: int, raw: Any) -> VerseRecord | None:
    if isinstance(raw, RawVerse):
        verse, text = raw.verse, raw.text
    elif isinstance(raw, Mapping):
        verse, text = raw.get("verse"), raw.get("text")
    else:
        logger.warning("Skipping malformed verse in %s %d: %r", book, chapter, raw)
        return None

    if not isinstance(verse, int) or isinstance(verse, bool) or verse < 1:
        logger.warning("Skipping verse with invalid number in %s %d", book, chapter)
        return None

    # Missing text is passed through; the index builder skips such records.
    if text is not None and not isinstance(text, str):
        text = None

    return VerseRecord(book=book, chapter=chapter, verse=verse, text=text)
