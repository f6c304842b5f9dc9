"""Corpus-side building blocks: books, verse records, references, loading."""

from .books import (
    BOOKS,
    CHAPTER_COUNTS,
    NEW_TESTAMENT,
    OLD_TESTAMENT,
    BookInfo,
    book_slug,
    format_book_name,
    get_book_info,
    resolve_book,
    testament_of,
)
from .corpus import load_corpus, records_from_mapping
from .models import Testament, VerseRecord
from .references import Reference, format_reference, parse_reference

__all__ = [
    "BOOKS",
    "CHAPTER_COUNTS",
    "NEW_TESTAMENT",
    "OLD_TESTAMENT",
    "BookInfo",
    "Reference",
    "Testament",
    "VerseRecord",
    "book_slug",
    "format_book_name",
    "format_reference",
    "get_book_info",
    "load_corpus",
    "parse_reference",
    "records_from_mapping",
    "resolve_book",
    "testament_of",
]
