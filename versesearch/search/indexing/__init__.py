"""Indexing components for verse search."""

from .analyzers import (
    MAX_QUERY_LENGTH,
    AnalyzerConfig,
    TextAnalyzer,
    Token,
    normalize_query,
)
from .builder import IndexBuilder, build_index
from .index import BOOK_FIELD, TEXT_FIELD, FieldIndex, Posting, VerseIndex

__all__ = [
    "BOOK_FIELD",
    "MAX_QUERY_LENGTH",
    "TEXT_FIELD",
    "AnalyzerConfig",
    "FieldIndex",
    "IndexBuilder",
    "Posting",
    "TextAnalyzer",
    "Token",
    "VerseIndex",
    "build_index",
    "normalize_query",
]
