"""Full-text verse search.

Main components:
- IndexBuilder: builds the immutable inverted index from the corpus
- QueryEngine: prefix matching, ranking, scoping and deduplication
- Highlighter: matched spans of verse text
- AutocompleteProvider: book-name and reference suggestions
- SearchService: lazily built facade over all of the above
"""

from ..errors import CorpusUnavailable, IndexNotReady, SearchError
from .autocomplete import COMMON_REFERENCES, AutocompleteProvider
from .engine import SearchService, SearchSession, create_search_service
from .highlighting import Highlight, Highlighter, highlight
from .indexing import (
    AnalyzerConfig,
    FieldIndex,
    IndexBuilder,
    Posting,
    TextAnalyzer,
    VerseIndex,
    build_index,
    normalize_query,
)
from .query import DEFAULT_LIMIT, QueryEngine, QueryOptions, ScoredVerse
from .results import SearchResult

__all__ = [
    # Service
    "SearchService",
    "SearchSession",
    "create_search_service",
    # Indexing
    "AnalyzerConfig",
    "FieldIndex",
    "IndexBuilder",
    "Posting",
    "TextAnalyzer",
    "VerseIndex",
    "build_index",
    "normalize_query",
    # Querying
    "DEFAULT_LIMIT",
    "QueryEngine",
    "QueryOptions",
    "ScoredVerse",
    "SearchResult",
    # Highlighting and suggestions
    "Highlight",
    "Highlighter",
    "highlight",
    "AutocompleteProvider",
    "COMMON_REFERENCES",
    # Errors
    "SearchError",
    "CorpusUnavailable",
    "IndexNotReady",
]
