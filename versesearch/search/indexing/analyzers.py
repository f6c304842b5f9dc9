"""Text analysis for verse indexing and querying.

Indexing and querying must normalize text identically, otherwise prefix
lookups miss. Both go through :class:`TextAnalyzer`.
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import Any

MAX_QUERY_LENGTH = 256

# Alphanumeric runs; underscores count as separators.
TOKEN_PATTERN = re.compile(r"[^\W_]+")


@dataclass(frozen=True)
class AnalyzerConfig:
    """Configuration for the normalization pipeline."""

    casefold: bool = True
    remove_accents: bool = False
    min_token_length: int = 2
    max_token_length: int | None = None


@dataclass(frozen=True)
class Token:
    """A normalized token and its position among the kept tokens."""

    text: str
    position: int


class TextAnalyzer:
    """Tokenizes and normalizes verse text and queries."""

    CONFIGS = {
        "default": AnalyzerConfig(),
        "keyword": AnalyzerConfig(min_token_length=1),
    }

    def __init__(self, config: AnalyzerConfig | None = None):
        self.config = config or self.CONFIGS["default"]

    def tokens(self, text: str) -> list[Token]:
        """Tokenize text, numbering kept tokens from zero.

        Args:
            text: Input text

        Returns:
            Normalized tokens in text order, duplicates included
        """
        if not text:
            return []

        config = self.config
        if config.remove_accents:
            text = self._remove_accents(text)

        tokens = []
        for raw in TOKEN_PATTERN.findall(text):
            token = raw.casefold() if config.casefold else raw
            if len(token) < config.min_token_length:
                continue
            if config.max_token_length is not None and len(token) > config.max_token_length:
                continue

            tokens.append(Token(token, len(tokens)))

        return tokens

    def normalize(self, word: str) -> str:
        """Normalize one word the way indexed tokens are normalized."""
        if self.config.remove_accents:
            word = self._remove_accents(word)
        return word.casefold() if self.config.casefold else word

    def terms(self, text: str) -> list[str]:
        """Distinct normalized terms in first-seen order."""
        return list(dict.fromkeys(token.text for token in self.tokens(text)))

    def _remove_accents(self, text: str) -> str:
        """Remove diacritical marks from text."""
        nfd = unicodedata.normalize("NFD", text)
        return "".join(char for char in nfd if unicodedata.category(char) != "Mn")


def normalize_query(query: Any, max_length: int = MAX_QUERY_LENGTH) -> str:
    """Coerce raw search-box input into a bounded query string.

    Bad input is repaired rather than rejected: ``None`` becomes empty,
    other non-strings are converted with ``str()``, surrounding whitespace is
    trimmed and the result is truncated to ``max_length`` characters.
    """
    if query is None:
        return ""
    if not isinstance(query, str):
        query = str(query)

    return query.strip()[: max(0, max_length)].strip()
