"""Match highlighting for search results."""

from collections.abc import Iterable
from dataclasses import dataclass

from .indexing.analyzers import TOKEN_PATTERN, TextAnalyzer

MIN_TERM_LENGTH = 2


@dataclass(frozen=True)
class Highlight:
    """A matched span of the original text."""

    text: str
    start_offset: int
    end_offset: int


class Highlighter:
    """Finds the words of a text that a query matched.

    Text is split into words with the same token pattern the index uses, and
    each word is normalized by the same analyzer. A query term matches a word
    when the normalized word starts with the normalized term, so a verse that
    matched a query always yields highlights for it.
    """

    def __init__(
        self,
        highlight_tag: str = "mark",
        css_class: str | None = None,
        analyzer: TextAnalyzer | None = None,
    ):
        """Initialize highlighter.

        Args:
            highlight_tag: Tag used by :meth:`mark`
            css_class: Optional class attribute for the tag
            analyzer: Normalization shared with the index (default: TextAnalyzer)
        """
        self.highlight_tag = highlight_tag
        self.css_class = css_class
        self.analyzer = analyzer or TextAnalyzer()

    def highlight(self, text: str, terms: Iterable[str]) -> list[str]:
        """Return the distinct matched substrings of ``text``.

        Substrings are returned as they appear in the text, in the order of
        the terms and then of their position, without duplicates.
        """
        words = self._words(text)
        highlights: dict[str, None] = {}
        for term in self._normalize_terms(terms):
            for word, normalized, _, _ in words:
                if normalized.startswith(term):
                    highlights.setdefault(word, None)
        return list(highlights)

    def spans(self, text: str, terms: Iterable[str]) -> list[Highlight]:
        """Return one span per matched word, ordered by position."""
        words = self._words(text)
        if not words:
            return []

        normalized_terms = self._normalize_terms(terms)
        return [
            Highlight(word, start, end)
            for word, normalized, start, end in words
            if any(normalized.startswith(term) for term in normalized_terms)
        ]

    def mark(self, text: str, terms: Iterable[str], tag: str | None = None) -> str:
        """Wrap every matched span of ``text`` in a tag."""
        spans = self.spans(text, terms)
        if not spans:
            return text

        tag = tag or self.highlight_tag
        open_tag = f'<{tag} class="{self.css_class}">' if self.css_class else f"<{tag}>"

        parts = []
        position = 0
        for span in spans:
            parts.append(text[position : span.start_offset])
            parts.append(f"{open_tag}{span.text}</{tag}>")
            position = span.end_offset
        parts.append(text[position:])

        return "".join(parts)

    def _words(self, text: str) -> list[tuple[str, str, int, int]]:
        if not text:
            return []
        return [
            (m.group(0), self.analyzer.normalize(m.group(0)), m.start(), m.end())
            for m in TOKEN_PATTERN.finditer(text)
        ]

    def _normalize_terms(self, terms: Iterable[str]) -> list[str]:
        normalized = []
        for term in terms or ():
            if not isinstance(term, str):
                continue
            term = self.analyzer.normalize(term.strip())
            if len(term) < MIN_TERM_LENGTH or term in normalized:
                continue
            normalized.append(term)
        return normalized


_default_highlighter = Highlighter()


def highlight(text: str, terms: Iterable[str]) -> list[str]:
    """Module-level shortcut for :meth:`Highlighter.highlight`."""
    return _default_highlighter.highlight(text, terms)
