"""Book-name and reference suggestions for the search box."""

from collections.abc import Sequence

from ..core.books import BOOKS

COMMON_REFERENCES: tuple[str, ...] = (
    "John 3:16",
    "Genesis 1:1",
    "Psalm 23",
    "Romans 8:28",
    "Jeremiah 29:11",
    "Philippians 4:13",
    "Proverbs 3:5-6",
    "Isaiah 40:31",
    "Matthew 6:33",
    "1 Corinthians 13",
)


class AutocompleteProvider:
    """Suggests book names and well-known references as the user types.

    Independent of the search index: it only needs the static book list and
    the curated references, so it works before the index is built.
    """

    def __init__(
        self,
        books: Sequence[str] = BOOKS,
        references: Sequence[str] = COMMON_REFERENCES,
    ):
        self.books = tuple(books)
        self.references = tuple(references)
        self._books_lower = [(book, book.lower()) for book in self.books]
        self._references_lower = [(ref, ref.lower()) for ref in self.references]

    def suggest(self, query: str, limit: int = 5) -> list[str]:
        """Suggest completions for ``query``.

        Books whose name starts with the query come first, in canonical order,
        followed by curated references that contain the query anywhere.
        """
        if not isinstance(query, str) or not query.strip() or limit <= 0:
            return []

        needle = query.strip().lower()
        suggestions = [book for book, lower in self._books_lower if lower.startswith(needle)]
        suggestions.extend(
            ref for ref, lower in self._references_lower if needle in lower
        )

        return suggestions[:limit]
