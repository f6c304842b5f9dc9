"""Index builder: turns the verse corpus into a :class:`VerseIndex`."""

from __future__ import annotations

import logging
import time
from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any

import msgspec

from ...core.models import VerseRecord
from ...errors import CorpusUnavailable
from .analyzers import TextAnalyzer
from .index import BOOK_FIELD, TEXT_FIELD, FieldIndex, Posting, VerseIndex

logger = logging.getLogger(__name__)


class IndexBuilder:
    """Builds immutable verse indexes.

    The builder itself holds no state between builds; every call to
    :meth:`build` returns a brand new index owned by the caller.
    """

    def __init__(self, analyzer: TextAnalyzer | None = None):
        self.analyzer = analyzer or TextAnalyzer()

    def build(self, corpus: Iterable[Any] | None) -> VerseIndex:
        """Index every record of the corpus exactly once.

        Records are assigned dense ids in corpus order. Records without text,
        or that are not verse-shaped at all, are skipped.

        Args:
            corpus: Ordered verse records (or verse-shaped mappings)

        Returns:
            The new index

        Raises:
            CorpusUnavailable: If no corpus was supplied
        """
        if corpus is None:
            raise CorpusUnavailable("No corpus supplied to the index builder")

        start = time.perf_counter()

        records: list[VerseRecord] = []
        seen: set[tuple[str, int, int]] = set()
        text_postings: dict[str, list[Posting]] = defaultdict(list)
        book_postings: dict[str, list[Posting]] = defaultdict(list)
        book_tokens: dict[str, list] = {}
        skipped = 0

        for item in corpus:
            record = self._coerce(item)
            if record is None:
                skipped += 1
                logger.debug("Skipping malformed corpus record: %r", item)
                continue
            if record.key in seen:
                skipped += 1
                logger.debug("Skipping duplicate corpus record %s", record.reference)
                continue
            seen.add(record.key)

            verse_id = len(records)
            record = msgspec.structs.replace(record, id=verse_id)
            records.append(record)

            for token in self.analyzer.tokens(record.text):
                text_postings[token.text].append(Posting(verse_id, token.position))

            if record.book not in book_tokens:
                book_tokens[record.book] = self.analyzer.tokens(record.book)
            for token in book_tokens[record.book]:
                book_postings[token.text].append(Posting(verse_id, token.position))

        index = VerseIndex(
            records=tuple(records),
            fields={
                TEXT_FIELD: FieldIndex.freeze(TEXT_FIELD, text_postings),
                BOOK_FIELD: FieldIndex.freeze(BOOK_FIELD, book_postings),
            },
            skipped=skipped,
            build_time_ms=(time.perf_counter() - start) * 1000,
        )

        logger.info(
            "Indexed %d verses in %.2fms (%d skipped)",
            len(index),
            index.build_time_ms,
            skipped,
        )
        return index

    def _coerce(self, item: Any) -> VerseRecord | None:
        if isinstance(item, VerseRecord):
            record = item
        elif isinstance(item, Mapping):
            try:
                record = VerseRecord(
                    book=item["book"],
                    chapter=item["chapter"],
                    verse=item["verse"],
                    text=item.get("text"),
                )
            except KeyError:
                return None
        else:
            return None

        if not isinstance(record.text, str) or not isinstance(record.book, str):
            return None
        return record


def build_index(
    corpus: Iterable[Any] | None, analyzer: TextAnalyzer | None = None
) -> VerseIndex:
    """Convenience wrapper around :meth:`IndexBuilder.build`."""
    return IndexBuilder(analyzer).build(corpus)
