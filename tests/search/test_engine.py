"""Tests for the search service facade."""

import asyncio
import threading
import time

import pytest

from versesearch.core.models import Testament, VerseRecord
from versesearch.errors import CorpusUnavailable, IndexNotReady
from versesearch.search import (
    IndexBuilder,
    QueryOptions,
    SearchResult,
    SearchService,
    SearchSession,
    create_search_service,
)


class CountingSource:
    """Corpus source callable that records how often it was loaded."""

    def __init__(self, records, delay: float = 0.0):
        self.records = records
        self.delay = delay
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        return self.records


class TestSearch:
    """Test end-to-end searches through the service."""

    def test_beginning(self, service):
        results = service.search("beginning")

        assert results[0].key == ("Genesis", 1, 1)
        assert "beginning" in results[0].highlights

    def test_scoped_to_chapter(self, service):
        results = service.search("God", {"book": "Genesis", "chapter": 1})

        assert [r.verse for r in results] == [1, 2, 3, 4]
        assert all(r.book == "Genesis" and r.chapter == 1 for r in results)
        assert all("God" in r.highlights for r in results)

    def test_current_chapter_only(self, service):
        results = service.search(
            "love",
            QueryOptions(book="1 John", chapter=4, current_chapter_only=True),
        )

        assert [r.reference for r in results] == ["1 John 4:8", "1 John 4:16"]

    def test_casefolded_match_is_highlighted(self, sample_records):
        record = VerseRecord(book="Exodus", chapter=1, verse=1, text="Die Straße")
        service = SearchService([*sample_records, record])

        results = service.search("strasse")

        assert [r.reference for r in results] == ["Exodus 1:1"]
        assert results[0].highlights == ("Straße",)

    def test_no_matches(self, service):
        assert service.search("zzzqqqxx") == []

    def test_limit_keyword(self, service):
        results = service.search("love", limit=3)

        assert len(results) == 3
        assert len({r.key for r in results}) == 3

    def test_keywords_override_options(self, service):
        results = service.search("god", QueryOptions(limit=10), testament="new", limit=2)

        assert [r.reference for r in results] == ["John 1:1", "John 3:16"]

    def test_camel_case_option_dict(self, service):
        results = service.search(
            "god", {"book": "John", "chapter": 3, "currentChapterOnly": True}
        )

        assert [r.reference for r in results] == ["John 3:16"]

    def test_testament_enum(self, service):
        results = service.search("lord", testament=Testament.OLD)

        assert [r.reference for r in results] == ["Genesis 2:7", "Psalms 23:1"]
        assert results[1].highlights == ("LORD",)

    def test_highlights_cover_every_term(self, service):
        results = service.search("god love", limit=1)

        assert results[0].reference == "John 3:16"
        assert results[0].highlights == ("God", "loved")

    def test_book_match_without_text_highlight(self, service):
        results = service.search("romans")

        assert results[0].reference == "Romans 8:28"
        assert results[0].highlights == ()

    def test_results_are_fresh_values(self, service):
        first = service.search("light")
        second = service.search("light")

        assert first == second
        assert first is not second
        assert all(isinstance(r, SearchResult) for r in first)

    @pytest.mark.parametrize(
        "options",
        [
            None,
            {"limit": 0},
            {"book": "Genesis", "chapter": 1},
            {"currentChapterOnly": True},
        ],
    )
    def test_empty_query(self, service, options):
        assert service.search("", options) == []
        assert service.search("   ", options) == []

    def test_empty_query_does_not_build(self, service):
        service.search("")

        assert not service.is_ready

    def test_incomplete_chapter_scope_is_ignored(self, service):
        results = service.search("god", {"currentChapterOnly": True, "book": "John"})

        assert service.search("god", current_chapter_only=True) == service.search("god")
        assert [r.reference for r in results] == ["John 1:1", "John 3:16"]


class TestLazyIndex:
    """Test the one-time build and explicit lifecycle."""

    def test_index_built_once(self, sample_records):
        source = CountingSource(sample_records)
        service = SearchService(source)

        assert not service.is_ready
        service.search("god")
        service.search("love")

        assert service.is_ready
        assert source.calls == 1
        assert service.build_count == 1

    def test_concurrent_first_queries_share_one_build(self, sample_records):
        source = CountingSource(sample_records, delay=0.05)
        service = SearchService(source)
        results = []

        def worker():
            results.append(service.search("light"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert source.calls == 1
        assert len(results) == 8
        assert all(r == results[0] for r in results)
        assert [r.reference for r in results[0]] == ["Genesis 1:3", "Genesis 1:4"]

    def test_index_not_ready_when_not_waiting(self, service):
        service._build_lock.acquire()
        try:
            with pytest.raises(IndexNotReady):
                service.ensure_index(wait=False)
            with pytest.raises(IndexNotReady):
                service.ensure_index(timeout=0.01)
        finally:
            service._build_lock.release()

        assert len(service.ensure_index(wait=False)) == 13

    def test_rebuild_replaces_index(self, sample_records):
        source = CountingSource(sample_records)
        service = SearchService(source)
        old = service.ensure_index()

        source.records = sample_records[:3]
        new = service.rebuild()

        assert new is not old
        assert service.index is new
        assert len(old) == 13
        assert len(new) == 3
        assert service.search("beginning")[0].reference == "Genesis 1:1"
        assert [r.reference for r in service.search("beginning")] == ["Genesis 1:1"]

    def test_old_index_stays_valid_after_rebuild(self, service):
        old = service.ensure_index()
        service.rebuild()

        assert old.get(8).reference == "John 3:16"
        assert service.engine.query(old, "loved")[0].verse_id == 8

    def test_generator_source_survives_rebuild(self, sample_records):
        service = SearchService(record for record in sample_records)

        first = service.ensure_index()
        second = service.rebuild()

        assert len(first) == len(second) == 13
        assert service.search("beginning")[0].reference == "Genesis 1:1"

    def test_discard(self, sample_records):
        source = CountingSource(sample_records)
        service = SearchService(source)
        service.ensure_index()

        service.discard()

        assert not service.is_ready
        service.search("god")
        assert source.calls == 2

    def test_statistics(self, service):
        assert service.get_statistics() == {"ready": False, "builds": 0, "index": None}

        service.ensure_index()
        stats = service.get_statistics()

        assert stats["ready"] is True
        assert stats["builds"] == 1
        assert stats["index"]["total_verses"] == 13

    def test_custom_builder(self, sample_records):
        builder = IndexBuilder()
        service = SearchService(sample_records, builder=builder)

        assert service.builder is builder
        assert service.engine.analyzer is builder.analyzer


class TestCorpusUnavailable:
    """Test surfacing of corpus failures."""

    def test_no_source(self):
        with pytest.raises(CorpusUnavailable):
            SearchService().search("god")

    def test_source_failure_propagates(self):
        def failing_source():
            raise CorpusUnavailable("disk on fire")

        service = SearchService(failing_source)

        with pytest.raises(CorpusUnavailable, match="disk on fire"):
            service.search("god")
        assert not service.is_ready

    def test_os_errors_are_wrapped(self):
        def failing_source():
            raise FileNotFoundError("kjv.json")

        with pytest.raises(CorpusUnavailable):
            SearchService(failing_source).search("god")

    def test_next_call_tries_again(self, sample_records):
        calls = []

        def flaky_source():
            calls.append(1)
            if len(calls) == 1:
                raise CorpusUnavailable("not yet")
            return sample_records

        service = SearchService(flaky_source)

        with pytest.raises(CorpusUnavailable):
            service.search("god")
        assert service.search("beginning")[0].reference == "Genesis 1:1"
        assert len(calls) == 2

    def test_missing_file(self, tmp_path):
        service = create_search_service(tmp_path / "missing.json")

        with pytest.raises(CorpusUnavailable):
            service.search("god")


class TestLookupAndHelpers:
    """Test reference lookup, suggestions and highlighting passthrough."""

    def test_lookup_single_verse(self, service):
        results = service.lookup("John 3:16")

        assert [r.reference for r in results] == ["John 3:16"]
        assert results[0].highlights == ()

    def test_lookup_range(self, service):
        assert [r.verse for r in service.lookup("Genesis 1:2-3")] == [2, 3]

    def test_lookup_chapter(self, service):
        assert [r.verse for r in service.lookup("Genesis 1")] == [1, 2, 3, 4]

    def test_lookup_invalid(self, service):
        assert service.lookup("not a reference") == []
        assert service.lookup("Genesis 50:1") == []

    def test_suggest_does_not_build(self, service):
        assert service.suggest("Gen", 5)[0] == "Genesis"
        assert not service.is_ready

    def test_highlight(self, service):
        assert service.highlight("God is love", ["go", "lo"]) == ["God", "love"]


class TestFileBackedService:
    """Test the factory that loads a corpus file."""

    def test_create_search_service(self, corpus_file):
        service = create_search_service(corpus_file)

        results = service.search("beginning")

        assert results[0].reference == "Genesis 1:1"
        assert results[0].highlights == ("beginning",)


class TestAsync:
    """Test the thread-offloading async wrappers."""

    @pytest.mark.asyncio
    async def test_search_async(self, service):
        results = await service.search_async("light")

        assert [r.reference for r in results] == ["Genesis 1:3", "Genesis 1:4"]

    @pytest.mark.asyncio
    async def test_suggest_async(self, service):
        assert await service.suggest_async("Gen", 1) == ["Genesis"]

    @pytest.mark.asyncio
    async def test_concurrent_async_searches(self, service):
        light, love = await asyncio.gather(
            service.search_async("light"), service.search_async("love", limit=2)
        )

        assert len(light) == 2
        assert len(love) == 2
        assert service.build_count == 1


class TestSearchSession:
    """Test caller-side discarding of stale responses."""

    def test_sequence_numbers_increase(self, service):
        session = SearchSession(service)

        first = session.next_sequence()
        second = session.next_sequence()

        assert second > first
        assert session.latest == second
        assert session.is_current(second)
        assert not session.is_current(first)

    def test_search_tags_results(self, service):
        session = SearchSession(service)

        seq_a, results_a = session.search("li")
        seq_b, results_b = session.search("light")

        assert not session.is_current(seq_a)
        assert session.is_current(seq_b)
        assert [r.reference for r in results_b] == ["Genesis 1:3", "Genesis 1:4"]

    @pytest.mark.asyncio
    async def test_stale_async_results_are_dropped(self, service):
        session = SearchSession(service)
        service.ensure_index()

        stale = asyncio.ensure_future(session.search_async("lig"))
        await asyncio.sleep(0)
        latest = await session.search_async("light")

        assert await stale is None
        assert [r.reference for r in latest] == ["Genesis 1:3", "Genesis 1:4"]
