"""Pytest configuration and shared fixtures."""

import json
import os

import pytest

from versesearch.core.models import VerseRecord

SAMPLE_VERSES = [
    ("Genesis", 1, 1, "In the beginning God created the heaven and the earth."),
    (
        "Genesis",
        1,
        2,
        "And the earth was without form, and void; and darkness was upon the face "
        "of the deep. And the Spirit of God moved upon the face of the waters.",
    ),
    ("Genesis", 1, 3, "And God said, Let there be light: and there was light."),
    (
        "Genesis",
        1,
        4,
        "And God saw the light, that it was good: and God divided the light from "
        "the darkness.",
    ),
    (
        "Genesis",
        2,
        7,
        "And the LORD God formed man of the dust of the ground, and breathed into "
        "his nostrils the breath of life; and man became a living soul.",
    ),
    ("Exodus", 20, 3, "Thou shalt have no other gods before me."),
    ("Psalms", 23, 1, "The LORD is my shepherd; I shall not want."),
    (
        "John",
        1,
        1,
        "In the beginning was the Word, and the Word was with God, and the Word "
        "was God.",
    ),
    (
        "John",
        3,
        16,
        "For God so loved the world, that he gave his only begotten Son, that "
        "whosoever believeth in him should not perish, but have everlasting life.",
    ),
    (
        "Romans",
        8,
        28,
        "And we know that all things work together for good to them that love "
        "God, to them who are the called according to his purpose.",
    ),
    (
        "1 Corinthians",
        13,
        4,
        "Charity suffereth long, and is kind; charity envieth not; charity "
        "vaunteth not itself, is not puffed up,",
    ),
    ("1 John", 4, 8, "He that loveth not knoweth not God; for God is love."),
    (
        "1 John",
        4,
        16,
        "And we have known and believed the love that God hath to us. God is "
        "love; and he that dwelleth in love dwelleth in God, and God in him.",
    ),
]


@pytest.fixture(autouse=True)
def isolate_environment(tmp_path, monkeypatch):
    """Isolate environment variables and config lookups for each test.

    This prevents a developer's own configuration or corpus setting from
    leaking into test runs.
    """
    original_env = os.environ.copy()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.delenv("VERSESEARCH_CORPUS", raising=False)

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def sample_records() -> list[VerseRecord]:
    """A small corpus in canonical order."""
    return [
        VerseRecord(book=book, chapter=chapter, verse=verse, text=text)
        for book, chapter, verse, text in SAMPLE_VERSES
    ]


@pytest.fixture
def corpus_data() -> dict:
    """The sample corpus in the JSON file layout."""
    data: dict = {}
    for book, chapter, verse, text in SAMPLE_VERSES:
        data.setdefault(book, {}).setdefault(str(chapter), []).append(
            {"verse": verse, "text": text}
        )
    return data


@pytest.fixture
def corpus_file(tmp_path, corpus_data):
    """The sample corpus written to a JSON file."""
    path = tmp_path / "kjv.json"
    path.write_text(json.dumps(corpus_data))
    return path
