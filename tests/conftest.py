"""Pytest configuration and shared fixtures for chunkwise tests."""

import re
from typing import List

import pytest

from chunking.tokenizers import Encoding, WhitespaceTokenizer, char_to_byte_offsets

TOPIC_TEXT = "Cats purr. Cats nap. Cats play. Stocks fell. Stocks rose. Stocks slid."


class PunctuationTokenizer:
    """Word runs and single punctuation marks are separate tokens, like GPT-2."""

    _pattern = re.compile(r"\w+|[^\w\s]")

    def encode(self, text: str) -> Encoding:
        byte_offsets = char_to_byte_offsets(text)
        spans = tuple(
            (byte_offsets[m.start()], byte_offsets[m.end()])
            for m in self._pattern.finditer(text)
        )
        return Encoding(ids=tuple(range(len(spans))), offsets=spans)


def topic_embedding(texts: List[str]) -> List[List[float]]:
    """Two orthogonal directions: one for texts about cats, one for the rest."""
    return [[1.0, 0.0] if "Cats" in t else [0.0, 1.0] for t in texts]


class RecordingEmbedding:
    """Embedding function that records every batch it receives."""

    def __init__(self, fn=topic_embedding):
        self.fn = fn
        self.calls: List[List[str]] = []

    def __call__(self, texts):
        self.calls.append(list(texts))
        return self.fn(texts)


@pytest.fixture
def tokenizer():
    return WhitespaceTokenizer()


@pytest.fixture
def punctuation_tokenizer():
    return PunctuationTokenizer()


@pytest.fixture
def topic_text():
    return TOPIC_TEXT


@pytest.fixture
def embedding_fn():
    return topic_embedding


@pytest.fixture
def recording_embedding():
    return RecordingEmbedding()


def assert_spans_match(text: str, chunks) -> None:
    """Every chunk (and every sentence it holds) must be an exact byte slice of text."""
    data = text.encode("utf-8")
    for chunk in chunks:
        assert data[chunk.start_byte:chunk.end_byte].decode("utf-8") == chunk.text
        for sentence in getattr(chunk, "sentences", ()):
            assert data[sentence.start_byte:sentence.end_byte].decode("utf-8") == sentence.text
