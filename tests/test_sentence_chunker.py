"""Tests for sentence-boundary windows."""

import pytest

from chunking.chunk import SentenceChunk
from chunking.errors import ConfigurationError
from chunking.sentence_chunker import SentenceChunker, sentence_chunk
from conftest import assert_spans_match

FOUR_SENTENCES = "First sentence. Second sentence. Third sentence. Fourth sentence."


class TestSentenceChunker:
    def test_overlap_by_sentence(self, tokenizer):
        chunks = sentence_chunk(FOUR_SENTENCES, tokenizer, chunk_size=4, chunk_overlap=2)
        assert [c.text for c in chunks] == [
            "First sentence. Second sentence.",
            " Second sentence. Third sentence.",
            " Third sentence. Fourth sentence.",
        ]
        assert [(c.start_byte, c.end_byte) for c in chunks] == [(0, 32), (15, 48), (32, 65)]
        assert all(isinstance(c, SentenceChunk) for c in chunks)

    def test_sentence_spans(self, tokenizer):
        chunks = sentence_chunk(FOUR_SENTENCES, tokenizer, chunk_size=4, chunk_overlap=0)
        sentences = [s for c in chunks for s in c.sentences]
        assert [(s.start_byte, s.end_byte, s.token_count) for s in sentences] == [
            (0, 15, 2),
            (15, 32, 2),
            (32, 48, 2),
            (48, 65, 2),
        ]

    def test_no_overlap_reconstructs_text(self, tokenizer):
        text = "Alpha beta.\nGamma delta! Epsilon? Zeta eta theta. Iota."
        chunks = sentence_chunk(text, tokenizer, chunk_size=5, chunk_overlap=0)
        assert "".join(c.text for c in chunks) == text
        assert_spans_match(text, chunks)

    def test_short_fragments_merge(self, tokenizer):
        text = "Hi! I am. Ok now. This is a longer sentence here. Very short! No! Testing."
        chunks = sentence_chunk(text, tokenizer, chunk_size=512, chunk_overlap=0, short_sentence_threshold=10)
        assert [s.text for s in chunks[0].sentences] == [
            "Hi! I am. Ok now.",
            " This is a longer sentence here.",
            " Very short! No! Testing.",
        ]

    def test_token_budget(self, tokenizer):
        text = " ".join(f"Sentence number {i} is here." for i in range(20))
        for chunk in sentence_chunk(text, tokenizer, chunk_size=12, chunk_overlap=5):
            assert chunk.token_count <= 12

    def test_overlap_within_budget(self, tokenizer):
        text = " ".join(f"Sentence number {i} is here." for i in range(20))
        chunks = sentence_chunk(text, tokenizer, chunk_size=12, chunk_overlap=5)
        for prev, nxt in zip(chunks, chunks[1:]):
            shared = [s for s in nxt.sentences if s.start_byte < prev.end_byte]
            assert sum(s.token_count for s in shared) <= 5
            assert nxt.start_byte > prev.start_byte

    def test_oversize_sentence_forced(self, tokenizer):
        text = "Tiny. This sentence is much longer than the budget allows. End."
        chunks = sentence_chunk(
            text, tokenizer, chunk_size=3, chunk_overlap=0, short_sentence_threshold=1
        )
        assert [c.text for c in chunks] == [
            "Tiny.",
            " This sentence is much longer than the budget allows.",
            " End.",
        ]
        assert chunks[1].token_count == 9

    def test_trailing_newline_stays_with_forced_sentence(self, tokenizer):
        text = "This sentence is much longer than the budget.\n"
        chunks = sentence_chunk(
            text, tokenizer, chunk_size=3, chunk_overlap=0, short_sentence_threshold=1
        )
        assert [c.text for c in chunks] == [text]
        assert chunks[0].token_count == 8
        assert [s.token_count for s in chunks[0].sentences] == [8, 0]

    def test_leading_newlines_join_first_sentence(self, tokenizer):
        text = "\n\nThis sentence is much longer than the budget."
        chunks = sentence_chunk(
            text, tokenizer, chunk_size=3, chunk_overlap=0, short_sentence_threshold=1
        )
        assert [c.text for c in chunks] == [text]
        assert all(c.token_count > 0 for c in chunks)

    def test_min_sentences_forces_inclusion(self, tokenizer):
        chunks = sentence_chunk(
            FOUR_SENTENCES, tokenizer, chunk_size=3, chunk_overlap=0, min_sentences_per_chunk=2
        )
        assert [len(c.sentences) for c in chunks] == [2, 2]
        assert chunks[0].token_count == 4

    def test_always_advances_when_chunk_fits_in_overlap(self, tokenizer):
        text = "A. B. Big sentence with many words here."
        chunks = sentence_chunk(
            text, tokenizer, chunk_size=3, chunk_overlap=2, short_sentence_threshold=1
        )
        assert [c.text for c in chunks] == [
            "A. B.",
            " B.",
            " Big sentence with many words here.",
        ]

    def test_custom_delimiters(self, tokenizer):
        chunks = sentence_chunk(
            "a;b;c", tokenizer, chunk_size=1, chunk_overlap=0,
            delimiters=[";"], short_sentence_threshold=1,
        )
        assert [c.text for c in chunks] == ["a;", "b;", "c"]

    @pytest.mark.parametrize("text", ["", "  ", "\n"])
    def test_blank_text(self, tokenizer, text):
        assert sentence_chunk(text, tokenizer) == []

    def test_single_sentence(self, tokenizer):
        chunks = sentence_chunk("Only one sentence here.", tokenizer)
        assert len(chunks) == 1
        assert chunks[0].text == "Only one sentence here."

    def test_multibyte_spans(self, tokenizer):
        text = "Hello 👋. World 🌍! Ça va?"
        chunks = sentence_chunk(text, tokenizer, chunk_size=2, chunk_overlap=0)
        assert [(c.start_byte, c.end_byte) for c in chunks] == [(0, 11), (11, 23), (23, 31)]
        assert_spans_match(text, chunks)

    def test_float_overlap_rejected(self):
        with pytest.raises(ConfigurationError, match="non-negative integer"):
            SentenceChunker(chunk_size=10, chunk_overlap=0.2)

    def test_string_delimiters_rejected(self):
        with pytest.raises(ConfigurationError, match="delimiters"):
            SentenceChunker(delimiters=".!?")
