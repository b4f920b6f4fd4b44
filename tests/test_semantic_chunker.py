"""Tests for semantic grouping."""

import numpy as np
import pytest

from chunking.chunk import Chunk
from chunking.config import SemanticChunkerConfig
from chunking.errors import CollaboratorError, ConfigurationError
from chunking.semantic_chunker import (
    SemanticChunker,
    average_similarities,
    find_threshold,
    pack_group,
    pairwise_similarities,
    semantic_chunk,
    split_ranges,
)
from conftest import TOPIC_TEXT, assert_spans_match

CATS = "Cats purr. Cats nap. Cats play."


class TestSimilarityHelpers:
    def test_pairwise_similarities(self):
        embeddings = [np.array([1.0, 0.0]), np.array([2.0, 0.0]), np.array([0.0, 3.0])]
        assert pairwise_similarities(embeddings) == pytest.approx([1.0, 0.0])

    def test_zero_vector_has_zero_similarity(self):
        embeddings = [np.array([0.0, 0.0]), np.array([1.0, 0.0])]
        assert pairwise_similarities(embeddings) == pytest.approx([0.0])

    def test_single_embedding(self):
        assert len(pairwise_similarities([np.array([1.0])])) == 0

    def test_average_similarities(self):
        """Ends have one neighbor, inner sentences average two."""
        assert average_similarities(np.array([1.0, 0.0])) == pytest.approx([1.0, 0.5, 0.0])

    def test_split_ranges(self):
        assert split_ranges([1.0, 0.5, 0.5, 1.0], 0.6, 1) == [(0, 2), (2, 3), (3, 4)]

    def test_split_at_threshold_inclusive(self):
        assert split_ranges([0.5, 1.0], 0.5, 1) == [(0, 1), (1, 2)]

    def test_last_sentence_never_splits(self):
        assert split_ranges([1.0, 0.0], 0.5, 1) == [(0, 2)]

    def test_short_ranges_dropped(self):
        assert split_ranges([1.0, 0.0, 0.0, 1.0], 0.5, 2) == [(0, 2)]


class TestFindThreshold:
    pair_sims = np.array([1.0, 1.0, 0.0, 1.0, 1.0])

    def test_returns_first_fitting_midpoint(self):
        """median 1.0, std 0.4: the search starts on [0.6, 1.0] and 0.8 fits."""
        config = SemanticChunkerConfig(chunk_size=100, min_chunk_size=2)
        assert find_threshold(self.pair_sims, [2] * 6, config) == pytest.approx(0.8)

    def test_small_groups_lower_threshold(self):
        """No threshold can reach min_chunk_size, so the interval shrinks downward."""
        config = SemanticChunkerConfig(chunk_size=100, min_chunk_size=5)
        assert find_threshold(self.pair_sims, [1] * 6, config) == pytest.approx(0.603125)

    def test_large_groups_raise_threshold(self):
        config = SemanticChunkerConfig(chunk_size=5, min_chunk_size=1)
        threshold = find_threshold(self.pair_sims, [2] * 6, config)
        assert 0.99 < threshold <= 1.0

    def test_narrow_interval_skips_search(self):
        """Identical similarities give a zero-width interval."""
        config = SemanticChunkerConfig(chunk_size=100)
        assert find_threshold(np.array([0.7, 0.7, 0.7]), [1] * 4, config) == pytest.approx(0.7)


class TestPackGroup:
    def _sentences(self, tokenizer, embedding_fn):
        chunker = SemanticChunker(embedding_fn, threshold=0.1, similarity_window=0)
        return [s for c in chunker.chunk(TOPIC_TEXT, tokenizer) for s in c.sentences]

    def test_packs_under_budget(self, tokenizer, embedding_fn):
        sentences = self._sentences(tokenizer, embedding_fn)
        chunks = pack_group(sentences, SemanticChunkerConfig(chunk_size=4))
        assert [len(c.sentences) for c in chunks] == [2, 2, 2]

    def test_zero_token_sentence_joins_oversize_chunk(self, tokenizer, embedding_fn):
        sentences = self._sentences(tokenizer, embedding_fn)[:1]
        blank = Chunk(text="\n", start_byte=10, end_byte=11, token_count=0)
        chunks = pack_group(sentences + [blank], SemanticChunkerConfig(chunk_size=1))
        assert [c.text for c in chunks] == ["Cats purr.\n"]
        assert chunks[0].token_count == 2

    def test_forces_min_sentences(self, tokenizer, embedding_fn):
        sentences = self._sentences(tokenizer, embedding_fn)
        chunks = pack_group(sentences, SemanticChunkerConfig(chunk_size=1))
        assert [c.token_count for c in chunks] == [2] * 6


class TestSemanticChunker:
    def test_low_threshold_single_chunk(self, tokenizer, embedding_fn):
        chunks = semantic_chunk(TOPIC_TEXT, tokenizer, embedding_fn, threshold=0.1, similarity_window=0)
        assert len(chunks) == 1
        assert chunks[0].text == TOPIC_TEXT

    def test_high_threshold_splits_topics(self, tokenizer, embedding_fn):
        chunks = semantic_chunk(TOPIC_TEXT, tokenizer, embedding_fn, threshold=0.9, similarity_window=0)
        assert [c.text for c in chunks] == [CATS, " Stocks fell.", " Stocks rose. Stocks slid."]

    def test_threshold_monotonicity(self, tokenizer, embedding_fn):
        low = semantic_chunk(TOPIC_TEXT, tokenizer, embedding_fn, threshold=0.1, similarity_window=0)
        high = semantic_chunk(TOPIC_TEXT, tokenizer, embedding_fn, threshold=0.9, similarity_window=0)
        assert len(high) >= len(low)

    def test_auto_threshold(self, tokenizer, embedding_fn):
        chunks = semantic_chunk(
            TOPIC_TEXT, tokenizer, embedding_fn, chunk_size=100, similarity_window=0
        )
        assert [c.text for c in chunks] == [CATS, " Stocks fell.", " Stocks rose. Stocks slid."]

    def test_spans_and_sentences(self, tokenizer, embedding_fn):
        chunks = semantic_chunk(TOPIC_TEXT, tokenizer, embedding_fn, threshold=0.9, similarity_window=0)
        assert_spans_match(TOPIC_TEXT, chunks)
        assert [(s.start_byte, s.end_byte) for s in chunks[0].sentences] == [
            (0, 10),
            (10, 20),
            (20, 31),
        ]

    def test_sentences_carry_embeddings(self, tokenizer, embedding_fn):
        chunks = semantic_chunk(TOPIC_TEXT, tokenizer, embedding_fn, threshold=0.9, similarity_window=0)
        assert np.allclose(chunks[0].sentences[0].embedding, [1.0, 0.0])
        assert np.allclose(chunks[-1].sentences[-1].embedding, [0.0, 1.0])

    def test_min_sentences_drops_short_groups(self, tokenizer, embedding_fn):
        chunks = semantic_chunk(
            TOPIC_TEXT, tokenizer, embedding_fn, threshold=0.9, min_sentences=2, similarity_window=0
        )
        assert [c.text for c in chunks] == [CATS, " Stocks rose. Stocks slid."]

    def test_chunk_size_splits_groups(self, tokenizer, embedding_fn):
        chunks = semantic_chunk(
            TOPIC_TEXT, tokenizer, embedding_fn, chunk_size=4, threshold=0.1, similarity_window=0
        )
        assert [c.token_count for c in chunks] == [4, 4, 4]
        assert "".join(c.text for c in chunks) == TOPIC_TEXT

    def test_degenerate_sentence_count(self, tokenizer, embedding_fn):
        chunks = semantic_chunk(TOPIC_TEXT, tokenizer, embedding_fn, min_sentences=6)
        assert len(chunks) == 1
        assert len(chunks[0].sentences) == 6

    def test_single_sentence(self, tokenizer, recording_embedding):
        chunks = semantic_chunk("Just one sentence.", tokenizer, recording_embedding)
        assert [c.text for c in chunks] == ["Just one sentence."]
        assert recording_embedding.calls == [["Just one sentence."]]

    def test_embedding_called_once_with_context_windows(self, tokenizer, recording_embedding):
        semantic_chunk("A b. C d. E f.", tokenizer, recording_embedding, threshold=0.5)
        assert recording_embedding.calls == [["A b. C d.", "A b. C d. E f.", " C d. E f."]]

    @pytest.mark.parametrize("text", ["", "   ", "\n\n"])
    def test_blank_text_skips_embedding(self, tokenizer, recording_embedding, text):
        assert semantic_chunk(text, tokenizer, recording_embedding) == []
        assert recording_embedding.calls == []

    def test_whitespace_fragments_fold(self, tokenizer, embedding_fn):
        text = "Cats purr.\n\nStocks fell."
        chunks = semantic_chunk(text, tokenizer, embedding_fn, threshold=0.1, similarity_window=0)
        assert [s.text for c in chunks for s in c.sentences] == ["Cats purr.\n\n", "Stocks fell."]

    def test_leading_whitespace_joins_first_sentence(self, tokenizer, recording_embedding):
        semantic_chunk(
            "\n\nCats purr. Stocks fell.", tokenizer, recording_embedding, similarity_window=0
        )
        assert recording_embedding.calls == [["\n\nCats purr.", " Stocks fell."]]

    def test_min_chars_merges_short_fragments(self, tokenizer, recording_embedding):
        semantic_chunk(
            "Hi. Ok. A longer sentence here.",
            tokenizer,
            recording_embedding,
            threshold=0.5,
            similarity_window=0,
            min_chars_per_sentence=5,
        )
        assert recording_embedding.calls == [["Hi. Ok.", " A longer sentence here."]]

    def test_multibyte_spans(self, tokenizer, embedding_fn):
        text = "Cats 🐈 purr. Stocks 📉 fell."
        chunks = semantic_chunk(text, tokenizer, embedding_fn, threshold=0.9, similarity_window=0)
        assert [(c.start_byte, c.end_byte) for c in chunks] == [(0, 15), (15, 33)]
        assert_spans_match(text, chunks)

    def test_wrong_vector_count(self, tokenizer):
        with pytest.raises(CollaboratorError, match="vectors"):
            semantic_chunk(TOPIC_TEXT, tokenizer, lambda texts: [[1.0, 0.0]])

    def test_ragged_vectors(self, tokenizer):
        def ragged(texts):
            return [[1.0] * (i + 1) for i in range(len(texts))]

        with pytest.raises(CollaboratorError, match="different lengths"):
            semantic_chunk(TOPIC_TEXT, tokenizer, ragged)

    def test_embedding_errors_propagate(self, tokenizer):
        def broken(texts):
            raise RuntimeError("model unavailable")

        with pytest.raises(RuntimeError, match="model unavailable"):
            semantic_chunk(TOPIC_TEXT, tokenizer, broken)

    def test_invalid_threshold(self, tokenizer, embedding_fn):
        with pytest.raises(ConfigurationError):
            semantic_chunk(TOPIC_TEXT, tokenizer, embedding_fn, threshold=2)

    def test_embedding_fn_must_be_callable(self):
        with pytest.raises(TypeError):
            SemanticChunker("not callable")

