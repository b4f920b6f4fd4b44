"""
Semantic chunking with sentence embeddings.

Pipeline:
1. Split text into sentences and locate each one in the source
2. Embed every sentence together with its neighbors (one batched call)
3. Score each sentence by its average cosine similarity to its neighbors
4. End a group after every sentence scoring at or below the threshold
5. Pack each group into chunks under the token budget

With threshold="auto", the threshold is searched between
median - std and median + std of the neighbor similarities, looking for
a value whose groups all fall within [min_chunk_size, chunk_size] tokens.
The search is capped at MAX_SEARCH_ITERATIONS and falls back to the
midpoint of the last interval, so the result is a heuristic, not an optimum.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .base import BaseChunker, ChunkingStrategy
from .chunk import Chunk, SentenceChunk
from .config import AUTO_THRESHOLD, DEFAULT_DELIMITERS, SemanticChunkerConfig
from .errors import CollaboratorError
from .sentence_splitter import (
    build_context_windows,
    combine_short_sentences,
    find_sentence_spans,
    split_sentences,
)
from .stats import median, standard_deviation
from .tokenizers import Tokenizer

logger = logging.getLogger(__name__)

EmbeddingFn = Callable[[List[str]], Sequence[Sequence[float]]]

MAX_SEARCH_ITERATIONS = 10


def prepare_sentences(
    text: str,
    tokenizer: Tokenizer,
    embedding_fn: EmbeddingFn,
    config: SemanticChunkerConfig,
) -> List[Chunk]:
    """
    Split text into sentences carrying spans, token counts and embeddings.

    The embedding for sentence i is computed from its context window
    (the sentence joined with config.similarity_window neighbors per side).

    Raises:
        CollaboratorError: If embedding_fn returns the wrong number of
            vectors or vectors of different lengths
    """
    fragments = split_sentences(text, config.delimiters)
    texts = combine_short_sentences(fragments, config.min_chars_per_sentence)
    located = find_sentence_spans(text, texts)
    token_counts = [len(tokenizer.encode(s)) for s in texts]

    windows = build_context_windows(texts, config.similarity_window)
    embeddings = _embed(embedding_fn, windows)

    return [
        Chunk(
            text=sentence.text,
            start_byte=sentence.start,
            end_byte=sentence.end,
            token_count=count,
            embedding=vector,
        )
        for sentence, count, vector in zip(located, token_counts, embeddings)
    ]


def _embed(embedding_fn: EmbeddingFn, texts: List[str]) -> List[np.ndarray]:
    vectors = embedding_fn(texts)
    if len(vectors) != len(texts):
        raise CollaboratorError(
            f"Embedding function returned {len(vectors)} vectors for {len(texts)} inputs"
        )

    arrays = [np.asarray(v, dtype=float).ravel() for v in vectors]
    if len({a.shape for a in arrays}) > 1:
        raise CollaboratorError("Embedding function returned vectors of different lengths")
    return arrays


def pairwise_similarities(embeddings: Sequence[np.ndarray]) -> np.ndarray:
    """Cosine similarity of each adjacent pair of embeddings (n - 1 values)."""
    if len(embeddings) < 2:
        return np.zeros(0)

    matrix = np.vstack(embeddings)
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    normalized = matrix / (norms + 1e-10)
    return np.sum(normalized[:-1] * normalized[1:], axis=1)


def average_similarities(pair_similarities: np.ndarray) -> np.ndarray:
    """
    Per-sentence score: the mean of the similarities to each neighbor.

    Sentences at either end have a single neighbor.
    """
    count = len(pair_similarities) + 1
    totals = np.zeros(count)
    neighbors = np.zeros(count)

    totals[:-1] += pair_similarities
    totals[1:] += pair_similarities
    neighbors[:-1] += 1
    neighbors[1:] += 1

    return totals / np.maximum(neighbors, 1)


def split_ranges(
    scores: Sequence[float], threshold: float, min_sentences: int
) -> List[Tuple[int, int]]:
    """
    [start, end) sentence ranges ending after each score <= threshold.

    The last sentence never opens a split. Ranges shorter than
    min_sentences are dropped, not merged into neighbors.
    """
    count = len(scores)
    cuts = [i + 1 for i in range(count - 1) if scores[i] <= threshold]
    bounds = [0] + cuts + [count]

    return [
        (start, end)
        for start, end in zip(bounds, bounds[1:])
        if end - start >= min_sentences
    ]


def find_threshold(
    pair_similarities: np.ndarray,
    token_counts: Sequence[int],
    config: SemanticChunkerConfig,
) -> float:
    """
    Binary search for a threshold whose groups fit the size bounds.

    Groups larger than chunk_size push the threshold up (more splits);
    groups smaller than min_chunk_size pull it down (fewer splits).
    """
    values = [float(v) for v in pair_similarities]
    mid_value = median(values)
    spread = standard_deviation(values)

    low = max(mid_value - spread, 0.0)
    high = min(mid_value + spread, 1.0)

    scores = average_similarities(np.asarray(values))
    prefix = np.concatenate([[0], np.cumsum(token_counts)])

    for iteration in range(MAX_SEARCH_ITERATIONS):
        if abs(high - low) <= config.threshold_step:
            break

        threshold = (low + high) / 2
        ranges = split_ranges(scores, threshold, config.min_sentences)
        totals = [int(prefix[end] - prefix[start]) for start, end in ranges]

        if all(config.min_chunk_size <= t <= config.chunk_size for t in totals):
            logger.debug(f"Threshold {threshold:.4f} found after {iteration + 1} probes")
            return threshold

        if any(t > config.chunk_size for t in totals):
            low = threshold + config.threshold_step
        else:
            high = threshold - config.threshold_step

    threshold = min(max((low + high) / 2, 0.0), 1.0)
    logger.debug(f"Threshold search stopped at interval midpoint {threshold:.4f}")
    return threshold


def pack_group(group: Sequence[Chunk], config: SemanticChunkerConfig) -> List[SentenceChunk]:
    """Greedily pack one group's sentences under chunk_size, without overlap."""
    chunks = []
    current: List[Chunk] = []
    current_tokens = 0

    for sentence in group:
        new_tokens = current_tokens + sentence.token_count
        if (
            not sentence.token_count
            or not current_tokens
            or new_tokens <= config.chunk_size
            or len(current) < config.min_sentences
        ):
            current.append(sentence)
            current_tokens = new_tokens
        else:
            chunks.append(SentenceChunk.from_sentences(current))
            current = [sentence]
            current_tokens = sentence.token_count

    if current:
        chunks.append(SentenceChunk.from_sentences(current))

    return chunks


class SemanticChunker(BaseChunker):
    """
    Groups semantically similar consecutive sentences into chunks.

    Usage:
        service = EmbeddingService()
        chunker = SemanticChunker(service.as_embedding_fn(), chunk_size=256)
        chunks = chunker.chunk(text, TiktokenTokenizer())

        # Fixed threshold instead of the adaptive search
        chunker = SemanticChunker(embed, threshold=0.6)
    """

    strategy = ChunkingStrategy.SEMANTIC

    def __init__(
        self,
        embedding_fn: EmbeddingFn,
        chunk_size: int = 512,
        threshold: Union[float, str] = AUTO_THRESHOLD,
        min_sentences: int = 1,
        min_chunk_size: int = 2,
        threshold_step: float = 0.01,
        similarity_window: int = 1,
        min_chars_per_sentence: int = 1,
        delimiters: Sequence[str] = DEFAULT_DELIMITERS,
        config: Optional[SemanticChunkerConfig] = None,
    ):
        if not callable(embedding_fn):
            raise TypeError("embedding_fn must be callable")

        self.embedding_fn = embedding_fn
        self.config = config or SemanticChunkerConfig(
            chunk_size=chunk_size,
            threshold=threshold,
            min_sentences=min_sentences,
            min_chunk_size=min_chunk_size,
            threshold_step=threshold_step,
            similarity_window=similarity_window,
            min_chars_per_sentence=min_chars_per_sentence,
            delimiters=delimiters,
        )

    def chunk(self, text: str, tokenizer: Tokenizer) -> List[SentenceChunk]:
        if self._is_blank(text):
            return []

        config = self.config
        sentences = prepare_sentences(text, tokenizer, self.embedding_fn, config)

        if len(sentences) <= config.min_sentences:
            return [SentenceChunk.from_sentences(sentences)]

        pair_sims = pairwise_similarities([s.embedding for s in sentences])

        if config.is_auto_threshold:
            threshold = find_threshold(
                pair_sims, [s.token_count for s in sentences], config
            )
        else:
            threshold = float(config.threshold)

        scores = average_similarities(pair_sims)
        groups = [
            sentences[start:end]
            for start, end in split_ranges(scores, threshold, config.min_sentences)
        ]

        chunks = []
        for group in groups:
            chunks.extend(pack_group(group, config))

        logger.debug(
            f"Semantic chunking: {len(sentences)} sentences, threshold={threshold:.4f}, "
            f"{len(groups)} groups -> {len(chunks)} chunks"
        )
        return chunks


def semantic_chunk(
    text: str,
    tokenizer: Tokenizer,
    embedding_fn: EmbeddingFn,
    chunk_size: int = 512,
    threshold: Union[float, str] = AUTO_THRESHOLD,
    min_sentences: int = 1,
    min_chunk_size: int = 2,
    threshold_step: float = 0.01,
    **options,
) -> List[SentenceChunk]:
    """
    Split text into semantically coherent chunks.

    Args:
        text: Source text
        tokenizer: Tokenizer used to count tokens per sentence
        embedding_fn: Maps a list of strings to one vector per string
        chunk_size: Token budget per chunk
        threshold: Similarity cutoff in [0, 1] or "auto"
        min_sentences: Minimum sentences per group and per chunk
        min_chunk_size: Minimum group token total targeted by the auto search
        threshold_step: Auto search resolution
        **options: similarity_window, min_chars_per_sentence, delimiters

    Returns:
        List of SentenceChunk objects whose sentences carry embeddings
    """
    chunker = SemanticChunker(
        embedding_fn,
        chunk_size=chunk_size,
        threshold=threshold,
        min_sentences=min_sentences,
        min_chunk_size=min_chunk_size,
        threshold_step=threshold_step,
        **options,
    )
    return chunker.chunk(text, tokenizer)
