"""
Per-call chunker configuration.

Every config is a frozen dataclass validated in __post_init__, so an invalid
option raises ConfigurationError before any text is tokenized.
"""

import math
from dataclasses import dataclass
from typing import Tuple, Union

from .errors import ConfigurationError

DEFAULT_DELIMITERS: Tuple[str, ...] = (".", "!", "?", "\n")

AUTO_THRESHOLD = "auto"


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate_chunk_size(chunk_size) -> None:
    if not _is_int(chunk_size) or chunk_size <= 0:
        raise ConfigurationError("chunk_size must be positive")


def _validate_delimiters(delimiters) -> Tuple[str, ...]:
    if isinstance(delimiters, str):
        raise ConfigurationError("delimiters must be a sequence of strings")
    delimiters = tuple(delimiters)
    if not delimiters:
        raise ConfigurationError("delimiters must contain at least one element")
    if any(not isinstance(d, str) or d == "" for d in delimiters):
        raise ConfigurationError("delimiters must be non-empty strings")
    return delimiters


def resolve_overlap(chunk_size: int, chunk_overlap: Union[int, float]) -> int:
    """
    Validate an overlap given as tokens (int) or as a fraction of chunk_size
    (float in [0, 1)) and return it as a token count.
    """
    if _is_int(chunk_overlap):
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ConfigurationError(
                "chunk_overlap must be less than chunk_size and non-negative"
            )
        return chunk_overlap

    if isinstance(chunk_overlap, float):
        if math.isnan(chunk_overlap) or chunk_overlap < 0.0 or chunk_overlap >= 1.0:
            raise ConfigurationError("chunk_overlap percentage must be less than 1")
        return math.floor(chunk_overlap * chunk_size)

    raise ConfigurationError("chunk_overlap must be an int or a float")


@dataclass(frozen=True)
class TokenChunkerConfig:
    """Fixed token windows."""

    chunk_size: int = 512
    chunk_overlap: Union[int, float] = 0.25

    def __post_init__(self):
        _validate_chunk_size(self.chunk_size)
        resolve_overlap(self.chunk_size, self.chunk_overlap)

    @property
    def overlap_tokens(self) -> int:
        return resolve_overlap(self.chunk_size, self.chunk_overlap)

    @property
    def stride(self) -> int:
        return self.chunk_size - self.overlap_tokens


@dataclass(frozen=True)
class WordChunkerConfig:
    """Word windows packed under a token budget."""

    chunk_size: int = 512
    chunk_overlap: Union[int, float] = 0.25

    def __post_init__(self):
        _validate_chunk_size(self.chunk_size)
        resolve_overlap(self.chunk_size, self.chunk_overlap)

    @property
    def overlap_tokens(self) -> int:
        return resolve_overlap(self.chunk_size, self.chunk_overlap)


@dataclass(frozen=True)
class SentenceChunkerConfig:
    """
    Sentence windows packed under a token budget.

    Attributes:
        chunk_size: Token budget per chunk
        chunk_overlap: Tokens of trailing sentences repeated in the next chunk
        min_sentences_per_chunk: Sentences forced into every chunk
        delimiters: Strings that end a sentence (kept with the sentence)
        short_sentence_threshold: Fragments shorter than this many bytes
            are appended to the previous fragment
    """

    chunk_size: int = 512
    chunk_overlap: int = 128
    min_sentences_per_chunk: int = 1
    delimiters: Tuple[str, ...] = DEFAULT_DELIMITERS
    short_sentence_threshold: int = 6

    def __post_init__(self):
        _validate_chunk_size(self.chunk_size)
        if not _is_int(self.chunk_overlap) or self.chunk_overlap < 0:
            raise ConfigurationError("chunk_overlap must be a non-negative integer")
        if self.chunk_overlap >= self.chunk_size:
            raise ConfigurationError("chunk_overlap must be less than chunk_size")
        if not _is_int(self.min_sentences_per_chunk) or self.min_sentences_per_chunk < 1:
            raise ConfigurationError("min_sentences_per_chunk must be at least 1")
        if not _is_int(self.short_sentence_threshold) or self.short_sentence_threshold < 1:
            raise ConfigurationError("short_sentence_threshold must be at least 1")
        # frozen: bypass __setattr__ to store the normalized tuple
        object.__setattr__(self, "delimiters", _validate_delimiters(self.delimiters))


@dataclass(frozen=True)
class SemanticChunkerConfig:
    """
    Embedding-similarity grouping.

    Attributes:
        chunk_size: Token budget per chunk
        threshold: Similarity cutoff in [0, 1], or "auto" to search for one
        min_sentences: Minimum sentences per group and per chunk
        min_chunk_size: Minimum group token total targeted by the auto search
        threshold_step: Search resolution and step applied after each probe
        similarity_window: Neighbors on each side joined into the embedded text
        min_chars_per_sentence: Fragments with fewer stripped characters are
            appended to the pending sentence
        delimiters: Strings that end a sentence
    """

    chunk_size: int = 512
    threshold: Union[float, str] = AUTO_THRESHOLD
    min_sentences: int = 1
    min_chunk_size: int = 2
    threshold_step: float = 0.01
    similarity_window: int = 1
    min_chars_per_sentence: int = 1
    delimiters: Tuple[str, ...] = DEFAULT_DELIMITERS

    def __post_init__(self):
        _validate_chunk_size(self.chunk_size)
        if not _is_int(self.min_sentences) or self.min_sentences <= 0:
            raise ConfigurationError("min_sentences must be positive")
        if not _is_int(self.min_chunk_size) or self.min_chunk_size <= 0:
            raise ConfigurationError("min_chunk_size must be positive")
        if not _is_number(self.threshold_step) or not 0 < self.threshold_step < 1:
            raise ConfigurationError("threshold_step must be between 0 and 1")
        if self.threshold != AUTO_THRESHOLD and not (
            _is_number(self.threshold) and 0 <= self.threshold <= 1
        ):
            raise ConfigurationError(
                "threshold must be 'auto' or a number between 0 and 1"
            )
        if not _is_int(self.similarity_window) or self.similarity_window < 0:
            raise ConfigurationError("similarity_window must be non-negative")
        if not _is_int(self.min_chars_per_sentence) or self.min_chars_per_sentence < 0:
            raise ConfigurationError("min_chars_per_sentence must be non-negative")
        object.__setattr__(self, "delimiters", _validate_delimiters(self.delimiters))

    @property
    def is_auto_threshold(self) -> bool:
        return self.threshold == AUTO_THRESHOLD
