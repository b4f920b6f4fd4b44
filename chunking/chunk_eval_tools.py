"""
Chunk quality evaluation tools.

Helps tune chunking parameters by measuring:
- Span consistency (does every chunk point back at its own text)
- Size distribution
- Overlap between consecutive chunks
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Union

import numpy as np

from .chunk import Chunk, SentenceChunk

logger = logging.getLogger(__name__)

AnyChunk = Union[Chunk, SentenceChunk]


@dataclass
class ChunkQualityReport:
    """Report on chunk quality metrics."""

    total_chunks: int
    avg_tokens: float
    min_tokens: int
    max_tokens: int
    std_tokens: float
    chunks_too_small: int  # Below min threshold
    chunks_too_large: int  # Above max threshold
    overlap_ratio: float
    recommendations: List[str] = field(default_factory=list)


def verify_spans(text: str, chunks: Sequence[AnyChunk]) -> List[str]:
    """
    Check that every chunk's byte span reproduces its text.

    Args:
        text: The source the chunks were produced from
        chunks: Chunks to check

    Returns:
        Problem descriptions; empty when all spans are consistent
    """
    data = text.encode("utf-8")
    problems = []

    for i, chunk in enumerate(chunks):
        if chunk.end_byte > len(data):
            problems.append(
                f"chunk {i}: span [{chunk.start_byte}, {chunk.end_byte}) "
                f"exceeds source length {len(data)}"
            )
            continue

        window = data[chunk.start_byte:chunk.end_byte]
        if window != chunk.text.encode("utf-8"):
            problems.append(
                f"chunk {i}: span [{chunk.start_byte}, {chunk.end_byte}) does not match its text"
            )

    if problems:
        logger.warning(f"{len(problems)} of {len(chunks)} chunks have inconsistent spans")
    return problems


def evaluate_chunk_quality(
    chunks: Sequence[AnyChunk],
    min_tokens: int = 50,
    max_tokens: int = 1500,
) -> ChunkQualityReport:
    """
    Evaluate overall chunking quality.

    Args:
        chunks: Chunks produced by any strategy
        min_tokens: Minimum acceptable tokens
        max_tokens: Maximum acceptable tokens

    Returns:
        ChunkQualityReport with metrics and recommendations
    """
    if not chunks:
        return ChunkQualityReport(
            total_chunks=0,
            avg_tokens=0.0,
            min_tokens=0,
            max_tokens=0,
            std_tokens=0.0,
            chunks_too_small=0,
            chunks_too_large=0,
            overlap_ratio=0.0,
            recommendations=["No chunks to evaluate"],
        )

    token_counts = np.array([c.token_count for c in chunks])

    avg_tokens = float(np.mean(token_counts))
    std_tokens = float(np.std(token_counts))

    too_small = int(np.sum(token_counts < min_tokens))
    too_large = int(np.sum(token_counts > max_tokens))

    overlap_ratio = _evaluate_overlap(chunks)

    recommendations = []

    if too_small > len(chunks) * 0.1:
        recommendations.append(
            f"Consider a larger chunk_size or fewer splits. {too_small} chunks "
            f"({too_small/len(chunks)*100:.0f}%) are below {min_tokens} tokens."
        )

    if too_large > len(chunks) * 0.1:
        recommendations.append(
            f"Consider reducing chunk_size. {too_large} chunks "
            f"({too_large/len(chunks)*100:.0f}%) exceed {max_tokens} tokens."
        )

    if avg_tokens > 0 and std_tokens > avg_tokens * 0.5:
        recommendations.append(
            f"High variance in chunk sizes (std={std_tokens:.0f}). "
            "Consider more consistent chunking boundaries."
        )

    if overlap_ratio > 0.5:
        recommendations.append(
            f"High overlap ratio ({overlap_ratio:.2f}). "
            "Consecutive chunks repeat most of their content; consider reducing chunk_overlap."
        )

    if not recommendations:
        recommendations.append("Chunking quality looks good!")

    return ChunkQualityReport(
        total_chunks=len(chunks),
        avg_tokens=avg_tokens,
        min_tokens=int(np.min(token_counts)),
        max_tokens=int(np.max(token_counts)),
        std_tokens=std_tokens,
        chunks_too_small=too_small,
        chunks_too_large=too_large,
        overlap_ratio=overlap_ratio,
        recommendations=recommendations,
    )


def _evaluate_overlap(chunks: Sequence[AnyChunk]) -> float:
    """
    Mean share of each chunk's bytes repeated at the start of the next one.

    Measured on byte spans, so repeated phrases elsewhere in the text
    are not counted.
    """
    if len(chunks) < 2:
        return 0.0

    ratios = []
    for prev, nxt in zip(chunks, chunks[1:]):
        shared = max(0, prev.end_byte - nxt.start_byte)
        length = nxt.end_byte - nxt.start_byte
        if length > 0:
            ratios.append(min(shared, length) / length)

    return float(np.mean(ratios)) if ratios else 0.0
