"""
Fixed-size token windows.

Windows are cut directly over the tokenizer's offsets, and each chunk's
text is the raw source slice between its first and last token, so any
bytes the tokenizer skipped (whitespace, normalized punctuation) are kept.
"""

import logging
from typing import List, Optional, Tuple, Union

from .base import BaseChunker, ChunkingStrategy
from .chunk import Chunk
from .config import TokenChunkerConfig
from .tokenizers import Tokenizer

logger = logging.getLogger(__name__)


def window_bounds(total: int, size: int, stride: int) -> List[Tuple[int, int]]:
    """
    [start, end) token index pairs for windows of `size` moving by `stride`.

    Example:
        >>> window_bounds(5, 3, 2)
        [(0, 3), (2, 5), (4, 5)]
    """
    bounds = []
    for start in range(0, total, stride):
        end = min(start + size, total)
        if end <= start:
            break
        bounds.append((start, end))
    return bounds


class TokenChunker(BaseChunker):
    """
    Splits text into overlapping windows of tokens.

    Usage:
        chunker = TokenChunker(chunk_size=256, chunk_overlap=0.1)
        chunks = chunker.chunk(text, TiktokenTokenizer())
    """

    strategy = ChunkingStrategy.TOKEN

    def __init__(
        self,
        chunk_size: int = 512,
        chunk_overlap: Union[int, float] = 0.25,
        config: Optional[TokenChunkerConfig] = None,
    ):
        self.config = config or TokenChunkerConfig(
            chunk_size=chunk_size, chunk_overlap=chunk_overlap
        )

    def chunk(self, text: str, tokenizer: Tokenizer) -> List[Chunk]:
        if self._is_blank(text):
            return []

        encoding = tokenizer.encode(text)
        # Zero-width spans are special tokens with no text
        spans = [(s, e) for s, e in encoding.offsets if e > s]
        if not spans:
            return []

        data = text.encode("utf-8")
        chunks = []

        for start, end in window_bounds(
            len(spans), self.config.chunk_size, self.config.stride
        ):
            start_byte = spans[start][0]
            end_byte = spans[end - 1][1]
            chunks.append(
                Chunk(
                    text=data[start_byte:end_byte].decode("utf-8"),
                    start_byte=start_byte,
                    end_byte=end_byte,
                    token_count=end - start,
                )
            )

        logger.debug(
            f"Token chunking: {len(spans)} tokens -> {len(chunks)} chunks "
            f"(size={self.config.chunk_size}, stride={self.config.stride})"
        )
        return chunks


def token_chunk(
    text: str,
    tokenizer: Tokenizer,
    chunk_size: int = 512,
    chunk_overlap: Union[int, float] = 0.25,
) -> List[Chunk]:
    """
    Split text into fixed-size token windows.

    Args:
        text: Source text
        tokenizer: Tokenizer providing byte offsets
        chunk_size: Tokens per window
        chunk_overlap: Shared tokens (int) or fraction of chunk_size (float)

    Returns:
        List of Chunk objects

    Example:
        >>> chunks = token_chunk("Some text to split", WhitespaceTokenizer(), 3, 1)
        >>> [c.text for c in chunks]
        ['Some text to', 'to split']
    """
    return TokenChunker(chunk_size, chunk_overlap).chunk(text, tokenizer)
