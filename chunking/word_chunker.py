"""
Word-boundary windows under a token budget.

Words keep their leading whitespace, so chunk texts are exact source
slices and a chunk never starts or ends inside a word.
"""

import logging
from typing import Dict, List, Optional, Union

from .base import BaseChunker, ChunkingStrategy
from .chunk import Chunk
from .config import WordChunkerConfig
from .sentence_splitter import split_into_words
from .tokenizers import Tokenizer

logger = logging.getLogger(__name__)


class WordChunker(BaseChunker):
    """
    Packs words into chunks of at most chunk_size tokens.

    When a word does not fit, the chunk is closed and the next one starts
    with as many trailing words of the closed chunk as fit in chunk_overlap.

    Usage:
        chunker = WordChunker(chunk_size=3, chunk_overlap=1)
        chunks = chunker.chunk("Some text to split", WhitespaceTokenizer())
        # ["Some text to", " to split"]
    """

    strategy = ChunkingStrategy.WORD

    def __init__(
        self,
        chunk_size: int = 512,
        chunk_overlap: Union[int, float] = 0.25,
        config: Optional[WordChunkerConfig] = None,
    ):
        self.config = config or WordChunkerConfig(
            chunk_size=chunk_size, chunk_overlap=chunk_overlap
        )

    def chunk(self, text: str, tokenizer: Tokenizer) -> List[Chunk]:
        if self._is_blank(text):
            return []

        words = split_into_words(text)
        counts = self._count_word_tokens(words, tokenizer)

        starts = []
        position = 0
        for word in words:
            starts.append(position)
            position += len(word.encode("utf-8"))

        chunk_size = self.config.chunk_size
        overlap_tokens = self.config.overlap_tokens

        chunks = []
        current: List[int] = []
        current_tokens = 0

        for idx, word_tokens in enumerate(counts):
            # Zero-token words (trailing whitespace) never open a chunk of their own
            if word_tokens == 0 or current_tokens + word_tokens <= chunk_size or not current:
                current.append(idx)
                current_tokens += word_tokens
                continue

            chunks.append(self._make_chunk(current, words, starts, current_tokens))

            # Longest suffix of the closed chunk that fits in the overlap
            # and still leaves room for the current word
            overlap_limit = min(overlap_tokens, chunk_size - word_tokens)
            overlap: List[int] = []
            overlap_total = 0
            for prev in reversed(current):
                if overlap_total + counts[prev] > overlap_limit:
                    break
                overlap.insert(0, prev)
                overlap_total += counts[prev]

            current = overlap + [idx]
            current_tokens = overlap_total + word_tokens

        if current:
            chunks.append(self._make_chunk(current, words, starts, current_tokens))

        logger.debug(f"Word chunking: {len(words)} words -> {len(chunks)} chunks")
        return chunks

    @staticmethod
    def _count_word_tokens(words: List[str], tokenizer: Tokenizer) -> List[int]:
        """Token count per word, tokenizing each distinct word once."""
        cache: Dict[str, int] = {}
        counts = []
        for word in words:
            if word not in cache:
                cache[word] = len(tokenizer.encode(word))
            counts.append(cache[word])
        return counts

    @staticmethod
    def _make_chunk(
        indices: List[int], words: List[str], starts: List[int], token_count: int
    ) -> Chunk:
        text = "".join(words[i] for i in indices)
        start_byte = starts[indices[0]]
        return Chunk(
            text=text,
            start_byte=start_byte,
            end_byte=start_byte + len(text.encode("utf-8")),
            token_count=token_count,
        )


def word_chunk(
    text: str,
    tokenizer: Tokenizer,
    chunk_size: int = 512,
    chunk_overlap: Union[int, float] = 0.25,
) -> List[Chunk]:
    """
    Split text into word-boundary chunks of at most chunk_size tokens.

    Args:
        text: Source text
        tokenizer: Tokenizer used to count tokens per word
        chunk_size: Token budget per chunk
        chunk_overlap: Overlap budget in tokens (int) or fraction of chunk_size (float)

    Returns:
        List of Chunk objects
    """
    return WordChunker(chunk_size, chunk_overlap).chunk(text, tokenizer)
