"""
Sentence-boundary windows under a token budget.

Sentences are packed greedily; consecutive chunks share trailing
sentences worth up to chunk_overlap tokens.
"""

import logging
from typing import List, Optional, Sequence

from .base import BaseChunker, ChunkingStrategy
from .chunk import Chunk, SentenceChunk
from .config import DEFAULT_DELIMITERS, SentenceChunkerConfig
from .sentence_splitter import merge_short_fragments, sequential_spans, split_sentences
from .tokenizers import Tokenizer

logger = logging.getLogger(__name__)


class SentenceChunker(BaseChunker):
    """
    Packs sentences into chunks of at most chunk_size tokens.

    A chunk always holds at least min_sentences_per_chunk sentences, even
    when that pushes it past chunk_size.

    Usage:
        chunker = SentenceChunker(chunk_size=256, chunk_overlap=32)
        for chunk in chunker.chunk(text, tokenizer):
            print(chunk.start_byte, chunk.end_byte, len(chunk.sentences))
    """

    strategy = ChunkingStrategy.SENTENCE

    def __init__(
        self,
        chunk_size: int = 512,
        chunk_overlap: int = 128,
        min_sentences_per_chunk: int = 1,
        delimiters: Sequence[str] = DEFAULT_DELIMITERS,
        short_sentence_threshold: int = 6,
        config: Optional[SentenceChunkerConfig] = None,
    ):
        self.config = config or SentenceChunkerConfig(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            min_sentences_per_chunk=min_sentences_per_chunk,
            delimiters=delimiters,
            short_sentence_threshold=short_sentence_threshold,
        )

    def chunk(self, text: str, tokenizer: Tokenizer) -> List[SentenceChunk]:
        if self._is_blank(text):
            return []

        sentences = self.prepare_sentences(text, tokenizer)

        chunks = []
        pos = 0
        while pos < len(sentences):
            end = self._chunk_end(sentences, pos)
            chunks.append(SentenceChunk.from_sentences(sentences[pos:end]))
            pos = self._next_start(sentences, pos, end)

        logger.debug(
            f"Sentence chunking: {len(sentences)} sentences -> {len(chunks)} chunks"
        )
        return chunks

    def prepare_sentences(self, text: str, tokenizer: Tokenizer) -> List[Chunk]:
        """Split, merge short fragments and tokenize each sentence once."""
        fragments = split_sentences(text, self.config.delimiters)
        merged = merge_short_fragments(fragments, self.config.short_sentence_threshold)

        return [
            Chunk(
                text=s.text,
                start_byte=s.start,
                end_byte=s.end,
                token_count=len(tokenizer.encode(s.text)),
            )
            for s in sequential_spans(merged)
        ]

    def _chunk_end(self, sentences: List[Chunk], pos: int) -> int:
        """Index one past the last sentence of the chunk starting at pos."""
        total = 0
        end = pos
        while end < len(sentences):
            tokens = sentences[end].token_count
            included = end - pos
            # Zero-token sentences stay with their neighbors
            if (
                tokens
                and total
                and total + tokens > self.config.chunk_size
                and included >= self.config.min_sentences_per_chunk
            ):
                break
            total += tokens
            end += 1
        return end

    def _next_start(self, sentences: List[Chunk], pos: int, end: int) -> int:
        """Where the next chunk starts, stepping back over the overlap."""
        if self.config.chunk_overlap == 0 or end >= len(sentences):
            return end

        start = end
        total = 0
        for idx in range(end - 1, pos - 1, -1):
            total += sentences[idx].token_count
            if total > self.config.chunk_overlap:
                break
            start = idx

        # Always advance, even when the whole chunk fits in the overlap
        return max(start, pos + 1)


def sentence_chunk(
    text: str,
    tokenizer: Tokenizer,
    chunk_size: int = 512,
    chunk_overlap: int = 128,
    min_sentences_per_chunk: int = 1,
    delimiters: Sequence[str] = DEFAULT_DELIMITERS,
    short_sentence_threshold: int = 6,
) -> List[SentenceChunk]:
    """
    Split text into sentence-boundary chunks.

    Args:
        text: Source text
        tokenizer: Tokenizer used to count tokens per sentence
        chunk_size: Token budget per chunk
        chunk_overlap: Tokens of trailing sentences repeated in the next chunk
        min_sentences_per_chunk: Sentences forced into every chunk
        delimiters: Sentence-ending strings
        short_sentence_threshold: Byte length below which a fragment is
            appended to the previous one

    Returns:
        List of SentenceChunk objects
    """
    chunker = SentenceChunker(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        min_sentences_per_chunk=min_sentences_per_chunk,
        delimiters=delimiters,
        short_sentence_threshold=short_sentence_threshold,
    )
    return chunker.chunk(text, tokenizer)
