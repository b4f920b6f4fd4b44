"""Base chunker interface and the closed set of strategies."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Union

from .chunk import Chunk, SentenceChunk
from .tokenizers import Tokenizer


class ChunkingStrategy(str, Enum):
    TOKEN = "token"
    WORD = "word"
    SENTENCE = "sentence"
    SEMANTIC = "semantic"


class BaseChunker(ABC):
    """
    Abstract base class for chunking strategies.

    Chunkers hold a validated config and no per-call state, so one
    instance can chunk any number of texts.
    """

    strategy: ChunkingStrategy

    @abstractmethod
    def chunk(
        self, text: str, tokenizer: Tokenizer
    ) -> List[Union[Chunk, SentenceChunk]]:
        """
        Split text into chunks.

        Args:
            text: Source text
            tokenizer: Tokenizer used for token counts and offsets

        Returns:
            Chunks in source order; empty for blank text
        """
        pass

    @staticmethod
    def _is_blank(text: str) -> bool:
        if not isinstance(text, str):
            raise TypeError(f"text must be a string, got {type(text).__name__}")
        return text.strip() == ""
