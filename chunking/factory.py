"""Chunker factory for creating chunker instances by strategy name."""

import logging
from typing import Any, Dict, List, Type, Union

from .base import BaseChunker, ChunkingStrategy
from .errors import ConfigurationError
from .semantic_chunker import SemanticChunker
from .sentence_chunker import SentenceChunker
from .token_chunker import TokenChunker
from .word_chunker import WordChunker

logger = logging.getLogger(__name__)


class ChunkerFactory:
    """
    Creates chunkers from a strategy identifier.

    The set of strategies is closed; there is no registration hook.

    Usage:
        chunker = ChunkerFactory.create("sentence", chunk_size=256, chunk_overlap=32)
        chunker = ChunkerFactory.create(ChunkingStrategy.SEMANTIC, embedding_fn=embed)
    """

    _registry: Dict[ChunkingStrategy, Type[BaseChunker]] = {
        ChunkingStrategy.TOKEN: TokenChunker,
        ChunkingStrategy.WORD: WordChunker,
        ChunkingStrategy.SENTENCE: SentenceChunker,
        ChunkingStrategy.SEMANTIC: SemanticChunker,
    }

    @classmethod
    def create(cls, strategy: Union[str, ChunkingStrategy], **params: Any) -> BaseChunker:
        """
        Create a chunker instance.

        Args:
            strategy: Strategy name ("token", "word", "sentence", "semantic")
                or a ChunkingStrategy member
            **params: Constructor arguments for the chunker

        Returns:
            Chunker instance

        Raises:
            ConfigurationError: If the strategy is unknown or the
                parameters are invalid
        """
        try:
            key = ChunkingStrategy(strategy)
        except ValueError:
            available = ", ".join(cls.list_types())
            raise ConfigurationError(
                f"Unknown chunking strategy: '{strategy}'. Available strategies: {available}"
            ) from None

        chunker_class = cls._registry[key]
        logger.debug(f"Creating {chunker_class.__name__} with params: {params}")

        return chunker_class(**params)

    @classmethod
    def list_types(cls) -> List[str]:
        """Names of the available strategies."""
        return [strategy.value for strategy in cls._registry]
