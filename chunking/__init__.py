"""
Chunking Module.

Splits text into chunks that carry exact UTF-8 byte spans into the source
and a token count. Four strategies:
- Token windows (fixed size, overlapping)
- Word windows (never split a word)
- Sentence windows (never split a sentence, sentence-level overlap)
- Semantic grouping (split where neighbor embedding similarity drops)

Rules of thumb:
- Prefer sentence or semantic chunking over fixed windows for retrieval
- Use 5-25% overlap to preserve context across boundaries
- Count tokens with the tokenizer of the model that consumes the chunks

Usage:
    from chunking import TiktokenTokenizer, sentence_chunk

    chunks = sentence_chunk(text, TiktokenTokenizer(), chunk_size=256, chunk_overlap=32)
    for chunk in chunks:
        print(chunk.start_byte, chunk.end_byte, chunk.token_count)
"""

from .base import BaseChunker, ChunkingStrategy
from .chunk import Chunk, SentenceChunk
from .chunk_eval_tools import ChunkQualityReport, evaluate_chunk_quality, verify_spans
from .config import (
    DEFAULT_DELIMITERS,
    SemanticChunkerConfig,
    SentenceChunkerConfig,
    TokenChunkerConfig,
    WordChunkerConfig,
)
from .errors import ChunkingError, CollaboratorError, ConfigurationError
from .factory import ChunkerFactory
from .semantic_chunker import SemanticChunker, semantic_chunk
from .sentence_chunker import SentenceChunker, sentence_chunk
from .token_chunker import TokenChunker, token_chunk
from .tokenizers import (
    Encoding,
    HuggingFaceTokenizer,
    TiktokenTokenizer,
    Tokenizer,
    WhitespaceTokenizer,
    get_tokenizer,
)
from .word_chunker import WordChunker, word_chunk

__all__ = [
    "Chunk",
    "SentenceChunk",
    "token_chunk",
    "word_chunk",
    "sentence_chunk",
    "semantic_chunk",
    "BaseChunker",
    "ChunkingStrategy",
    "ChunkerFactory",
    "TokenChunker",
    "WordChunker",
    "SentenceChunker",
    "SemanticChunker",
    "TokenChunkerConfig",
    "WordChunkerConfig",
    "SentenceChunkerConfig",
    "SemanticChunkerConfig",
    "DEFAULT_DELIMITERS",
    "Encoding",
    "Tokenizer",
    "TiktokenTokenizer",
    "HuggingFaceTokenizer",
    "WhitespaceTokenizer",
    "get_tokenizer",
    "ChunkingError",
    "ConfigurationError",
    "CollaboratorError",
    "ChunkQualityReport",
    "evaluate_chunk_quality",
    "verify_spans",
]
