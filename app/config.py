"""
Configuration module for chunkwise.
Manages environment variables and application-level defaults.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional, Union


def parse_overlap(value: str) -> Union[int, float]:
    """Overlap from the environment: "128" is a token count, "0.25" a fraction."""
    value = value.strip()
    if "." in value:
        return float(value)
    return int(value)


@dataclass
class EmbeddingSettings:
    """Embedding model used by semantic chunking - tune thresholds per model."""
    model_name: str = field(
        default_factory=lambda: os.getenv("CHUNKWISE_EMBEDDING_MODEL", "all-MiniLM-L6-v2")
    )
    normalize: bool = field(
        default_factory=lambda: os.getenv("CHUNKWISE_EMBEDDING_NORMALIZE", "true").lower() == "true"
    )
    version: str = field(
        default_factory=lambda: os.getenv("CHUNKWISE_EMBEDDING_VERSION", "2025-01-01")
    )


@dataclass
class ChunkingDefaults:
    """Defaults applied when a caller does not pass chunk_size or chunk_overlap."""
    chunk_size: int = field(
        default_factory=lambda: int(os.getenv("CHUNKWISE_CHUNK_SIZE", "512"))
    )
    chunk_overlap: Union[int, float] = field(
        default_factory=lambda: parse_overlap(os.getenv("CHUNKWISE_CHUNK_OVERLAP", "0.25"))
    )
    threshold: str = "auto"
    min_sentences: int = 1


@dataclass
class Settings:
    """Main application settings loaded from environment."""

    # Tokenizer settings
    TOKENIZER: str = field(default_factory=lambda: os.getenv("CHUNKWISE_TOKENIZER", "tiktoken"))
    TOKENIZER_NAME: Optional[str] = field(
        default_factory=lambda: os.getenv("CHUNKWISE_TOKENIZER_NAME")
    )

    # Application settings
    LOG_LEVEL: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # Nested configs
    embedding: EmbeddingSettings = field(default_factory=EmbeddingSettings)
    chunking: ChunkingDefaults = field(default_factory=ChunkingDefaults)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
