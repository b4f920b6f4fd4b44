"""
Embeddings Module.

Supplies the embedding function consumed by semantic chunking.

Key practices:
- Normalize vectors to unit length for cosine similarity
- Make embedding generation deterministic
- Tune semantic thresholds per model

Usage:
    from embeddings import get_embedding_service

    service = get_embedding_service()
    embed = service.as_embedding_fn()
    vectors = embed(["text1", "text2"])
"""

from .embedder import (
    EmbeddingConfig,
    EmbeddingResult,
    EmbeddingService,
    get_embedding_service,
)

__all__ = [
    "EmbeddingService",
    "EmbeddingResult",
    "EmbeddingConfig",
    "get_embedding_service",
]
