"""
Embedding service backing the semantic chunker.

The semantic chunker only needs a callable mapping a list of strings to
one vector per string. EmbeddingService.as_embedding_fn() provides that
callable on top of a sentence-transformers model.

Thresholds tuned against one model do not transfer to another:
record model_name and version alongside any tuned threshold.
"""

import hashlib
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np
from sentence_transformers import SentenceTransformer

logger = logging.getLogger(__name__)


@dataclass
class EmbeddingConfig:
    """
    Embedding model configuration.

    IMPORTANT: Changing model_name or normalize changes every similarity
    score, so bump version when you do.
    """

    model_name: str = "all-MiniLM-L6-v2"
    normalize: bool = True
    version: str = "2025-01-01"
    max_seq_length: int = 512
    batch_size: int = 32


@dataclass
class EmbeddingResult:
    """Embedding result with metadata for tracking."""

    vectors: np.ndarray
    model_name: str
    model_version: str
    preprocessing_hash: str


class EmbeddingService:
    """
    Sentence embedding service.

    Key practices:
    - Normalize vectors to unit length for cosine similarity
    - Make embedding generation deterministic
    - Load the model lazily, on the first batch

    Usage:
        service = EmbeddingService()
        result = service.embed_batch(["text1", "text2"])

        # As the semantic chunker's embedding function
        chunks = semantic_chunk(text, tokenizer, service.as_embedding_fn())
    """

    def __init__(self, config: Optional[EmbeddingConfig] = None):
        self.config = config or EmbeddingConfig()
        self._model: Optional[SentenceTransformer] = None
        self._preprocessing_hash = self._compute_preprocessing_hash()

    def _compute_preprocessing_hash(self) -> str:
        """Hash preprocessing config for drift detection."""
        config_str = (
            f"{self.config.model_name}:"
            f"{self.config.normalize}:"
            f"{self.config.max_seq_length}:"
            f"{self.config.version}"
        )
        return hashlib.md5(config_str.encode()).hexdigest()[:8]

    @property
    def model(self) -> SentenceTransformer:
        """Lazy load the model."""
        if self._model is None:
            logger.info(f"Loading embedding model: {self.config.model_name}")
            self._model = SentenceTransformer(self.config.model_name)
        return self._model

    def preprocess_text(self, text: str) -> str:
        """
        Deterministic text preprocessing.

        Collapses whitespace and truncates very long inputs.
        """
        text = " ".join(text.split())

        max_chars = self.config.max_seq_length * 4  # Approximate
        if len(text) > max_chars:
            text = text[:max_chars]

        return text

    def embed_batch(self, texts: List[str], show_progress: bool = False) -> EmbeddingResult:
        """
        Embed a batch of texts with metadata.

        Args:
            texts: List of texts to embed
            show_progress: Show progress bar

        Returns:
            EmbeddingResult with one vector per input, in input order
        """
        processed = [self.preprocess_text(t) for t in texts]

        vectors = self.model.encode(
            processed,
            batch_size=self.config.batch_size,
            show_progress_bar=show_progress,
            convert_to_numpy=True,
        )
        vectors = np.asarray(vectors, dtype=float)

        if self.config.normalize and len(vectors):
            norms = np.linalg.norm(vectors, axis=1, keepdims=True)
            vectors = vectors / (norms + 1e-10)  # Avoid division by zero

        logger.debug(f"Embedded {len(texts)} texts with {self.config.model_name}")

        return EmbeddingResult(
            vectors=vectors,
            model_name=self.config.model_name,
            model_version=self.config.version,
            preprocessing_hash=self._preprocessing_hash,
        )

    def as_embedding_fn(self) -> Callable[[List[str]], np.ndarray]:
        """Callable suitable as the semantic chunker's embedding_fn."""

        def embed(texts: List[str]) -> np.ndarray:
            return self.embed_batch(list(texts)).vectors

        return embed

    def get_metadata(self) -> dict:
        """Get embedding configuration metadata."""
        return {
            "model_name": self.config.model_name,
            "version": self.config.version,
            "normalize": self.config.normalize,
            "preprocessing_hash": self._preprocessing_hash,
        }


# Global embedding service instance
_embedding_service: Optional[EmbeddingService] = None


def get_embedding_service(config: Optional[EmbeddingConfig] = None) -> EmbeddingService:
    """
    Get or create the global embedding service.

    Args:
        config: Optional custom configuration; replaces the global service

    Returns:
        EmbeddingService instance
    """
    global _embedding_service
    if _embedding_service is None or config is not None:
        _embedding_service = EmbeddingService(config)
    return _embedding_service
