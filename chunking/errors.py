"""
Chunking error hierarchy.

- ConfigurationError: invalid options, raised before any text is processed
- CollaboratorError: a tokenizer or embedding function broke its contract

Exceptions raised by the collaborators themselves are never wrapped;
they reach the caller unchanged.
"""


class ChunkingError(Exception):
    """Base class for chunking errors."""

    pass


class ConfigurationError(ChunkingError, ValueError):
    """Raised when chunker options are out of range or contradictory."""

    pass


class CollaboratorError(ChunkingError):
    """Raised when an external capability returns something unusable."""

    pass
