"""
Chunk data model.

Offsets are UTF-8 byte offsets into the source text, half-open:
source.encode("utf-8")[start_byte:end_byte] decodes to chunk.text.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class Chunk:
    """A span of source text with its token count."""

    text: str
    start_byte: int
    end_byte: int
    token_count: int
    embedding: Optional[np.ndarray] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if not isinstance(self.text, str):
            raise ValueError("text must be a string")
        if self.start_byte < 0:
            raise ValueError("start_byte must be non-negative")
        if self.end_byte < self.start_byte:
            raise ValueError("end_byte must not be less than start_byte")
        if self.end_byte - self.start_byte != len(self.text.encode("utf-8")):
            raise ValueError(
                f"Span [{self.start_byte}, {self.end_byte}) does not match "
                f"text length of {len(self.text.encode('utf-8'))} bytes"
            )
        if self.token_count < 0:
            raise ValueError("token_count must be non-negative")
        if self.token_count == 0 and self.text.strip():
            raise ValueError("token_count must be positive for non-blank text")

    @property
    def byte_length(self) -> int:
        return self.end_byte - self.start_byte

    def to_dict(self, include_embedding: bool = False) -> Dict:
        result = {
            "text": self.text,
            "start_byte": self.start_byte,
            "end_byte": self.end_byte,
            "token_count": self.token_count,
        }
        if include_embedding and self.embedding is not None:
            result["embedding"] = np.asarray(self.embedding).tolist()
        return result


@dataclass(frozen=True)
class SentenceChunk:
    """
    A chunk assembled from consecutive sentence chunks.

    The sentences are contiguous in the source, their texts concatenate
    to this chunk's text and their token counts sum to its token count.
    """

    text: str
    start_byte: int
    end_byte: int
    token_count: int
    sentences: Tuple[Chunk, ...]

    def __post_init__(self):
        if not self.sentences:
            raise ValueError("sentences must not be empty")
        if self.start_byte != self.sentences[0].start_byte:
            raise ValueError("start_byte must equal the first sentence's start_byte")
        if self.end_byte != self.sentences[-1].end_byte:
            raise ValueError("end_byte must equal the last sentence's end_byte")

        for prev, nxt in zip(self.sentences, self.sentences[1:]):
            if prev.end_byte != nxt.start_byte:
                raise ValueError(
                    f"Sentences are not contiguous at byte {prev.end_byte}"
                )

        if self.text != "".join(s.text for s in self.sentences):
            raise ValueError("text must equal the concatenated sentence texts")
        if self.token_count != sum(s.token_count for s in self.sentences):
            raise ValueError("token_count must equal the summed sentence token counts")

    @classmethod
    def from_sentences(cls, sentences: Sequence[Chunk]) -> "SentenceChunk":
        """Build a chunk spanning the given consecutive sentences."""
        sentences = tuple(sentences)
        if not sentences:
            raise ValueError("sentences must not be empty")

        return cls(
            text="".join(s.text for s in sentences),
            start_byte=sentences[0].start_byte,
            end_byte=sentences[-1].end_byte,
            token_count=sum(s.token_count for s in sentences),
            sentences=sentences,
        )

    @property
    def byte_length(self) -> int:
        return self.end_byte - self.start_byte

    def to_dict(self, include_embedding: bool = False) -> Dict:
        return {
            "text": self.text,
            "start_byte": self.start_byte,
            "end_byte": self.end_byte,
            "token_count": self.token_count,
            "sentences": [s.to_dict(include_embedding) for s in self.sentences],
        }
