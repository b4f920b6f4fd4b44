"""
Tokenizer contract and adapters.

The chunkers only need two things from a tokenizer: how many tokens a text
has and where each token sits in the text. Offsets are UTF-8 byte spans;
a zero-width span marks a token with no textual content (special tokens,
or a byte fragment of a character that belongs to a later token).

Adapters:
- TiktokenTokenizer: OpenAI BPE encodings (cl100k_base by default)
- HuggingFaceTokenizer: fast tokenizers from transformers
- WhitespaceTokenizer: one token per whitespace-separated word
"""

import logging
import re
from dataclasses import dataclass
from itertools import accumulate
from typing import List, Optional, Protocol, Tuple

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

_WORD_PATTERN = re.compile(r"\S+")


@dataclass(frozen=True)
class Encoding:
    """Token ids with their byte-offset spans in the encoded text."""

    ids: Tuple[int, ...]
    offsets: Tuple[Tuple[int, int], ...]

    def __len__(self) -> int:
        return len(self.ids)


class Tokenizer(Protocol):
    """Anything that can encode text into an Encoding."""

    def encode(self, text: str) -> Encoding:
        ...


def char_to_byte_offsets(text: str) -> List[int]:
    """
    Byte offset of every character boundary in text.

    Returns a list of len(text) + 1 entries; entry i is the UTF-8 byte
    offset where character i starts.
    """
    return [0] + list(accumulate(len(ch.encode("utf-8")) for ch in text))


def _snap_to_char_start(data: bytes, pos: int) -> int:
    # UTF-8 continuation bytes look like 0b10xxxxxx
    while 0 < pos < len(data) and (data[pos] & 0xC0) == 0x80:
        pos -= 1
    return pos


class WhitespaceTokenizer:
    """
    Treats every run of non-whitespace characters as one token.

    Useful for quick estimates (one word is roughly one token) and for
    deterministic tests.
    """

    def encode(self, text: str) -> Encoding:
        byte_offsets = char_to_byte_offsets(text)
        spans = tuple(
            (byte_offsets[m.start()], byte_offsets[m.end()])
            for m in _WORD_PATTERN.finditer(text)
        )
        return Encoding(ids=tuple(range(len(spans))), offsets=spans)


class TiktokenTokenizer:
    """
    tiktoken encoding with byte offsets.

    Offsets are snapped to character starts: when a multi-byte character
    is split across tokens, the last of those tokens owns the character
    and the earlier ones get zero-width spans.

    Usage:
        tokenizer = TiktokenTokenizer()  # cl100k_base
        encoding = tokenizer.encode("Hello world")
        print(len(encoding), encoding.offsets)
    """

    def __init__(self, encoding_name: str = "cl100k_base"):
        import tiktoken

        self.encoding_name = encoding_name
        self._enc = tiktoken.get_encoding(encoding_name)

    def count_tokens(self, text: str) -> int:
        return len(self._enc.encode(text, disallowed_special=()))

    def encode(self, text: str) -> Encoding:
        ids = self._enc.encode(text, disallowed_special=())
        token_bytes = self._enc.decode_tokens_bytes(ids)
        data = text.encode("utf-8")

        boundaries = [0] + list(accumulate(len(b) for b in token_bytes))
        snapped = [_snap_to_char_start(data, pos) for pos in boundaries]

        offsets = tuple(
            (snapped[i], snapped[i + 1]) for i in range(len(ids))
        )
        return Encoding(ids=tuple(ids), offsets=offsets)


class HuggingFaceTokenizer:
    """
    Fast tokenizer from transformers with byte offsets.

    Special tokens ([CLS], [SEP], ...) come back with zero-width spans,
    so the token chunker ignores them while token counts include them.

    Usage:
        tokenizer = HuggingFaceTokenizer("gpt2")

        # Or wrap an already loaded tokenizer
        tokenizer = HuggingFaceTokenizer(tokenizer=AutoTokenizer.from_pretrained("gpt2"))
    """

    def __init__(
        self,
        model_name: Optional[str] = None,
        tokenizer=None,
        add_special_tokens: bool = True,
    ):
        if tokenizer is None:
            if model_name is None:
                raise ConfigurationError("Either model_name or tokenizer required")

            from transformers import AutoTokenizer

            logger.info(f"Loading tokenizer: {model_name}")
            tokenizer = AutoTokenizer.from_pretrained(model_name, use_fast=True)

        self.model_name = model_name
        self.add_special_tokens = add_special_tokens
        self._tokenizer = tokenizer

    def encode(self, text: str) -> Encoding:
        result = self._tokenizer(
            text,
            add_special_tokens=self.add_special_tokens,
            return_offsets_mapping=True,
        )
        byte_offsets = char_to_byte_offsets(text)
        offsets = tuple(
            (byte_offsets[start], byte_offsets[end])
            for start, end in result["offset_mapping"]
        )
        return Encoding(ids=tuple(result["input_ids"]), offsets=offsets)


def get_tokenizer(backend: str = "tiktoken", name: Optional[str] = None) -> Tokenizer:
    """
    Build a tokenizer adapter by backend name.

    Args:
        backend: "tiktoken", "huggingface" or "whitespace"
        name: Encoding name (tiktoken) or model name (huggingface)
    """
    if backend == "tiktoken":
        return TiktokenTokenizer(name or "cl100k_base")
    if backend == "huggingface":
        return HuggingFaceTokenizer(name)
    if backend == "whitespace":
        return WhitespaceTokenizer()
    raise ConfigurationError(f"Unknown tokenizer backend: {backend}")
