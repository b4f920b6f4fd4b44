"""
Sentence and word boundary utilities.

Splitting here is lossless: delimiters and surrounding whitespace stay
attached to the fragments, so the fragments always concatenate back to
the input. Boundary rules are delimiter-based, not language-aware.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .config import DEFAULT_DELIMITERS

logger = logging.getLogger(__name__)

# Private-use code point, inserted after each delimiter and split on
SENTENCE_SEPARATOR = "\U0010fffd"

_WORD_PATTERN = re.compile(r"\s*\S+")


@dataclass
class Sentence:
    """A sentence with its byte span in the source text."""

    text: str
    start: int
    end: int
    index: int


def split_sentences(
    text: str, delimiters: Sequence[str] = DEFAULT_DELIMITERS
) -> List[str]:
    """
    Split text after every delimiter occurrence.

    Delimiters are applied in order; only empty fragments are dropped.

    Example:
        >>> split_sentences("Hello...World!!!", [".", "!"])
        ['Hello.', '.', '.', 'World!', '!', '!']
    """
    marked = text
    for delimiter in delimiters:
        marked = marked.replace(delimiter, delimiter + SENTENCE_SEPARATOR)

    return [part for part in marked.split(SENTENCE_SEPARATOR) if part != ""]


def merge_short_fragments(fragments: Iterable[str], threshold: int) -> List[str]:
    """
    Append fragments shorter than threshold bytes to the previous fragment.

    A short first fragment seeds the result. Single left-to-right pass.
    """
    merged: List[str] = []
    for fragment in fragments:
        if len(fragment.encode("utf-8")) < threshold and merged:
            merged[-1] += fragment
        else:
            merged.append(fragment)
    return merged


def combine_short_sentences(fragments: Iterable[str], min_chars: int) -> List[str]:
    """
    Fold fragments with fewer than min_chars stripped characters into the
    pending sentence.

    Whitespace-only fragments always fold (their stripped length is 0),
    unless min_chars is 0.
    """
    sentences: List[str] = []
    current = ""

    for fragment in fragments:
        if len(fragment.strip()) < min_chars:
            current += fragment
        elif min_chars and current and not current.strip():
            # Leading whitespace joins the first real sentence
            current += fragment
        else:
            if current:
                sentences.append(current)
            current = fragment

    if current:
        sentences.append(current)

    return sentences


def find_sentence_spans(text: str, sentences: Sequence[str]) -> List[Sentence]:
    """
    Locate each sentence in text by searching forward from the previous match.

    Each search only looks past the cursor, so repeated sentence text maps
    to successive occurrences. A sentence that cannot be found is placed at
    the cursor.
    """
    data = text.encode("utf-8")
    cursor = 0
    located = []

    for i, sentence in enumerate(sentences):
        needle = sentence.encode("utf-8")
        start = data.find(needle, cursor)
        if start == -1:
            logger.debug(f"Sentence {i} not found after byte {cursor}")
            start = cursor
        end = start + len(needle)
        located.append(Sentence(text=sentence, start=start, end=end, index=i))
        cursor = end

    return located


def sequential_spans(sentences: Sequence[str]) -> List[Sentence]:
    """Spans for fragments known to tile the source in order."""
    located = []
    position = 0
    for i, sentence in enumerate(sentences):
        end = position + len(sentence.encode("utf-8"))
        located.append(Sentence(text=sentence, start=position, end=end, index=i))
        position = end
    return located


def split_into_words(text: str) -> List[str]:
    """
    Split text into words, each carrying its leading whitespace.

    Trailing whitespace becomes a final unit, so the units join back
    to the full text.
    """
    words = _WORD_PATTERN.findall(text)
    covered = sum(len(w) for w in words)
    if covered < len(text):
        words.append(text[covered:])
    return words


def build_context_windows(sentences: Sequence[str], window: int) -> List[str]:
    """
    Join each sentence with up to `window` neighbors on either side.

    Example:
        >>> build_context_windows(["A.", "B.", "C."], 1)
        ['A.B.', 'A.B.C.', 'B.C.']
    """
    if window == 0:
        return list(sentences)

    count = len(sentences)
    return [
        "".join(sentences[max(0, i - window) : min(count, i + window + 1)])
        for i in range(count)
    ]
