"""
Command line entry point.

Usage:
    chunkwise document.txt --strategy sentence --chunk-size 256 --chunk-overlap 32
    cat document.txt | chunkwise --strategy semantic --threshold auto
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Union

from chunking import ChunkerFactory, ChunkingError, ChunkingStrategy, get_tokenizer
from chunking.config import resolve_overlap

from .config import Settings, get_settings, parse_overlap
from .logging_setup import configure_logging

logger = logging.getLogger(__name__)


def _parse_threshold(value: str) -> Union[float, str]:
    if value == "auto":
        return value
    try:
        return float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"threshold must be 'auto' or a number, got {value!r}")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chunkwise", description="Split text into chunks with byte offsets"
    )
    parser.add_argument("input", nargs="?", help="Input file (reads stdin when omitted)")
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in ChunkingStrategy],
        default=ChunkingStrategy.SENTENCE.value,
        help="Chunking strategy",
    )
    parser.add_argument(
        "--chunk-size", type=int, default=settings.chunking.chunk_size, help="Tokens per chunk"
    )
    parser.add_argument(
        "--chunk-overlap",
        type=parse_overlap,
        default=settings.chunking.chunk_overlap,
        help="Overlap in tokens (int) or as a fraction of chunk size (float)",
    )
    parser.add_argument(
        "--threshold",
        type=_parse_threshold,
        default=settings.chunking.threshold,
        help="Semantic similarity threshold or 'auto'",
    )
    parser.add_argument(
        "--min-sentences",
        type=int,
        default=settings.chunking.min_sentences,
        help="Minimum sentences per chunk (sentence and semantic strategies)",
    )
    parser.add_argument(
        "--similarity-window",
        type=int,
        default=1,
        help="Neighbors per side embedded with each sentence (semantic strategy)",
    )
    parser.add_argument(
        "--tokenizer",
        choices=["tiktoken", "huggingface", "whitespace"],
        default=settings.TOKENIZER,
        help="Tokenizer backend",
    )
    parser.add_argument(
        "--tokenizer-name",
        default=settings.TOKENIZER_NAME,
        help="tiktoken encoding or Hugging Face model name",
    )
    parser.add_argument(
        "--embedding-model",
        default=settings.embedding.model_name,
        help="sentence-transformers model for the semantic strategy",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    return parser


def build_embedding_service(args: argparse.Namespace, settings: Settings):
    """Global embedding service for the semantic strategy, configured from settings."""
    from embeddings import EmbeddingConfig, get_embedding_service

    config = EmbeddingConfig(
        model_name=args.embedding_model,
        normalize=settings.embedding.normalize,
        version=settings.embedding.version,
    )
    return get_embedding_service(config)


def build_chunker_params(args: argparse.Namespace, embedding_service=None) -> Dict[str, Any]:
    """Constructor arguments for the chosen strategy."""
    strategy = ChunkingStrategy(args.strategy)

    if strategy in (ChunkingStrategy.TOKEN, ChunkingStrategy.WORD):
        return {"chunk_size": args.chunk_size, "chunk_overlap": args.chunk_overlap}

    if strategy == ChunkingStrategy.SENTENCE:
        # Sentence overlap is a token count; fractions are resolved against chunk_size
        overlap = args.chunk_overlap
        if isinstance(overlap, float):
            overlap = resolve_overlap(args.chunk_size, overlap)
        return {
            "chunk_size": args.chunk_size,
            "chunk_overlap": overlap,
            "min_sentences_per_chunk": args.min_sentences,
        }

    return {
        "embedding_fn": embedding_service.as_embedding_fn(),
        "chunk_size": args.chunk_size,
        "threshold": args.threshold,
        "min_sentences": args.min_sentences,
        "similarity_window": args.similarity_window,
    }


def read_input(path: Optional[str]) -> str:
    if path is None:
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    args = build_parser(settings).parse_args(argv)
    configure_logging(args.log_level)

    text = read_input(args.input)

    embedding_service = None
    if args.strategy == ChunkingStrategy.SEMANTIC.value:
        embedding_service = build_embedding_service(args, settings)

    try:
        params = build_chunker_params(args, embedding_service)
        chunker = ChunkerFactory.create(args.strategy, **params)
        tokenizer = get_tokenizer(args.tokenizer, args.tokenizer_name)
        chunks = chunker.chunk(text, tokenizer)
    except ChunkingError as e:
        print(f"chunkwise: error: {e}", file=sys.stderr)
        return 2

    logger.info(f"Chunked {args.input or '<stdin>'} into {len(chunks)} chunks ({args.strategy})")

    result = {
        "strategy": args.strategy,
        "chunk_count": len(chunks),
        "chunks": [chunk.to_dict() for chunk in chunks],
    }
    if embedding_service is not None:
        # Model the semantic threshold was computed with
        result["embedding"] = embedding_service.get_metadata()
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
