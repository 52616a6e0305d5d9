"""Command-line ranker: print the best-matching passages of a folder.

Usage::

    docintel "What changed in the Q3 roadmap?" --dir ./docs --top-k 5
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from docintel.config import settings
from docintel.errors import RetrievalError
from docintel.ingestion.embedder import EmbeddingGateway, get_embedding_function
from docintel.retrieval.ranker import format_match
from docintel.retrieval.retriever import ContextRetriever

logger = logging.getLogger(__name__)


def resolve_directory(value: str | None) -> Path:
    """Return *value* if it names an existing directory, else the configured default."""
    if value:
        path = Path(value).expanduser()
        if path.is_dir():
            return path
        logger.warning("%s is not a directory, falling back to %s", value, settings.data_dir)
    return Path(settings.data_dir)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docintel",
        description="Rank the documents of a folder against a question.",
    )
    parser.add_argument("query", help="Question or search text")
    parser.add_argument("--dir", dest="directory", default=None, help=f"Document folder (default: {settings.data_dir})")
    parser.add_argument("--top-k", type=int, default=settings.top_k, help="Number of matches to show")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level (DEBUG, INFO, ...)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    if args.top_k < 0:
        print("--top-k must be non-negative", file=sys.stderr)
        return 2

    directory = resolve_directory(args.directory)
    logger.info("Initializing embedding model: %s", settings.embedding_model)
    retriever = ContextRetriever(
        directory,
        EmbeddingGateway(get_embedding_function()),
        top_k=args.top_k,
    )

    try:
        matches = retriever.rank(args.query)
    except RetrievalError as exc:
        print(f"Retrieval failed: {exc}", file=sys.stderr)
        return 1

    print("\n--- TOP RANKED MATCHES ---")
    for scored in matches:
        print(format_match(scored, settings.snippet_length))
    print("--------------------------")
    return 0


if __name__ == "__main__":
    sys.exit(main())
