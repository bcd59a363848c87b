"""Command-line entry point.

Usage:
    pdf-rag ingest [PATH]           # index a PDF (defaults to PDF_PATH)
    pdf-rag chat                    # interactive question answering
    pdf-rag stats [--namespace NS]  # print index statistics
    pdf-rag models [--method M]     # list models available to the Gemini key
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import TYPE_CHECKING, Any, Coroutine

from pydantic import ValidationError

from pdf_rag.chat.loop import ChatLoop
from pdf_rag.chat.pipeline import QueryPipeline
from pdf_rag.config import Settings
from pdf_rag.errors import RagError, SearchError
from pdf_rag.generation.catalog import list_models
from pdf_rag.generation.generator import AnswerGenerator
from pdf_rag.generation.llm import get_llm
from pdf_rag.ingestion.embedder import Embedder
from pdf_rag.ingestion.pipeline import IngestionPipeline
from pdf_rag.retrieval.retriever import SemanticRetriever

if TYPE_CHECKING:
    from pdf_rag.retrieval.base import VectorStoreBase

logger = logging.getLogger("pdf_rag")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdf-rag",
        description="Ask questions about a PDF with retrieval-augmented generation.",
    )
    parser.add_argument("--env-file", default=".env", help="Settings file (default: .env)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    ingest = sub.add_parser("ingest", help="Load, chunk, embed and index a PDF")
    ingest.add_argument("path", nargs="?", help="PDF to ingest (default: PDF_PATH setting)")

    sub.add_parser("chat", help="Interactive question answering over the indexed PDF")

    stats = sub.add_parser("stats", help="Print vector index statistics")
    stats.add_argument("--namespace", default=None, help="Limit to one namespace")

    models = sub.add_parser("models", help="List models available to the configured Gemini key")
    models.add_argument(
        "--method", default=None, help="Only models supporting this method, e.g. embedContent"
    )
    return parser


def make_store(settings: Settings) -> VectorStoreBase:
    from pdf_rag.retrieval.chroma_store import ChromaVectorStore

    return ChromaVectorStore.from_settings(settings)


async def ingest(settings: Settings, path: str | None) -> int:
    embedder = Embedder.from_settings(settings)
    store = make_store(settings)
    report = await IngestionPipeline(settings, embedder, store).run(path)
    print(
        f"Documents successfully stored in {settings.index_name!r} "
        f"(namespace {report.namespace!r})"
    )
    return 0


async def chat(settings: Settings) -> int:
    embedder = Embedder.from_settings(settings)
    store = make_store(settings)
    generator = AnswerGenerator(get_llm(settings), timeout=settings.request_timeout)
    retriever = SemanticRetriever(
        store,
        embedder,
        namespace=settings.namespace,
        default_k=settings.top_k,
        timeout=settings.request_timeout,
    )

    if await asyncio.to_thread(store.health_check):
        try:
            stats = await asyncio.to_thread(store.describe_stats)
        except RagError as exc:
            logger.warning("Could not read index stats: %s", exc)
        else:
            print("Index Stats:")
            print(json.dumps(stats.model_dump(), indent=2))
            retriever.check_index(stats)
    else:
        logger.warning(
            "Vector index %r is not reachable; answers will lack context", settings.index_name
        )

    print("Welcome to your PDF RAG chatbot!")
    print("Ask questions about your document.\nType 'exit' to quit.\n")
    loop = ChatLoop(QueryPipeline(retriever, generator))
    return await loop.run()


def stats(settings: Settings, namespace: str | None) -> int:
    store = make_store(settings)
    if not store.health_check():
        raise SearchError(f"Vector index {settings.index_name!r} is not reachable")
    result = store.describe_stats(namespace)
    print(json.dumps(result.model_dump(), indent=2))
    return 0


def models(settings: Settings, method: str | None) -> int:
    names = list_models(settings.google_api_key, method=method, timeout=settings.request_timeout)
    print("Available models:")
    print("\n".join(names))
    return 0


def run_interactive(coro: Coroutine[Any, Any, int]) -> int:
    """Run *coro* on a fresh event loop that leaves SIGINT alone.

    ``asyncio.run`` turns the first Ctrl-C into a cancellation that a
    blocking prompt never sees; here it raises ``KeyboardInterrupt`` out
    of the read immediately.
    """
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.close()


def main(argv: list[str] | None = None) -> int:
    """Parse *argv*, run the sub-command, and return the exit status."""
    args = build_parser().parse_args(argv)

    try:
        settings = Settings(_env_file=args.env_file)
    except ValidationError as exc:
        print(f"Invalid configuration:\n{exc}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "ingest":
            return asyncio.run(ingest(settings, args.path))
        if args.command == "chat":
            return run_interactive(chat(settings))
        if args.command == "models":
            return models(settings, args.method)
        return stats(settings, args.namespace)
    except RagError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1
    except KeyboardInterrupt:
        print(file=sys.stderr)
        return 130


def run() -> None:
    """Console-script entry point; the only place the process exits."""
    sys.exit(main())
