"""One-shot ingestion: load → split → embed + upsert.

The run is linear and non-resumable.  Any stage failure cancels the
outstanding upsert batches and propagates; re-running from the start is
the only recovery path.  Records use deterministic ids, so a re-run
overwrites what a failed run managed to write.
"""

from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from pydantic import BaseModel

from pdf_rag.errors import EmbeddingStoreError
from pdf_rag.ingestion.chunker import chunk_documents
from pdf_rag.ingestion.loader import load_pdf
from pdf_rag.retrieval.models import VectorRecord

if TYPE_CHECKING:
    from langchain_core.documents import Document

    from pdf_rag.config import Settings
    from pdf_rag.ingestion.embedder import Embedder
    from pdf_rag.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)


class IngestionStage(str, Enum):
    LOAD = "load"
    SPLIT = "split"
    EMBED_UPSERT = "embed_upsert"
    DONE = "done"


class IngestionReport(BaseModel):
    """Summary of a completed ingestion run."""

    source: str
    namespace: str
    pages_loaded: int
    chunks_created: int
    vectors_upserted: int
    batches: int
    elapsed_seconds: float


class IngestionPipeline:
    """Compose loader, chunker, embedder and vector index.

    Parameters
    ----------
    settings:
        Source path, chunking, batching, concurrency and namespace settings.
    embedder:
        Embedder shared with the query side.
    store:
        Target vector index.
    echo:
        Sink for the per-stage progress lines (``print`` by default).
    """

    def __init__(
        self,
        settings: Settings,
        embedder: Embedder,
        store: VectorStoreBase,
        *,
        echo: Callable[[str], None] = print,
    ) -> None:
        self.settings = settings
        self._embedder = embedder
        self._store = store
        self._echo = echo
        self.stage = IngestionStage.LOAD

    async def run(self, path: str | Path | None = None) -> IngestionReport:
        """Ingest the PDF at *path* (defaults to ``settings.pdf_path``)."""
        source = Path(path or self.settings.pdf_path)
        namespace = self.settings.namespace
        t0 = time.monotonic()

        self.stage = IngestionStage.LOAD
        pages = await asyncio.to_thread(load_pdf, source)
        self._echo(f"Loaded Documents: {len(pages)}")

        self.stage = IngestionStage.SPLIT
        chunks = chunk_documents(pages, self.settings.chunk_size, self.settings.chunk_overlap)
        self._echo(f"Chunked Documents: {len(chunks)}")

        self.stage = IngestionStage.EMBED_UPSERT
        batches = self._batches(chunks)
        upserted = await self._embed_and_upsert(namespace, batches)

        self.stage = IngestionStage.DONE
        elapsed = time.monotonic() - t0
        logger.info(
            "Indexed %d vectors from %s into namespace %r in %.1fs (%d batches)",
            upserted, source, namespace, elapsed, len(batches),
        )
        return IngestionReport(
            source=str(source),
            namespace=namespace,
            pages_loaded=len(pages),
            chunks_created=len(chunks),
            vectors_upserted=upserted,
            batches=len(batches),
            elapsed_seconds=round(elapsed, 2),
        )

    # -- internals ------------------------------------------------------------

    def _batches(self, chunks: list[Document]) -> list[list[Document]]:
        size = self.settings.embed_batch_size
        return [chunks[start : start + size] for start in range(0, len(chunks), size)]

    async def _embed_and_upsert(self, namespace: str, batches: list[list[Document]]) -> int:
        semaphore = asyncio.Semaphore(self.settings.max_concurrency)

        async def process(batch_no: int, batch: list[Document]) -> int:
            async with semaphore:
                vectors = await self._embedder.embed_batch([c.page_content for c in batch])
                records = [self._to_record(c, v) for c, v in zip(batch, vectors)]
                try:
                    written = await asyncio.wait_for(
                        asyncio.to_thread(self._store.upsert, namespace, records),
                        self.settings.request_timeout,
                    )
                except asyncio.TimeoutError as exc:
                    raise EmbeddingStoreError(
                        f"Upsert of batch {batch_no} timed out after {self.settings.request_timeout}s"
                    ) from exc
                logger.info("  upserted batch %d (%d records)", batch_no, written)
                return written

        tasks = [asyncio.ensure_future(process(i, b)) for i, b in enumerate(batches, 1)]
        try:
            counts = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return sum(counts)

    def _to_record(self, chunk: Document, vector: list[float]) -> VectorRecord:
        metadata: dict[str, Any] = {
            k: v for k, v in chunk.metadata.items() if isinstance(v, (str, int, float, bool))
        }
        metadata["text"] = chunk.page_content
        metadata["embedding_model"] = self._embedder.model_name
        return VectorRecord(id=chunk.metadata["chunk_id"], values=vector, metadata=metadata)
