"""Unit tests for the one-shot ingestion pipeline."""

from __future__ import annotations

import asyncio
import threading
import time
from pathlib import Path
from typing import Sequence

import pytest

from fakes import FailingEmbeddings, InMemoryVectorStore
from pdf_rag.config import Settings
from pdf_rag.errors import EmbeddingError, EmbeddingStoreError, LoadError, SplitError
from pdf_rag.ingestion.embedder import Embedder
from pdf_rag.ingestion.pipeline import IngestionPipeline, IngestionStage
from pdf_rag.retrieval.models import VectorRecord


class _InFlightStore(InMemoryVectorStore):
    """Records how many upserts overlap in time."""

    def __init__(self) -> None:
        super().__init__()
        self._lock = threading.Lock()
        self.in_flight = 0
        self.max_in_flight = 0

    def upsert(self, namespace: str, records: Sequence[VectorRecord]) -> int:
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            time.sleep(0.05)
            return super().upsert(namespace, records)
        finally:
            with self._lock:
                self.in_flight -= 1


class TestIngestionPipeline:
    def test_ingests_every_page(
        self,
        settings: Settings,
        embedder: Embedder,
        store: InMemoryVectorStore,
        freedonia_pdf: Path,
    ) -> None:
        pipeline = IngestionPipeline(settings, embedder, store)
        report = asyncio.run(pipeline.run(freedonia_pdf))

        assert pipeline.stage is IngestionStage.DONE
        assert report.pages_loaded == 3
        assert report.chunks_created == 3
        assert report.vectors_upserted == 3
        assert report.batches == 2  # embed_batch_size=2
        assert report.namespace == settings.namespace

        records = store.namespaces[settings.namespace]
        assert len(records) == 3
        texts = [r.metadata["text"] for r in records.values()]
        assert any("The capital of Freedonia is Lepidopolis." in t for t in texts)
        for record in records.values():
            assert record.metadata["embedding_model"] == "fake-keyword"
            assert record.metadata["chunk_id"] == record.id
            assert len(record.values) == 128

    def test_defaults_to_configured_path(
        self, embedder: Embedder, store: InMemoryVectorStore, freedonia_pdf: Path
    ) -> None:
        settings = Settings(_env_file=None, pdf_path=str(freedonia_pdf))
        report = asyncio.run(IngestionPipeline(settings, embedder, store).run())
        assert report.source == str(freedonia_pdf)

    def test_reingestion_overwrites(
        self,
        settings: Settings,
        embedder: Embedder,
        store: InMemoryVectorStore,
        freedonia_pdf: Path,
    ) -> None:
        pipeline = IngestionPipeline(settings, embedder, store)
        asyncio.run(pipeline.run(freedonia_pdf))
        asyncio.run(pipeline.run(freedonia_pdf))
        assert len(store.namespaces[settings.namespace]) == 3

    def test_upserts_bounded_by_max_concurrency(
        self, settings: Settings, embedder: Embedder, freedonia_pdf: Path
    ) -> None:
        small = settings.model_copy(
            update={"chunk_size": 40, "chunk_overlap": 5, "embed_batch_size": 1, "max_concurrency": 2}
        )
        store = _InFlightStore()
        report = asyncio.run(IngestionPipeline(small, embedder, store).run(freedonia_pdf))
        assert report.batches > 2
        assert store.upsert_calls == report.batches
        assert store.max_in_flight <= 2

    def test_missing_pdf_aborts_at_load(
        self, settings: Settings, embedder: Embedder, store: InMemoryVectorStore
    ) -> None:
        pipeline = IngestionPipeline(settings, embedder, store)
        with pytest.raises(LoadError):
            asyncio.run(pipeline.run())
        assert pipeline.stage is IngestionStage.LOAD
        assert store.upsert_calls == 0

    def test_invalid_chunking_aborts_at_split(
        self,
        settings: Settings,
        embedder: Embedder,
        store: InMemoryVectorStore,
        freedonia_pdf: Path,
    ) -> None:
        bad = settings.model_copy(update={"chunk_overlap": settings.chunk_size})
        pipeline = IngestionPipeline(bad, embedder, store)
        with pytest.raises(SplitError):
            asyncio.run(pipeline.run(freedonia_pdf))
        assert pipeline.stage is IngestionStage.SPLIT
        assert store.upsert_calls == 0

    def test_embedding_failure_is_fatal(
        self, settings: Settings, store: InMemoryVectorStore, freedonia_pdf: Path
    ) -> None:
        pipeline = IngestionPipeline(
            settings, Embedder(FailingEmbeddings(), model_name="fake"), store
        )
        with pytest.raises(EmbeddingError):
            asyncio.run(pipeline.run(freedonia_pdf))
        assert pipeline.stage is IngestionStage.EMBED_UPSERT
        assert store.upsert_calls == 0

    def test_upsert_failure_is_fatal(
        self, settings: Settings, embedder: Embedder, freedonia_pdf: Path
    ) -> None:
        pipeline = IngestionPipeline(settings, embedder, InMemoryVectorStore(fail_upsert=True))
        with pytest.raises(EmbeddingStoreError):
            asyncio.run(pipeline.run(freedonia_pdf))
        assert pipeline.stage is IngestionStage.EMBED_UPSERT

    def test_progress_echoed_as_each_stage_finishes(
        self, settings: Settings, embedder: Embedder, freedonia_pdf: Path
    ) -> None:
        out: list[str] = []
        seen_at_upsert: list[list[str]] = []

        class _SnapshotStore(InMemoryVectorStore):
            def upsert(self, namespace: str, records: Sequence[VectorRecord]) -> int:
                seen_at_upsert.append(list(out))
                return super().upsert(namespace, records)

        asyncio.run(
            IngestionPipeline(settings, embedder, _SnapshotStore(), echo=out.append).run(freedonia_pdf)
        )
        assert out == ["Loaded Documents: 3", "Chunked Documents: 3"]
        assert seen_at_upsert[0] == ["Loaded Documents: 3", "Chunked Documents: 3"]

    def test_load_failure_echoes_nothing(
        self, settings: Settings, embedder: Embedder, store: InMemoryVectorStore
    ) -> None:
        out: list[str] = []
        with pytest.raises(LoadError):
            asyncio.run(IngestionPipeline(settings, embedder, store, echo=out.append).run())
        assert out == []
