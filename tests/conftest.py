"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from fakes import FREEDONIA_PAGES, InMemoryVectorStore, KeywordEmbeddings, make_pdf
from pdf_rag.config import Settings
from pdf_rag.ingestion.embedder import Embedder


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


@pytest.fixture()
def freedonia_pdf(tmp_path: Path) -> Path:
    path = tmp_path / "freedonia.pdf"
    path.write_bytes(make_pdf(FREEDONIA_PAGES))
    return path


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        google_api_key="test-key",
        pdf_path=str(tmp_path / "missing.pdf"),
        chunk_size=1000,
        chunk_overlap=200,
        embed_batch_size=2,
        max_concurrency=2,
        top_k=5,
        request_timeout=5.0,
    )


@pytest.fixture()
def keyword_embeddings() -> KeywordEmbeddings:
    return KeywordEmbeddings()


@pytest.fixture()
def embedder(keyword_embeddings: KeywordEmbeddings) -> Embedder:
    return Embedder(keyword_embeddings, model_name="fake-keyword", timeout=5.0)


@pytest.fixture()
def store() -> InMemoryVectorStore:
    return InMemoryVectorStore()
