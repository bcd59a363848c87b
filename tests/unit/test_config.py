"""Unit tests for the settings object."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pdf_rag.config import Settings


def test_defaults_match_reference_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("CHUNK_SIZE", "CHUNK_OVERLAP", "MAX_CONCURRENCY", "TOP_K", "NAMESPACE"):
        monkeypatch.delenv(var, raising=False)
    s = Settings(_env_file=None)
    assert s.chunk_size == 1000
    assert s.chunk_overlap == 200
    assert s.max_concurrency == 5
    assert s.top_k == 5
    assert s.namespace == "TEST-namespace"


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "g-123")
    monkeypatch.setenv("INDEX_NAME", "manuals")
    monkeypatch.setenv("TOP_K", "3")
    s = Settings(_env_file=None)
    assert s.google_api_key == "g-123"
    assert s.index_name == "manuals"
    assert s.top_k == 3


def test_reads_env_file(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NAMESPACE", raising=False)
    env = tmp_path / ".env"
    env.write_text("NAMESPACE=handbook\nCHUNK_OVERLAP=50\n")
    s = Settings(_env_file=str(env))
    assert s.namespace == "handbook"
    assert s.chunk_overlap == 50


def test_settings_are_immutable() -> None:
    s = Settings(_env_file=None)
    with pytest.raises(ValidationError):
        s.top_k = 10  # type: ignore[misc]


@pytest.mark.parametrize("field", ["top_k", "max_concurrency", "embed_batch_size", "chunk_size"])
def test_non_positive_values_rejected(field: str) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: 0})


def test_unknown_provider_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, llm_provider="anthropic")
