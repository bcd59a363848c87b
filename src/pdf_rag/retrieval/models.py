"""Domain models for stored vectors, search matches, and index statistics."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class VectorRecord(BaseModel):
    """One stored vector: identifier, embedding, and flat metadata.

    Attributes
    ----------
    id:
        Record identifier; upserting the same id again replaces the record.
    values:
        The embedding vector.
    metadata:
        Flat metadata.  Always contains ``"text"``, the original chunk text.
    """

    id: str
    values: list[float]
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def text(self) -> str:
        return str(self.metadata.get("text", ""))


class SearchMatch(BaseModel):
    """A single nearest-neighbour hit, highest score first within a result."""

    id: str
    score: float
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def text(self) -> str:
        """Chunk text stored alongside the vector (``""`` when absent)."""
        return str(self.metadata.get("text") or self.metadata.get("page_content") or "")

    def short_ref(self) -> str:
        """Return a compact ``[source p.page]`` reference string."""
        source = self.metadata.get("source", "unknown")
        page = self.metadata.get("page", "?")
        return f"[{source} p.{page}]"


class NamespaceStats(BaseModel):
    record_count: int = 0
    dimension: int | None = None
    embedding_model: str | None = None


class IndexStats(BaseModel):
    """Diagnostic summary of an index, keyed by namespace."""

    dimension: int | None = None
    total_record_count: int = 0
    namespaces: dict[str, NamespaceStats] = Field(default_factory=dict)
