"""Abstract base class for vector-index backends.

Adding a new backend (Pinecone, Weaviate, Qdrant …) only requires
subclassing :class:`VectorStoreBase` and implementing the abstract
methods.  The pipelines are backend-agnostic.

Methods are synchronous; the async pipelines run them in a worker thread.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from pdf_rag.retrieval.models import IndexStats, SearchMatch, VectorRecord


class VectorStoreBase(ABC):
    """Backend-agnostic vector-index interface.

    Parameters
    ----------
    index_name:
        Logical name of the index.  Namespaces partition it further.
    """

    def __init__(self, index_name: str) -> None:
        self.index_name = index_name

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def upsert(self, namespace: str, records: Sequence[VectorRecord]) -> int:
        """Insert or replace *records* in *namespace*, keyed by ``record.id``.

        Returns the number of records written.  Upserts are idempotent by
        id.  No ordering is guaranteed between concurrent calls.

        Raises
        ------
        EmbeddingStoreError
            On any backend failure.
        """
        ...

    @abstractmethod
    def query(
        self,
        namespace: str,
        vector: list[float],
        *,
        top_k: int = 5,
        include_metadata: bool = True,
    ) -> list[SearchMatch]:
        """Return at most *top_k* matches for *vector*, highest score first.

        An empty or unknown namespace yields ``[]``, not an error.

        Raises
        ------
        SearchError
            On any backend failure.
        """
        ...

    @abstractmethod
    def describe_stats(self, namespace: str | None = None) -> IndexStats:
        """Record counts and dimensionality, for diagnostics only."""
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...
