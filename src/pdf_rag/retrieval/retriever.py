"""Semantic retriever — embed a question, search the index, build context.

Usage::

    retriever = SemanticRetriever(store, embedder, namespace="TEST-namespace")
    matches   = await retriever.search("What is the capital of Freedonia?")
    context   = build_context(matches)
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from pdf_rag.errors import ConfigurationError, SearchError

if TYPE_CHECKING:
    from pdf_rag.ingestion.embedder import Embedder
    from pdf_rag.retrieval.base import VectorStoreBase
    from pdf_rag.retrieval.models import IndexStats, SearchMatch

logger = logging.getLogger(__name__)

CONTEXT_SEPARATOR = "\n\n---\n\n"


def build_context(matches: list[SearchMatch]) -> str:
    """Number the matched chunk texts ``[1]``, ``[2]`` … and join them."""
    return CONTEXT_SEPARATOR.join(f"[{i}] {m.text}" for i, m in enumerate(matches, 1))


class SemanticRetriever:
    """High-level retriever over any :class:`VectorStoreBase`.

    Parameters
    ----------
    store:
        A concrete vector-index backend.
    embedder:
        Must be the embedder that produced the stored vectors.
    namespace:
        Index partition to search.
    default_k:
        Number of results returned by :meth:`search`.
    timeout:
        Seconds allowed for the index query.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        embedder: Embedder,
        *,
        namespace: str,
        default_k: int = 5,
        timeout: float | None = None,
    ) -> None:
        self._store = store
        self._embedder = embedder
        self.namespace = namespace
        self.default_k = default_k
        self.timeout = timeout

    def check_index(self, stats: IndexStats) -> None:
        """Refuse an index whose vectors came from a different embedding model.

        Compares the model name recorded at ingestion time, and the vector
        dimension once the embedder has produced a vector, with this
        retriever's embedder.  An empty or unrecorded namespace passes.

        Raises
        ------
        ConfigurationError
            On a model or dimension mismatch.
        """
        ns_stats = stats.namespaces.get(self.namespace)
        if ns_stats is None or not ns_stats.record_count:
            return
        indexed_model = ns_stats.embedding_model
        if indexed_model and indexed_model != self._embedder.model_name:
            raise ConfigurationError(
                f"Namespace {self.namespace!r} was indexed with embedding model "
                f"{indexed_model!r} but {self._embedder.model_name!r} is configured; "
                "re-ingest the document or change EMBEDDING_MODEL"
            )
        expected = self._embedder.dimension
        if ns_stats.dimension and expected and ns_stats.dimension != expected:
            raise ConfigurationError(
                f"Namespace {self.namespace!r} holds {ns_stats.dimension}-dimensional vectors "
                f"but the embedder produces {expected}"
            )

    async def embed_query(self, query: str) -> list[float]:
        """Embed *query*; raises ``EmbeddingError``."""
        return await self._embedder.embed(query)

    async def search_by_embedding(
        self, embedding: list[float], *, k: int | None = None
    ) -> list[SearchMatch]:
        """Top-*k* search with a pre-computed embedding; raises ``SearchError``."""
        k = k or self.default_k
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(
                    self._store.query,
                    self.namespace,
                    embedding,
                    top_k=k,
                    include_metadata=True,
                ),
                self.timeout,
            )
        except asyncio.TimeoutError as exc:
            raise SearchError(f"Index query timed out after {self.timeout}s") from exc

    async def search(self, query: str, *, k: int | None = None) -> list[SearchMatch]:
        """Embed *query* and return the closest stored chunks."""
        embedding = await self.embed_query(query)
        matches = await self.search_by_embedding(embedding, k=k)
        logger.debug("Query %r matched %d chunk(s)", query, len(matches))
        return matches
