"""Chroma implementation of the vector-index abstraction.

Each namespace of an index is stored as its own Chroma collection named
``"<index_name>.<namespace>"`` using cosine distance.  Scores are cosine
similarities (``1 - distance``), so a vector queried against itself
scores 1.0.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Sequence

import chromadb

from pdf_rag.errors import ConfigurationError, EmbeddingStoreError, SearchError
from pdf_rag.retrieval.base import VectorStoreBase
from pdf_rag.retrieval.models import IndexStats, NamespaceStats, SearchMatch, VectorRecord

if TYPE_CHECKING:
    from pdf_rag.config import Settings

logger = logging.getLogger(__name__)

DISTANCE_METRIC = "cosine"


def _flatten_metadata(metadata: dict[str, Any]) -> dict[str, str | int | float | bool]:
    """Keep only the scalar values Chroma accepts as metadata."""
    return {k: v for k, v in metadata.items() if isinstance(v, (str, int, float, bool))}


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector index.

    Parameters
    ----------
    index_name:
        Prefix shared by the collections of every namespace.
    client:
        Any ``chromadb`` client (``HttpClient``, ``EphemeralClient``, …).
    """

    def __init__(self, index_name: str, *, client: Any) -> None:
        super().__init__(index_name)
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> ChromaVectorStore:
        """Connect to the Chroma server described by *settings*."""
        headers = {"x-chroma-token": settings.chroma_api_key} if settings.chroma_api_key else None
        try:
            client = chromadb.HttpClient(
                host=settings.chroma_host,
                port=settings.chroma_port,
                ssl=settings.chroma_ssl,
                headers=headers,
            )
        except Exception as exc:
            raise ConfigurationError(
                f"Could not connect to Chroma at {settings.chroma_host}:{settings.chroma_port}: {exc}"
            ) from exc
        return cls(settings.index_name, client=client)

    # -- VectorStoreBase overrides --------------------------------------------

    def upsert(self, namespace: str, records: Sequence[VectorRecord]) -> int:
        if not records:
            return 0

        # Chroma rejects duplicate ids inside one call; the last record wins.
        latest: dict[str, VectorRecord] = {}
        for record in records:
            latest[record.id] = record

        ids: list[str] = []
        embeddings: list[list[float]] = []
        documents: list[str] = []
        metadatas: list[dict[str, Any]] = []
        for record in latest.values():
            meta = _flatten_metadata(record.metadata)
            meta.pop("text", None)
            meta["namespace"] = namespace
            ids.append(record.id)
            embeddings.append(record.values)
            documents.append(record.text)
            metadatas.append(meta)

        try:
            collection = self._collection(namespace)
            collection.upsert(
                ids=ids,
                embeddings=embeddings,
                documents=documents,
                metadatas=metadatas,
            )
        except Exception as exc:
            raise EmbeddingStoreError(
                f"Upsert of {len(ids)} records into {self._collection_name(namespace)!r} failed: {exc}"
            ) from exc

        logger.debug("Upserted %d records into %s", len(ids), self._collection_name(namespace))
        return len(ids)

    def query(
        self,
        namespace: str,
        vector: list[float],
        *,
        top_k: int = 5,
        include_metadata: bool = True,
    ) -> list[SearchMatch]:
        include = ["distances", "documents", "metadatas"] if include_metadata else ["distances"]
        try:
            collection = self._collection(namespace)
            count = collection.count()
            if count == 0:
                return []
            results = collection.query(
                query_embeddings=[vector],
                n_results=min(top_k, count),
                include=include,
            )
        except Exception as exc:
            raise SearchError(
                f"Query against {self._collection_name(namespace)!r} failed: {exc}"
            ) from exc

        ids = (results.get("ids") or [[]])[0]
        distances = (results.get("distances") or [[]])[0]
        docs = (results.get("documents") or [[]])[0] if include_metadata else []
        metas = (results.get("metadatas") or [[]])[0] if include_metadata else []

        matches: list[SearchMatch] = []
        for i, (doc_id, dist) in enumerate(zip(ids, distances)):
            metadata: dict[str, Any] = {}
            if include_metadata:
                metadata = dict(metas[i] or {}) if i < len(metas) else {}
                metadata["text"] = (docs[i] if i < len(docs) else None) or ""
            matches.append(SearchMatch(id=doc_id, score=1.0 - float(dist), metadata=metadata))

        matches.sort(key=lambda m: m.score, reverse=True)
        return matches

    def describe_stats(self, namespace: str | None = None) -> IndexStats:
        try:
            names = self._namespace_collections()
            if namespace is not None:
                names = {ns: name for ns, name in names.items() if ns == namespace}

            stats = IndexStats()
            for ns, name in sorted(names.items()):
                collection = self._client.get_collection(name)
                count = collection.count()
                ns_stats = NamespaceStats(record_count=count)
                stats.namespaces[ns] = ns_stats
                stats.total_record_count += count
                if not count:
                    continue
                sample = collection.get(limit=1, include=["embeddings", "metadatas"])
                metadatas = sample.get("metadatas") or []
                if metadatas and metadatas[0]:
                    ns_stats.embedding_model = metadatas[0].get("embedding_model")
                embeddings = sample.get("embeddings")
                if embeddings is not None and len(embeddings) > 0:
                    ns_stats.dimension = len(embeddings[0])
                    if stats.dimension is None:
                        stats.dimension = ns_stats.dimension
        except Exception as exc:
            raise SearchError(f"Could not describe index {self.index_name!r}: {exc}") from exc
        return stats

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False

    # -- internals ------------------------------------------------------------

    def _collection_name(self, namespace: str) -> str:
        return f"{self.index_name}.{namespace}"

    def _collection(self, namespace: str) -> Any:
        return self._client.get_or_create_collection(
            name=self._collection_name(namespace),
            metadata={"hnsw:space": DISTANCE_METRIC},
        )

    def _namespace_collections(self) -> dict[str, str]:
        """Map namespace -> collection name for this index."""
        prefix = f"{self.index_name}."
        found: dict[str, str] = {}
        for entry in self._client.list_collections():
            # Entries are collection objects or plain names depending on the chromadb release.
            name = entry if isinstance(entry, str) else entry.name
            if name.startswith(prefix):
                found[name[len(prefix):]] = name
        return found
