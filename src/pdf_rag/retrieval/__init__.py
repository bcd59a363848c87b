"""
Retrieval — vector index access, semantic search, and context assembly.

This module wraps the vector index behind a clean interface so that
the pipelines never need to know which DB is backing retrieval.

Public surface
--------------
- :class:`SemanticRetriever` — embed a question and search the index.
- :func:`build_context` — numbered context string for the answer prompt.
- :class:`VectorStoreBase` — abstract backend (subclass for Pinecone, etc.).
- :class:`ChromaVectorStore` — default Chroma backend.
- :class:`VectorRecord`, :class:`SearchMatch`, :class:`IndexStats` — data models.
"""

from pdf_rag.retrieval.base import VectorStoreBase
from pdf_rag.retrieval.models import IndexStats, NamespaceStats, SearchMatch, VectorRecord
from pdf_rag.retrieval.retriever import SemanticRetriever, build_context

__all__ = [
    "ChromaVectorStore",
    "IndexStats",
    "NamespaceStats",
    "SearchMatch",
    "SemanticRetriever",
    "VectorRecord",
    "VectorStoreBase",
    "build_context",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorStore to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorStore":
        from pdf_rag.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
