"""Exception hierarchy.

Ingestion-time errors are fatal; query-time errors are recovered by
:class:`~pdf_rag.chat.pipeline.QueryPipeline` so the chat loop survives.
"""

from __future__ import annotations


class RagError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(RagError):
    """A provider or client could not be constructed from the settings."""


class LoadError(RagError):
    """The source document is missing, unreadable, or not a valid PDF."""


class SplitError(RagError):
    """Invalid chunking parameters."""


class EmbeddingError(RagError):
    """The embedding service failed, timed out, or returned malformed vectors."""


class EmbeddingStoreError(RagError):
    """Upserting records into the vector index failed."""


class SearchError(RagError):
    """Querying the vector index failed."""


class GenerationError(RagError):
    """The generative model failed or timed out."""
