"""Embedding — async wrapper around a LangChain ``Embeddings`` provider.

The same :class:`Embedder` (built by :meth:`Embedder.from_settings`) must be
used for ingestion and for query-time search; vectors from different models
live in different spaces and cannot be compared.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from pdf_rag.errors import ConfigurationError, EmbeddingError

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

    from pdf_rag.config import Settings

logger = logging.getLogger(__name__)


def get_embedding_function(settings: Settings) -> Embeddings:
    """Return the configured LangChain embedding function.

    ``google`` uses the Generative AI embedding API, ``huggingface`` runs a
    local sentence-transformer model.
    """
    try:
        if settings.embedding_provider == "huggingface":
            from langchain_huggingface import HuggingFaceEmbeddings

            return HuggingFaceEmbeddings(model_name=settings.embedding_model)

        from langchain_google_genai import GoogleGenerativeAIEmbeddings

        return GoogleGenerativeAIEmbeddings(
            model=settings.embedding_model,
            google_api_key=settings.google_api_key or None,
        )
    except Exception as exc:
        raise ConfigurationError(
            f"Could not initialise {settings.embedding_provider!r} embeddings: {exc}"
        ) from exc


class Embedder:
    """Map text to fixed-length vectors.

    Parameters
    ----------
    embeddings:
        Any LangChain ``Embeddings`` implementation.
    model_name:
        Identifier of the embedding model, recorded on every stored vector.
    timeout:
        Seconds allowed per remote call; ``None`` waits indefinitely.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        *,
        model_name: str,
        timeout: float | None = None,
    ) -> None:
        self._embeddings = embeddings
        self.model_name = model_name
        self.timeout = timeout
        self.dimension: int | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> Embedder:
        return cls(
            get_embedding_function(settings),
            model_name=settings.embedding_model,
            timeout=settings.request_timeout,
        )

    async def embed(self, text: str) -> list[float]:
        """Embed a single query string."""
        try:
            vector = await asyncio.wait_for(self._embeddings.aembed_query(text), self.timeout)
        except asyncio.TimeoutError as exc:
            raise EmbeddingError(f"Embedding timed out after {self.timeout}s") from exc
        except Exception as exc:
            raise EmbeddingError(f"Embedding request failed: {exc}") from exc

        return self._check_dimension([list(vector)])[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed *texts*, preserving order.  The batch fails as a whole."""
        if not texts:
            return []
        try:
            vectors = await asyncio.wait_for(
                self._embeddings.aembed_documents(list(texts)), self.timeout
            )
        except asyncio.TimeoutError as exc:
            raise EmbeddingError(
                f"Embedding batch of {len(texts)} timed out after {self.timeout}s"
            ) from exc
        except Exception as exc:
            raise EmbeddingError(f"Embedding batch of {len(texts)} failed: {exc}") from exc

        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"Expected {len(texts)} vectors, embedding service returned {len(vectors)}"
            )
        logger.debug("Embedded batch of %d texts", len(texts))
        return self._check_dimension([list(v) for v in vectors])

    def _check_dimension(self, vectors: list[list[float]]) -> list[list[float]]:
        for vector in vectors:
            if not vector:
                raise EmbeddingError("Embedding service returned an empty vector")
            if self.dimension is None:
                self.dimension = len(vector)
            elif len(vector) != self.dimension:
                raise EmbeddingError(
                    f"Vector dimension changed from {self.dimension} to {len(vector)}"
                )
        return vectors
