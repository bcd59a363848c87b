"""Query pipeline: embed → search → build context → generate.

Service failures never reach the caller.  A failed embedding or search
degrades to an empty context; a failed generation degrades to
:func:`~pdf_rag.generation.generator.fallback_answer`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from pdf_rag.errors import EmbeddingError, GenerationError, SearchError
from pdf_rag.generation.generator import fallback_answer
from pdf_rag.retrieval.retriever import build_context

if TYPE_CHECKING:
    from pdf_rag.generation.generator import AnswerGenerator
    from pdf_rag.retrieval.retriever import SemanticRetriever

logger = logging.getLogger(__name__)

NO_MATCHES = "No matching documents found."


class QueryPipeline:
    """Answer one question at a time; no state is carried between questions.

    Parameters
    ----------
    retriever:
        Embeds the question and searches the index.
    generator:
        Produces the answer from the retrieved context.
    echo:
        Sink for user-facing status lines (``print`` by default).
    """

    def __init__(
        self,
        retriever: SemanticRetriever,
        generator: AnswerGenerator,
        *,
        echo: Callable[[str], None] = print,
    ) -> None:
        self._retriever = retriever
        self._generator = generator
        self._echo = echo

    async def retrieve_context(self, question: str) -> str:
        """Return the numbered context for *question*, or ``""``."""
        self._echo(f"Generating embedding for query: {question}")
        try:
            vector = await self._retriever.embed_query(question)
            self._echo("Searching vector index...")
            matches = await self._retriever.search_by_embedding(vector)
        except (EmbeddingError, SearchError) as exc:
            logger.warning("Retrieval failed, continuing without context: %s", exc)
            return ""

        if not matches:
            self._echo(NO_MATCHES)
            return ""

        self._echo(f"Found {len(matches)} matching documents.")
        logger.debug("Matched %s", ", ".join(m.short_ref() for m in matches))
        return build_context(matches)

    async def answer(self, question: str, context: str) -> str:
        try:
            return await self._generator.generate(question, context)
        except GenerationError as exc:
            logger.error("Chat model error: %s", exc)
            return fallback_answer(context)

    async def ask(self, question: str) -> str:
        """Run the full sequence for *question* and return the answer."""
        self._echo("Step 1: Searching documents...")
        context = await self.retrieve_context(question)

        self._echo("Step 2: Generating answer...")
        return await self.answer(question, context)

    async def chat(self, question: str) -> str:
        """Like :meth:`ask`, and also display the answer."""
        result = await self.ask(question)
        self._echo(f"Assistant: {result}")
        return result
