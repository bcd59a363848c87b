"""Answer generation and the fallback used when the model is unavailable."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from pdf_rag.errors import GenerationError
from pdf_rag.generation.prompts import build_rag_prompt

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

logger = logging.getLogger(__name__)

UNAVAILABLE_NOTICE = "Chat model unavailable. Showing retrieved documents:"
APOLOGY = "Sorry, I could not process your question."


def fallback_answer(context: str) -> str:
    """What the user sees when generation fails."""
    if context:
        return f"{UNAVAILABLE_NOTICE}\n\n{context}"
    return APOLOGY


def _message_text(content: Any) -> str:
    """Flatten a chat-model message body into plain text."""
    if isinstance(content, str):
        return content
    parts: list[str] = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(str(block.get("text", "")))
    return "".join(parts)


class AnswerGenerator:
    """Answer a question from retrieved context with a chat model.

    Parameters
    ----------
    llm:
        Any LangChain chat model (anything exposing ``ainvoke``).
    timeout:
        Seconds allowed for one generation call.
    """

    def __init__(self, llm: BaseChatModel, *, timeout: float | None = None) -> None:
        self._llm = llm
        self.timeout = timeout

    async def generate(self, question: str, context: str) -> str:
        """Return the model's answer; raises :class:`GenerationError`."""
        prompt = build_rag_prompt(question, context)
        try:
            response = await asyncio.wait_for(self._llm.ainvoke(prompt), self.timeout)
        except asyncio.TimeoutError as exc:
            raise GenerationError(f"Generation timed out after {self.timeout}s") from exc
        except Exception as exc:
            raise GenerationError(f"Generation failed: {exc}") from exc

        return _message_text(getattr(response, "content", response)).strip()
