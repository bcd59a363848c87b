"""
Generation — prompt construction and answer generation with a chat model.

Public API
----------
- :class:`AnswerGenerator` — answer a question from retrieved context.
- :func:`fallback_answer` — degraded answer when the model is unavailable.
- :func:`get_llm` — build the configured chat model.
- :func:`list_models` — model names available to the configured key.
"""

from pdf_rag.generation.catalog import list_models
from pdf_rag.generation.generator import AnswerGenerator, fallback_answer
from pdf_rag.generation.llm import get_llm
from pdf_rag.generation.prompts import NOT_FOUND_ANSWER, build_rag_prompt

__all__ = [
    "NOT_FOUND_ANSWER",
    "AnswerGenerator",
    "build_rag_prompt",
    "fallback_answer",
    "get_llm",
    "list_models",
]
