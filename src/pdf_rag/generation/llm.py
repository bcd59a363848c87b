"""LLM initialisation — single place to swap providers.

Supports two providers:

1. **Google Generative AI** (default) — set ``GEMINI_API_KEY``.
2. **OpenAI** — set ``OPENAI_API_KEY``, or set ``LLM_BASE_URL`` to any
   OpenAI-compatible ``/v1/chat/completions`` server (e.g. vLLM), in which
   case a dummy key is accepted.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pdf_rag.errors import ConfigurationError

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

    from pdf_rag.config import Settings

logger = logging.getLogger(__name__)


def get_llm(settings: Settings) -> BaseChatModel:
    """Return the configured chat model."""
    try:
        if settings.llm_provider == "openai":
            from langchain_openai import ChatOpenAI

            kwargs: dict = {
                "model": settings.llm_model_name,
                "temperature": settings.llm_temperature,
            }
            if settings.llm_base_url:
                logger.info("Using OpenAI-compatible endpoint: %s", settings.llm_base_url)
                kwargs["base_url"] = settings.llm_base_url
                # Self-hosted servers don't need a real key; LangChain requires a non-empty value.
                kwargs["api_key"] = settings.openai_api_key or "EMPTY"
            else:
                kwargs["api_key"] = settings.openai_api_key
            return ChatOpenAI(**kwargs)

        from langchain_google_genai import ChatGoogleGenerativeAI

        return ChatGoogleGenerativeAI(
            model=settings.llm_model_name,
            temperature=settings.llm_temperature,
            google_api_key=settings.google_api_key or None,
        )
    except Exception as exc:
        raise ConfigurationError(
            f"Could not initialise {settings.llm_provider!r} chat model: {exc}"
        ) from exc
