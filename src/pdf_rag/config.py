"""Shared configuration loaded from environment / .env file.

A single immutable :class:`Settings` instance is built at process start
(see :mod:`pdf_rag.cli`) and passed explicitly to every component.
"""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Credentials
    google_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY", "google_api_key"),
        description="Google Generative AI key, used for embeddings and generation",
    )
    openai_api_key: str = Field(default="", description="OpenAI API key (or dummy value for local vLLM)")

    # Embedding
    embedding_provider: Literal["google", "huggingface"] = "google"
    embedding_model: str = "models/text-embedding-004"

    # LLM
    llm_provider: Literal["google", "openai"] = "google"
    llm_model_name: str = Field(default="gemini-2.0-flash", description="LLM model identifier")
    llm_base_url: str = Field(
        default="",
        description=(
            "Base URL for an OpenAI-compatible API (only used with llm_provider='openai'). "
            "Leave empty to use OpenAI cloud."
        ),
    )
    llm_temperature: float = 0.0

    # Vector store
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_ssl: bool = False
    chroma_api_key: str = ""
    index_name: str = "pdf-rag"
    namespace: str = "TEST-namespace"

    # Ingestion
    pdf_path: str = "./sample.pdf"
    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = 200
    embed_batch_size: int = Field(default=50, gt=0)
    max_concurrency: int = Field(default=5, gt=0, description="Upsert batches in flight at once")

    # Query
    top_k: int = Field(default=5, gt=0)

    # Runtime
    request_timeout: float = Field(default=60.0, gt=0, description="Seconds allowed per remote call")
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )
