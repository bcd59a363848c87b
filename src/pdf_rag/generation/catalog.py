"""List the Google Generative AI models the configured key can use.

A diagnostic for choosing ``LLM_MODEL_NAME`` and ``EMBEDDING_MODEL``;
it calls the REST ``models`` endpoint directly and follows pagination.
"""

from __future__ import annotations

import logging

import requests

from pdf_rag.errors import ConfigurationError

logger = logging.getLogger(__name__)

MODELS_URL = "https://generativelanguage.googleapis.com/v1beta/models"
PAGE_SIZE = 1000


def list_models(
    api_key: str,
    *,
    method: str | None = None,
    timeout: float = 60.0,
) -> list[str]:
    """Return the model resource names (``models/...``) visible to *api_key*.

    When *method* is given (``generateContent``, ``embedContent`` …) only
    models supporting that generation method are returned.

    Raises
    ------
    ConfigurationError
        When no key is configured or the endpoint rejects the request.
    """
    if not api_key:
        raise ConfigurationError("GEMINI_API_KEY is not set")

    names: list[str] = []
    params: dict[str, str | int] = {"pageSize": PAGE_SIZE}
    while True:
        try:
            resp = requests.get(
                MODELS_URL,
                params=params,
                headers={"x-goog-api-key": api_key},
                timeout=timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise ConfigurationError(f"Could not list models: {exc}") from exc

        data = resp.json()
        for model in data.get("models", []):
            if method and method not in model.get("supportedGenerationMethods", []):
                continue
            names.append(model["name"])

        token = data.get("nextPageToken")
        if not token:
            break
        params["pageToken"] = token

    logger.debug("Listed %d model(s)", len(names))
    return names
