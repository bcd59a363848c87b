"""Unit tests for the model catalogue lookup (HTTP mocked)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from pdf_rag.errors import ConfigurationError
from pdf_rag.generation.catalog import MODELS_URL, list_models


def _page(models: list[dict], token: str | None = None) -> MagicMock:
    body: dict = {"models": models}
    if token:
        body["nextPageToken"] = token
    return MagicMock(json=MagicMock(return_value=body), raise_for_status=MagicMock())


GEMINI = {"name": "models/gemini-2.0-flash", "supportedGenerationMethods": ["generateContent"]}
EMBEDDER = {"name": "models/text-embedding-004", "supportedGenerationMethods": ["embedContent"]}


class TestListModels:
    def test_lists_names_with_key_header(self) -> None:
        with patch("requests.get", return_value=_page([GEMINI, EMBEDDER])) as mock_get:
            names = list_models("secret", timeout=5)

        assert names == ["models/gemini-2.0-flash", "models/text-embedding-004"]
        args, kwargs = mock_get.call_args
        assert args[0] == MODELS_URL
        assert kwargs["headers"] == {"x-goog-api-key": "secret"}
        assert kwargs["timeout"] == 5
        assert "secret" not in str(kwargs["params"])

    def test_follows_page_tokens(self) -> None:
        pages = [_page([GEMINI], token="next"), _page([EMBEDDER])]
        with patch("requests.get", side_effect=pages) as mock_get:
            names = list_models("secret")

        assert names == ["models/gemini-2.0-flash", "models/text-embedding-004"]
        assert mock_get.call_count == 2
        assert mock_get.call_args.kwargs["params"]["pageToken"] == "next"

    def test_filters_by_generation_method(self) -> None:
        with patch("requests.get", return_value=_page([GEMINI, EMBEDDER])):
            assert list_models("secret", method="embedContent") == ["models/text-embedding-004"]

    def test_missing_key(self) -> None:
        with patch("requests.get") as mock_get, pytest.raises(ConfigurationError):
            list_models("")
        mock_get.assert_not_called()

    def test_http_error_wrapped(self) -> None:
        resp = _page([])
        resp.raise_for_status.side_effect = requests.HTTPError("403 Forbidden")
        with patch("requests.get", return_value=resp), pytest.raises(ConfigurationError, match="403"):
            list_models("bad-key")
