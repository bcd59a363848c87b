"""PDF loader — thin wrapper around LangChain's ``PyPDFLoader``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from langchain_community.document_loaders import PyPDFLoader

from pdf_rag.errors import LoadError

if TYPE_CHECKING:
    from langchain_core.documents import Document

logger = logging.getLogger(__name__)


def load_pdf(path: str | Path) -> list[Document]:
    """Load a single PDF file, one ``Document`` per page.

    Parameters
    ----------
    path:
        Filesystem path to a readable PDF.

    Returns
    -------
    list[Document]
        Pages in document order, each carrying ``source`` and ``page``
        metadata.

    Raises
    ------
    LoadError
        When the file is missing, unreadable, not a PDF, or has no pages.
    """
    pdf = Path(path)
    if not pdf.is_file():
        raise LoadError(f"PDF not found: {pdf}")

    try:
        pages = PyPDFLoader(str(pdf)).load()
    except Exception as exc:
        raise LoadError(f"Could not read {pdf} as a PDF: {exc}") from exc

    if not pages:
        raise LoadError(f"{pdf} contains no pages")

    logger.info("Loaded %d page(s) from %s", len(pages), pdf)
    return pages
