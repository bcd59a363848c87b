"""Text chunking strategy.

Pages are split with ``RecursiveCharacterTextSplitter``: the text is cut at
the first separator in ``SEPARATORS`` that occurs, pieces that are still
longer than ``chunk_size`` are cut again with the next separator (the last
one, ``""``, cuts between characters), and the pieces are greedily merged
back up to ``chunk_size``.  Each new chunk starts with the trailing pieces
of the previous one whose combined length fits in ``chunk_overlap``, so the
overlap is at most ``chunk_overlap`` characters and may be shorter.

Whitespace is never stripped, so the chunks of a page always cover every
character of that page.
"""

from __future__ import annotations

import hashlib
import logging
from typing import TYPE_CHECKING

from langchain_text_splitters import RecursiveCharacterTextSplitter

from pdf_rag.errors import SplitError

if TYPE_CHECKING:
    from langchain_core.documents import Document

logger = logging.getLogger(__name__)

SEPARATORS = ["\n\n", "\n", ". ", " ", ""]


def make_chunk_id(source: str, page: object, start_index: int) -> str:
    """Deterministic chunk identifier so re-ingestion overwrites, not duplicates."""
    key = f"{source}:{page}:{start_index}"
    return hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]


def chunk_documents(
    documents: list[Document],
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
) -> list[Document]:
    """Split *documents* into smaller chunks for embedding.

    Parameters
    ----------
    documents:
        Source documents produced by a loader.
    chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Upper bound on the characters shared by consecutive chunks.

    Returns
    -------
    list[Document]
        Chunked documents ready for embedding.  Each inherits its page's
        metadata and adds ``start_index``, ``chunk_index`` and ``chunk_id``.

    Raises
    ------
    SplitError
        When ``chunk_size`` is not positive or ``chunk_overlap`` is
        negative or not smaller than ``chunk_size``.
    """
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
        raise SplitError(f"chunk_size must be a positive integer, got {chunk_size!r}")
    if isinstance(chunk_overlap, bool) or not isinstance(chunk_overlap, int) or chunk_overlap < 0:
        raise SplitError(f"chunk_overlap must be a non-negative integer, got {chunk_overlap!r}")
    if chunk_overlap >= chunk_size:
        raise SplitError(
            f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})"
        )

    splitter = RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
        separators=SEPARATORS,
        keep_separator=True,
        strip_whitespace=False,
        add_start_index=True,
    )
    chunks = splitter.split_documents(documents)

    for idx, chunk in enumerate(chunks):
        meta = chunk.metadata
        meta["chunk_index"] = idx
        meta["chunk_id"] = make_chunk_id(
            str(meta.get("source", "")), meta.get("page", ""), meta.get("start_index", idx)
        )

    logger.info("Produced %d chunks from %d documents", len(chunks), len(documents))
    return chunks
