"""pdf-rag: ask questions about a PDF with retrieval-augmented generation."""

__version__ = "0.1.0"
