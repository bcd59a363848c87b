"""Allow ``python -m pdf_rag``."""

from pdf_rag.cli import run

if __name__ == "__main__":
    run()
