"""
Chat — the per-question query pipeline and the interactive loop around it.
"""

from pdf_rag.chat.loop import ChatLoop, ChatState
from pdf_rag.chat.pipeline import QueryPipeline

__all__ = ["ChatLoop", "ChatState", "QueryPipeline"]
