"""Prompt template for answer generation.

The wording below, including the fallback sentence, is part of the
observable behaviour: the model is told to answer from the retrieved
context only and to say ``NOT_FOUND_ANSWER`` otherwise.
"""

from __future__ import annotations

from langchain_core.messages import BaseMessage, HumanMessage

NOT_FOUND_ANSWER = "I could not find the answer in the provided document."

NO_CONTEXT_PLACEHOLDER = "NO CONTEXT FOUND"

RAG_PROMPT_TEMPLATE = """
You are a helpful assistant.

Use ONLY the following document context to answer the user's question.
If the answer is not found in the context, say:
"{not_found}"

--------------------
DOCUMENT CONTEXT:
{context}
--------------------

USER QUESTION:
{question}
"""


def build_rag_prompt(question: str, context: str) -> list[BaseMessage]:
    """Assemble the single-message prompt for a retrieval-augmented answer.

    An empty *context* is replaced by ``NO_CONTEXT_PLACEHOLDER`` so the
    model still receives the instruction to answer with the fallback.
    """
    prompt = RAG_PROMPT_TEMPLATE.format(
        not_found=NOT_FOUND_ANSWER,
        context=context or NO_CONTEXT_PLACEHOLDER,
        question=question,
    )
    return [HumanMessage(content=prompt)]
