"""Interactive read-loop as an explicit state machine.

    PROMPT ──line──▶ DISPATCH ──▶ PROMPT
       │
       └──"exit" / end of input──▶ EXIT

The loop never terminates the process itself; :meth:`ChatLoop.run`
returns the exit status and the CLI decides what to do with it.

The read blocks the calling thread, so nothing else runs while the prompt
waits and Ctrl-C surfaces as ``KeyboardInterrupt`` straight from the read.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from pdf_rag.chat.pipeline import QueryPipeline

logger = logging.getLogger(__name__)

PROMPT = "You: "


class ChatState(str, Enum):
    PROMPT = "prompt"
    DISPATCH = "dispatch"
    EXIT = "exit"


class ChatLoop:
    """Read questions until the exit keyword and answer each one.

    Parameters
    ----------
    pipeline:
        Answers each question.
    read_line:
        Blocking read primitive; ``input`` by default.  ``EOFError`` ends
        the session like the exit keyword does; ``KeyboardInterrupt``
        propagates to the caller.
    echo:
        Output sink for the goodbye line and blank separators.
    exit_keyword:
        Compared case-insensitively with the stripped input line.
    """

    def __init__(
        self,
        pipeline: QueryPipeline,
        *,
        read_line: Callable[[str], str] = input,
        echo: Callable[[str], None] = print,
        exit_keyword: str = "exit",
    ) -> None:
        self._pipeline = pipeline
        self._read_line = read_line
        self._echo = echo
        self.exit_keyword = exit_keyword.lower()
        self.state = ChatState.PROMPT

    async def run(self) -> int:
        """Drive the loop to completion and return the exit status (0)."""
        question = ""
        while self.state is not ChatState.EXIT:
            if self.state is ChatState.PROMPT:
                try:
                    line = self._read_line(PROMPT)
                except EOFError:
                    self.state = ChatState.EXIT
                    continue
                question = line.strip()
                if question.lower() == self.exit_keyword:
                    self.state = ChatState.EXIT
                elif question:
                    self.state = ChatState.DISPATCH
            elif self.state is ChatState.DISPATCH:
                await self._pipeline.chat(question)
                self._echo("")
                self.state = ChatState.PROMPT

        self._echo("Goodbye!")
        logger.debug("Chat loop finished")
        return 0
