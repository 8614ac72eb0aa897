"""
Shell Command Implementation

Drives the statement pipeline from a terminal (prompt_toolkit, with tab
completion) or from piped input. Input lines go through the segmenter;
completed statements are queued and run in order while the user keeps
typing.
"""

import asyncio
import sys
from pathlib import Path
from typing import TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console

from adasql.core.completion import META_COMMAND_PREFIX, SQLCompleter
from adasql.core.execution import ExecutionQueue, Statement
from adasql.core.segmenter import StatementSegmenter
from adasql.core.session import Session
from adasql.models import StatementResult
from adasql.render import render_result

console = Console()
error_console = Console(stderr=True)

HISTORY_FILE = Path.home() / ".adasql_history"
PROMPT = "adasql> "
CONTINUATION_PROMPT = "    -> "

# Recognised even while a statement is pending
META_COMMANDS = frozenset({".break", ".clear", ".exit", ".quit", ".help"})

HELP_TEXT = """\
Statements end with ';'. 'use <db>' and '\\c <db>' need no semicolon.
BEGIN / COMMIT / ROLLBACK manage a Data API transaction.

.break, .clear   Discard the statement being typed
.exit, .quit     Leave the shell
.help            Show this help"""


class Shell:
    """Input loop feeding the segmenter and the execution queue

    Attributes:
        session: Session shared by the queue and the completer
        interactive: Whether input comes from a terminal
        segmenter: Statement segmenter for raw input
        queue: Execution queue (stops on first failure when not interactive)
    """

    def __init__(
        self,
        session: Session,
        *,
        interactive: bool,
        output: Console | None = None,
        errors: Console | None = None,
    ) -> None:
        self.session = session
        self.interactive = interactive
        self.segmenter = StatementSegmenter()
        self.queue = ExecutionQueue(
            session, stop_on_failure=not interactive, refresh_keywords=interactive
        )
        self.output = output or console
        self.errors = errors or error_console

    def on_result(self, result: StatementResult) -> None:
        if result.failed and not self.interactive:
            render_result(self.errors, result)
        else:
            render_result(self.output, result)

    def feed(self, chunk: str) -> bool:
        """Handle a chunk of input line by line; returns False when the user asked to exit.

        A pasted block arrives as one chunk and is split so that each line is
        seen exactly as if it had been typed.
        """
        for line in chunk.splitlines(keepends=True):
            if not self._feed_line(line):
                return False
        return True

    def _feed_line(self, line: str) -> bool:
        command = line.strip()
        if command.lower() in META_COMMANDS or (
            command.startswith(META_COMMAND_PREFIX) and not self.segmenter.pending
        ):
            return self._run_meta_command(command)

        for text in self.segmenter.feed(line):
            self.queue.submit(Statement(text=text, on_result=self.on_result))
        return True

    def _run_meta_command(self, command: str) -> bool:
        name = command.split()[0].lower()
        if name in (".exit", ".quit"):
            self.segmenter.reset()
            return False
        if name in (".break", ".clear"):
            self.segmenter.reset()
        elif name == ".help":
            self.output.print(HELP_TEXT, markup=False, highlight=False)
        else:
            self.errors.print(f"[red]✗[/red] Unknown command '{name}', try .help")
        return True

    def prompt_text(self) -> str:
        return CONTINUATION_PROMPT if self.segmenter.pending else PROMPT

    async def run(self, stream: TextIO | None = None) -> int:
        """Run until end of input; returns the process exit code."""
        consumer = asyncio.create_task(self.queue.run())
        try:
            if self.interactive:
                self.session.refresh_keywords()
                await self._read_terminal()
            else:
                await self._read_stream(stream or sys.stdin)
                for text in self.segmenter.flush():
                    self.queue.submit(Statement(text=text, on_result=self.on_result))
            await self._drain(consumer)
        finally:
            consumer.cancel()
            self.session.cancel_keyword_refresh()

        return 1 if self.queue.failure is not None else 0

    async def _drain(self, consumer: asyncio.Task[None]) -> None:
        joined = asyncio.create_task(self.queue.join())
        done, _ = await asyncio.wait({joined, consumer}, return_when=asyncio.FIRST_COMPLETED)
        if consumer in done:
            joined.cancel()
            consumer.result()

    async def _read_terminal(self) -> None:
        prompt_session: PromptSession[str] = PromptSession(
            completer=SQLCompleter(self.session),
            history=FileHistory(str(HISTORY_FILE)),
            complete_while_typing=False,
        )
        with patch_stdout():
            while True:
                try:
                    line = await prompt_session.prompt_async(self.prompt_text)
                except KeyboardInterrupt:
                    self.segmenter.reset()
                    continue
                except EOFError:
                    break

                if not self.feed(line + "\n"):
                    break

    async def _read_stream(self, stream: TextIO) -> None:
        while not self.queue.stopped:
            line = await asyncio.to_thread(stream.readline)
            if not line:
                break
            if not self.feed(line):
                break
            # yield to the consumer between lines
            await asyncio.sleep(0)


def run_shell(session: Session, *, interactive: bool, stream: TextIO | None = None) -> int:
    """Run the shell to completion and return the exit code."""
    shell = Shell(session, interactive=interactive)
    return asyncio.run(shell.run(stream))
