"""
Shell session state

One Session owns everything that outlives a single statement: the selected
database, the open transaction, and the current keyword snapshot. Only the
execution queue writes the database and transaction fields.
"""

import asyncio
from enum import StrEnum

from rich.console import Console
from rich.markup import escape

from adasql.core.keywords import KeywordIndex, fetch_keywords
from adasql.providers.base.backend import DataAPIBackend

console = Console(stderr=True)


class TransactionState(StrEnum):
    IDLE = "idle"
    IN_TRANSACTION = "in_transaction"


class Session:
    """Per-process shell session

    Attributes:
        backend: Data API backend statements run against
        database: Currently selected database (None until a switch or -d)
        transaction_id: Identifier of the open transaction, if any
        keywords: Latest completed keyword snapshot
    """

    def __init__(self, backend: DataAPIBackend, database: str | None = None) -> None:
        self.backend = backend
        self.database = database
        self.transaction_id: str | None = None
        self.keywords = KeywordIndex()
        self._keyword_generation = 0
        self._refresh_tasks: set[asyncio.Task[None]] = set()

    @property
    def transaction_state(self) -> TransactionState:
        if self.transaction_id is None:
            return TransactionState.IDLE
        return TransactionState.IN_TRANSACTION

    def refresh_keywords(self) -> asyncio.Task[None]:
        """Start rebuilding the keyword snapshot for the current database.

        Returns immediately; the new snapshot replaces the old one when the
        rebuild finishes, unless a later rebuild was started in the meantime.
        Must be called from a running event loop.
        """
        self._keyword_generation += 1
        task = asyncio.create_task(self._rebuild_keywords(self._keyword_generation, self.database))
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)
        return task

    async def _rebuild_keywords(self, generation: int, database: str | None) -> None:
        try:
            keywords = await fetch_keywords(self.backend, database)
        except Exception as e:
            console.print(
                "[yellow]⚠ Warning:[/yellow] Failed to refresh autocomplete keywords "
                f"({escape(str(e))})"
            )
            return

        if generation == self._keyword_generation:
            self.keywords = keywords

    async def wait_for_keywords(self) -> None:
        """Wait for in-flight keyword rebuilds."""
        if self._refresh_tasks:
            await asyncio.gather(*self._refresh_tasks)

    def cancel_keyword_refresh(self) -> None:
        for task in list(self._refresh_tasks):
            task.cancel()
