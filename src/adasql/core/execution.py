"""
Sequential statement execution

Statements are queued as soon as the segmenter completes them and run one at
a time, in arrival order, by a single consumer task. The consumer also owns
the transaction state machine: BEGIN/COMMIT/ROLLBACK are mapped onto the Data
API's transaction calls, and every other statement carries the open
transaction id and the selected database.
"""

import asyncio
import re
from collections.abc import Callable
from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape

from adasql.core.hydrate import hydrate_records
from adasql.core.segmenter import match_database_switch
from adasql.core.session import Session, TransactionState
from adasql.domain.errors import BackendError, HydrationError
from adasql.models import StatementResult

console = Console(stderr=True)

TX_BEGIN_RE = re.compile(r"^(?:begin(?:\s+work)?|start\s+transaction);?$", re.IGNORECASE)
TX_ROLLBACK_RE = re.compile(r"^rollback(?:\s+work)?;?$", re.IGNORECASE)
TX_COMMIT_RE = re.compile(r"^commit(?:\s+work)?;?$", re.IGNORECASE)

ResultCallback = Callable[[StatementResult], None]


@dataclass(frozen=True)
class Statement:
    """A complete statement and the callback that receives its result."""

    text: str
    on_result: ResultCallback


class ExecutionQueue:
    """FIFO statement pipeline with a single consumer

    ``submit`` never blocks. ``run`` drains the queue forever; a statement's
    result callback fires before the next statement is taken off the queue.

    Attributes:
        session: Session whose database and transaction this queue drives
        stop_on_failure: Stop executing after the first failed statement
        refresh_keywords: Rebuild the keyword index after a database switch
        failure: The failed result that stopped the queue, if any
    """

    def __init__(
        self,
        session: Session,
        *,
        stop_on_failure: bool = False,
        refresh_keywords: bool = True,
    ) -> None:
        self.session = session
        self.stop_on_failure = stop_on_failure
        self.refresh_keywords = refresh_keywords
        self.failure: StatementResult | None = None
        self._queue: asyncio.Queue[Statement] = asyncio.Queue()

    @property
    def stopped(self) -> bool:
        return self.failure is not None

    def submit(self, statement: Statement) -> None:
        """Queue a statement; ignored once the queue stopped on a failure."""
        if self.stopped:
            return
        self._queue.put_nowait(statement)

    async def join(self) -> None:
        """Wait until every submitted statement has been handled."""
        await self._queue.join()

    async def run(self) -> None:
        """Consume statements until cancelled (or until a failure, if stopping)."""
        while True:
            statement = await self._queue.get()
            try:
                try:
                    result = await self.execute(statement.text)
                except Exception as e:
                    result = StatementResult(
                        sql=statement.text.strip(),
                        status="failed",
                        message=f"Unexpected error executing statement: {e}",
                    )
                self._report(statement, result)
                if result.failed and self.stop_on_failure:
                    self.failure = result
                    self._discard_pending()
                    return
            finally:
                self._queue.task_done()

    def _report(self, statement: Statement, result: StatementResult) -> None:
        try:
            statement.on_result(result)
        except Exception as e:
            console.print(
                f"[red]✗[/red] Failed to report result of '{escape(result.sql)}': "
                f"{escape(str(e))}"
            )

    def _discard_pending(self) -> None:
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()

    async def execute(self, text: str) -> StatementResult:
        """Run one statement through the transaction state machine."""
        sql = text.strip()

        if not sql:
            return StatementResult(sql=sql, status="success")

        database = match_database_switch(sql)
        if database is not None:
            return self._switch_database(sql, database)

        if TX_BEGIN_RE.match(sql):
            return await self._begin(sql)

        if TX_ROLLBACK_RE.match(sql):
            return await self._end_transaction(sql, commit=False)

        if TX_COMMIT_RE.match(sql):
            return await self._end_transaction(sql, commit=True)

        return await self._execute_sql(sql)

    def _switch_database(self, sql: str, database: str) -> StatementResult:
        self.session.database = database
        if self.refresh_keywords:
            self.session.refresh_keywords()
        return StatementResult(sql=sql, status="success", message=f"Now using database {database}")

    async def _begin(self, sql: str) -> StatementResult:
        session = self.session
        if session.transaction_state is TransactionState.IN_TRANSACTION:
            return StatementResult(
                sql=sql,
                status="rejected",
                message=(
                    f"Error: Transaction '{session.transaction_id}' currently in progress, "
                    "cannot create a new one"
                ),
            )

        try:
            transaction_id = await asyncio.to_thread(
                session.backend.begin_transaction, session.database
            )
        except BackendError as e:
            return StatementResult(
                sql=sql, status="failed", message=f"Failed to begin transaction: {e.describe()}"
            )

        session.transaction_id = transaction_id
        return StatementResult(
            sql=sql, status="success", message=f"Transaction '{transaction_id}' begun"
        )

    async def _end_transaction(self, sql: str, *, commit: bool) -> StatementResult:
        session = self.session
        transaction_id = session.transaction_id
        if transaction_id is None:
            return StatementResult(
                sql=sql, status="rejected", message="Error: No transaction currently in progress"
            )

        if commit:
            call, verb, past = session.backend.commit_transaction, "commit", "committed"
        else:
            call, verb, past = session.backend.rollback_transaction, "rollback", "rolled back"

        try:
            await asyncio.to_thread(call, transaction_id)
        except BackendError as e:
            return StatementResult(
                sql=sql,
                status="failed",
                message=f"Failed to {verb} transaction '{transaction_id}': {e.describe()}",
            )

        session.transaction_id = None
        return StatementResult(
            sql=sql, status="success", message=f"Transaction '{transaction_id}' {past}"
        )

    async def _execute_sql(self, sql: str) -> StatementResult:
        session = self.session
        try:
            response = await asyncio.to_thread(
                session.backend.execute_statement,
                sql,
                database=session.database,
                transaction_id=session.transaction_id,
            )
        except BackendError as e:
            return StatementResult(
                sql=sql, status="failed", message=f"Failed to execute statement: {e.describe()}"
            )

        if response.records is not None:
            try:
                records = hydrate_records(response.records, response.column_metadata or [])
            except HydrationError as e:
                return StatementResult(
                    sql=sql, status="failed", message=f"Failed to read results: {e.message}"
                )
            return StatementResult(
                sql=sql, status="success", records=records, record_count=len(records)
            )

        if response.number_of_records_updated is not None:
            return StatementResult(
                sql=sql, status="success", affected_count=response.number_of_records_updated
            )

        return StatementResult(sql=sql, status="success")
