"""
Base Data API Backend Protocol

Defines the contract the shell needs from a serverless SQL backend. The
backend is not connected; every method is an independent request/response
call. Providers implement this protocol to plug into the execution queue and
the keyword index builder.
"""

from typing import Any, Optional, Protocol

from pydantic import BaseModel, Field

from adasql.models import ColumnDescriptor


class ExecuteResult(BaseModel):
    """Raw result of one executed statement

    Attributes:
        records: Result rows as lists of typed wire fields (None for DML/DDL)
        column_metadata: Column descriptors paired positionally with fields
        number_of_records_updated: Affected row count for DML statements
    """

    records: Optional[list[list[dict[str, Any]]]] = Field(None, description="Wire rows")
    column_metadata: Optional[list[ColumnDescriptor]] = Field(
        None, alias="columnMetadata", description="Column metadata"
    )
    number_of_records_updated: Optional[int] = Field(
        None, alias="numberOfRecordsUpdated", description="Affected rows"
    )

    class Config:
        populate_by_name = True
        extra = "ignore"


class DataAPIBackend(Protocol):
    """Protocol for a per-request SQL backend

    Implementations raise ``BackendError`` for every failed call.
    """

    def execute_statement(
        self,
        sql: str,
        *,
        database: Optional[str] = None,
        transaction_id: Optional[str] = None,
    ) -> ExecuteResult:
        """Execute one SQL statement, optionally inside a transaction"""
        ...

    def begin_transaction(self, database: Optional[str] = None) -> str:
        """Start a transaction and return its identifier"""
        ...

    def commit_transaction(self, transaction_id: str) -> None:
        """Commit the given transaction"""
        ...

    def rollback_transaction(self, transaction_id: str) -> None:
        """Roll back the given transaction"""
        ...

    def list_schemas(self) -> list[str]:
        """Names of all schemas visible to the caller"""
        ...

    def list_tables(self, database: str) -> list[str]:
        """Names of tables in a database"""
        ...

    def list_columns(self, database: str, table: str) -> list[str]:
        """Names of columns in a table"""
        ...
