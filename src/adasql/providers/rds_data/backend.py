"""
RDS Data API Backend

Executes SQL statements against an Aurora Serverless cluster through the
RDS Data API (``rds-data``). Each call is a single signed HTTPS request; the
cluster and secret ARNs are attached to every request.
"""

from typing import Any, Optional

from botocore.exceptions import BotoCoreError, ClientError

from adasql.domain.errors import BackendError
from adasql.providers.base.backend import ExecuteResult


def _backend_error(error: Exception) -> BackendError:
    """Translate a botocore exception into a BackendError."""
    if isinstance(error, ClientError):
        details = error.response.get("Error", {})
        return BackendError(
            message=details.get("Message") or str(error),
            code=details.get("Code") or "ClientError",
        )
    return BackendError(message=str(error), code=type(error).__name__)


def quote_identifier(name: str) -> str:
    """Backtick-quote a MySQL identifier."""
    return "`" + name.replace("`", "``") + "`"


class RdsDataBackend:
    """Data API backend bound to one cluster and secret

    Attributes:
        client: boto3 ``rds-data`` client
        resource_arn: Aurora cluster ARN
        secret_arn: Secrets Manager secret ARN holding the DB credentials
    """

    def __init__(self, client: Any, resource_arn: str, secret_arn: str) -> None:
        self.client = client
        self.resource_arn = resource_arn
        self.secret_arn = secret_arn

    def _call(self, operation: str, **params: Any) -> dict[str, Any]:
        request = {"resourceArn": self.resource_arn, "secretArn": self.secret_arn}
        request.update({key: value for key, value in params.items() if value is not None})
        try:
            return getattr(self.client, operation)(**request)
        except (ClientError, BotoCoreError) as e:
            raise _backend_error(e) from e

    def execute_statement(
        self,
        sql: str,
        *,
        database: Optional[str] = None,
        transaction_id: Optional[str] = None,
    ) -> ExecuteResult:
        response = self._call(
            "execute_statement",
            sql=sql,
            database=database,
            transactionId=transaction_id,
            includeResultMetadata=True,
        )
        return ExecuteResult.model_validate(response)

    def begin_transaction(self, database: Optional[str] = None) -> str:
        response = self._call("begin_transaction", database=database)
        return response["transactionId"]

    def commit_transaction(self, transaction_id: str) -> None:
        self._call("commit_transaction", transactionId=transaction_id)

    def rollback_transaction(self, transaction_id: str) -> None:
        self._call("rollback_transaction", transactionId=transaction_id)

    def _first_column(self, sql: str, database: Optional[str] = None) -> list[str]:
        response = self._call("execute_statement", sql=sql, database=database)
        names = [record[0].get("stringValue") for record in response.get("records", []) if record]
        return [name for name in names if name is not None]

    def list_schemas(self) -> list[str]:
        return self._first_column("show schemas")

    def list_tables(self, database: str) -> list[str]:
        return self._first_column("show tables", database)

    def list_columns(self, database: str, table: str) -> list[str]:
        return self._first_column(f"show columns from {quote_identifier(table)}", database)
