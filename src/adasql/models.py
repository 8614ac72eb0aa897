"""
Pydantic models shared across the shell.

Wire-facing models accept the Data API's camelCase field names through
aliases, so raw boto3 response dictionaries validate directly.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field

RowValue = Union[str, int, float, Decimal, bool, bytes, datetime, None]
Row = dict[str, RowValue]


class ColumnDescriptor(BaseModel):
    """Column metadata paired positionally with raw field values"""

    label: str = ""
    type_name: str = Field("", alias="typeName")

    class Config:
        populate_by_name = True
        extra = "ignore"


class StatementResult(BaseModel):
    """Human-facing result of one completed statement

    Attributes:
        sql: Statement text as it was executed (echoed for traceability)
        status: success, rejected (transaction discipline) or failed (backend)
        message: Status or error message, if any
        records: Hydrated rows for statements returning a result set
        record_count: Number of hydrated rows
        affected_count: Number of affected rows for DML statements
    """

    sql: str = Field(..., description="Statement text")
    status: Literal["success", "rejected", "failed"] = Field(..., description="Outcome")
    message: Optional[str] = Field(None, description="Status or error message")
    records: Optional[list[dict[str, Any]]] = Field(None, description="Hydrated result rows")
    record_count: Optional[int] = Field(None, description="Number of result rows")
    affected_count: Optional[int] = Field(None, description="Number of affected rows")

    @property
    def failed(self) -> bool:
        return self.status == "failed"


class AWSInfo(BaseModel):
    """Caller identity resolved at startup"""

    partition: str
    account_id: str
    region: str
    user_arn: str
    account_alias: Optional[str] = None

    @property
    def user_name(self) -> str:
        return self.user_arn.rsplit(":", 1)[-1]


class ConnectionConfig(BaseModel):
    """Everything needed to address the Data API for one session"""

    aws: AWSInfo
    cluster_id: str = Field(..., description="Aurora DB cluster identifier")
    secret_name: str = Field(..., description="Secrets Manager secret name")
    database: Optional[str] = Field(None, description="Initial database")

    @property
    def resource_arn(self) -> str:
        return (
            f"arn:{self.aws.partition}:rds:{self.aws.region}:"
            f"{self.aws.account_id}:cluster:{self.cluster_id}"
        )

    @property
    def secret_arn(self) -> str:
        return (
            f"arn:{self.aws.partition}:secretsmanager:{self.aws.region}:"
            f"{self.aws.account_id}:secret:{self.secret_name}"
        )
