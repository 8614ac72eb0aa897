"""
Record hydration

Converts Data API result rows (lists of typed wire fields) into plain
label-keyed rows, applying display coercions driven by the declared column
type.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Union

from adasql.domain.errors import HydrationError
from adasql.models import ColumnDescriptor, Row, RowValue


@dataclass(frozen=True, slots=True)
class BlobValue:
    value: bytes


@dataclass(frozen=True, slots=True)
class DoubleValue:
    value: float


@dataclass(frozen=True, slots=True)
class NullValue:
    value: None = None


@dataclass(frozen=True, slots=True)
class LongValue:
    value: int


@dataclass(frozen=True, slots=True)
class StringValue:
    value: str


@dataclass(frozen=True, slots=True)
class BooleanValue:
    value: bool


FieldValue = Union[BlobValue, DoubleValue, NullValue, LongValue, StringValue, BooleanValue]

_FIELD_TAGS: dict[str, type] = {
    "blobValue": BlobValue,
    "doubleValue": DoubleValue,
    "isNull": NullValue,
    "longValue": LongValue,
    "stringValue": StringValue,
    "booleanValue": BooleanValue,
}

NUMERIC_TYPES = frozenset({"DECIMAL"})
TEMPORAL_TYPES = frozenset({"DATE", "DATETIME", "TIMESTAMP", "YEAR"})


def decode_field(field: Mapping[str, Any]) -> FieldValue:
    """Decode one wire field into its tagged variant.

    Exactly one recognised tag must be present.

    Raises:
        HydrationError: If the field carries no tag, several tags, or an
            unknown tag
    """
    unknown = [tag for tag in field if tag not in _FIELD_TAGS]
    if unknown:
        raise HydrationError(
            message=f"Unknown value type '{unknown[0]}' from row", code="UnknownValueType"
        )

    tags = list(field)
    if len(tags) != 1:
        described = ", ".join(tags) if tags else "none"
        raise HydrationError(
            message=f"Expected exactly one value type in field, found {described}",
            code="AmbiguousValueType",
        )

    tag = tags[0]
    if tag == "isNull":
        return NullValue()
    return _FIELD_TAGS[tag](field[tag])


def _parse_utc(value: str) -> datetime | None:
    """Read a Data API date/time string as UTC.

    Returns None for values with no datetime equivalent, such as the MySQL
    zero date ``0000-00-00``.
    """
    text = value.strip()
    try:
        if text.isdigit() and len(text) == 4:
            return datetime(int(text), 1, 1, tzinfo=UTC)
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def coerce_value(value: RowValue, type_name: str) -> RowValue:
    """Apply the display coercion for a declared column type."""
    if value is None:
        return None

    if type_name in NUMERIC_TYPES:
        try:
            return Decimal(str(value))
        except InvalidOperation as e:
            raise HydrationError(
                message=f"Invalid numeric value '{value}'", code="InvalidNumericValue"
            ) from e

    if type_name in TEMPORAL_TYPES:
        parsed = _parse_utc(str(value))
        return value if parsed is None else parsed

    return value


def hydrate_row(fields: Sequence[Mapping[str, Any]], columns: Sequence[ColumnDescriptor]) -> Row:
    """Hydrate one positional row into a label-keyed mapping.

    Columns sharing a label overwrite earlier ones (last write wins).
    """
    if len(fields) > len(columns):
        raise HydrationError(
            message=f"Row has {len(fields)} values but only {len(columns)} columns described",
            code="MissingColumnMetadata",
        )

    row: Row = {}
    for field, column in zip(fields, columns):
        value = decode_field(field).value
        row[column.label] = coerce_value(value, column.type_name)
    return row


def hydrate_records(
    records: Sequence[Sequence[Mapping[str, Any]]], columns: Sequence[ColumnDescriptor]
) -> list[Row]:
    """Hydrate every row of a result set."""
    return [hydrate_row(fields, columns) for fields in records]
