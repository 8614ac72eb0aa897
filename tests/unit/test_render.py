"""
Unit tests for adasql.render (result output).
"""

import io
from datetime import UTC, datetime
from decimal import Decimal

import pytest
from rich.console import Console

from adasql.models import StatementResult
from adasql.render import format_value, render_result


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200)


def _output(console: Console) -> str:
    return console.file.getvalue()


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, "NULL"),
        (datetime(2024, 1, 1, tzinfo=UTC), "2024-01-01T00:00:00+00:00"),
        (b"\x01\xff", "0x01ff"),
        (Decimal("1.10"), "1.10"),
        (True, "True"),
        (3, "3"),
        ("[bold]x", "[bold]x"),
    ],
)
def test_format_value(value, expected) -> None:
    assert format_value(value) == expected


def test_records_table(console) -> None:
    render_result(
        console,
        StatementResult(
            sql="SELECT id, note FROM t",
            status="success",
            records=[{"id": 1, "note": "[not markup]"}, {"id": 2, "note": None}],
            record_count=2,
        ),
    )

    output = _output(console)
    assert "SELECT id, note FROM t" in output
    assert "[not markup]" in output
    assert "NULL" in output
    assert "Record Count: 2" in output


def test_empty_result_set(console) -> None:
    render_result(
        console, StatementResult(sql="SELECT 1 FROM t", status="success", records=[], record_count=0)
    )

    assert "Record Count: 0" in _output(console)


def test_affected_count(console) -> None:
    render_result(console, StatementResult(sql="DELETE FROM t", status="success", affected_count=4))

    assert "Number of Affected Records: 4" in _output(console)


def test_status_message(console) -> None:
    render_result(
        console, StatementResult(sql="BEGIN", status="success", message="Transaction 'x' begun")
    )

    assert "✓ Transaction 'x' begun" in _output(console)


def test_failure(console) -> None:
    render_result(
        console,
        StatementResult(sql="SELEC 1", status="failed", message="Failed to execute statement: no"),
    )

    assert "✗ Failed to execute statement: no" in _output(console)


def test_plain_success(console) -> None:
    render_result(console, StatementResult(sql="SET @a = 1", status="success"))

    assert "OK" in _output(console)


def test_empty_statement_prints_nothing(console) -> None:
    render_result(console, StatementResult(sql="", status="success"))

    assert _output(console) == ""
