"""
Keyword index for tab completion

Collects the names offered by the completer: SQL reserved words, shell
commands, and the schema/table/column names visible in the current
database. Metadata lookups are best effort; any failure only narrows what
can be completed.
"""

import asyncio
import re
from dataclasses import dataclass, field

from rich.console import Console
from rich.markup import escape
from sqlglot.dialects.mysql import MySQL

from adasql.domain.errors import BackendError
from adasql.providers.base.backend import DataAPIBackend

console = Console(stderr=True)

_WORD_RE = re.compile(r"^[A-Z_][A-Z0-9_]*$")

# Statement words the MySQL tokenizer hands through as plain identifiers
_MYSQL_STATEMENT_WORDS = frozenset(
    {
        "analyze",
        "columns",
        "databases",
        "describe",
        "explain",
        "fields",
        "grants",
        "index",
        "indexes",
        "optimize",
        "processlist",
        "rename",
        "schemas",
        "show",
        "status",
        "tables",
        "triggers",
        "truncate",
        "use",
        "variables",
        "warnings",
    }
)


def _language_keywords() -> frozenset[str]:
    tokenizer_words = {
        keyword.lower() for keyword in MySQL.Tokenizer.KEYWORDS if _WORD_RE.match(keyword)
    }
    return frozenset(tokenizer_words | _MYSQL_STATEMENT_WORDS)


LANGUAGE_KEYWORDS = _language_keywords()
REPL_KEYWORDS = frozenset({"use", "begin", "commit", "rollback"})


@dataclass(frozen=True)
class KeywordIndex:
    """Immutable snapshot of everything the completer can offer."""

    language_keywords: frozenset[str] = LANGUAGE_KEYWORDS
    repl_keywords: frozenset[str] = REPL_KEYWORDS
    schema_names: frozenset[str] = field(default_factory=frozenset)
    object_names: frozenset[str] = field(default_factory=frozenset)
    object_dot_names: frozenset[str] = field(default_factory=frozenset)


def _warn(message: str) -> None:
    console.print(f"[yellow]⚠ Warning:[/yellow] {escape(message)}")


async def fetch_keywords(backend: DataAPIBackend, database: str | None = None) -> KeywordIndex:
    """Build a keyword snapshot from backend metadata.

    Schemas are always listed. Tables and their columns are listed only when
    a database is selected. Each lookup fails independently and is reported
    as a warning.

    Args:
        backend: Data API backend used for metadata queries
        database: Currently selected database, if any

    Returns:
        A new KeywordIndex snapshot
    """
    try:
        schema_names = set(await asyncio.to_thread(backend.list_schemas))
    except BackendError as e:
        _warn(f"Failed to query for schemas, autocomplete will be limited ({e.message})")
        schema_names = set()

    object_names: set[str] = set()
    object_dot_names: set[str] = set()

    if database:
        try:
            table_names = await asyncio.to_thread(backend.list_tables, database)
        except BackendError as e:
            _warn(f"Failed to query for tables, autocomplete will be limited ({e.message})")
            table_names = []

        object_names.update(table_names)

        for table_name in dict.fromkeys(table_names):
            try:
                column_names = await asyncio.to_thread(backend.list_columns, database, table_name)
            except BackendError as e:
                _warn(
                    f"Failed to query for columns from table '{table_name}', "
                    f"autocomplete will be limited ({e.message})"
                )
                continue

            for column_name in column_names:
                object_names.add(column_name)
                object_dot_names.add(f"{table_name}.{column_name}")

    return KeywordIndex(
        schema_names=frozenset(schema_names),
        object_names=frozenset(object_names),
        object_dot_names=frozenset(object_dot_names),
    )
