"""
Tab completion

Completes the last whitespace-separated token of the input line against the
session's latest keyword snapshot. Completion never waits for a snapshot that
is still being built.
"""

import re
from collections.abc import Iterable

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from adasql.core.keywords import KeywordIndex
from adasql.core.session import Session

META_COMMAND_PREFIX = "."
QUOTE_CHAR = "`"

_WHITESPACE_RE = re.compile(r"\s+")


def complete_line(line: str, keywords: KeywordIndex) -> list[str]:
    """Return sorted full-line completions for the last token of ``line``.

    Tokens containing a dot, or starting with a backtick, only complete to
    schema and object names. The first token of a line also completes to
    shell commands. Quoted targets get their closing backtick appended.
    """
    if not line or line.startswith(META_COMMAND_PREFIX):
        return []

    tokens = _WHITESPACE_RE.split(line)
    target = tokens[-1]

    quoted = target.startswith(QUOTE_CHAR)
    if quoted:
        target = target[len(QUOTE_CHAR) :]

    names_only = quoted or "." in target

    candidates: set[str] = set(keywords.schema_names) | keywords.object_names
    if not any(tokens[:-1]):
        candidates |= keywords.repl_keywords
    if not names_only:
        candidates |= keywords.language_keywords
    if "." in target:
        candidates |= keywords.object_dot_names

    prefix = line[: len(line) - len(target)]
    suffix = QUOTE_CHAR if quoted else ""

    return sorted(
        f"{prefix}{candidate}{suffix}" for candidate in candidates if candidate.startswith(target)
    )


class SQLCompleter(Completer):
    """prompt_toolkit adapter over :func:`complete_line`."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        line = document.text_before_cursor
        for candidate in complete_line(line, self.session.keywords):
            display = _WHITESPACE_RE.split(candidate)[-1]
            yield Completion(candidate, start_position=-len(line), display=display)
