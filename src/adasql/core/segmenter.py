"""
Statement segmentation

Buffers raw terminal input and cuts it into complete statements. Semicolons
and comment markers inside quotes are literal text. Block comments are
removed, MySQL executable comments (``/*!40101 ... */``) are unwrapped, and a
bare database switch is complete without a semicolon.
"""

import re

_COMMENT_OPEN = "/*"
_COMMENT_CLOSE = "*/"
_QUOTES = ("'", '"', "`")
# Executable comment marker and its optional version number
_EXECUTABLE_RE = re.compile(r"!\d*")

DB_SWITCH_RE = re.compile(r"^(?:use|\\c(?:onnect)?)\s+(`?)([^;\s`]+)\1\s*;?$", re.IGNORECASE)


def match_database_switch(text: str) -> str | None:
    """Return the database named by a ``use``/``\\c``/``\\connect`` command."""
    match = DB_SWITCH_RE.match(text.strip())
    if not match:
        return None
    return match.group(2)


def _scan(text: str) -> tuple[list[str], str, str, str | None]:
    """Scan text that starts at a statement boundary.

    Returns:
        (completed_statements, tail, held_comment, open_quote)
    """
    statements: list[str] = []
    current: list[str] = []
    quote: str | None = None
    i = 0

    while i < len(text):
        char = text[i]

        if quote is not None:
            current.append(char)
            if char == "\\" and quote != "`" and i + 1 < len(text):
                current.append(text[i + 1])
                i += 2
                continue
            if char == quote:
                quote = None
            i += 1
            continue

        if text.startswith(_COMMENT_OPEN, i):
            end = text.find(_COMMENT_CLOSE, i + len(_COMMENT_OPEN))
            if end == -1:
                return statements, "".join(current), text[i:], None
            body = text[i + len(_COMMENT_OPEN) : end]
            executable = _EXECUTABLE_RE.match(body)
            inner = body[executable.end() :] if executable else ""
            # rescan the unwrapped body in place
            text = text[:i] + inner + text[end + len(_COMMENT_CLOSE) :]
            continue

        if char in _QUOTES:
            quote = char
            current.append(char)
        elif char == ";":
            statements.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    return statements, "".join(current), "", quote


class StatementSegmenter:
    """Accumulate input chunks and emit complete statement texts.

    State carried between calls is the unterminated tail buffer and whether
    the input currently sits inside a block comment. An open comment (or an
    open executable comment) is held back verbatim until its terminator
    arrives, so a terminator split across two chunks is still recognised.
    The tail always starts at a statement boundary, so quote state is
    recovered by rescanning it together with the next chunk.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._held = ""
        self.in_comment = False

    @property
    def buffer(self) -> str:
        """Unterminated statement text with comments already removed."""
        return self._buffer

    @property
    def pending(self) -> bool:
        """True while a partial statement or an open comment is buffered."""
        return bool(self._buffer.strip() or self._held)

    def feed(self, chunk: str) -> list[str]:
        """Add a chunk of raw input and return any statements it completed."""
        statements, tail, held, quote = _scan(self._buffer + self._held + chunk)

        self._held = held
        self.in_comment = bool(held) and not held.startswith("/*!")

        if not held and quote is None and match_database_switch(tail) is not None:
            statements.append(tail.strip())
            tail = ""

        self._buffer = tail
        return statements

    def flush(self) -> list[str]:
        """Return the trailing unterminated statement (end of input) and reset."""
        tail = self._buffer.strip()
        self.reset()
        return [tail] if tail else []

    def reset(self) -> None:
        """Drop any buffered input and comment state."""
        self._buffer = ""
        self._held = ""
        self.in_comment = False
