"""
Unit tests for the shell command (piped input, meta commands, exit codes).
"""

import asyncio
import io

from rich.console import Console

from adasql.commands.shell import CONTINUATION_PROMPT, PROMPT, Shell, run_shell
from adasql.models import StatementResult


def _console() -> Console:
    return Console(file=io.StringIO(), width=200)


def _shell(session, *, interactive: bool = False) -> Shell:
    return Shell(session, interactive=interactive, output=_console(), errors=_console())


def _text(console: Console) -> str:
    return console.file.getvalue()


def _run(shell: Shell, script: str) -> int:
    return asyncio.run(shell.run(io.StringIO(script)))


def executed_sql(backend) -> list[str]:
    return [call[1] for call in backend.calls if call[0] == "execute"]


class TestPipedInput:
    def test_runs_every_statement(self, session, backend) -> None:
        shell = _shell(session)

        exit_code = _run(shell, "SELECT 1;\nSELECT 2;\n")

        assert exit_code == 0
        assert executed_sql(backend) == ["SELECT 1", "SELECT 2"]
        assert "SELECT 2" in _text(shell.output)

    def test_first_failure_stops_and_exits_nonzero(self, session, backend) -> None:
        backend.failing = {"BAD"}
        shell = _shell(session)

        exit_code = _run(shell, "SELECT 1;\nBAD;\nSELECT 3;\n")

        assert exit_code == 1
        assert executed_sql(backend) == ["SELECT 1", "BAD"]
        assert "Failed to execute statement" in _text(shell.errors)
        assert "Failed to execute statement" not in _text(shell.output)

    def test_rejection_does_not_fail_the_run(self, session, backend) -> None:
        shell = _shell(session)

        exit_code = _run(shell, "COMMIT;\nSELECT 1;\n")

        assert exit_code == 0
        assert executed_sql(backend) == ["SELECT 1"]
        assert "No transaction currently in progress" in _text(shell.output)

    def test_trailing_statement_without_semicolon_runs(self, session, backend) -> None:
        _run(_shell(session), "SELECT 1;\nSELECT 2")

        assert executed_sql(backend) == ["SELECT 1", "SELECT 2"]

    def test_use_applies_to_following_statements(self, session, backend) -> None:
        _run(_shell(session), "use app\nSELECT 1;\n")

        assert ("execute", "SELECT 1", "app", None) in backend.calls

    def test_multi_line_statement(self, session, backend) -> None:
        _run(_shell(session), "SELECT *\n  FROM t\n  WHERE a = 1;\n")

        assert executed_sql(backend) == ["SELECT *\n  FROM t\n  WHERE a = 1"]

    def test_use_does_not_rebuild_keywords(self, session, backend) -> None:
        _run(_shell(session), "use app\nSELECT 1;\n")

        assert session.database == "app"
        assert [call[0] for call in backend.calls] == ["execute"]

    def test_run_shell_uses_default_consoles(self, session, backend, capsys) -> None:
        exit_code = run_shell(session, interactive=False, stream=io.StringIO("SELECT 42;\n"))

        assert exit_code == 0
        assert "SELECT 42" in capsys.readouterr().out


class TestMetaCommands:
    def test_exit_stops_reading(self, session, backend) -> None:
        exit_code = _run(_shell(session), ".exit\nSELECT 1;\n")

        assert exit_code == 0
        assert backend.calls == []

    def test_help(self, session) -> None:
        shell = _shell(session)

        _run(shell, ".help\n")

        assert ".exit, .quit" in _text(shell.output)

    def test_unknown_command(self, session) -> None:
        shell = _shell(session)

        _run(shell, ".frobnicate\n")

        assert "Unknown command '.frobnicate'" in _text(shell.errors)

    def test_dot_inside_statement_is_sql(self, session, backend) -> None:
        _run(_shell(session), "SELECT\n.5;\n")

        assert executed_sql(backend) == ["SELECT\n.5"]

    def test_break_discards_partial_statement(self, session, backend) -> None:
        shell = _shell(session, interactive=True)

        assert shell.feed("SELECT 1\n")
        assert shell.prompt_text() == CONTINUATION_PROMPT

        assert shell.feed(".break")

        assert shell.prompt_text() == PROMPT
        assert not shell.segmenter.pending

    def test_clear_discards_partial_statement_in_piped_input(self, session, backend) -> None:
        _run(_shell(session), "SELECT 1\n.clear\nSELECT 2;\n")

        assert executed_sql(backend) == ["SELECT 2"]

    def test_exit_while_statement_pending(self, session, backend) -> None:
        exit_code = _run(_shell(session), "SELECT 1\n.exit\n")

        assert exit_code == 0
        assert backend.calls == []

    def test_break_escapes_unterminated_quote(self, session, backend) -> None:
        _run(_shell(session), "SELECT 'oops;\n.break\nSELECT 2;\n")

        assert executed_sql(backend) == ["SELECT 2"]

    def test_exit_returns_false(self, session) -> None:
        shell = _shell(session, interactive=True)

        assert shell.feed(".quit") is False


class TestPastedInput:
    def test_pasted_block_is_split_into_lines(self, session, backend) -> None:
        shell = _shell(session, interactive=True)

        async def scenario():
            consumer = asyncio.create_task(shell.queue.run())
            shell.feed("use app\nSELECT 1;\n")
            await shell.queue.join()
            consumer.cancel()
            session.cancel_keyword_refresh()

        asyncio.run(scenario())

        assert session.database == "app"
        assert ("execute", "SELECT 1", "app", None) in backend.calls

    def test_meta_command_inside_pasted_block(self, session, backend) -> None:
        shell = _shell(session, interactive=True)

        assert shell.feed("SELECT 1\n.break\n") is True
        assert not shell.segmenter.pending

        assert shell.feed("SELECT 2\n.exit\nSELECT 3;\n") is False


class TestResultRouting:
    def test_interactive_failures_go_to_output(self, session) -> None:
        shell = _shell(session, interactive=True)

        shell.on_result(StatementResult(sql="SELECT x", status="failed", message="boom"))

        assert "boom" in _text(shell.output)
        assert _text(shell.errors) == ""

    def test_piped_failures_go_to_errors(self, session) -> None:
        shell = _shell(session)

        shell.on_result(StatementResult(sql="SELECT x", status="failed", message="boom"))

        assert "boom" in _text(shell.errors)
        assert _text(shell.output) == ""
