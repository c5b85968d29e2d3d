"""Tests for the blocking command runner."""

import sys

import pytest

from decryptex.core.runner import CommandError, CommandRunner


def _python(code):
    return [sys.executable, "-c", code]


def test_successful_command_returns_captured_output():
    result = CommandRunner().run(_python("print('hello')"), capture=True)

    assert result.returncode == 0
    assert result.stdout.strip() == "hello"


def test_input_text_is_fed_to_stdin():
    result = CommandRunner().run(
        _python("import sys; print(sys.stdin.read().upper())"),
        capture=True,
        input_text="var a;",
    )

    assert result.stdout.strip() == "VAR A;"


def test_missing_program_raises():
    with pytest.raises(CommandError, match="not found on PATH") as exc_info:
        CommandRunner().run(["decryptex-no-such-tool-xyz", "--help"])

    assert exc_info.value.returncode is None
    assert exc_info.value.argv == ["decryptex-no-such-tool-xyz", "--help"]


def test_non_zero_exit_raises_with_stderr_detail():
    code = "import sys; sys.stderr.write('boom'); sys.exit(3)"

    with pytest.raises(CommandError) as exc_info:
        CommandRunner().run(_python(code), capture=True)

    assert exc_info.value.returncode == 3
    assert "exited with status 3" in str(exc_info.value)
    assert "boom" in str(exc_info.value)


def test_non_zero_exit_without_capture_still_raises():
    with pytest.raises(CommandError) as exc_info:
        CommandRunner().run(_python("import sys; sys.exit(2)"))

    assert exc_info.value.returncode == 2


def test_timeout_raises():
    runner = CommandRunner(timeout=1)

    with pytest.raises(CommandError, match="timed out"):
        runner.run(_python("import time; time.sleep(5)"))


def test_cwd_is_honoured(tmp_path):
    result = CommandRunner().run(_python("import os; print(os.getcwd())"), cwd=tmp_path, capture=True)

    assert result.stdout.strip() == str(tmp_path.resolve())
