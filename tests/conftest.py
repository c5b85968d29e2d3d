"""Pytest configuration and fixtures."""

import io
import subprocess
from pathlib import Path
from typing import Callable, Optional

import pytest
from rich.console import Console

from decryptex.config import Config
from decryptex.core.runner import CommandError
from decryptex.log import StatusLogger


def tool_key(argv: list[str]) -> str:
    """Name the tool an argv invokes, looking through `npx`."""
    if argv[0] == "npx":
        if argv[1] == "@wakaru/cli":
            return f"@wakaru/cli {argv[2]}"
        return argv[1]
    return argv[0]


def failing(argv, **kwargs):
    raise CommandError(argv, "exited with status 1", returncode=1)


class FakeRunner:
    """Stands in for CommandRunner: records argv lists and dispatches to handlers."""

    def __init__(self):
        self.calls: list[list[str]] = []
        self.handlers: dict[str, Callable] = {}

    def on(self, tool: str, handler: Callable) -> "FakeRunner":
        self.handlers[tool] = handler
        return self

    def fail(self, *tools: str) -> "FakeRunner":
        for tool in tools:
            self.handlers[tool] = failing
        return self

    def called_tools(self) -> list[str]:
        return [tool_key(argv) for argv in self.calls]

    def run(self, argv, **kwargs) -> subprocess.CompletedProcess:
        argv = list(argv)
        self.calls.append(argv)
        handler: Optional[Callable] = self.handlers.get(tool_key(argv))
        result = handler(argv, **kwargs) if handler else None
        return result or subprocess.CompletedProcess(argv, 0, stdout="", stderr="")


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def console_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def logger(console_buffer: io.StringIO) -> StatusLogger:
    """Status logger writing into a buffer instead of the terminal."""
    return StatusLogger(verbose=True, console=Console(file=console_buffer, width=200, highlight=False))


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(base_dir=tmp_path, node_project_dir=tmp_path)


@pytest.fixture
def obfuscated_code() -> str:
    """Return a small obfuscator.io-style sample."""
    return (
        "var _0x4f2a=['log','Hello\\x20World'];"
        "(function(_0x1b,_0x2c){var _0x3d=function(_0x4e){while(--_0x4e){_0x1b['push'](_0x1b['shift']());}};"
        "_0x3d(++_0x2c);}(_0x4f2a,0x1e3));"
        "console[_0x4f2a[0]](_0x4f2a[1]);\n"
    )


@pytest.fixture
def clean_code() -> str:
    return """
function add(x, y) {
    return x + y;
}
console.log(add(1, 2));
"""
