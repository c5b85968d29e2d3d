"""Blocking subprocess execution for external Node.js tools."""

import shutil
import subprocess
from pathlib import Path
from typing import Optional, Sequence


class CommandError(RuntimeError):
    """An external command could not be started, timed out or exited non-zero."""

    def __init__(self, argv: Sequence[str], message: str, returncode: Optional[int] = None):
        super().__init__(f"{' '.join(argv)}: {message}")
        self.argv = list(argv)
        self.returncode = returncode


class CommandRunner:
    """Runs one command at a time and waits for it to exit.

    Output is discarded unless ``verbose`` is set (or the call asks for it),
    in which case it is passed straight through to the terminal.
    """

    def __init__(self, verbose: bool = False, timeout: Optional[float] = None):
        self.verbose = verbose
        self.timeout = timeout

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Optional[Path] = None,
        capture: bool = False,
        input_text: Optional[str] = None,
        echo: bool = False,
        timeout: Optional[float] = None,
    ) -> subprocess.CompletedProcess:
        """Run ``argv`` to completion.

        Args:
            argv: Program and arguments; the program is looked up on PATH
            cwd: Working directory for the child process
            capture: Return stdout/stderr as text instead of discarding them
            input_text: Text fed to the child's stdin
            echo: Always show the child's output (installs)
            timeout: Override the runner's default timeout

        Returns:
            The completed process

        Raises:
            CommandError: If the program is missing, times out or fails
        """
        program = shutil.which(argv[0])
        if program is None:
            raise CommandError(argv, f"{argv[0]} not found on PATH")

        if capture:
            output = {"capture_output": True}
        elif self.verbose or echo:
            output = {}
        else:
            output = {"stdout": subprocess.DEVNULL, "stderr": subprocess.DEVNULL}

        try:
            result = subprocess.run(
                [program, *argv[1:]],
                cwd=cwd,
                input=input_text,
                text=True,
                timeout=timeout if timeout is not None else self.timeout,
                **output,
            )
        except subprocess.TimeoutExpired as e:
            raise CommandError(argv, f"timed out after {e.timeout}s") from e
        except OSError as e:
            raise CommandError(argv, str(e)) from e

        if result.returncode != 0:
            detail = (result.stderr or "").strip()[:200] if capture else ""
            message = f"exited with status {result.returncode}"
            if detail:
                message = f"{message}: {detail}"
            raise CommandError(argv, message, returncode=result.returncode)
        return result
