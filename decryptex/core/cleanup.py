"""Removal of staging directories and per-file artifacts."""

import os
import shutil
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from decryptex.log import StatusLogger


@dataclass
class StepContext:
    """Paths a pipeline step reads and writes for one file."""
    file_path: Path
    output_dir: Path

    @property
    def temp_path(self) -> Path:
        return self.file_path.with_name(f"{self.file_path.name}.temp")

    @property
    def deobfuscated_path(self) -> Path:
        return self.file_path.with_name(f"{self.file_path.name}.deobfuscated.js")

    def artifacts(self) -> list[Path]:
        return [self.output_dir, self.temp_path, self.deobfuscated_path]


def remove_path(path: Path) -> bool:
    """Delete a file or directory tree; return False if nothing was there."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
        return True
    if path.exists() or path.is_symlink():
        path.unlink()
        return True
    return False


def remove_output_dirs(
    root: Optional[Path] = None,
    dir_name: str = "output_dir",
    logger: Optional[StatusLogger] = None,
) -> list[Path]:
    """Remove every directory named ``dir_name`` under ``root``.

    Args:
        root: Directory to sweep (default: current working directory)
        dir_name: Staging directory name to remove
        logger: Optional status logger

    Returns:
        The directories that were removed
    """
    root = root or Path.cwd()
    removed: list[Path] = []
    if not root.is_dir():
        return removed

    for current, dirnames, _filenames in os.walk(root):
        if dir_name in dirnames:
            dirnames.remove(dir_name)
            target = Path(current) / dir_name
            try:
                remove_path(target)
            except OSError as e:
                if logger:
                    logger.error(f"Error cleaning up output directory: {target} ({e})")
                continue
            removed.append(target)
            if logger:
                logger.debug(f"Cleaned up output directory: {target}")
    return removed


@contextmanager
def staged_workspace(file_path: Path, output_dir_name: str = "output_dir") -> Iterator[StepContext]:
    """Create the staging directory for one file and release all artifacts on exit.

    Whatever happens inside the block (step failures, KeyboardInterrupt,
    SystemExit), the output directory and the sibling artifacts are gone
    afterwards. The file itself keeps the last promoted content.
    """
    context = StepContext(file_path=file_path, output_dir=file_path.parent / output_dir_name)
    # Leftovers from an earlier run must not be mistaken for fresh tool output.
    for artifact in context.artifacts():
        remove_path(artifact)
    context.output_dir.mkdir(parents=True, exist_ok=True)
    try:
        yield context
    finally:
        for artifact in context.artifacts():
            remove_path(artifact)
