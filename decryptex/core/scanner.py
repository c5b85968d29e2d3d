"""Directory traversal and script-file discovery."""

import os
from pathlib import Path
from typing import Iterator

from decryptex.config import Config

# Bundled helper scripts must never be fed through the pipeline themselves.
_OWN_FILES = frozenset(
    path.resolve() for path in (Path(__file__).parent / "js").glob("*")
)


def is_script_file(path: Path, config: Config) -> bool:
    """Whether ``path`` is a regular file with a script suffix that is not one of ours."""
    if path.suffix.lower() not in config.script_extensions:
        return False
    if not path.is_file():
        return False
    return path.resolve() not in _OWN_FILES


def _sorted_entries(directory: Path) -> list[os.DirEntry]:
    with os.scandir(directory) as it:
        return sorted(it, key=lambda entry: entry.name)


def iter_script_files(root: Path, config: Config) -> Iterator[Path]:
    """Yield script files under ``root`` depth-first, in name order.

    Ignored directories and symlinked directories are not descended into.
    """
    skipped = config.skipped_dir_names
    for entry in _sorted_entries(root):
        if entry.is_dir(follow_symlinks=False):
            if entry.name in skipped:
                continue
            yield from iter_script_files(Path(entry.path), config)
        elif is_script_file(Path(entry.path), config):
            yield Path(entry.path)


def count_script_files(root: Path, config: Config) -> int:
    """Total number of files ``iter_script_files`` will yield, for progress bars."""
    return sum(1 for _ in iter_script_files(root, config))


def has_direct_script_files(directory: Path, config: Config) -> bool:
    """Whether ``directory`` itself (not its subdirectories) holds a script file."""
    return any(
        not entry.is_dir() and is_script_file(Path(entry.path), config)
        for entry in _sorted_entries(directory)
    )


def discover_sibling_targets(base_dir: Path, config: Config) -> list[Path]:
    """Find directories next to each other under ``base_dir`` worth processing.

    A subdirectory qualifies when it is not ignored and contains at least one
    script file directly. If none qualifies, ``base_dir`` itself is returned.
    """
    skipped = config.skipped_dir_names
    targets = [
        Path(entry.path)
        for entry in _sorted_entries(base_dir)
        if entry.is_dir()
        and entry.name not in skipped
        and has_direct_script_files(Path(entry.path), config)
    ]
    return targets or [base_dir]
