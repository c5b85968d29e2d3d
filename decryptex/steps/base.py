"""Base step interface and the output conventions external tools follow."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from decryptex.core.cleanup import StepContext, remove_path


@dataclass
class StepResult:
    """Outcome of one step for one file."""
    index: int
    name: str
    ok: bool
    promoted: Optional[Path] = None
    error: Optional[str] = None


def promote(artifact: Path, target: Path) -> bool:
    """Move ``artifact`` over ``target``.

    Empty artifacts are discarded instead, so a tool that crashed after
    creating its output file cannot blank the source.
    """
    if not artifact.is_file():
        return False
    if artifact.stat().st_size == 0:
        artifact.unlink()
        return False
    if target.exists():
        target.unlink()
    artifact.rename(target)
    return True


class Step(ABC):
    """One external tool invocation plus its reconciliation rule."""

    name: str = "base_step"
    description: str = "Base step class"

    @abstractmethod
    def command(self, context: StepContext) -> list[str]:
        """Build the argv for this step.

        Args:
            context: Paths for the file being processed

        Returns:
            Program and arguments
        """
        pass

    def reconcile(self, context: StepContext) -> Optional[Path]:
        """Bring the tool's output back to ``context.file_path``.

        Returns:
            The artifact that was promoted, or None if there was nothing to do
        """
        return None


class InPlaceStep(Step):
    """Tools that rewrite the file at its own path."""


class OutputDirStep(Step):
    """Tools that write `<output_dir>/entry.js`; the directory is kept for the next one."""

    produced_name: str = "entry.js"

    def reconcile(self, context: StepContext) -> Optional[Path]:
        produced = context.output_dir / self.produced_name
        return produced if promote(produced, context.file_path) else None


class TempSiblingStep(Step):
    """Tools that write `<file>.temp`, either as a file or as a directory."""

    produced_name: str = "deobfuscated.js"

    def reconcile(self, context: StepContext) -> Optional[Path]:
        temp_path = context.temp_path
        if temp_path.is_dir():
            produced = temp_path / self.produced_name
            promoted = promote(produced, context.file_path)
            remove_path(temp_path)
            return produced if promoted else None
        return temp_path if promote(temp_path, context.file_path) else None


class SiblingFileStep(Step):
    """Tools that write `<file>.deobfuscated.js` next to the source."""

    def reconcile(self, context: StepContext) -> Optional[Path]:
        produced = context.deobfuscated_path
        return produced if promote(produced, context.file_path) else None
