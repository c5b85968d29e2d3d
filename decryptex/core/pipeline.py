"""Per-file deobfuscation pipeline."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from decryptex.config import CleanupScope, Config
from decryptex.core.cleanup import remove_output_dirs, staged_workspace
from decryptex.core.runner import CommandError, CommandRunner
from decryptex.log import StatusLogger
from decryptex.steps import Step, StepResult, default_steps


@dataclass
class PipelineReport:
    """Step results for one file, in execution order."""
    file: Path
    results: list[StepResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return len(self.results) - self.succeeded


class Pipeline:
    """Runs a fixed list of steps against one file, sequentially.

    A failing step is logged and skipped; nothing aborts the run and
    nothing is rolled back.
    """

    def __init__(
        self,
        runner: CommandRunner,
        logger: StatusLogger,
        config: Config,
        steps: Optional[list[Step]] = None,
    ):
        self.runner = runner
        self.logger = logger
        self.config = config
        self.steps = steps if steps is not None else default_steps()

    def run(self, file_path: Path) -> PipelineReport:
        report = PipelineReport(file=file_path)
        total = len(self.steps)

        self.logger.info(f"Deobfuscating file: {file_path}")
        with staged_workspace(file_path, self.config.output_dir_name) as context:
            for index, step in enumerate(self.steps, start=1):
                prefix = f"Step {index}/{total}:"
                self.logger.info(f"{prefix} deobfuscate using {step.name} started.")
                argv = step.command(context)
                self.logger.debug(" ".join(argv))

                result = StepResult(index=index, name=step.name, ok=True)
                try:
                    self.runner.run(argv, cwd=file_path.parent)
                except CommandError as e:
                    result.ok = False
                    result.error = str(e)
                    self.logger.error(f"{prefix} Error during deobfuscate using {step.name}!")
                    self.logger.debug(str(e))
                else:
                    self.logger.info(f"{prefix} deobfuscate using {step.name} completed.")

                # Tools may exit non-zero and still leave usable output behind.
                try:
                    result.promoted = step.reconcile(context)
                except OSError as e:
                    result.ok = False
                    result.error = str(e)
                    self.logger.error(f"{prefix} Could not reconcile output of {step.name}: {e}")
                report.results.append(result)

        self.sweep(file_path)
        self.logger.success("Deobfuscation and cleanup completed successfully.")
        return report

    def sweep(self, file_path: Path) -> list[Path]:
        """Remove leftover output directories after a file finishes."""
        if self.config.cleanup_scope == CleanupScope.WORKING_DIR:
            root = Path.cwd()
        else:
            root = file_path.parent
        self.logger.debug("Cleaning up temporary data...")
        return remove_output_dirs(root, self.config.output_dir_name, self.logger)


def deobfuscate_file(
    file_path: Path,
    config: Config,
    runner: Optional[CommandRunner] = None,
    logger: Optional[StatusLogger] = None,
) -> PipelineReport:
    """Run the default pipeline over a single file.

    Args:
        file_path: JavaScript file to rewrite in place
        config: Configuration
        runner: Command runner (default: built from config)
        logger: Status logger (default: built from config)

    Returns:
        Report with one result per step
    """
    logger = logger or StatusLogger(verbose=config.verbose)
    runner = runner or CommandRunner(verbose=config.verbose, timeout=config.step_timeout_seconds)
    return Pipeline(runner, logger, config).run(file_path)
