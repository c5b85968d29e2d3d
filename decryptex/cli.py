"""CLI interface for decryptex."""

import signal
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from decryptex import __version__
from decryptex.config import CleanupScope, Config
from decryptex.core import (
    CommandRunner,
    DependencyInstaller,
    InstallError,
    ObfuscationDetector,
    count_script_files,
    discover_sibling_targets,
    iter_script_files,
    remove_output_dirs,
)
from decryptex.core.pipeline import Pipeline, PipelineReport
from decryptex.core.scanner import is_script_file
from decryptex.log import StatusLogger, setup_debug_logger

console = Console(highlight=False)

BANNER = r"""
    ██████╗ ██████╗  ██████╗██████╗ ██╗   ██╗██████╗ ████████╗██████╗ ██╗  ██╗
    ██╔══██╗╚════██╗██╔════╝██╔══██╗╚██╗ ██╔╝██╔══██╗╚══██╔══╝╚════██╗╚██╗██╔╝
    ██║  ██║ █████╔╝██║     ██████╔╝ ╚████╔╝ ██████╔╝   ██║    █████╔╝ ╚███╔╝
    ██║  ██║ ╚═══██╗██║     ██╔══██╗  ╚██╔╝  ██╔═══╝    ██║    ╚═══██╗ ██╔██╗
    ██████╔╝██████╔╝╚██████╗██║  ██║   ██║   ██║        ██║   ██████╔╝██╔╝ ██╗
    ╚═════╝ ╚═════╝  ╚═════╝╚═╝  ╚═╝   ╚═╝   ╚═╝        ╚═╝   ╚═════╝ ╚═╝  ╚═╝
"""


class TargetError(RuntimeError):
    """The requested file or directory cannot be processed."""


@dataclass
class FileOutcome:
    """What happened to one scanned file."""
    file: Path
    status: str  # "deobfuscated", "clean", "failed"
    report: Optional[PipelineReport] = None
    error: Optional[str] = None


def select_targets(
    file_path: Optional[Path],
    dir_path: Optional[Path],
    config: Config,
    logger: StatusLogger,
) -> list[Path]:
    """Resolve the command-line options into directories to walk.

    ``--dir`` wins over ``--file``; with neither, sibling directories of the
    base directory are auto-discovered.

    Raises:
        TargetError: If a given path has the wrong type or nothing qualifies
    """
    if dir_path is not None:
        if not dir_path.is_dir():
            raise TargetError("The specified path is not a directory.")
        return [dir_path.resolve()]

    if file_path is not None:
        if not file_path.is_file():
            raise TargetError("The specified path is not a file.")
        return [file_path.resolve().parent]

    logger.info("Scanning sibling directories...")
    targets = discover_sibling_targets(config.resolved_base_dir, config)
    logger.info("Scanning completed.")
    if targets == [config.resolved_base_dir] and count_script_files(targets[0], config) == 0:
        raise TargetError("No directories to process.")
    return targets


def process_file(
    file_path: Path,
    detector: ObfuscationDetector,
    pipeline: Pipeline,
    logger: StatusLogger,
) -> FileOutcome:
    """Gate one file through the detector and, if obfuscated, the pipeline."""
    content = file_path.read_text(encoding="utf-8")
    logger.info(f"Processing {file_path}...")

    if not detector.is_obfuscated(content):
        logger.info(f"{file_path} is not obfuscated. Skipping...")
        return FileOutcome(file=file_path, status="clean")

    logger.info(f"Deobfuscating {file_path.name}...")
    report = pipeline.run(file_path)
    logger.success(f"{file_path.name} has been deobfuscated and beautified.")
    return FileOutcome(file=file_path, status="deobfuscated", report=report)


def process_directory(
    directory: Path,
    config: Config,
    detector: ObfuscationDetector,
    pipeline: Pipeline,
    logger: StatusLogger,
) -> list[FileOutcome]:
    """Walk ``directory`` and process every script file in it.

    Per-file failures are logged and skipped; installation failures are not.
    """
    total = count_script_files(directory, config)
    logger.info(f"Processing directory: {directory} ({total} files)")

    outcomes: list[FileOutcome] = []
    with tqdm(total=total, desc="Files processed", unit="file", leave=False) as pbar:
        for file_path in iter_script_files(directory, config):
            if not file_path.exists():
                # Removed by an earlier file's cleanup, e.g. a stale pipeline artifact.
                logger.debug(f"{file_path} no longer exists. Skipping...")
                pbar.update(1)
                continue
            try:
                outcome = process_file(file_path, detector, pipeline, logger)
            except InstallError:
                raise
            except Exception as e:
                logger.error(f"Failed to deobfuscate {file_path.name}: {e}")
                outcome = FileOutcome(file=file_path, status="failed", error=str(e))
            outcomes.append(outcome)
            pbar.update(1)

    logger.success(f"All files processed in {directory}.")
    return outcomes


def process_targets(
    targets: list[Path],
    config: Config,
    detector: ObfuscationDetector,
    pipeline: Pipeline,
    logger: StatusLogger,
) -> list[FileOutcome]:
    """Process each target; script files stand for their containing directory."""
    outcomes: list[FileOutcome] = []
    for target in targets:
        if not target.exists():
            logger.warning(f"Directory {target} does not exist.")
            continue
        if target.is_dir():
            outcomes.extend(process_directory(target, config, detector, pipeline, logger))
        elif is_script_file(target, config):
            logger.info(f"Processing file: {target}")
            outcomes.extend(process_directory(target.parent, config, detector, pipeline, logger))
        else:
            logger.warning("The path provided is not a directory or a supported file type.")
    return outcomes


def print_summary(outcomes: list[FileOutcome]) -> None:
    table = Table(title="Processing Summary")
    table.add_column("File")
    table.add_column("Status")
    table.add_column("Steps OK")

    for outcome in outcomes:
        steps = "-"
        if outcome.report is not None:
            steps = f"{outcome.report.succeeded}/{len(outcome.report.results)}"
        status = {"deobfuscated": "✓", "clean": "clean", "failed": "✗"}[outcome.status]
        table.add_row(str(outcome.file), status, steps)

    console.print(table)


def _raise_on_sigterm(signum, frame):
    # Turn SIGTERM into SystemExit so cleanup in finally blocks runs.
    raise SystemExit(128 + signum)


def _final_cleanup(roots: list[Path], config: Config, logger: StatusLogger) -> None:
    logger.info("Cleaning up temporary data...")
    for root in roots:
        remove_output_dirs(root, config.output_dir_name, logger)
    logger.info("Temporary data cleaned up successfully.")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-v", "--version", prog_name="decryptex", message="%(version)s")
@click.option("-f", "--file", "file_path", type=click.Path(path_type=Path), help="Process the directory containing this file")
@click.option("-d", "--dir", "dir_path", type=click.Path(path_type=Path), help="Directory to process recursively")
@click.option("-V", "--verbose", is_flag=True, help="Show tool output and extra diagnostics")
@click.option("--no-install", is_flag=True, help="Fail instead of installing missing npm packages")
@click.option("--cleanup-cwd", is_flag=True, help="Sweep output directories under the working directory after each file")
@click.option("--timeout", type=click.IntRange(min=1), help="Per-step timeout in seconds")
@click.option("--debug", is_flag=True, help="Enable debug logging to file")
@click.option("--debug-file", type=click.Path(path_type=Path), help="Debug log file path (default: decryptex_debug_TIMESTAMP.log)")
def main(
    file_path: Optional[Path],
    dir_path: Optional[Path],
    verbose: bool,
    no_install: bool,
    cleanup_cwd: bool,
    timeout: Optional[int],
    debug: bool,
    debug_file: Optional[Path],
):
    """Just crazy tool that tries to deobfuscate anything around it!

    Obfuscated JavaScript files are rewritten in place; no backup is kept.
    """
    # Only override .env values if CLI args are explicitly provided
    config_kwargs = {}
    if verbose:
        config_kwargs["verbose"] = True
    if no_install:
        config_kwargs["auto_install"] = False
    if cleanup_cwd:
        config_kwargs["cleanup_scope"] = CleanupScope.WORKING_DIR
    if timeout:
        config_kwargs["step_timeout_seconds"] = timeout
    config = Config(**config_kwargs)

    logger = StatusLogger(verbose=config.verbose, console=console)
    if debug:
        log_path = setup_debug_logger(debug_file)
        console.print(f"[yellow]Debug logging enabled: {log_path}[/yellow]")
    if config.verbose:
        console.print("Verbose mode enabled")

    console.print(BANNER, style="bold cyan", markup=False)

    try:
        targets = select_targets(file_path, dir_path, config, logger)
    except TargetError as e:
        logger.error(str(e))
        raise SystemExit(1)

    runner = CommandRunner(verbose=config.verbose, timeout=config.step_timeout_seconds)
    installer = DependencyInstaller(
        runner,
        logger,
        project_dir=config.resolved_node_project_dir,
        auto_install=config.auto_install,
    )
    detector = ObfuscationDetector(runner, installer, package_name=config.detector_package)
    pipeline = Pipeline(runner, logger, config)

    signal.signal(signal.SIGTERM, _raise_on_sigterm)
    cleanup_roots = [Path.cwd()] if config.cleanup_scope == CleanupScope.WORKING_DIR else targets
    try:
        logger.info("Checking dependencies...")
        report = installer.provision([config.detector_package], config.global_tools)
        logger.info(
            f"Dependencies ready ({len(report.present)} present, {len(report.installed)} installed)."
        )
        outcomes = process_targets(targets, config, detector, pipeline, logger)
    except InstallError as e:
        logger.error(str(e))
        raise SystemExit(1)
    finally:
        _final_cleanup(cleanup_roots, config, logger)

    print_summary(outcomes)


if __name__ == "__main__":
    main()
