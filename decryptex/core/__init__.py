"""Core orchestration functionality."""

from decryptex.core.cleanup import remove_output_dirs, staged_workspace
from decryptex.core.detector import DetectionError, ObfuscationDetector
from decryptex.core.installer import DependencyInstaller, InstallError
from decryptex.core.runner import CommandError, CommandRunner
from decryptex.core.scanner import (
    count_script_files,
    discover_sibling_targets,
    iter_script_files,
)

__all__ = [
    "CommandError",
    "CommandRunner",
    "DependencyInstaller",
    "DetectionError",
    "InstallError",
    "ObfuscationDetector",
    "count_script_files",
    "discover_sibling_targets",
    "iter_script_files",
    "remove_output_dirs",
    "staged_workspace",
]
