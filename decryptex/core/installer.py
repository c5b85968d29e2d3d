"""npm package provisioning for the detector and the pipeline tools."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from decryptex.core.runner import CommandError, CommandRunner
from decryptex.log import StatusLogger

# Resolves the package named by the first script argument from the cwd.
_RESOLVE_SNIPPET = "require.resolve(process.argv[1], { paths: [process.cwd()] })"


class InstallError(RuntimeError):
    """A required npm package is missing and could not be installed."""


@dataclass
class ProvisionReport:
    """Outcome of the preflight phase."""
    present: list[str] = field(default_factory=list)
    installed: list[str] = field(default_factory=list)


class DependencyInstaller:
    """Checks for npm packages and installs the missing ones.

    Local packages go into ``project_dir``; libraries are installed
    globally so their command-line entry points land on PATH.
    """

    def __init__(
        self,
        runner: CommandRunner,
        logger: StatusLogger,
        project_dir: Path,
        auto_install: bool = True,
    ):
        self.runner = runner
        self.logger = logger
        self.project_dir = project_dir
        self.auto_install = auto_install
        self._ensured: set[tuple[str, str]] = set()

    def is_local_installed(self, package_name: str) -> bool:
        """Check whether node can resolve the package from the project directory."""
        try:
            self.runner.run(
                ["node", "-e", _RESOLVE_SNIPPET, package_name],
                cwd=self.project_dir,
                capture=True,
            )
        except CommandError:
            return False
        return True

    def is_global_installed(self, package_name: str) -> bool:
        """Check `npm list -g` for the package."""
        try:
            self.runner.run(["npm", "list", "-g", package_name], capture=True)
        except CommandError:
            return False
        return True

    def ensure_local_package(self, package_name: str) -> bool:
        """Install a package into the project directory unless it resolves.

        Returns:
            True if an install happened, False if it was already present

        Raises:
            InstallError: If the package is missing and cannot be installed
        """
        key = ("local", package_name)
        if key in self._ensured:
            return False

        if self.is_local_installed(package_name):
            self.logger.debug(f"{package_name} is already installed.")
            self._ensured.add(key)
            return False

        self._install(package_name, ["npm", "install", package_name], cwd=self.project_dir)
        self._ensured.add(key)
        return True

    def ensure_global_package(self, package_name: str) -> bool:
        """Install a package globally unless `npm list -g` already reports it."""
        key = ("global", package_name)
        if key in self._ensured:
            return False

        if self.is_global_installed(package_name):
            self.logger.debug(f"{package_name} is already installed globally.")
            self._ensured.add(key)
            return False

        self._install(package_name, ["npm", "install", "-g", package_name])
        self._ensured.add(key)
        return True

    def _install(self, package_name: str, argv: list[str], cwd: Optional[Path] = None) -> None:
        if not self.auto_install:
            raise InstallError(f"{package_name} is not installed and automatic installation is disabled")

        self.logger.info(f"{package_name} is not installed. Installing...")
        try:
            self.runner.run(argv, cwd=cwd, echo=True)
        except CommandError as e:
            raise InstallError(f"Failed to install {package_name}: {e}") from e
        self.logger.success(f"{package_name} installed successfully.")

    def provision(self, local_packages: list[str], global_packages: list[str]) -> ProvisionReport:
        """Preflight: make sure every package exists before any file is touched."""
        report = ProvisionReport()
        for name in local_packages:
            bucket = report.installed if self.ensure_local_package(name) else report.present
            bucket.append(name)
        for name in global_packages:
            bucket = report.installed if self.ensure_global_package(name) else report.present
            bucket.append(name)
        return report
