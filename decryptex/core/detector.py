"""Obfuscation detection through the external obfuscation-detector package."""

import json
from pathlib import Path
from typing import Any, Optional

from decryptex.core.installer import DependencyInstaller
from decryptex.core.runner import CommandError, CommandRunner

DETECTOR_SCRIPT = Path(__file__).parent / "js" / "detect_obfuscation.cjs"


class DetectionError(RuntimeError):
    """The detector could not classify a file."""


class ObfuscationDetector:
    """Gate deciding whether a file goes through the pipeline."""

    def __init__(
        self,
        runner: CommandRunner,
        installer: DependencyInstaller,
        package_name: str = "obfuscation-detector",
    ):
        self.runner = runner
        self.installer = installer
        self.package_name = package_name

    def classify(self, content: str) -> Optional[Any]:
        """Return the detector's classification, or None for clean code.

        Raises:
            InstallError: If the detector package cannot be installed
            DetectionError: If the detector fails or prints garbage
        """
        # Installation failures propagate; they are fatal for the whole run.
        self.installer.ensure_local_package(self.package_name)

        try:
            result = self.runner.run(
                ["node", str(DETECTOR_SCRIPT), self.package_name],
                cwd=self.installer.project_dir,
                capture=True,
                input_text=content,
            )
        except CommandError as e:
            raise DetectionError(f"Obfuscation detector failed: {e}") from e

        try:
            payload = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise DetectionError(f"Unexpected detector output: {result.stdout[:100]!r}") from e

        if not isinstance(payload, dict):
            raise DetectionError(f"Unexpected detector output: {result.stdout[:100]!r}")
        return payload.get("type")

    def is_obfuscated(self, content: str) -> bool:
        return self.classify(content) is not None
