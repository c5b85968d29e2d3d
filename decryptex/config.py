"""Configuration management for decryptex."""

from enum import Enum
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Load .env from multiple locations
# 1. Current working directory
load_dotenv()
# 2. Project directory (where this package is installed)
_package_dir = Path(__file__).parent
load_dotenv(_package_dir.parent / ".env")
# 3. Home directory config
load_dotenv(Path.home() / ".config" / "decryptex" / ".env")


class CleanupScope(str, Enum):
    """Where the output-directory sweep runs after each file."""
    FILE = "file"
    WORKING_DIR = "cwd"


# Global CLI tools the pipeline shells out to (npm package names).
DEFAULT_GLOBAL_TOOLS = [
    "@wakaru/cli",
    "js-deobfuscator",
    "js-beautify",
    "restringer",
    "webcrack",
    "deobfuscator",
]


class Config(BaseSettings):
    """Configuration for decryptex."""

    # Output Settings
    verbose: bool = Field(default=False, description="Echo tool output and extra diagnostics")

    # Target Settings
    base_dir: Optional[Path] = Field(
        default=None,
        description="Directory whose siblings are auto-discovered (default: current directory)",
    )
    script_extensions: list[str] = Field(
        default_factory=lambda: [".js", ".cjs", ".mjs"],
        description="File suffixes treated as scripts",
    )
    ignored_dir_names: list[str] = Field(
        default_factory=lambda: ["node_modules"],
        description="Directory names never descended into",
    )

    # Pipeline Settings
    output_dir_name: str = Field(default="output_dir", description="Shared staging directory name")
    step_timeout_seconds: Optional[int] = Field(
        default=600,
        ge=1,
        description="Per-step timeout for external tools (None disables it)",
    )
    cleanup_scope: CleanupScope = Field(
        default=CleanupScope.FILE,
        description="Sweep output directories under the file's directory or the whole working directory",
    )

    # Dependency Settings
    auto_install: bool = Field(default=True, description="Install missing npm packages on demand")
    node_project_dir: Optional[Path] = Field(
        default=None,
        description="npm project that receives local installs (default: current directory)",
    )
    detector_package: str = Field(default="obfuscation-detector", description="Local npm detector package")
    global_tools: list[str] = Field(
        default_factory=lambda: list(DEFAULT_GLOBAL_TOOLS),
        description="Global npm packages providing the pipeline tools",
    )

    model_config = {
        "env_prefix": "DECRYPTEX_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("script_extensions", mode="after")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Lower-case suffixes and make sure each starts with a dot."""
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in v]

    @property
    def resolved_base_dir(self) -> Path:
        return (self.base_dir or Path.cwd()).resolve()

    @property
    def resolved_node_project_dir(self) -> Path:
        return (self.node_project_dir or Path.cwd()).resolve()

    @property
    def skipped_dir_names(self) -> set[str]:
        """Directory names the scanner never enters, staging directories included."""
        return set(self.ignored_dir_names) | {self.output_dir_name}
