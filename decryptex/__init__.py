"""Decryptex - orchestrates external JavaScript deobfuscators over a directory tree."""

__version__ = "1.0.0"
__author__ = "decryptex"

from decryptex.config import Config
from decryptex.core.pipeline import deobfuscate_file
from decryptex.core.scanner import iter_script_files, count_script_files

__all__ = [
    "__version__",
    "Config",
    "deobfuscate_file",
    "iter_script_files",
    "count_script_files",
]
