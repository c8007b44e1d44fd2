"""
fnbuild utility modules.

This package contains path and manifest helpers used across fnbuild.
"""

from .file_utils import (
    normalize_path,
    to_handler_path,
    relative_to,
    load_manifest,
    dump_manifest,
    ensure_directory_exists,
)

__all__ = [
    "normalize_path",
    "to_handler_path",
    "relative_to",
    "load_manifest",
    "dump_manifest",
    "ensure_directory_exists",
]
