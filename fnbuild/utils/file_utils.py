"""
File utilities for fnbuild.

This module provides the path and manifest helpers shared by the resolver,
the packaging engine and the function registry.
"""

import json
import os
import sys
import yaml
from pathlib import Path
from typing import Union, Dict, Any

MANIFEST_SUFFIXES = ('.json', '.yaml', '.yml')


def normalize_path(path: Union[str, Path]) -> str:
    """
    Canonicalizes a path string.

    This function normalizes path separators, resolves '..' references,
    and ensures all separators are forward slashes ('/') for consistent,
    cross-platform path representation.

    Args:
        path: The file or directory path string.

    Returns:
        The normalized path string with forward slashes.

    Example:
        >>> normalize_path("folder//subfolder/./file.txt")
        "folder/subfolder/file.txt"
    """
    if not isinstance(path, str):
        path = str(path)
    return os.path.normpath(path).replace('\\', '/')


def to_handler_path(path: str, platform: str = sys.platform) -> str:
    """
    Convert a local path into the form written back to a function handler.

    Deployment tooling always expects forward slashes, so on Windows the
    native separators are replaced. Other platforms get the path unchanged.

    Example:
        >>> to_handler_path(".bin\\\\hello", platform="win32")
        ".bin/hello"
    """
    if platform == "win32":
        return path.replace('\\', '/')
    return path


def relative_to(target: Union[str, Path], start: Union[str, Path]) -> str:
    """
    Express `target` relative to `start` after resolving both to absolute paths.

    Example:
        >>> relative_to(".bin", "gopath")
        "../.bin"
    """
    return os.path.relpath(os.path.abspath(target), os.path.abspath(start))


def load_manifest(manifest_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Loads and parses a service manifest (JSON or YAML) into a dictionary.

    Raises:
        FileNotFoundError: If the manifest file does not exist.
        ValueError: If the file format is unsupported, a parsing error occurs
                    or the top level is not a mapping.

    Example:
        >>> data = load_manifest(Path("serverless.yml"))
        >>> print(data["functions"])
    """
    manifest_path = Path(manifest_path)
    suffix = manifest_path.suffix.lower()

    if suffix not in MANIFEST_SUFFIXES:
        raise ValueError(f"Unsupported manifest format for file: {manifest_path}")

    try:
        with open(manifest_path, 'r', encoding='utf-8') as f:
            if suffix == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Manifest file not found: {manifest_path}")
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Failed to parse manifest from {manifest_path}: {e}") from e

    # Empty document
    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ValueError(f"Manifest {manifest_path} must contain a mapping at the top level")
    return data


def dump_manifest(data: Dict[str, Any], manifest_path: Path) -> None:
    """
    Write a manifest dictionary as JSON or YAML, chosen by file suffix.

    Raises:
        ValueError: If the file format is unsupported.
    """
    manifest_path = Path(manifest_path)
    suffix = manifest_path.suffix.lower()

    if suffix not in MANIFEST_SUFFIXES:
        raise ValueError(f"Unsupported manifest format for file: {manifest_path}")

    ensure_directory_exists(manifest_path.parent)
    with open(manifest_path, 'w', encoding='utf-8') as f:
        if suffix == '.json':
            json.dump(data, f, indent=2)
        else:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)


def ensure_directory_exists(path: Union[str, Path]) -> None:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: The directory path to ensure exists (can be a string or Path object).
    """
    Path(path).mkdir(parents=True, exist_ok=True)
