"""
Packaging decisions for compiled functions.

Two descriptor shapes are produced:

- plain: `{individually, exclude: ["./**"], include: [binary, *declared]}`
- bootstrap: `{individually, artifact: "<binary>.zip"}` where the archive
  holds the binary as an executable `bootstrap` entry plus any files matched
  by the function's declared include patterns.
"""

import glob
import logging
import os
import zipfile
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from ..constants import ARCHIVE_SUFFIX, BOOTSTRAP_MODE, BOOTSTRAP_NAME
from ..entities.functions import PackageDirectives
from ..exceptions import PackagingError
from ..utils.file_utils import ensure_directory_exists, normalize_path, to_handler_path

logger = logging.getLogger(__name__)

EXCLUDE_ALL = "./**"

# Fixed timestamp so rebuilding unchanged binaries yields identical archives
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


class ZipArchiver:
    """Collects entries in memory and writes them as a zip archive."""

    def __init__(self):
        self._entries: List[Tuple[str, bytes, int]] = []

    @property
    def names(self) -> List[str]:
        return [name for name, _, _ in self._entries]

    def add_file(self, name: str, data: bytes, mode: int = 0o644) -> None:
        """Add an entry from bytes with the given permission bits."""
        self._entries.append((name, data, mode))

    def add_local_file(self, path: Union[str, Path], directory: str = "") -> None:
        """Add a file from disk under `directory` inside the archive, keeping its mode."""
        path = Path(path)
        arcname = f"{directory}/{path.name}" if directory else path.name
        mode = path.stat().st_mode & 0o777
        self.add_file(arcname, path.read_bytes(), mode)

    def write(self, path: Union[str, Path]) -> None:
        """Write all collected entries to `path`, replacing any existing file."""
        path = Path(path)
        ensure_directory_exists(path.parent)
        with zipfile.ZipFile(path, 'w', zipfile.ZIP_DEFLATED) as zf:
            for name, data, mode in self._entries:
                info = zipfile.ZipInfo(name, date_time=ZIP_EPOCH)
                info.create_system = 3  # unix, so external_attr permissions are honoured
                info.external_attr = (0o100000 | mode) << 16
                info.compress_type = zipfile.ZIP_DEFLATED
                zf.writestr(info, data)


ArchiverFactory = Callable[[], ZipArchiver]


def expand_includes(patterns: List[str]) -> List[Tuple[str, str]]:
    """
    Expand include globs into (file, archive directory) pairs.

    The archive directory is the matched file's own directory, so relative
    structure is preserved inside the archive.
    """
    matches = []
    for pattern in patterns:
        for file_path in sorted(glob.glob(pattern, recursive=True)):
            if not os.path.isfile(file_path):
                continue
            directory = os.path.dirname(normalize_path(file_path))
            matches.append((file_path, directory))
    return matches


class PackagingEngine:
    """
    Builds the packaging descriptor for a compiled function.

    Args:
        archiver_factory: Creates the archive collaborator for bootstrap packages
    """

    def __init__(self, archiver_factory: Optional[ArchiverFactory] = None):
        self.archiver_factory = archiver_factory or ZipArchiver

    def package(self, name: str, binary_path: str, declared_includes: List[str],
                bootstrap: bool = False) -> PackageDirectives:
        if bootstrap:
            return self.bootstrap_descriptor(name, binary_path, declared_includes)
        return self.plain_descriptor(binary_path, declared_includes)

    def plain_descriptor(self, binary_path: str, declared_includes: List[str]) -> PackageDirectives:
        """Exclude everything, include the binary followed by the user's own includes."""
        return PackageDirectives(
            individually=True,
            exclude=[EXCLUDE_ALL],
            include=[to_handler_path(binary_path)] + list(declared_includes),
        )

    def bootstrap_descriptor(self, name: str, binary_path: str,
                             declared_includes: List[str]) -> PackageDirectives:
        """
        Write `<binary>.zip` with the binary as `bootstrap` and return an artifact descriptor.

        Raises:
            PackagingError: If the binary or an included file cannot be read, or
                the archive cannot be written
        """
        archive_path = binary_path + ARCHIVE_SUFFIX
        archiver = self.archiver_factory()
        try:
            archiver.add_file(BOOTSTRAP_NAME, Path(binary_path).read_bytes(), BOOTSTRAP_MODE)
            for file_path, directory in expand_includes(declared_includes):
                archiver.add_local_file(file_path, directory)
            archiver.write(archive_path)
        except OSError as e:
            raise PackagingError(f"Failed to package '{name}' as {archive_path}: {e}") from e

        logger.debug(f"Packaged {name} as {archive_path}")
        return PackageDirectives(individually=True, artifact=to_handler_path(archive_path))
