"""
Path resolution for compile tasks.

Works out where the toolchain runs, what source argument it gets and where
the binary goes. Three strategies exist:

1. Literal base directory (default): the toolchain runs in `baseDir` and gets
   the handler unchanged.
2. Monorepo: the toolchain runs in the handler's own directory, resolved
   under `baseDir`.
3. Base directory macro: `baseDir` is a reserved token such as
   `{{handlerDir}}` that selects a resolver from `MACRO_RESOLVERS`.

All returned paths are in native form. The handler written back to the
registry is converted separately with `to_handler_path`.
"""

import logging
import os
from enum import Enum
from typing import Callable, Dict, NamedTuple, Optional, Tuple

from ..config import BuildConfig
from ..constants import SOURCE_SUFFIXES
from ..utils.file_utils import relative_to

logger = logging.getLogger(__name__)


class ResolvedPaths(NamedTuple):
    working_dir: str
    source: str
    output_path: str


class BaseDirMacro(str, Enum):
    """Reserved `baseDir` values."""
    HANDLER_DIR = "{{handlerDir}}"

    @classmethod
    def lookup(cls, value: str) -> Optional["BaseDirMacro"]:
        try:
            return cls(value)
        except ValueError:
            return None


def split_handler(handler: str) -> Tuple[str, str]:
    """
    Split a handler into (directory, source argument).

    A source file gives its directory and base name, a package directory
    gives itself and the current directory marker.
    """
    if handler.endswith(SOURCE_SUFFIXES):
        return os.path.dirname(handler) or os.curdir, os.path.basename(handler)
    return handler, os.curdir


def binary_path(config: BuildConfig, name: str) -> str:
    """Location of the compiled binary relative to the service root."""
    return os.path.normpath(os.path.join(config.bin_dir, name))


def _resolve_literal(config: BuildConfig, name: str, handler: str) -> ResolvedPaths:
    output_path = os.path.join(relative_to(config.bin_dir, config.base_dir), name)
    return ResolvedPaths(working_dir=config.base_dir, source=handler, output_path=output_path)


def _resolve_monorepo(config: BuildConfig, name: str, handler: str) -> ResolvedPaths:
    literal = _resolve_literal(config, name, handler)
    directory, source = split_handler(handler)
    working_dir = os.path.normpath(os.path.join(config.base_dir, directory))
    # Output was relative to baseDir; re-express it from the new working directory
    output_path = relative_to(os.path.join(config.base_dir, literal.output_path), working_dir)
    return ResolvedPaths(working_dir=working_dir, source=source, output_path=output_path)


def _resolve_handler_dir(config: BuildConfig, name: str, handler: str) -> ResolvedPaths:
    directory, source = split_handler(handler)
    working_dir = os.path.normpath(directory)
    output_path = relative_to(binary_path(config, name), working_dir)
    return ResolvedPaths(working_dir=working_dir, source=source, output_path=output_path)


Resolver = Callable[[BuildConfig, str, str], ResolvedPaths]

MACRO_RESOLVERS: Dict[BaseDirMacro, Resolver] = {
    BaseDirMacro.HANDLER_DIR: _resolve_handler_dir,
}


def resolve_paths(config: BuildConfig, name: str, handler: str) -> ResolvedPaths:
    """
    Resolve the working directory, source argument and output path for a function.

    Args:
        config: Resolved build configuration
        name: Function name, used as the binary name
        handler: Declared handler (source file or package directory)

    Returns:
        ResolvedPaths with `output_path` relative to `working_dir`
    """
    macro = BaseDirMacro.lookup(config.base_dir)
    if macro is not None:
        resolver = MACRO_RESOLVERS[macro]
    elif config.monorepo:
        resolver = _resolve_monorepo
    else:
        resolver = _resolve_literal

    paths = resolver(config, name, handler)
    logger.debug(f"Resolved {name}: cwd={paths.working_dir} source={paths.source} output={paths.output_path}")
    return paths
