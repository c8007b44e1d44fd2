"""
Build components: command parsing, path resolution, runtime classification,
toolchain execution and packaging.
"""

from .command_parser import ParsedCommand, parse_command
from .path_resolver import BaseDirMacro, MACRO_RESOLVERS, ResolvedPaths, binary_path, resolve_paths, split_handler
from .runtime import RuntimeClassification, classify, is_provided_runtime
from .executor import BuildExecutor, Toolchain, ToolchainResult, run_bounded
from .packaging import PackagingEngine, ZipArchiver, expand_includes

__all__ = [
    'ParsedCommand',
    'parse_command',
    'BaseDirMacro',
    'MACRO_RESOLVERS',
    'ResolvedPaths',
    'binary_path',
    'resolve_paths',
    'split_handler',
    'RuntimeClassification',
    'classify',
    'is_provided_runtime',
    'BuildExecutor',
    'Toolchain',
    'ToolchainResult',
    'run_bounded',
    'PackagingEngine',
    'ZipArchiver',
    'expand_includes',
]
