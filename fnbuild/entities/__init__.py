"""
Entity models for fnbuild.
"""

from .functions import (
    PackageDirectives,
    FunctionSpec,
    ProviderSpec,
    CompileTask,
    BuildResult,
)

__all__ = [
    'PackageDirectives',
    'FunctionSpec',
    'ProviderSpec',
    'CompileTask',
    'BuildResult',
]
