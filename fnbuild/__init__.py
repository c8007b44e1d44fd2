"""fnbuild - compiles Go functions into deployable binaries and rewrites their packaging."""

from .config import BuildConfig, FnBuildSettings, configure_logging
from .constants import *
from .entities import BuildResult, CompileTask, FunctionSpec, PackageDirectives, ProviderSpec
from .exceptions import BuildError, ConfigurationError, FnBuildError, FunctionNotFoundError, PackagingError
from .orchestrator import Orchestrator
from .registry import FunctionRegistry

__version__ = "0.1.0"
__all__ = [
    "BuildConfig",
    "FnBuildSettings",
    "configure_logging",
    "BuildResult",
    "CompileTask",
    "FunctionSpec",
    "PackageDirectives",
    "ProviderSpec",
    "BuildError",
    "ConfigurationError",
    "FnBuildError",
    "FunctionNotFoundError",
    "PackagingError",
    "Orchestrator",
    "FunctionRegistry",
    "GO_RUNTIME",
    "PROVIDED_RUNTIMES",
    "BOOTSTRAP_NAME",
    "__version__"
]
