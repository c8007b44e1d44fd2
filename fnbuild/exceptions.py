"""
Exception hierarchy for fnbuild.
"""

from typing import Optional


class FnBuildError(Exception):
    """Base class for all fnbuild errors."""
    pass


class ConfigurationError(FnBuildError):
    """Raised when the build configuration cannot be resolved."""
    pass


class FunctionNotFoundError(FnBuildError):
    """Raised when a function name is not present in the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Function '{name}' is not defined")


class BuildError(FnBuildError):
    """
    Raised when the toolchain fails for a function.

    Args:
        name: Function name
        working_dir: Directory the toolchain ran in
        message: Underlying toolchain or spawn error
        returncode: Exit status, None when the process could not be spawned
    """

    def __init__(self, name: str, working_dir: str, message: str, returncode: Optional[int] = None):
        self.name = name
        self.working_dir = working_dir
        self.message = message
        self.returncode = returncode
        super().__init__(f'Error compiling "{name}" function (cwd: {working_dir}): {message}')


class PackagingError(FnBuildError):
    """Raised when a deployment archive cannot be written."""
    pass
