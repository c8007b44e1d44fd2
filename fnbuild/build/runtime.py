"""
Decides which functions get compiled and which get a bootstrap archive.
"""

from typing import NamedTuple, Optional

from ..config import BuildConfig
from ..constants import PROVIDED_RUNTIMES
from ..entities.functions import FunctionSpec


class RuntimeClassification(NamedTuple):
    runtime: Optional[str]
    is_candidate: bool
    is_bootstrap: bool


def is_provided_runtime(runtime: Optional[str]) -> bool:
    return runtime in PROVIDED_RUNTIMES


def classify(function: FunctionSpec, config: BuildConfig,
             default_runtime: Optional[str] = None) -> RuntimeClassification:
    """
    Classify a function by its effective runtime.

    A function is a build candidate when its runtime (its own, or the
    provider default) is one of `supportedRuntimes`. It is a bootstrap
    candidate when `buildProvidedRuntimeAsBootstrap` is set and the runtime
    is a provided runtime.
    """
    runtime = function.effective_runtime(default_runtime)
    is_candidate = runtime is not None and runtime in config.supported_runtime_set
    is_bootstrap = config.build_provided_runtime_as_bootstrap and is_provided_runtime(runtime)
    return RuntimeClassification(runtime=runtime, is_candidate=is_candidate, is_bootstrap=is_bootstrap)
