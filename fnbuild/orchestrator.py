"""
Orchestrator - drives compilation and packaging for one or all functions.

The host deployment tool calls into `Orchestrator.hooks` at its lifecycle
trigger points:

- before packaging all functions: compile every candidate
- before packaging one function: compile just that one
- before a local invoke: compile one function and skip the bulk packaging
  step that follows, since it has already been done
- the explicit build command: compile every candidate

A build failure in any hook is logged and terminates the process with a
non-zero status.
"""

import logging
import sys
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .build.executor import BuildExecutor, Toolchain, run_bounded
from .build.packaging import PackagingEngine
from .build.path_resolver import binary_path
from .build.runtime import classify
from .config import BuildConfig, FnBuildSettings
from .constants import HOOK_BUILD_COMMAND, HOOK_INVOKE_LOCAL, HOOK_PACKAGE_ALL, HOOK_PACKAGE_FUNCTION
from .entities.functions import BuildResult, FunctionSpec
from .exceptions import BuildError, ConfigurationError
from .registry import FunctionRegistry
from .utils.file_utils import to_handler_path

logger = logging.getLogger(__name__)


class Orchestrator:
    """
    Compile orchestration for a function registry.

    Args:
        registry: Function registry to read and update
        options: Host options, `function` names the target of single-function hooks
        settings: Process settings (custom key, concurrency)
        toolchain: Process runner, replaceable in tests
        packaging: Packaging engine, replaceable in tests
    """

    def __init__(self, registry: FunctionRegistry, options: Optional[Dict[str, Any]] = None,
                 settings: Optional[FnBuildSettings] = None, toolchain: Optional[Toolchain] = None,
                 packaging: Optional[PackagingEngine] = None):
        self.registry = registry
        self.options = options or {}
        self.settings = settings or FnBuildSettings()
        self.toolchain = toolchain or Toolchain()
        self.packaging = packaging or PackagingEngine()
        self.is_invoking = False

        self.hooks: Dict[str, Callable[[], Awaitable[Any]]] = {
            HOOK_PACKAGE_FUNCTION: self.on_package_function,
            HOOK_PACKAGE_ALL: self.on_package_all,
            HOOK_INVOKE_LOCAL: self.on_invoke_local,
            HOOK_BUILD_COMMAND: self.on_package_all,
        }

    def get_config(self) -> BuildConfig:
        custom = self.registry.custom.get(self.settings.CUSTOM_KEY)
        return BuildConfig.resolve(custom, self.registry.architecture)

    # Hooks

    async def on_package_function(self) -> Optional[BuildResult]:
        return await self._exit_on_failure(self.compile_function)

    async def on_package_all(self) -> List[BuildResult]:
        return await self._exit_on_failure(self.compile_functions)

    async def on_invoke_local(self) -> Optional[BuildResult]:
        return await self._exit_on_failure(self.compile_function_and_ignore_package)

    async def _exit_on_failure(self, operation: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await operation()
        except BuildError as e:
            logger.error(str(e))
            sys.exit(1)

    # Operations

    async def compile_function(self, name: Optional[str] = None) -> Optional[BuildResult]:
        """
        Compile and package a single function.

        Args:
            name: Function name, defaults to the `function` option

        Returns:
            The applied BuildResult, or None if the function is not a build candidate

        Raises:
            ConfigurationError: If no function name is given, or a candidate has no handler
            FunctionNotFoundError: If the function is not defined
            BuildError: If the toolchain fails
        """
        name = name or self.options.get("function")
        if not name:
            raise ConfigurationError("No function given for a single-function build")
        function = self.registry.get(name)
        config = self.get_config()
        executor = BuildExecutor(config, self.toolchain)

        started = time.perf_counter()
        result = await self._build(name, function, config, executor)
        elapsed = time.perf_counter() - started

        if result is None:
            logger.info(f"Skipping {name}: runtime is not one of {config.supported_runtimes}")
            return None

        self.registry.apply([result])
        logger.info(f"Compilation time ({name}): {elapsed:.3f}s")
        return result

    async def compile_functions(self) -> List[BuildResult]:
        """
        Compile and package every build candidate in parallel.

        Nothing is written back to the registry unless every build succeeds.

        Raises:
            BuildError: From the first failing build; the rest are cancelled
        """
        if self.is_invoking:
            logger.debug("Skipping bulk compilation, function already built for local invoke")
            return []

        config = self.get_config()
        executor = BuildExecutor(config, self.toolchain)
        functions = list(self.registry.functions.items())

        async def _worker(item) -> Optional[BuildResult]:
            name, function = item
            return await self._build(name, function, config, executor)

        started = time.perf_counter()
        results = await run_bounded(functions, _worker, concurrency=self.settings.max_concurrency)
        elapsed = time.perf_counter() - started

        built = [result for result in results if result is not None]
        self.registry.apply(built)
        logger.info(f"Compilation time: {elapsed:.3f}s ({len(built)} of {len(functions)} functions)")
        return built

    async def compile_function_and_ignore_package(self) -> Optional[BuildResult]:
        self.is_invoking = True
        return await self.compile_function()

    async def _build(self, name: str, function: FunctionSpec, config: BuildConfig,
                     executor: BuildExecutor) -> Optional[BuildResult]:
        classification = classify(function, config, self.registry.default_runtime)
        if not classification.is_candidate:
            return None
        if not function.handler:
            raise ConfigurationError(f'Function "{name}" has runtime {classification.runtime} but no handler')

        await executor.compile(name, function.handler)

        output = binary_path(config, name)
        package = self.packaging.package(
            name,
            output,
            function.declared_includes,
            bootstrap=classification.is_bootstrap,
        )
        return BuildResult(
            name=name,
            handler=to_handler_path(output),
            package=package,
            bootstrap=classification.is_bootstrap,
        )
