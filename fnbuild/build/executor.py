"""
Build executor - runs the native toolchain for compile tasks.

The toolchain is treated as an opaque shell process that either succeeds or
fails. Bulk builds fan out with a concurrency ceiling and stop at the first
failure: outstanding sibling builds are cancelled and their child processes
killed before the error is re-raised.
"""

import asyncio
import logging
import os
import signal
from typing import Awaitable, Callable, Dict, Iterable, List, Mapping, NamedTuple, Optional, TypeVar

from ..config import BuildConfig
from ..constants import CGO_ENV_VAR
from ..entities.functions import CompileTask
from ..exceptions import BuildError
from .command_parser import parse_command
from .path_resolver import resolve_paths

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')

# On POSIX each shell leads its own process group, killed as a whole on cancel
KILL_PROCESS_GROUP = os.name == "posix"


def _kill(process: asyncio.subprocess.Process) -> None:
    if not KILL_PROCESS_GROUP:
        process.kill()
        return
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


class ToolchainResult(NamedTuple):
    returncode: int
    stdout: str
    stderr: str


class Toolchain:
    """Runs build commands as shell child processes."""

    async def run(self, command: str, cwd: str, env: Mapping[str, str]) -> ToolchainResult:
        """
        Run a command and wait for it to exit.

        Raises:
            OSError: If the process cannot be spawned (e.g. missing working directory)
        """
        process = await asyncio.create_subprocess_shell(
            command,
            cwd=cwd,
            env=dict(env),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=KILL_PROCESS_GROUP,
        )
        try:
            stdout, stderr = await process.communicate()
        except asyncio.CancelledError:
            if process.returncode is None:
                _kill(process)
                await process.wait()
            raise

        return ToolchainResult(
            returncode=process.returncode,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
        )


class BuildExecutor:
    """
    Compiles functions with the configured build command.

    Args:
        config: Resolved build configuration
        toolchain: Process runner, replaceable in tests
        base_env: Inherited environment, defaults to the process environment
    """

    def __init__(self, config: BuildConfig, toolchain: Optional[Toolchain] = None,
                 base_env: Optional[Mapping[str, str]] = None):
        self.config = config
        self.toolchain = toolchain or Toolchain()
        self.base_env = base_env

    def build_environment(self, overrides: Mapping[str, str]) -> Dict[str, str]:
        """Inherited environment < CGO toggle < assignments from the command."""
        base_env = os.environ if self.base_env is None else self.base_env
        return {
            **base_env,
            CGO_ENV_VAR: str(self.config.cgo),
            **overrides,
        }

    def prepare(self, name: str, handler: str) -> CompileTask:
        """Resolve paths and parse the command line for one function."""
        paths = resolve_paths(self.config, name, handler)
        parsed = parse_command(f"{self.config.cmd} -o {paths.output_path} {paths.source}")
        return CompileTask(
            name=name,
            working_dir=paths.working_dir,
            source=paths.source,
            output_path=paths.output_path,
            env=parsed.env,
            command=parsed.command,
        )

    async def execute(self, task: CompileTask) -> ToolchainResult:
        """
        Run the toolchain for a prepared task.

        Raises:
            BuildError: If the process cannot be spawned or exits non-zero
        """
        logger.debug(f"Compiling {task.name}: {task.command} (cwd: {task.working_dir})")
        try:
            result = await self.toolchain.run(
                task.command,
                cwd=task.working_dir,
                env=self.build_environment(task.env),
            )
        except OSError as e:
            raise BuildError(task.name, task.working_dir, str(e)) from e

        if result.returncode != 0:
            message = result.stderr.strip() or result.stdout.strip() or f"exit status {result.returncode}"
            raise BuildError(task.name, task.working_dir, message, returncode=result.returncode)

        return result

    async def compile(self, name: str, handler: str) -> CompileTask:
        task = self.prepare(name, handler)
        await self.execute(task)
        return task


async def run_bounded(items: Iterable[T], worker: Callable[[T], Awaitable[R]],
                      concurrency: Optional[int] = None) -> List[R]:
    """
    Run `worker` over `items` with at most `concurrency` running at once.

    Results come back in input order. The first exception cancels every task
    still pending or running and is then re-raised.

    Args:
        items: Work items
        worker: Coroutine function applied to each item
        concurrency: Parallelism ceiling, defaults to the host CPU count
    """
    items = list(items)
    if not items:
        return []

    limit = concurrency or os.cpu_count() or 1
    semaphore = asyncio.Semaphore(limit)

    async def _guarded(item: T) -> R:
        async with semaphore:
            return await worker(item)

    tasks = [asyncio.ensure_future(_guarded(item)) for item in items]
    done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)

    # Every finished failure is read, the first in input order is raised
    failures = [task.exception() for task in tasks if task in done and not task.cancelled()]
    failure = next((error for error in failures if error is not None), None)
    if failure is not None:
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.debug(f"Cancelled {len(pending)} outstanding builds")
        raise failure

    return [task.result() for task in tasks]
