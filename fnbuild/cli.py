"""
Command line entry point for fnbuild.

    fnbuild build [--manifest serverless.yml] [--function NAME] [--output PATH]
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config import FnBuildSettings, configure_logging
from .constants import HOOK_BUILD_COMMAND, HOOK_PACKAGE_FUNCTION
from .exceptions import FnBuildError
from .orchestrator import Orchestrator
from .registry import FunctionRegistry

logger = logging.getLogger(__name__)


def build_parser(settings: FnBuildSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fnbuild", description="Compile Go functions for deployment")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Build all Go functions")
    build.add_argument(
        "--manifest",
        "-m",
        default=settings.MANIFEST,
        help="Service manifest (YAML or JSON)"
    )
    build.add_argument(
        "--function",
        "-f",
        help="Build only this function"
    )
    build.add_argument(
        "--output",
        "-o",
        help="Write the updated service definition to this file"
    )
    return parser


async def run_build(args: argparse.Namespace, settings: FnBuildSettings) -> None:
    registry = FunctionRegistry.from_manifest(args.manifest)
    options = {"function": args.function} if args.function else {}
    orchestrator = Orchestrator(registry, options=options, settings=settings)

    hook = HOOK_PACKAGE_FUNCTION if args.function else HOOK_BUILD_COMMAND
    await orchestrator.hooks[hook]()

    if args.output:
        registry.write_manifest(args.output)


def main(argv: Optional[List[str]] = None) -> int:
    settings = FnBuildSettings()
    configure_logging(settings)

    args = build_parser(settings).parse_args(argv)

    try:
        asyncio.run(run_build(args, settings))
    except (FnBuildError, FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
