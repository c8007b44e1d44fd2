"""
fnbuild test fixtures and configuration.
"""
import os
import pytest
from pathlib import Path
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from fnbuild.build.executor import Toolchain, ToolchainResult
from fnbuild.config import FnBuildSettings
from fnbuild.registry import FunctionRegistry


class ToolchainCall(NamedTuple):
    command: str
    cwd: str
    env: Dict[str, str]


class RecordingToolchain(Toolchain):
    """
    Toolchain stand-in that records calls instead of running a compiler.

    Writes a small fake binary to the `-o` target so packaging has something
    to read. Commands containing `fail_on` exit with status 2.
    """

    def __init__(self, fail_on: Optional[str] = None, write_outputs: bool = True):
        self.fail_on = fail_on
        self.write_outputs = write_outputs
        self.calls: List[ToolchainCall] = []

    @property
    def commands(self) -> List[str]:
        return [call.command for call in self.calls]

    async def run(self, command, cwd, env):
        self.calls.append(ToolchainCall(command, cwd, dict(env)))
        if self.fail_on and self.fail_on in command:
            return ToolchainResult(2, "", "undefined: main")

        if self.write_outputs:
            tokens = command.split()
            output = tokens[tokens.index("-o") + 1]
            target = Path(os.path.normpath(os.path.join(cwd, output)))
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(b"\x7fELF fake binary")
        return ToolchainResult(0, "", "")


@pytest.fixture
def service_dir(tmp_path: Path, monkeypatch) -> Path:
    """Run the test from an empty service root."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def toolchain() -> RecordingToolchain:
    return RecordingToolchain()


@pytest.fixture
def settings() -> FnBuildSettings:
    return FnBuildSettings(CONCURRENCY=4)


@pytest.fixture
def make_registry() -> Callable[..., FunctionRegistry]:
    """Build a registry the way a parsed manifest would."""

    def _make(functions: Dict[str, Dict[str, Any]], custom: Optional[Dict[str, Any]] = None,
              provider: Optional[Dict[str, Any]] = None) -> FunctionRegistry:
        data: Dict[str, Any] = {"service": "testService", "functions": functions}
        if custom is not None:
            data["custom"] = {"go": custom}
        if provider is not None:
            data["provider"] = provider
        return FunctionRegistry.from_dict(data)

    return _make


@pytest.fixture
def sample_manifest_data() -> Dict[str, Any]:
    """Sample service manifest for testing."""
    return {
        "service": "testService",
        "provider": {
            "name": "aws",
            "runtime": "go1.x",
        },
        "functions": {
            "hello": {
                "handler": "functions/hello/main.go",
            },
            "world": {
                "handler": "functions/world",
                "package": {"include": ["templates/*.tmpl"]},
            },
            "node": {
                "runtime": "nodejs18.x",
                "handler": "index.handler",
            },
        },
    }


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on test location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
