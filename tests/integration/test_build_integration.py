"""
Integration tests: full builds through the real shell toolchain.

The compiler is replaced by `fake_go.py`, invoked through the configured
build command exactly as `go build` would be.
"""
import json
import os
import shlex
import sys
import zipfile
import pytest
import yaml
from pathlib import Path

from fnbuild.config import FnBuildSettings
from fnbuild.constants import HOOK_PACKAGE_ALL
from fnbuild.orchestrator import Orchestrator
from fnbuild.registry import FunctionRegistry

FAKE_GO = Path(__file__).parent / "fake_go.py"


def _fake_cmd(*assignments: str) -> str:
    parts = list(assignments) + [shlex.quote(sys.executable), shlex.quote(str(FAKE_GO)), "build"]
    return " ".join(parts)


def _record(binary: Path) -> dict:
    return json.loads(binary.read_text().splitlines()[1][2:])


@pytest.fixture
def service(service_dir: Path) -> Path:
    for name in ("alpha", "beta"):
        directory = service_dir / "functions" / name
        directory.mkdir(parents=True)
        (directory / "main.go").write_text("package main\n")
    (service_dir / "assets").mkdir()
    (service_dir / "assets" / "schema.json").write_text("{}")
    return service_dir


def _write_manifest(service: Path, custom: dict, functions: dict) -> Path:
    manifest = service / "serverless.yml"
    manifest.write_text(yaml.safe_dump({
        "service": "integration",
        "provider": {"name": "aws", "runtime": "go1.x"},
        "custom": {"go": custom},
        "functions": functions,
    }))
    return manifest


@pytest.mark.asyncio
class TestBuildIntegration:

    async def test_plain_build(self, service):
        manifest = _write_manifest(
            service,
            {"cmd": _fake_cmd("GOOS=linux", "GOARCH=amd64"), "cgo": 1},
            {
                "alpha": {"handler": "functions/alpha/main.go"},
                "beta": {"handler": "functions/beta"},
            },
        )
        registry = FunctionRegistry.from_manifest(manifest)

        await Orchestrator(registry, settings=FnBuildSettings(CONCURRENCY=2, _env_file=None)).hooks[HOOK_PACKAGE_ALL]()

        alpha = _record(service / ".bin" / "alpha")
        assert alpha["source"] == "functions/alpha/main.go"
        assert alpha["env"] == {"GOOS": "linux", "GOARCH": "amd64", "CGO_ENABLED": "1"}
        assert _record(service / ".bin" / "beta")["source"] == "functions/beta"
        assert registry.get("beta").package.to_dict() == {
            "individually": True,
            "exclude": ["./**"],
            "include": [".bin/beta"],
        }

    async def test_monorepo_bootstrap_build(self, service):
        manifest = _write_manifest(
            service,
            {
                "cmd": _fake_cmd(),
                "monorepo": True,
                "supportedRuntimes": ["provided.al2"],
                "buildProvidedRuntimeAsBootstrap": True,
            },
            {
                "alpha": {
                    "runtime": "provided.al2",
                    "handler": "functions/alpha/main.go",
                    "package": {"include": ["assets/*.json"]},
                },
                "beta": {"handler": "functions/beta"},
            },
        )
        registry = FunctionRegistry.from_manifest(manifest)

        await Orchestrator(registry, settings=FnBuildSettings(_env_file=None)).hooks[HOOK_PACKAGE_ALL]()

        record = _record(service / ".bin" / "alpha")
        assert record["source"] == "main.go"
        assert Path(record["cwd"]) == (service / "functions" / "alpha").resolve()
        assert registry.get("alpha").package.to_dict() == {"individually": True, "artifact": ".bin/alpha.zip"}
        with zipfile.ZipFile(service / ".bin" / "alpha.zip") as zf:
            assert zf.namelist() == ["bootstrap", "assets/schema.json"]
            assert (zf.getinfo("bootstrap").external_attr >> 16) & 0o777 == 0o755
        # go1.x is no longer a supported runtime here
        assert registry.get("beta").handler == "functions/beta"

    async def test_failing_build_exits(self, service):
        manifest = _write_manifest(
            service,
            {"cmd": _fake_cmd()},
            {
                "alpha": {"handler": "functions/alpha/main.go"},
                "ghost": {"handler": "functions/ghost/main.go"},
            },
        )
        registry = FunctionRegistry.from_manifest(manifest)

        with pytest.raises(SystemExit) as exc_info:
            await Orchestrator(registry, settings=FnBuildSettings(_env_file=None)).hooks[HOOK_PACKAGE_ALL]()

        assert exc_info.value.code == 1
        assert registry.get("alpha").handler == "functions/alpha/main.go"
