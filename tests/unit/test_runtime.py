"""
Unit tests for fnbuild.build.runtime.
"""
import pytest

from fnbuild.build.runtime import classify, is_provided_runtime
from fnbuild.config import BuildConfig
from fnbuild.constants import PROVIDED_RUNTIMES
from fnbuild.entities.functions import FunctionSpec


def _function(runtime=None) -> FunctionSpec:
    return FunctionSpec(name="f1", handler="main.go", runtime=runtime)


class TestClassify:

    def test_go_runtime_is_candidate(self):
        result = classify(_function("go1.x"), BuildConfig())

        assert result.runtime == "go1.x"
        assert result.is_candidate is True
        assert result.is_bootstrap is False

    def test_other_runtime_is_not_candidate(self):
        result = classify(_function("nodejs18.x"), BuildConfig())

        assert result.is_candidate is False

    def test_falls_back_to_provider_runtime(self):
        result = classify(_function(), BuildConfig(), default_runtime="go1.x")

        assert result.runtime == "go1.x"
        assert result.is_candidate is True

    def test_function_runtime_overrides_provider(self):
        result = classify(_function("python3.12"), BuildConfig(), default_runtime="go1.x")

        assert result.is_candidate is False

    def test_no_runtime_anywhere(self):
        result = classify(_function(), BuildConfig())

        assert result.runtime is None
        assert result.is_candidate is False

    def test_supported_runtimes_replace_default(self):
        config = BuildConfig(supportedRuntimes=["provided.al2"])

        assert classify(_function("provided.al2"), config).is_candidate is True
        assert classify(_function("go1.x"), config).is_candidate is False

    def test_bootstrap_requires_flag(self):
        config = BuildConfig(supportedRuntimes=["provided.al2"])

        assert classify(_function("provided.al2"), config).is_bootstrap is False

    @pytest.mark.parametrize("runtime", PROVIDED_RUNTIMES)
    def test_bootstrap_for_provided_runtimes(self, runtime):
        config = BuildConfig(supportedRuntimes=[runtime], buildProvidedRuntimeAsBootstrap=True)
        result = classify(_function(runtime), config)

        assert result.is_candidate is True
        assert result.is_bootstrap is True

    def test_bootstrap_flag_ignores_managed_runtime(self):
        config = BuildConfig(buildProvidedRuntimeAsBootstrap=True)
        result = classify(_function("go1.x"), config)

        assert result.is_candidate is True
        assert result.is_bootstrap is False


def test_is_provided_runtime():
    assert is_provided_runtime("provided.al2023") is True
    assert is_provided_runtime("go1.x") is False
    assert is_provided_runtime(None) is False
