"""
Function registry - the service's function map that builds read and update.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from .entities.functions import BuildResult, FunctionSpec, ProviderSpec
from .exceptions import ConfigurationError, FunctionNotFoundError
from .utils.file_utils import dump_manifest, load_manifest

logger = logging.getLogger(__name__)


class FunctionRegistry:
    """
    Function definitions keyed by name, plus the provider record and custom settings.

    Builds never write to the registry directly. They return BuildResult
    objects which are applied here once a batch has finished.
    """

    def __init__(self, functions: Optional[Dict[str, FunctionSpec]] = None,
                 provider: Optional[ProviderSpec] = None,
                 custom: Optional[Dict[str, Any]] = None,
                 service: Optional[Dict[str, Any]] = None):
        self.functions: Dict[str, FunctionSpec] = dict(functions or {})
        self.provider = provider or ProviderSpec()
        self.custom: Dict[str, Any] = dict(custom or {})
        # Remaining manifest keys, kept so the manifest can be written back
        self._service: Dict[str, Any] = dict(service or {})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FunctionRegistry":
        """
        Build a registry from a parsed service manifest.

        Raises:
            ConfigurationError: If a function or the provider section is malformed
        """
        service = dict(data)
        raw_functions = service.pop("functions", None) or {}
        raw_provider = service.pop("provider", None) or {}
        custom = service.pop("custom", None) or {}

        functions = {}
        try:
            for name, definition in raw_functions.items():
                definition = dict(definition or {})
                definition.setdefault("name", name)
                functions[name] = FunctionSpec.model_validate(definition)
            provider = ProviderSpec.model_validate(raw_provider)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid service definition: {e}") from e

        return cls(functions=functions, provider=provider, custom=custom, service=service)

    @classmethod
    def from_manifest(cls, manifest_path: Union[str, Path]) -> "FunctionRegistry":
        data = load_manifest(Path(manifest_path))
        registry = cls.from_dict(data)
        logger.info(f"Loaded {len(registry.functions)} functions from {manifest_path}")
        return registry

    @property
    def default_runtime(self) -> Optional[str]:
        return self.provider.runtime

    @property
    def architecture(self) -> Optional[str]:
        return self.provider.architecture

    def names(self) -> List[str]:
        return list(self.functions.keys())

    def get(self, name: str) -> FunctionSpec:
        try:
            return self.functions[name]
        except KeyError:
            raise FunctionNotFoundError(name) from None

    def apply(self, results: Iterable[BuildResult]) -> None:
        """Write build results back. Each result replaces handler and package of its own function."""
        for result in results:
            function = self.get(result.name)
            function.handler = result.handler
            function.package = result.package

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self._service)
        provider = self.provider.model_dump(exclude_none=True)
        if provider:
            data["provider"] = provider
        if self.custom:
            data["custom"] = self.custom
        data["functions"] = {name: function.to_dict() for name, function in self.functions.items()}
        return data

    def write_manifest(self, manifest_path: Union[str, Path]) -> None:
        dump_manifest(self.to_dict(), Path(manifest_path))
        logger.info(f"Wrote service definition to {manifest_path}")
