"""
Function schemas for the fnbuild compiler.
"""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Any


class PackageDirectives(BaseModel):
    """
    Packaging instructions for a single function.

    Used both for what the user declared and for the descriptor written back
    after a build. Unset fields are omitted when serialized.
    """
    individually: Optional[bool] = Field(None, description="Package the function on its own")
    include: Optional[List[str]] = Field(None, description="Glob patterns to include")
    exclude: Optional[List[str]] = Field(None, description="Glob patterns to exclude")
    artifact: Optional[str] = Field(None, description="Prebuilt deployment archive")

    class Config:
        extra = "allow"

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class FunctionSpec(BaseModel):
    """A function definition as declared in the service manifest."""
    name: str = Field(..., description="Unique function name")
    handler: Optional[str] = Field(None, description="Source file or package directory, required for build candidates")
    runtime: Optional[str] = Field(None, description="Runtime override, falls back to the provider runtime")
    package: Optional[PackageDirectives] = Field(None, description="Packaging directives")

    class Config:
        extra = "allow"

    @property
    def declared_includes(self) -> List[str]:
        if self.package and self.package.include:
            return list(self.package.include)
        return []

    def effective_runtime(self, default: Optional[str]) -> Optional[str]:
        return self.runtime or default

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_none=True, exclude={"package"})
        if self.package is not None:
            data["package"] = self.package.to_dict()
        return data


class ProviderSpec(BaseModel):
    """Provider-wide settings read by the compiler."""
    runtime: Optional[str] = None
    architecture: Optional[str] = None

    class Config:
        extra = "allow"


class CompileTask(BaseModel):
    """
    A single toolchain invocation, derived per function.

    `output_path` is relative to `working_dir`.
    """
    name: str
    working_dir: str
    source: str
    output_path: str
    env: Dict[str, str] = Field(default_factory=dict)
    command: str = ""


class BuildResult(BaseModel):
    """What a finished build writes back into the registry."""
    name: str
    handler: str
    package: PackageDirectives
    bootstrap: bool = False
