"""Models for build outputs collected after the build phase."""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Literal

from pydantic import Field

from xamarin_uitest_action.models.base import Model

OutputType = Literal["app", "ipa", "dsym", "dll"]
SDK = Literal["ios", "android", "macos", "tvos", "unknown"]
TestFramework = Literal["xamarin-uitest", "nunit", "none"]


class OutputModel(Model):
    """A single build artifact."""

    output_type: OutputType = Field(..., description="Kind of the artifact")
    path: Path = Field(..., description="Artifact path on disk")


class ProjectOutput(Model):
    """All artifacts produced by one project."""

    outputs: Sequence[OutputModel] = Field(default_factory=list)

    def app_path(self) -> Path | None:
        """Return the application bundle path, if the project produced one."""
        app_path = None
        for output in self.outputs:
            if output.output_type == "app":
                app_path = output.path
        return app_path


class TestProjectOutput(Model):
    """Test assembly of a UITest project and the projects it exercises."""

    __test__ = False

    output: OutputModel = Field(..., description="Test assembly artifact")
    referred_project_names: Sequence[str] = Field(default_factory=list)


type ProjectOutputMap = Mapping[str, ProjectOutput]
type TestProjectOutputMap = Mapping[str, TestProjectOutput]
