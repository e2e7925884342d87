"""Xamarin solution builder driving msbuild or xbuild."""

import asyncio
import logging
import shlex
import shutil
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Self

from xamarin_uitest_action.builders.base import (
    BuildCallback,
    BuildCommandEvent,
    SolutionBuilder,
)
from xamarin_uitest_action.builders.project import Project, parse_project
from xamarin_uitest_action.builders.solution import (
    Solution,
    SolutionProject,
    parse_solution,
)
from xamarin_uitest_action.errors import BuildError
from xamarin_uitest_action.models.outputs import (
    SDK,
    OutputModel,
    ProjectOutput,
    ProjectOutputMap,
    TestProjectOutput,
    TestProjectOutputMap,
)

log = logging.getLogger(__name__)

type BuildTool = Literal["msbuild", "xbuild"]

IOS_SIMULATOR_PLATFORM = "iPhoneSimulator"


@dataclass(frozen=True, kw_only=True)
class ResolvedProject:
    """A solution entry together with its parsed project file."""

    entry: SolutionProject
    project: Project

    @property
    def name(self) -> str:
        """Project name as listed in the solution."""
        return self.entry.name


@dataclass(frozen=True, kw_only=True)
class XamarinSolutionBuilder(SolutionBuilder):
    """Builds Xamarin.iOS UITest projects and the app projects they test.

    iOS application projects are always built for the iPhoneSimulator
    solution platform, since UITests run against a simulator build.
    """

    solution: Solution
    projects: Sequence[ResolvedProject]
    build_tool: BuildTool = "msbuild"
    _performed_commands: set[str] = field(default_factory=set, repr=False)

    @classmethod
    def load(cls, solution_path: Path, build_tool: BuildTool = "msbuild") -> Self:
        """Parse the solution and all of its project files.

        Raises:
            BuildError: If the solution or one of its projects is unreadable

        """
        try:
            solution = parse_solution(solution_path)
        except (OSError, ValueError) as e:
            raise BuildError(
                f"Failed to parse solution {solution_path}: {e}"
            ) from e

        projects: list[ResolvedProject] = []
        for entry in solution.projects:
            try:
                project = parse_project(entry.path)
            except (OSError, ValueError) as e:
                raise BuildError(
                    f"Failed to parse project {entry.name}: {e}"
                ) from e
            projects.append(ResolvedProject(entry=entry, project=project))

        return cls(solution=solution, projects=projects, build_tool=build_tool)

    def uitest_projects(self) -> Sequence[ResolvedProject]:
        """Return the projects referencing Xamarin.UITest."""
        return [
            p for p in self.projects if p.project.test_framework == "xamarin-uitest"
        ]

    def project_by_path(self, path: Path) -> ResolvedProject | None:
        """Find a solution project by its project file path."""
        resolved = path.resolve()
        for project in self.projects:
            if project.project.path.resolve() == resolved:
                return project
        return None

    def referred_projects(
        self, test_project: ResolvedProject, warnings: list[str]
    ) -> Sequence[ResolvedProject]:
        """Return the solution projects a test project refers to."""
        referred: list[ResolvedProject] = []
        for path in test_project.project.referred_project_paths:
            if (project := self.project_by_path(path)) is None:
                warnings.append(
                    f"Test project ({test_project.name}) refers to a project "
                    f"not in the solution: {path}"
                )
                continue
            referred.append(project)
        return referred

    def solution_platform(self, project: ResolvedProject, platform: str) -> str:
        """Return the solution platform a project is built for."""
        if project.project.sdk == "ios" and project.project.is_app:
            return IOS_SIMULATOR_PLATFORM
        return platform

    def project_config(
        self, project: ResolvedProject, configuration: str, platform: str
    ) -> str | None:
        """Map a solution configuration onto the project's "Config|Platform"."""
        solution_config = (
            f"{configuration}|{self.solution_platform(project, platform)}"
        )
        return project.entry.configs.get(solution_config)

    def build_command(
        self, project: ResolvedProject, project_config: str
    ) -> list[str]:
        """Return the command line building one project."""
        configuration, _, platform = project_config.partition("|")
        return [
            self.build_tool,
            str(project.project.path),
            f"/p:Configuration={configuration}",
            f"/p:Platform={platform.replace(' ', '')}",
        ]

    async def build_uitest_and_referred_projects(
        self,
        configuration: str,
        platform: str,
        sdks: Sequence[SDK] = ("ios",),
        callback: BuildCallback | None = None,
    ) -> Sequence[str]:
        """Build the referred projects of the given SDKs, then each test project."""
        if shutil.which(self.build_tool) is None:
            raise BuildError(f"Build tool not found: {self.build_tool}")

        warnings: list[str] = []
        test_projects = self.uitest_projects()
        if not test_projects:
            warnings.append(
                f"No Xamarin.UITest project found in {self.solution.name}"
            )

        for test_project in test_projects:
            for project in self.referred_projects(test_project, warnings):
                if project.project.sdk not in sdks:
                    continue
                await self._build_project(
                    project, test_project, configuration, platform, warnings, callback
                )

            await self._build_project(
                test_project, test_project, configuration, platform, warnings, callback
            )

        return warnings

    async def _build_project(
        self,
        project: ResolvedProject,
        test_project: ResolvedProject,
        configuration: str,
        platform: str,
        warnings: list[str],
        callback: BuildCallback | None,
    ) -> None:
        project_config = self.project_config(project, configuration, platform)
        if project_config is None:
            warnings.append(
                f"Project ({project.name}) referred by ({test_project.name}) has no "
                f"configuration mapped to ({configuration}|"
                f"{self.solution_platform(project, platform)}), skipping..."
            )
            return

        command = self.build_command(project, project_config)
        command_str = shlex.join(command)
        already_performed = command_str in self._performed_commands

        if callback is not None:
            callback(
                BuildCommandEvent(
                    solution_name=self.solution.name,
                    project_name=project.name,
                    sdk=project.project.sdk,
                    test_framework=project.project.test_framework,
                    command=command_str,
                    already_performed=already_performed,
                )
            )

        if already_performed:
            return
        self._performed_commands.add(command_str)

        try:
            process = await asyncio.create_subprocess_exec(
                *command, cwd=self.solution.path.parent
            )
        except OSError as e:
            raise BuildError(f"Failed to start {self.build_tool}: {e}") from e

        if (returncode := await process.wait()) != 0:
            raise BuildError(
                f"Building {project.name} failed with exit code {returncode}"
            )

    async def collect_project_outputs(
        self,
        configuration: str,
        platform: str,
        sdks: Sequence[SDK] = ("ios",),
    ) -> ProjectOutputMap:
        """Collect the existing artifacts of every mapped project of the SDKs."""
        outputs: dict[str, ProjectOutput] = {}

        for project in self.projects:
            if project.project.sdk not in sdks:
                continue
            project_config = self.project_config(project, configuration, platform)
            if project_config is None:
                continue

            found = find_outputs(project.project, project_config)
            if found:
                outputs[project.name] = ProjectOutput(outputs=found)

        return outputs

    async def collect_uitest_project_outputs(
        self, configuration: str, platform: str
    ) -> tuple[TestProjectOutputMap, Sequence[str]]:
        """Collect the test assembly of every UITest project."""
        outputs: dict[str, TestProjectOutput] = {}
        warnings: list[str] = []

        for test_project in self.uitest_projects():
            project_config = self.project_config(test_project, configuration, platform)
            if project_config is None:
                warnings.append(
                    f"Test project ({test_project.name}) has no configuration "
                    f"mapped to ({configuration}|{platform})"
                )
                continue

            dll = test_project.project.output_dir(project_config) / (
                f"{test_project.project.assembly_name}.dll"
            )
            if not dll.exists():
                warnings.append(
                    f"No test assembly found for test project "
                    f"({test_project.name}) at: {dll}"
                )
                continue

            outputs[test_project.name] = TestProjectOutput(
                output=OutputModel(output_type="dll", path=dll),
                referred_project_names=[
                    p.name for p in self.referred_projects(test_project, warnings)
                ],
            )

        return outputs, warnings


OUTPUT_SUFFIXES: Mapping[str, Literal["app", "dsym", "dll"]] = {
    ".app": "app",
    ".app.dSYM": "dsym",
    ".dll": "dll",
}


def find_outputs(project: Project, project_config: str) -> Sequence[OutputModel]:
    """Return the artifacts present in a project's output directory."""
    output_dir = project.output_dir(project_config)
    outputs = [
        OutputModel(output_type=output_type, path=path)
        for suffix, output_type in OUTPUT_SUFFIXES.items()
        if (path := output_dir / f"{project.assembly_name}{suffix}").exists()
    ]
    if project.is_app and project.sdk == "ios":
        outputs.extend(
            OutputModel(output_type="ipa", path=path)
            for path in sorted(output_dir.glob("*.ipa"))
        )
    return outputs
