"""Abstract base class for solution builders."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from xamarin_uitest_action.models.outputs import (
    SDK,
    ProjectOutputMap,
    TestFramework,
    TestProjectOutputMap,
)


@dataclass(frozen=True, kw_only=True)
class BuildCommandEvent:
    """Reported once for every build command the builder issues."""

    solution_name: str
    project_name: str
    sdk: SDK
    test_framework: TestFramework
    command: str
    already_performed: bool


type BuildCallback = Callable[[BuildCommandEvent], None]


class SolutionBuilder(ABC):
    """Builds a solution and reports the artifacts it produced."""

    @abstractmethod
    async def build_uitest_and_referred_projects(
        self,
        configuration: str,
        platform: str,
        sdks: Sequence[SDK] = ("ios",),
        callback: BuildCallback | None = None,
    ) -> Sequence[str]:
        """Build every UITest project and the projects they refer to.

        Args:
            configuration: Solution configuration (e.g. "Debug")
            platform: Solution platform (e.g. "Any CPU")
            sdks: SDKs of the referred projects to build
            callback: Called once per build command issued

        Returns:
            Warnings collected while building

        Raises:
            BuildError: If the solution cannot be built

        """

    @abstractmethod
    async def collect_project_outputs(
        self,
        configuration: str,
        platform: str,
        sdks: Sequence[SDK] = ("ios",),
    ) -> ProjectOutputMap:
        """Return the artifacts of the built projects, keyed by project name.

        Only projects of the given SDKs are collected, so shared libraries and
        test projects never show up as app projects.
        """

    @abstractmethod
    async def collect_uitest_project_outputs(
        self, configuration: str, platform: str
    ) -> tuple[TestProjectOutputMap, Sequence[str]]:
        """Return the test assembly of every UITest project plus warnings."""
