"""Parser for Visual Studio solution (.sln) files."""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path, PureWindowsPath

SOLUTION_FOLDER_TYPE = "2150E333-8FDC-42A3-9474-1A3956D46DE8"

PROJECT_PATTERN = re.compile(
    r'^Project\("\{(?P<type>[^}]+)\}"\)\s*=\s*"(?P<name>[^"]+)",\s*'
    r'"(?P<path>[^"]+)",\s*"\{(?P<guid>[^}]+)\}"'
)
PROJECT_CONFIG_PATTERN = re.compile(
    r"^\{(?P<guid>[^}]+)\}\.(?P<solution_config>.+?\|.+?)\.ActiveCfg\s*=\s*"
    r"(?P<project_config>.+\|.+)$"
)


@dataclass(frozen=True, kw_only=True)
class SolutionProject:
    """A project entry of a solution."""

    name: str
    guid: str
    path: Path
    # solution "Configuration|Platform" -> project "Configuration|Platform"
    configs: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class Solution:
    """A parsed solution file."""

    path: Path
    projects: Sequence[SolutionProject]

    @property
    def name(self) -> str:
        """Solution name, the file name without extension."""
        return self.path.stem


def parse_solution(path: Path) -> Solution:
    """Parse the projects and configuration mappings of a solution file.

    Solution folders are not projects and are left out.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the file is not a solution file

    """
    content = path.read_text(encoding="utf-8-sig")
    if "Microsoft Visual Studio Solution File" not in content:
        raise ValueError(f"Not a solution file: {path}")

    entries: list[tuple[str, str, Path]] = []
    configs: dict[str, dict[str, str]] = {}

    for raw_line in content.splitlines():
        line = raw_line.strip()

        if match := PROJECT_PATTERN.match(line):
            if match["type"].upper() == SOLUTION_FOLDER_TYPE:
                continue
            project_path = path.parent.joinpath(*PureWindowsPath(match["path"]).parts)
            entries.append((match["name"], match["guid"].upper(), project_path))
        elif match := PROJECT_CONFIG_PATTERN.match(line):
            configs.setdefault(match["guid"].upper(), {})[
                match["solution_config"]
            ] = match["project_config"].strip()

    projects = [
        SolutionProject(
            name=name, guid=guid, path=project_path, configs=configs.get(guid, {})
        )
        for name, guid, project_path in entries
    ]
    return Solution(path=path, projects=projects)
