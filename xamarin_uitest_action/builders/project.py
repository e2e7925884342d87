"""Parser for MSBuild C# project (.csproj) files."""

import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path, PureWindowsPath

from xamarin_uitest_action.models.outputs import SDK, TestFramework

SDK_PROJECT_TYPE_GUIDS: Mapping[str, SDK] = {
    "FEACFBD2-3405-455C-9665-78FE426C6842": "ios",
    "EFBA0AD7-5A72-4C68-AF49-83D382785DCF": "android",
    "A3F8F2AB-B479-4A4A-A458-A89E7DC349F1": "macos",
    "06FA79CB-D6CD-4721-BB4B-1BD202089C55": "tvos",
}
SDK_REFERENCES: Mapping[str, SDK] = {
    "xamarin.ios": "ios",
    "mono.android": "android",
    "xamarin.mac": "macos",
    "xamarin.tvos": "tvos",
}
TARGET_FRAMEWORK_SDKS: Mapping[str, SDK] = {
    "-ios": "ios",
    "-android": "android",
    "-macos": "macos",
    "-maccatalyst": "macos",
    "-tvos": "tvos",
}

CONDITION_PATTERN = re.compile(
    r"'\$\(Configuration\)\|\$\(Platform\)'\s*==\s*'(?P<config>[^']+)'"
)


@dataclass(frozen=True, kw_only=True)
class Project:
    """The parts of a project file the builder relies on."""

    path: Path
    assembly_name: str
    output_type: str
    sdk: SDK
    test_framework: TestFramework
    referred_project_paths: Sequence[Path] = field(default_factory=list)
    # project "Configuration|Platform" -> OutputPath
    output_paths: Mapping[str, Path] = field(default_factory=dict)
    # SDK-style projects append it to the output directory
    target_framework: str = ""

    @property
    def is_app(self) -> bool:
        """Whether the project builds an executable application."""
        return self.output_type.lower() == "exe"

    def output_dir(self, project_config: str) -> Path:
        """Return the output directory for a project "Configuration|Platform".

        Falls back to the default layout when the project does not declare
        an OutputPath for that configuration. SDK-style projects build into
        a target framework subdirectory (bin/Debug/netstandard2.0).
        """
        configuration, _, platform = project_config.partition("|")
        platform = platform.replace(" ", "")

        output_path = self.output_paths.get(f"{configuration}|{platform}")
        if output_path is not None:
            output_dir = self.path.parent / output_path
        elif platform.lower() in {"", "anycpu"}:
            output_dir = self.path.parent / "bin" / configuration
        else:
            output_dir = self.path.parent / "bin" / platform / configuration

        if self.target_framework:
            return output_dir / self.target_framework
        return output_dir


def _local_name(tag: str) -> str:
    return tag.rpartition("}")[2]


def _to_path(base: Path, value: str) -> Path:
    return base.joinpath(*PureWindowsPath(value.strip()).parts)


def parse_project(path: Path) -> Project:
    """Parse a project file.

    Both classic (MSBuild 2003 namespace) and SDK-style projects are read.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the file is not valid XML

    """
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise ValueError(f"Invalid project file {path}: {e}") from e

    properties: dict[str, str] = {}
    output_paths: dict[str, Path] = {}
    references: list[str] = []
    referred_project_paths: list[Path] = []

    for element in root.iter():
        name = _local_name(element.tag)

        if name == "PropertyGroup":
            condition = CONDITION_PATTERN.search(element.get("Condition", ""))
            for child in element:
                child_name = _local_name(child.tag)
                text = (child.text or "").strip()
                if condition and child_name == "OutputPath" and text:
                    config = condition["config"].replace(" ", "")
                    output_paths[config] = _to_path(Path(), text)
                elif not condition and text:
                    properties.setdefault(child_name, text)
        elif name in {"Reference", "PackageReference"}:
            references.append(element.get("Include", "").split(",")[0].strip())
        elif name == "ProjectReference":
            include = element.get("Include", "")
            referred_project_paths.append(_to_path(path.parent, include).resolve())

    return Project(
        path=path,
        assembly_name=properties.get("AssemblyName", path.stem),
        output_type=properties.get("OutputType", "Library"),
        sdk=_detect_sdk(properties, references),
        test_framework=_detect_test_framework(references),
        referred_project_paths=referred_project_paths,
        output_paths=output_paths,
        target_framework=_output_target_framework(root, properties),
    )


def _output_target_framework(
    root: ET.Element, properties: Mapping[str, str]
) -> str:
    if root.get("Sdk") is None:
        return ""
    if properties.get("AppendTargetFrameworkToOutputPath", "").lower() == "false":
        return ""
    if framework := properties.get("TargetFramework"):
        return framework
    # multi-targeting projects are built for their first framework
    return properties.get("TargetFrameworks", "").split(";")[0].strip()


def _detect_sdk(properties: Mapping[str, str], references: Sequence[str]) -> SDK:
    type_guids = properties.get("ProjectTypeGuids", "").upper()
    for guid, sdk in SDK_PROJECT_TYPE_GUIDS.items():
        if guid in type_guids:
            return sdk

    frameworks = properties.get("TargetFrameworks") or properties.get(
        "TargetFramework", ""
    )
    for framework in frameworks.lower().split(";"):
        for suffix, sdk in TARGET_FRAMEWORK_SDKS.items():
            if suffix in framework:
                return sdk

    for reference in references:
        if (sdk := SDK_REFERENCES.get(reference.lower())) is not None:
            return sdk

    return "unknown"


def _detect_test_framework(references: Sequence[str]) -> TestFramework:
    names = {reference.lower() for reference in references}
    if "xamarin.uitest" in names:
        return "xamarin-uitest"
    if names & {"nunit", "nunit.framework"}:
        return "nunit"
    return "none"
