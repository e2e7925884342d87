"""Sample Xamarin solution trees for builder tests."""

from pathlib import Path

APP_GUID = "6A1F2D4E-0B1C-4D6E-9F70-1A2B3C4D5E6F"
UITEST_GUID = "B7C8D9E0-1F2A-4B3C-8D4E-5F6A7B8C9D0E"
CORE_GUID = "C1D2E3F4-A5B6-4C7D-8E9F-0A1B2C3D4E5F"
FOLDER_GUID = "D4E5F6A7-B8C9-4DAE-BF01-23456789ABCD"

SOLUTION = f"""
Microsoft Visual Studio Solution File, Format Version 12.00
# Visual Studio 15
Project("{{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}}") = "App.iOS", "App.iOS\\App.iOS.csproj", "{{{APP_GUID}}}"
EndProject
Project("{{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}}") = "App.UITests", "App.UITests\\App.UITests.csproj", "{{{UITEST_GUID}}}"
EndProject
Project("{{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}}") = "App.Core", "App.Core\\App.Core.csproj", "{{{CORE_GUID}}}"
EndProject
Project("{{2150E333-8FDC-42A3-9474-1A3956D46DE8}}") = "Tests", "Tests", "{{{FOLDER_GUID}}}"
EndProject
Global
	GlobalSection(SolutionConfigurationPlatforms) = preSolution
		Debug|Any CPU = Debug|Any CPU
		Debug|iPhoneSimulator = Debug|iPhoneSimulator
	EndGlobalSection
	GlobalSection(ProjectConfigurationPlatforms) = postSolution
		{{{APP_GUID}}}.Debug|iPhoneSimulator.ActiveCfg = Debug|iPhoneSimulator
		{{{APP_GUID}}}.Debug|iPhoneSimulator.Build.0 = Debug|iPhoneSimulator
		{{{UITEST_GUID.lower()}}}.Debug|Any CPU.ActiveCfg = Debug|Any CPU
		{{{UITEST_GUID.lower()}}}.Debug|Any CPU.Build.0 = Debug|Any CPU
		{{{CORE_GUID}}}.Debug|Any CPU.ActiveCfg = Debug|Any CPU
		{{{CORE_GUID}}}.Debug|iPhoneSimulator.ActiveCfg = Debug|Any CPU
	EndGlobalSection
EndGlobal
"""

IOS_APP_PROJECT = """<?xml version="1.0" encoding="utf-8"?>
<Project DefaultTargets="Build" ToolsVersion="4.0" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">
  <PropertyGroup>
    <Configuration Condition=" '$(Configuration)' == '' ">Debug</Configuration>
    <Platform Condition=" '$(Platform)' == '' ">iPhoneSimulator</Platform>
    <ProjectTypeGuids>{FEACFBD2-3405-455C-9665-78FE426C6842};{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}</ProjectTypeGuids>
    <OutputType>Exe</OutputType>
    <AssemblyName>AppiOS</AssemblyName>
  </PropertyGroup>
  <PropertyGroup Condition=" '$(Configuration)|$(Platform)' == 'Debug|iPhoneSimulator' ">
    <OutputPath>bin\\iPhoneSimulator\\Debug</OutputPath>
  </PropertyGroup>
  <ItemGroup>
    <Reference Include="Xamarin.iOS" />
  </ItemGroup>
  <ItemGroup>
    <ProjectReference Include="..\\App.Core\\App.Core.csproj" />
  </ItemGroup>
</Project>
"""

UITEST_PROJECT = """<?xml version="1.0" encoding="utf-8"?>
<Project ToolsVersion="4.0" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">
  <PropertyGroup>
    <OutputType>Library</OutputType>
    <AssemblyName>App.UITests</AssemblyName>
  </PropertyGroup>
  <PropertyGroup Condition=" '$(Configuration)|$(Platform)' == 'Debug|AnyCPU' ">
    <OutputPath>bin\\Debug</OutputPath>
  </PropertyGroup>
  <ItemGroup>
    <Reference Include="nunit.framework, Version=3.11.0.0, Culture=neutral" />
    <Reference Include="Xamarin.UITest, Version=2.2.7.0, Culture=neutral" />
  </ItemGroup>
  <ItemGroup>
    <ProjectReference Include="..\\App.iOS\\App.iOS.csproj">
      <Project>{6A1F2D4E-0B1C-4D6E-9F70-1A2B3C4D5E6F}</Project>
      <Name>App.iOS</Name>
    </ProjectReference>
  </ItemGroup>
</Project>
"""

CORE_PROJECT = """<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup>
    <TargetFramework>netstandard2.0</TargetFramework>
  </PropertyGroup>
</Project>
"""


def write_sample_solution(root: Path) -> Path:
    """Write an iOS app, its UITest project and a shared library under root.

    Returns:
        Path of the solution file

    """
    projects = {
        "App.iOS": IOS_APP_PROJECT,
        "App.UITests": UITEST_PROJECT,
        "App.Core": CORE_PROJECT,
    }
    for name, content in projects.items():
        project_dir = root / name
        project_dir.mkdir(parents=True, exist_ok=True)
        (project_dir / f"{name}.csproj").write_text(content)

    solution = root / "App.sln"
    solution.write_text(SOLUTION, encoding="utf-8")
    return solution
