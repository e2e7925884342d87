"""Tests for the step orchestrator."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from xamarin_uitest_action.builders.base import BuildCommandEvent
from xamarin_uitest_action.errors import (
    BuildError,
    MissingAppBundleError,
    NotFoundError,
    TestRunFailedError,
)
from xamarin_uitest_action.models.config import StepConfig
from xamarin_uitest_action.models.outputs import OutputModel, ProjectOutput
from xamarin_uitest_action.models.simulator import SimulatorInfo
from xamarin_uitest_action.orchestrator import UITestOrchestrator
from xamarin_uitest_action.testing.factories import (
    ProjectOutputFactory,
    UITestProjectOutputFactory,
)
from xamarin_uitest_action.testing.fakes import (
    RecordingExporter,
    StaticSimulatorDirectory,
    StaticSolutionBuilder,
)
from xamarin_uitest_action.uitest_runner import APP_BUNDLE_PATH_ENV, SIMULATOR_UDID_ENV


@pytest.fixture
def config(tmp_path: Path) -> StepConfig:
    """Create step config."""
    solution = tmp_path / "App.sln"
    solution.write_text("")
    return StepConfig(
        solution=solution,
        configuration="Debug",
        platform="Any CPU",
        simulator_device="iPhone 8",
        deploy_dir=tmp_path / "deploy",
    )


@pytest.fixture
def directory() -> StaticSimulatorDirectory:
    """Create simulator directory."""
    return StaticSimulatorDirectory(
        simulators={
            "iOS 12.1": [SimulatorInfo(name="iPhone 8", id="X")],
            "iOS 11.4": [SimulatorInfo(name="iPhone 8", id="Y")],
        }
    )


def make_orchestrator(
    directory: StaticSimulatorDirectory, builder: StaticSolutionBuilder
) -> UITestOrchestrator:
    """Create orchestrator with a recording exporter."""
    return UITestOrchestrator(
        directory=directory,
        builder=builder,
        exporter=RecordingExporter(),
        console_path=Path("/usr/local/bin/nunit3-console"),
    )


async def test_runs_each_pair_on_resolved_simulator(
    config: StepConfig, directory: StaticSimulatorDirectory
) -> None:
    """Builds, matches and runs every pair against the latest simulator."""
    app = ProjectOutputFactory.build()
    builder = StaticSolutionBuilder(
        project_outputs={"App.iOS": app},
        test_outputs={
            "App.UITests": UITestProjectOutputFactory.build(
                referred_project_names=["App.iOS"]
            )
        },
    )
    run_mock = AsyncMock(return_value=0)

    with patch("xamarin_uitest_action.uitest_runner.NUnitConsole.run", new=run_mock):
        result_log = await make_orchestrator(directory, builder).run(config)

    assert result_log == ""
    assert builder.built == [("Debug", "Any CPU")]
    assert config.deploy_dir.is_dir()
    run_mock.assert_awaited_once_with(
        {SIMULATOR_UDID_ENV: "X", APP_BUNDLE_PATH_ENV: str(app.outputs[0].path)}
    )


async def test_unknown_simulator_stops_before_build(
    config: StepConfig,
) -> None:
    """Fails before building when the simulator cannot be resolved."""
    builder = StaticSolutionBuilder()
    directory = StaticSimulatorDirectory(simulators={"tvOS 14.0": []})

    with pytest.raises(NotFoundError):
        await make_orchestrator(directory, builder).run(config)

    assert builder.built == []


async def test_build_error_stops_run(
    config: StepConfig, directory: StaticSimulatorDirectory
) -> None:
    """Propagates a build that cannot proceed."""
    builder = StaticSolutionBuilder(build_error=BuildError("msbuild not found"))

    with pytest.raises(BuildError, match="msbuild not found"):
        await make_orchestrator(directory, builder).run(config)


async def test_missing_app_aborts_before_any_test_runs(
    config: StepConfig, directory: StaticSimulatorDirectory
) -> None:
    """Runs no test when a referred project produced no app bundle."""
    builder = StaticSolutionBuilder(
        project_outputs={
            "App.iOS": ProjectOutputFactory.build(),
            "Lib.iOS": ProjectOutput(
                outputs=[OutputModel(output_type="dll", path=Path("/src/Lib.dll"))]
            ),
        },
        test_outputs={
            "App.UITests": UITestProjectOutputFactory.build(
                referred_project_names=["App.iOS", "Lib.iOS"]
            )
        },
    )
    run_mock = AsyncMock(return_value=0)

    with (
        patch("xamarin_uitest_action.uitest_runner.NUnitConsole.run", new=run_mock),
        pytest.raises(MissingAppBundleError),
    ):
        await make_orchestrator(directory, builder).run(config)

    run_mock.assert_not_awaited()


async def test_failing_test_stops_run(
    config: StepConfig, directory: StaticSimulatorDirectory
) -> None:
    """Propagates the first failing test run."""
    builder = StaticSolutionBuilder(
        project_outputs={"App.iOS": ProjectOutputFactory.build()},
        test_outputs={
            "First.UITests": UITestProjectOutputFactory.build(
                referred_project_names=["App.iOS"]
            ),
            "Second.UITests": UITestProjectOutputFactory.build(
                referred_project_names=["App.iOS"]
            ),
        },
    )
    run_mock = AsyncMock(return_value=1)

    with (
        patch("xamarin_uitest_action.uitest_runner.NUnitConsole.run", new=run_mock),
        pytest.raises(TestRunFailedError),
    ):
        await make_orchestrator(directory, builder).run(config)

    assert run_mock.await_count == 1


async def test_build_commands_are_logged(
    config: StepConfig,
    directory: StaticSimulatorDirectory,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Logs the builder's commands and warnings."""
    builder = StaticSolutionBuilder(
        build_events=[
            BuildCommandEvent(
                solution_name="App",
                project_name="App.iOS",
                sdk="ios",
                test_framework="none",
                command="msbuild App.iOS.csproj",
                already_performed=False,
            )
        ],
        build_warnings=["project skipped"],
        collect_warnings=["no test assembly"],
    )

    with caplog.at_level("INFO"):
        await make_orchestrator(directory, builder).run(config)

    assert "$ msbuild App.iOS.csproj" in caplog.text
    assert "project skipped" in caplog.text
    assert "no test assembly" in caplog.text
