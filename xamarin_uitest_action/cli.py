"""CLI entry point for the Xamarin UITest step."""

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

from pydantic import ValidationError

from xamarin_uitest_action.builders.xamarin import BuildTool, XamarinSolutionBuilder
from xamarin_uitest_action.errors import ConfigurationError, StepError
from xamarin_uitest_action.exporter import EnvmanExporter, OutputExporter
from xamarin_uitest_action.models.config import LATEST_OS_VERSION, StepConfig
from xamarin_uitest_action.nunit import find_nunit3_console
from xamarin_uitest_action.orchestrator import UITestOrchestrator
from xamarin_uitest_action.simulators.base import SimulatorDirectory
from xamarin_uitest_action.simulators.simctl import SimctlDirectory

CONFIG_GROUPS: Mapping[str, Sequence[str]] = {
    "Build Configs": ("solution", "configuration", "platform"),
    "Xamarin UITest Configs": (
        "test_to_run",
        "simulator_device",
        "simulator_os_version",
    ),
    "Other Configs": ("deploy_dir",),
}


def log_inputs(log: logging.Logger, inputs: Mapping[str, str]) -> None:
    """Log the step inputs group by group."""
    for group, keys in CONFIG_GROUPS.items():
        log.info("%s:", group)
        for key in keys:
            log.info("- %s: %s", key, inputs.get(key, ""))


def format_validation_error(error: ValidationError) -> str:
    """Render pydantic errors as "field: message" pairs."""
    return "; ".join(
        f"{'.'.join(str(part) for part in e['loc'])}: {e['msg']}"
        for e in error.errors()
    )


async def run(
    inputs: Mapping[str, str],
    build_tool: BuildTool = "msbuild",
    nunit_console: Path | None = None,
    exporter: OutputExporter | None = None,
    directory: SimulatorDirectory | None = None,
) -> int:
    """Run the step and return exit code."""
    log = logging.getLogger("xamarin_uitest_action")
    exporter = exporter or EnvmanExporter()

    log_inputs(log, inputs)

    try:
        try:
            config = StepConfig(**inputs)
        except ValidationError as e:
            raise ConfigurationError(
                f"Issue with input: {format_validation_error(e)}"
            ) from e

        console_path = find_nunit3_console(nunit_console)
        log.info("nunit3-console: %s", console_path)

        orchestrator = UITestOrchestrator(
            directory=directory or SimctlDirectory(),
            builder=XamarinSolutionBuilder.load(config.solution, build_tool),
            exporter=exporter,
            console_path=console_path,
        )
        result_log = await orchestrator.run(config)
    except StepError as e:
        log.error("%s", e)
        await exporter.export_result("failed")
        return 1

    log.info("Xamarin UITest succeeded")
    await exporter.export_result("succeeded")
    await exporter.export_full_results(result_log)
    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Build a Xamarin solution and run its UITests on a simulator"
    )
    parser.add_argument(
        "--solution",
        default=os.environ.get("xamarin_project", ""),
        help="Path to the Xamarin solution file",
    )
    parser.add_argument(
        "--configuration",
        default=os.environ.get("xamarin_configuration", ""),
        help="Solution configuration to build (e.g. Debug)",
    )
    parser.add_argument(
        "--platform",
        default=os.environ.get("xamarin_platform", ""),
        help="Solution platform to build (e.g. 'Any CPU')",
    )
    parser.add_argument(
        "--test-to-run",
        default=os.environ.get("test_to_run", ""),
        help="Comma-separated test names to run (empty runs all tests)",
    )
    parser.add_argument(
        "--simulator-device",
        default=os.environ.get("simulator_device", ""),
        help="Simulator device name (e.g. 'iPhone 8')",
    )
    parser.add_argument(
        "--simulator-os-version",
        default=os.environ.get("simulator_os_version", LATEST_OS_VERSION),
        help="Simulator OS version (e.g. 'iOS 12.1') or 'latest'",
    )
    parser.add_argument(
        "--deploy-dir",
        default=os.environ.get("BITRISE_DEPLOY_DIR", ""),
        help="Directory the test result log is written to",
    )
    parser.add_argument(
        "--build-tool",
        choices=("msbuild", "xbuild"),
        default="msbuild",
        help="Tool used to build the solution projects",
    )
    parser.add_argument(
        "--nunit-console",
        type=Path,
        default=None,
        help="Path to nunit3-console (defaults to NUNIT_CONSOLE_PATH, then PATH)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    inputs = {
        "solution": args.solution,
        "configuration": args.configuration,
        "platform": args.platform,
        "test_to_run": args.test_to_run,
        "simulator_device": args.simulator_device,
        "simulator_os_version": args.simulator_os_version,
        "deploy_dir": args.deploy_dir,
    }

    exit_code = asyncio.run(
        run(inputs, build_tool=args.build_tool, nunit_console=args.nunit_console)
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
