"""Pairs test projects with app bundles and runs each pair."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from xamarin_uitest_action.errors import (
    MissingAppBundleError,
    ResultLogError,
    TestRunFailedError,
)
from xamarin_uitest_action.exporter import OutputExporter
from xamarin_uitest_action.models.outputs import ProjectOutputMap, TestProjectOutputMap
from xamarin_uitest_action.models.simulator import SimulatorInfo
from xamarin_uitest_action.nunit import NUnitConsole
from xamarin_uitest_action.result_log import extract_failure_message, read_result_log

log = logging.getLogger(__name__)

APP_BUNDLE_PATH_ENV = "APP_BUNDLE_PATH"
SIMULATOR_UDID_ENV = "IOS_SIMULATOR_UDID"
RESULT_LOG_NAME = "TestResult.xml"


@dataclass(frozen=True, kw_only=True)
class TestPair:
    """A test assembly and the app bundle it runs against."""

    __test__ = False

    test_project_name: str
    dll_path: Path
    project_name: str
    app_path: Path


def match_tests(
    project_outputs: ProjectOutputMap, test_outputs: TestProjectOutputMap
) -> Sequence[TestPair]:
    """Pair every test project with the app of each project it refers to.

    Every pair is matched before any test runs, so a missing app bundle
    aborts the run regardless of which test project is visited first.
    Referred projects without collected outputs are not part of this build
    and are skipped.

    Raises:
        MissingAppBundleError: If a referred project produced no .app

    """
    pairs: list[TestPair] = []

    for test_project_name, test_output in test_outputs.items():
        if not test_output.referred_project_names:
            log.warning(
                "Test project (%s) does not refers to any project, skipping...",
                test_project_name,
            )
            continue

        for project_name in test_output.referred_project_names:
            if (project_output := project_outputs.get(project_name)) is None:
                continue

            if (app_path := project_output.app_path()) is None:
                raise MissingAppBundleError(project_name)

            pairs.append(
                TestPair(
                    test_project_name=test_project_name,
                    dll_path=test_output.output.path,
                    project_name=project_name,
                    app_path=app_path,
                )
            )

    return pairs


@dataclass(frozen=True, kw_only=True)
class TestRunnerInvoker:
    """Runs nunit3-console once per test pair, one pair at a time.

    All pairs write the same result log, so invocations must never overlap.
    """

    __test__ = False

    console_path: Path
    simulator: SimulatorInfo
    result_log_path: Path
    exporter: OutputExporter
    test_to_run: str = ""

    async def run_all(self, pairs: Sequence[TestPair]) -> str:
        """Run every pair and return the result log of the last run.

        Raises:
            TestRunFailedError: On the first failing run

        """
        result_log = ""
        for pair in pairs:
            result_log = await self.run_pair(pair)
        return result_log

    async def run_pair(self, pair: TestPair) -> str:
        """Run the tests of one pair and return the result log it produced."""
        log.info("Testing (%s) against (%s)", pair.test_project_name, pair.project_name)
        log.info("test dll: %s", pair.dll_path)
        log.info("app: %s", pair.app_path)

        console = NUnitConsole(
            console_path=self.console_path,
            dll_path=pair.dll_path,
            result_log_path=self.result_log_path,
            test_to_run=self.test_to_run,
        )

        log.info("Running Xamarin UITest")
        log.info("$ %s", console.printable_command())

        exit_code = await console.run(
            {
                SIMULATOR_UDID_ENV: self.simulator.id,
                APP_BUNDLE_PATH_ENV: str(pair.app_path),
            }
        )

        try:
            result_log = read_result_log(self.result_log_path)
        except ResultLogError as e:
            log.warning("Failed to read test result, error: %s", e)
            result_log = ""

        if exit_code != 0:
            if error_message := extract_failure_message(result_log):
                log.error("%s", error_message)
            else:
                log.warning("No failure message found in the test result")

            await self.exporter.export_full_results(result_log)

            raise TestRunFailedError(
                f"Test failed, nunit3-console exit code: {exit_code}",
                result_log=result_log,
            )

        return result_log
