"""Step orchestrator tying the simulator, build and test phases together."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from xamarin_uitest_action.build_orchestrator import BuildOrchestrator
from xamarin_uitest_action.builders.base import SolutionBuilder
from xamarin_uitest_action.errors import ConfigurationError
from xamarin_uitest_action.exporter import OutputExporter
from xamarin_uitest_action.models.config import StepConfig
from xamarin_uitest_action.models.outputs import SDK
from xamarin_uitest_action.output_collector import OutputCollector
from xamarin_uitest_action.simulator_selector import SimulatorSelector
from xamarin_uitest_action.simulators.base import SimulatorDirectory
from xamarin_uitest_action.uitest_runner import (
    RESULT_LOG_NAME,
    TestRunnerInvoker,
    match_tests,
)

log = logging.getLogger(__name__)

SDK_TARGETS: Sequence[SDK] = ("ios",)


@dataclass(frozen=True, kw_only=True)
class UITestOrchestrator:
    """Runs the UITest step phases in order, sequentially."""

    directory: SimulatorDirectory
    builder: SolutionBuilder
    exporter: OutputExporter
    console_path: Path

    async def run(self, config: StepConfig) -> str:
        """Run the step and return the result log of the last test run.

        Any StepError raised by a phase stops the run immediately.

        Args:
            config: Validated step configuration

        Returns:
            Result log content, empty when no test ran or it was unreadable

        """
        log.info("Collecting simulator info...")
        simulator = await SimulatorSelector(directory=self.directory).resolve(
            config.simulator_os_version, config.simulator_device
        )
        log.info(
            "Simulator (%s), id: (%s), status: %s",
            simulator.name,
            simulator.id,
            simulator.status,
        )

        await BuildOrchestrator(builder=self.builder).build(
            config.configuration, config.platform, sdk_targets=SDK_TARGETS
        )

        collector = OutputCollector(builder=self.builder)
        project_outputs = await collector.collect_outputs(
            config.configuration, config.platform, sdk_targets=SDK_TARGETS
        )
        test_outputs, _ = await collector.collect_test_outputs(
            config.configuration, config.platform
        )

        pairs = match_tests(project_outputs, test_outputs)
        log.info("Running %d test pair(s)...", len(pairs))
        try:
            config.deploy_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(
                f"Failed to create deploy dir {config.deploy_dir}: {e}"
            ) from e

        invoker = TestRunnerInvoker(
            console_path=self.console_path,
            simulator=simulator,
            result_log_path=config.deploy_dir / RESULT_LOG_NAME,
            exporter=self.exporter,
            test_to_run=config.test_to_run,
        )
        return await invoker.run_all(pairs)
