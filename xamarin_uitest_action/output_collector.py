"""Queries the artifacts materialized by the build phase."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from xamarin_uitest_action.builders.base import SolutionBuilder
from xamarin_uitest_action.models.outputs import (
    SDK,
    ProjectOutputMap,
    TestProjectOutputMap,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class OutputCollector:
    """Collects project and test project outputs without building anything."""

    builder: SolutionBuilder

    async def collect_outputs(
        self,
        configuration: str,
        platform: str,
        sdk_targets: Sequence[SDK] = ("ios",),
    ) -> ProjectOutputMap:
        """Return the artifacts of the SDK target projects, keyed by name."""
        outputs = await self.builder.collect_project_outputs(
            configuration, platform, sdks=sdk_targets
        )
        log.info("Collected outputs of %d project(s)", len(outputs))
        return outputs

    async def collect_test_outputs(
        self, configuration: str, platform: str
    ) -> tuple[TestProjectOutputMap, Sequence[str]]:
        """Return the test assemblies of every UITest project and the warnings.

        Collection warnings are logged here as well, the caller decides which
        entries to skip.
        """
        outputs, warnings = await self.builder.collect_uitest_project_outputs(
            configuration, platform
        )
        for warning in warnings:
            log.warning("%s", warning)
        log.info("Collected outputs of %d test project(s)", len(outputs))
        return outputs, warnings
