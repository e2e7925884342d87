"""Build phase: builds the UITest projects and the apps they exercise."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from xamarin_uitest_action.builders.base import BuildCommandEvent, SolutionBuilder
from xamarin_uitest_action.models.outputs import SDK

log = logging.getLogger(__name__)


def log_build_command(event: BuildCommandEvent) -> None:
    """Log a build command reported by the builder."""
    if event.test_framework == "xamarin-uitest":
        log.info("Building test project: %s", event.project_name)
    else:
        log.info("Building project: %s (%s)", event.project_name, event.sdk)

    log.info("$ %s", event.command)

    if event.already_performed:
        log.warning("build command already performed, skipping...")


@dataclass(frozen=True, kw_only=True)
class BuildOrchestrator:
    """Runs the builder and surfaces its warnings."""

    builder: SolutionBuilder

    async def build(
        self,
        configuration: str,
        platform: str,
        sdk_targets: Sequence[SDK] = ("ios",),
    ) -> Sequence[str]:
        """Build every UITest project and its referred projects.

        Warnings are logged and returned; a build that cannot proceed raises
        BuildError from the builder.
        """
        log.info(
            "Building all iOS Xamarin UITest and referred projects (%s|%s)",
            configuration,
            platform,
        )
        warnings = await self.builder.build_uitest_and_referred_projects(
            configuration, platform, sdks=sdk_targets, callback=log_build_command
        )
        for warning in warnings:
            log.warning("%s", warning)
        return warnings
