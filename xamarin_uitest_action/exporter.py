"""Publishing step outputs to the surrounding pipeline."""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal

from xamarin_uitest_action.errors import ExportFailure

log = logging.getLogger(__name__)

TEST_RESULT_KEY = "BITRISE_XAMARIN_TEST_RESULT"
FULL_RESULTS_TEXT_KEY = "BITRISE_XAMARIN_TEST_FULL_RESULTS_TEXT"

type ResultToken = Literal["succeeded", "failed"]


class OutputExporter(ABC):
    """Publishes key/value outputs of the step."""

    @abstractmethod
    async def export(self, key: str, value: str) -> None:
        """Publish a single value.

        Raises:
            ExportFailure: If the publishing channel is unavailable

        """

    async def export_safely(self, key: str, value: str) -> bool:
        """Publish a value, logging a warning instead of raising."""
        try:
            await self.export(key, value)
        except ExportFailure as e:
            log.warning("Failed to export environment: %s, error: %s", key, e)
            return False
        return True

    async def export_result(self, result: ResultToken) -> bool:
        """Publish the overall test result."""
        return await self.export_safely(TEST_RESULT_KEY, result)

    async def export_full_results(self, result_log: str) -> bool:
        """Publish the full result log, skipped when there is nothing to publish."""
        if not result_log:
            return False
        return await self.export_safely(FULL_RESULTS_TEXT_KEY, result_log)


@dataclass(frozen=True, kw_only=True)
class EnvmanExporter(OutputExporter):
    """Exports values with `envman add`, passing the value on stdin."""

    envman: str = "envman"

    async def export(self, key: str, value: str) -> None:
        """Run `envman add --key KEY` with the value on stdin."""
        try:
            process = await asyncio.create_subprocess_exec(
                self.envman,
                "add",
                "--key",
                key,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ExportFailure(f"Failed to start {self.envman}: {e}") from e

        _, stderr = await process.communicate(value.encode())

        if process.returncode != 0:
            raise ExportFailure(
                f"{self.envman} exited with {process.returncode}: "
                f"{stderr.decode().strip()}"
            )
