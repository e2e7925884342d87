"""Resolve the configured simulator into a concrete device."""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from xamarin_uitest_action.errors import NotFoundError
from xamarin_uitest_action.models.config import LATEST_OS_VERSION
from xamarin_uitest_action.models.simulator import (
    OsVersionSimulatorInfosMap,
    SimulatorInfo,
)
from xamarin_uitest_action.simulators.base import SimulatorDirectory

log = logging.getLogger(__name__)

IOS_PREFIX = "iOS"
VERSION_PATTERN = re.compile(
    r"^v?(?P<segments>\d+(?:\.\d+)*)(?:[-+][0-9A-Za-z.\-+]*)?$"
)


def parse_version(version: str) -> tuple[int, ...]:
    """Parse a dotted version ("12.1", "11.4.1", "13.0-beta") into numbers.

    Raises:
        ValueError: If the text is not a version number

    """
    if (match := VERSION_PATTERN.match(version.strip())) is None:
        raise ValueError(f"Malformed version: {version!r}")
    return tuple(int(segment) for segment in match["segments"].split("."))


def get_latest_ios_version(os_versions: Iterable[str]) -> str:
    """Return the bucket key of the newest iOS version.

    Versions are compared numerically, and the result keeps only the major
    and minor components (e.g. "iOS 12.1" for 12.1.1).

    Raises:
        NotFoundError: If no iOS bucket exists or one of them is not a version

    """
    latest: tuple[int, ...] | None = None

    for os_version in os_versions:
        if not os_version.startswith(IOS_PREFIX):
            continue

        version_str = os_version.removeprefix(IOS_PREFIX).strip()
        try:
            version = parse_version(version_str)
        except ValueError as e:
            raise NotFoundError(
                f"Failed to parse version ({version_str}), error: {e}"
            ) from e

        if latest is None or version > latest:
            latest = version

    if latest is None:
        raise NotFoundError("Failed to determine latest iOS simulator version")

    major, minor = (*latest, 0)[:2]
    return f"{IOS_PREFIX} {major}.{minor}"


def find_simulator(
    simulators: OsVersionSimulatorInfosMap, os_version: str, device_name: str
) -> SimulatorInfo:
    """Find the device with exactly the given name in an OS version bucket.

    When the bucket holds several devices with the same name the first one
    listed is returned.

    Raises:
        NotFoundError: If the bucket or the device does not exist

    """
    if os_version == LATEST_OS_VERSION:
        os_version = get_latest_ios_version(simulators.keys())

    if (infos := simulators.get(os_version)) is None:
        raise NotFoundError(f"No simulators found for os version: {os_version}")

    for info in infos:
        if info.name == device_name:
            return info

    raise NotFoundError(
        f"No simulators found for os version: ({os_version}), "
        f"device name: ({device_name})"
    )


@dataclass(frozen=True, kw_only=True)
class SimulatorSelector:
    """Resolves an (OS version, device name) pair through a directory."""

    directory: SimulatorDirectory

    async def resolve(self, os_version: str, device_name: str) -> SimulatorInfo:
        """Resolve the simulator to run the tests on.

        Args:
            os_version: OS version bucket (e.g. "iOS 12.1") or "latest"
            device_name: Exact simulator device name

        Returns:
            The matching simulator

        """
        simulators = await self.directory.list_simulators()
        log.info(
            "Found %d OS version(s): %s",
            len(simulators),
            ", ".join(sorted(simulators)),
        )

        return find_simulator(simulators, os_version, device_name)
