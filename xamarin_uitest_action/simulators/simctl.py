"""Simulator directory backed by `xcrun simctl`."""

import asyncio
import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from xamarin_uitest_action.errors import NotFoundError
from xamarin_uitest_action.models.simulator import (
    OsVersionSimulatorInfosMap,
    SimulatorInfo,
)
from xamarin_uitest_action.simulators.base import SimulatorDirectory

log = logging.getLogger(__name__)

RUNTIME_ID_PREFIX = "com.apple.CoreSimulator.SimRuntime."
RUNTIME_ID_PATTERN = re.compile(r"^(?P<os>[A-Za-z]+)-(?P<version>\d+(?:-\d+)*)$")


@dataclass(frozen=True, kw_only=True)
class SimctlDirectory(SimulatorDirectory):
    """Lists simulators with `xcrun simctl list devices --json`."""

    xcrun: str = "xcrun"

    async def list_simulators(self) -> OsVersionSimulatorInfosMap:
        """Run simctl and group the available devices by OS version."""
        try:
            process = await asyncio.create_subprocess_exec(
                self.xcrun,
                "simctl",
                "list",
                "devices",
                "--json",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise NotFoundError(f"{self.xcrun} not found: {e}") from e

        stdout, stderr = await process.communicate()

        if process.returncode != 0:
            raise NotFoundError(
                f"Failed to list simulators: {stderr.decode().strip()}"
            )

        try:
            return parse_simctl_devices(json.loads(stdout.decode()))
        except (
            json.JSONDecodeError,
            KeyError,
            AttributeError,
            TypeError,
            ValidationError,
        ) as e:
            raise NotFoundError(f"Unexpected simctl output: {e}") from e


def parse_simctl_devices(data: Mapping[str, Any]) -> OsVersionSimulatorInfosMap:
    """Convert `simctl list devices --json` output into OS version buckets.

    Unavailable devices are left out, and runtimes with no available device
    do not produce a bucket.
    """
    simulators: dict[str, list[SimulatorInfo]] = {}

    for runtime, devices in data.get("devices", {}).items():
        os_version = runtime_to_os_version(runtime)
        available = [
            SimulatorInfo(
                name=device["name"],
                id=device["udid"],
                status=device.get("state", ""),
            )
            for device in devices
            if is_available(device)
        ]
        if not available:
            continue
        simulators.setdefault(os_version, []).extend(available)

    return simulators


def runtime_to_os_version(runtime: str) -> str:
    """Turn a simctl runtime key into an OS version bucket name.

    Runtime identifiers (com.apple.CoreSimulator.SimRuntime.iOS-12-1) become
    "iOS 12.1"; older simctl versions already key devices by "iOS 12.1".
    """
    if not runtime.startswith(RUNTIME_ID_PREFIX):
        return runtime

    runtime_name = runtime.removeprefix(RUNTIME_ID_PREFIX)
    if (match := RUNTIME_ID_PATTERN.match(runtime_name)) is None:
        log.warning("Unrecognized simulator runtime: %s", runtime)
        return runtime_name

    return f"{match['os']} {match['version'].replace('-', '.')}"


def is_available(device: Mapping[str, Any]) -> bool:
    """Check the availability flags reported by the different simctl versions."""
    if "isAvailable" in device:
        return bool(device["isAvailable"])
    availability: str = device.get("availability", "(available)")
    return "unavailable" not in availability

