"""Simulator directory module."""

from xamarin_uitest_action.simulators.base import SimulatorDirectory
from xamarin_uitest_action.simulators.simctl import SimctlDirectory

__all__ = ["SimctlDirectory", "SimulatorDirectory"]
