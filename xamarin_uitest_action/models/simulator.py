"""Models describing available simulators."""

from collections.abc import Mapping, Sequence

from pydantic import Field

from xamarin_uitest_action.models.base import Model


class SimulatorInfo(Model):
    """A single simulator device as listed by the simulator directory."""

    name: str = Field(..., description="Device name (e.g. 'iPhone 8')")
    id: str = Field(..., description="Simulator UDID")
    status: str = Field(default="", description="Device state (e.g. 'Shutdown')")


type OsVersionSimulatorInfosMap = Mapping[str, Sequence[SimulatorInfo]]
