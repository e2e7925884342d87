"""Abstract base class for simulator directories."""

from abc import ABC, abstractmethod

from xamarin_uitest_action.models.simulator import OsVersionSimulatorInfosMap


class SimulatorDirectory(ABC):
    """Source of the simulators available on the host, keyed by OS version."""

    @abstractmethod
    async def list_simulators(self) -> OsVersionSimulatorInfosMap:
        """Return available simulators grouped by OS version.

        Returns:
            Mapping of OS version bucket (e.g. "iOS 12.1") to its simulators

        """
