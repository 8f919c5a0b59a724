from abc import ABC, abstractmethod


class ISpeedProbe(ABC):
    @abstractmethod
    def measure_mbps(self) -> float:
        """
        Times a download of a small reference payload.

        Raises:
            TransientUpstreamError: The payload could not be fetched.
        """
        pass


class IVariantProbe(ABC):
    @abstractmethod
    def exists(self, url: str) -> bool:
        """Lightweight existence check. Never raises; unreachable means False."""
        pass
