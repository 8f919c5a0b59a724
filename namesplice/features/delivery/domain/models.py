# File: namesplice/features/delivery/domain/models.py
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class QualityTier:
    """A resolution/bitrate bucket. Tiers are fixed; callers never invent new ones."""
    name: str
    min_bandwidth_mbps: float
    width: int
    height: int
    bitrate: str

    @property
    def resolution(self) -> str:
        return f"{self.width}x{self.height}"


# Ordered lowest -> highest
QUALITY_TIERS: Tuple[QualityTier, ...] = (
    QualityTier("360p", 0.5, 640, 360, "500k"),
    QualityTier("480p", 1.5, 854, 480, "1M"),
    QualityTier("720p", 3.0, 1280, 720, "2.5M"),
    QualityTier("1080p", 6.0, 1920, 1080, "5M"),
)


class SampleSource(str, Enum):
    HINT = "hint"
    PROBE = "probe"
    DEFAULT = "default"


class EstimatorState(str, Enum):
    UNCACHED = "uncached"
    PROBING = "probing"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(frozen=True)
class ConnectionHint:
    """
    What the client platform reports about its network, when it reports anything.
    effective_type is one of slow-2g, 2g, 3g, 4g, wifi.
    """
    effective_type: Optional[str] = None
    downlink_mbps: Optional[float] = None


@dataclass(frozen=True)
class BandwidthSample:
    speed_mbps: float
    tier: QualityTier
    source: SampleSource
    connection_type: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = {"speed": self.speed_mbps, "quality": self.tier.name}
        if self.connection_type:
            payload["connectionType"] = self.connection_type
        return payload
