# File: namesplice/features/delivery/domain/quality.py
from typing import Dict, Optional, Sequence

from namesplice.core.errors import ValidationError
from .models import ConnectionHint, QUALITY_TIERS, QualityTier

# Only 70% of the estimate is spent on video
SAFETY_MARGIN = 0.7

DEFAULT_DOWNLINK_MBPS = 1.0

# Conservative floors per connection class. The estimate is never below its class floor.
CONNECTION_FLOORS_MBPS: Dict[str, float] = {
    "slow-2g": 0.05,
    "2g": 0.25,
    "3g": 1.0,
    "4g": 5.0,
}


def select_tier(speed_mbps: float, tiers: Sequence[QualityTier] = QUALITY_TIERS) -> QualityTier:
    """
    Highest tier whose threshold fits within the margined estimate, else the lowest tier.
    e.g. 4.5 Mbps -> 3.15 margined -> 720p
    """
    for tier in reversed(tiers):
        # Dividing the threshold keeps speed == threshold / margin exactly on the boundary
        if speed_mbps >= tier.min_bandwidth_mbps / SAFETY_MARGIN:
            return tier
    return tiers[0]


def get_tier(name: str, tiers: Sequence[QualityTier] = QUALITY_TIERS) -> QualityTier:
    for tier in tiers:
        if tier.name == name:
            return tier
    raise ValidationError(
        f"Unknown quality tier: {name!r}",
        {"tier": name, "allowed": [t.name for t in tiers]},
    )


def speed_from_hint(hint: ConnectionHint) -> float:
    downlink = hint.downlink_mbps if hint.downlink_mbps else DEFAULT_DOWNLINK_MBPS
    floor: Optional[float] = CONNECTION_FLOORS_MBPS.get((hint.effective_type or "").lower())
    if floor is None:
        return downlink
    return max(downlink, floor)
