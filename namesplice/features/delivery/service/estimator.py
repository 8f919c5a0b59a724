# File: namesplice/features/delivery/service/estimator.py
import logging
import threading
from typing import Optional

from ..domain.interfaces import ISpeedProbe
from ..domain.models import BandwidthSample, ConnectionHint, EstimatorState, SampleSource
from ..domain.quality import get_tier, select_tier, speed_from_hint

logger = logging.getLogger(__name__)

DEFAULT_SPEED_MBPS = 2.0
DEFAULT_TIER_NAME = "480p"


def default_sample() -> BandwidthSample:
    return BandwidthSample(
        speed_mbps=DEFAULT_SPEED_MBPS,
        tier=get_tier(DEFAULT_TIER_NAME),
        source=SampleSource.DEFAULT,
    )


class BandwidthEstimator:
    """
    Single-shot estimator for one session.

    UNCACHED -> PROBING -> RESOLVED | FAILED

    A platform hint is preferred over a timed download. Estimation never
    raises: a failed probe resolves to a fixed default sample so playback
    is never blocked on it.
    """

    def __init__(self, probe: ISpeedProbe):
        self.probe = probe
        self.state = EstimatorState.UNCACHED
        self.sample: Optional[BandwidthSample] = None
        self._lock = threading.Lock()

    def estimate(self, hint: Optional[ConnectionHint] = None) -> BandwidthSample:
        with self._lock:
            if self.sample is not None:
                return self.sample

            self.state = EstimatorState.PROBING

            if hint is not None:
                speed = speed_from_hint(hint)
                self.sample = BandwidthSample(
                    speed_mbps=speed,
                    tier=select_tier(speed),
                    source=SampleSource.HINT,
                    connection_type=hint.effective_type,
                )
                self.state = EstimatorState.RESOLVED
                return self.sample

            try:
                speed = self.probe.measure_mbps()
            except Exception as e:
                logger.warning(f"Bandwidth detection failed, using default quality: {e}")
                self.sample = default_sample()
                self.state = EstimatorState.FAILED
                return self.sample

            self.sample = BandwidthSample(speed_mbps=speed, tier=select_tier(speed), source=SampleSource.PROBE)
            self.state = EstimatorState.RESOLVED
            return self.sample
