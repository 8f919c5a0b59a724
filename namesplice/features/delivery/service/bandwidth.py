# File: namesplice/features/delivery/service/bandwidth.py
import logging
from typing import Callable, Optional

from namesplice.core.cache import SingleFlight, TTLCache
from namesplice.core.config.settings import Settings, settings as default_settings
from ..data.speed_probe import RequestsSpeedProbe
from ..domain.interfaces import ISpeedProbe
from ..domain.models import BandwidthSample, ConnectionHint
from .estimator import BandwidthEstimator

logger = logging.getLogger(__name__)


class BandwidthService:
    """
    Session-scoped bandwidth estimates.

    Resolved samples are cached per session key for BANDWIDTH_CACHE_TTL_SECONDS.
    Concurrent requests for the same key while a probe is running share that probe.
    """

    def __init__(self,
                 probe: Optional[ISpeedProbe] = None,
                 cache: Optional[TTLCache] = None,
                 config: Settings = default_settings,
                 estimator_factory: Callable[[ISpeedProbe], BandwidthEstimator] = BandwidthEstimator):
        self.probe = probe or RequestsSpeedProbe(config)
        self.cache = cache or TTLCache(ttl_seconds=config.BANDWIDTH_CACHE_TTL_SECONDS)
        self._estimator_factory = estimator_factory
        self._flight: SingleFlight[BandwidthSample] = SingleFlight()

    def estimate_bandwidth(self,
                           session_key: str = "default",
                           hint: Optional[ConnectionHint] = None,
                           refresh: bool = False) -> BandwidthSample:
        if refresh:
            self.cache.expire(session_key)
        else:
            cached = self.cache.get(session_key)
            if cached is not None:
                return cached

        return self._flight.do(session_key, lambda: self._resolve(session_key, hint))

    def _resolve(self, session_key: str, hint: Optional[ConnectionHint]) -> BandwidthSample:
        # A follower that arrives just after the leader finished finds the cached value
        cached = self.cache.get(session_key)
        if cached is not None:
            return cached

        estimator = self._estimator_factory(self.probe)
        sample = estimator.estimate(hint)
        self.cache.set(session_key, sample)
        logger.info(
            f"Session {session_key}: {sample.speed_mbps:.2f} Mbps -> {sample.tier.name} ({sample.source.value})"
        )
        return sample

    def invalidate(self, session_key: str) -> bool:
        return self.cache.expire(session_key)
