import logging
import time
from typing import Callable, Optional

import requests

from namesplice.core.config.settings import Settings, settings as default_settings
from namesplice.core.errors import TransientUpstreamError
from ..domain.interfaces import ISpeedProbe

logger = logging.getLogger(__name__)

PROVIDER = "speed-test"

# Lower bound on any measured speed
MIN_SPEED_MBPS = 0.1
MIN_ELAPSED_SECONDS = 1e-6


class RequestsSpeedProbe(ISpeedProbe):
    """
    Estimates downlink by timing a GET of a fixed-size payload.
    The clock is injectable so elapsed time can be controlled in tests.
    """

    def __init__(self,
                 config: Settings = default_settings,
                 session: Optional[requests.Session] = None,
                 clock: Callable[[], float] = time.perf_counter):
        self.url = config.SPEED_TEST_URL
        self.timeout = config.SPEED_TEST_TIMEOUT_SECONDS
        self._session = session
        self._clock = clock

    @property
    def session(self) -> requests.Session:
        """Lazy-load session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({"Cache-Control": "no-cache"})
        return self._session

    def measure_mbps(self) -> float:
        started = self._clock()
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            # Reading the body is part of the measurement
            received = len(response.content)
        except requests.RequestException as e:
            logger.warning(f"Speed test against {self.url} failed: {e}")
            status = getattr(getattr(e, "response", None), "status_code", None)
            raise TransientUpstreamError("Speed test failed", provider=PROVIDER, status_code=status) from e

        elapsed = max(self._clock() - started, MIN_ELAPSED_SECONDS)
        megabits = received / 1_000_000 * 8
        speed = max(MIN_SPEED_MBPS, megabits / elapsed)
        logger.info(f"Speed test: {speed:.2f} Mbps ({received} bytes in {elapsed:.3f}s)")
        return speed
