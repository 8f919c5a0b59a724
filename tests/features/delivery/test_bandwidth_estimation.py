import threading
import time
from unittest.mock import MagicMock

import pytest
import requests

from namesplice.core.cache import TTLCache
from namesplice.core.config.settings import Settings
from namesplice.core.errors import TransientUpstreamError
from namesplice.features.delivery.data.speed_probe import RequestsSpeedProbe
from namesplice.features.delivery.domain.interfaces import ISpeedProbe
from namesplice.features.delivery.domain.models import ConnectionHint, EstimatorState, SampleSource
from namesplice.features.delivery.service.bandwidth import BandwidthService
from namesplice.features.delivery.service.estimator import BandwidthEstimator


class StubProbe(ISpeedProbe):
    def __init__(self, speed=None, error=None, delay=0.0):
        self.speed = speed
        self.error = error
        self.delay = delay
        self.calls = 0

    def measure_mbps(self) -> float:
        self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error
        return self.speed


class FakeClock:
    def __init__(self, *readings):
        self.readings = list(readings)

    def __call__(self):
        return self.readings.pop(0)


def _session_returning(status=200, error=None, body_bytes=100_000):
    session = MagicMock()
    if error:
        session.get.side_effect = error
        return session
    response = MagicMock()
    response.content = b"\x00" * body_bytes
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(response=MagicMock(status_code=status))
    session.get.return_value = response
    return session


# --- Speed probe ---

def test_probe_derives_mbps_from_elapsed_time():
    probe = RequestsSpeedProbe(Settings(), session=_session_returning(), clock=FakeClock(10.0, 10.4))
    # 0.1 MB * 8 / 0.4s
    assert probe.measure_mbps() == pytest.approx(2.0)


def test_probe_measures_the_bytes_actually_received():
    probe = RequestsSpeedProbe(Settings(), session=_session_returning(body_bytes=250_000), clock=FakeClock(0.0, 0.5))
    # 0.25 MB * 8 / 0.5s
    assert probe.measure_mbps() == pytest.approx(4.0)


def test_probe_floors_at_point_one_mbps():
    probe = RequestsSpeedProbe(Settings(), session=_session_returning(), clock=FakeClock(0.0, 60.0))
    assert probe.measure_mbps() == 0.1


def test_probe_never_divides_by_zero():
    probe = RequestsSpeedProbe(Settings(), session=_session_returning(), clock=FakeClock(5.0, 5.0))
    assert probe.measure_mbps() > 0


@pytest.mark.parametrize("session", [
    _session_returning(status=503),
    _session_returning(error=requests.ConnectionError("no route")),
    _session_returning(error=requests.Timeout("slow")),
])
def test_probe_failures_raise_transient(session):
    probe = RequestsSpeedProbe(Settings(), session=session, clock=FakeClock(0.0, 1.0))
    with pytest.raises(TransientUpstreamError):
        probe.measure_mbps()


def test_probe_uses_configured_timeout():
    config = Settings()
    config.SPEED_TEST_TIMEOUT_SECONDS = 3.0
    session = _session_returning()
    RequestsSpeedProbe(config, session=session, clock=FakeClock(0.0, 1.0)).measure_mbps()
    assert session.get.call_args.kwargs["timeout"] == 3.0


# --- Estimator state machine ---

def test_hint_is_preferred_over_probe():
    probe = StubProbe(speed=50.0)
    estimator = BandwidthEstimator(probe)

    sample = estimator.estimate(ConnectionHint("4g", 2.0))

    assert sample.speed_mbps == 5.0
    assert sample.tier.name == "720p"
    assert sample.source == SampleSource.HINT
    assert sample.connection_type == "4g"
    assert probe.calls == 0
    assert estimator.state == EstimatorState.RESOLVED


def test_probe_path_resolves():
    estimator = BandwidthEstimator(StubProbe(speed=4.5))
    assert estimator.state == EstimatorState.UNCACHED

    sample = estimator.estimate()

    assert sample.tier.name == "720p"
    assert sample.source == SampleSource.PROBE
    assert estimator.state == EstimatorState.RESOLVED


def test_failed_probe_resolves_to_default_sample():
    estimator = BandwidthEstimator(StubProbe(error=TransientUpstreamError("down", provider="speed-test")))

    sample = estimator.estimate()

    assert sample.speed_mbps == 2
    assert sample.tier.name == "480p"
    assert sample.source == SampleSource.DEFAULT
    assert estimator.state == EstimatorState.FAILED
    assert sample.to_payload() == {"speed": 2.0, "quality": "480p"}


def test_unexpected_probe_error_still_resolves():
    estimator = BandwidthEstimator(StubProbe(error=RuntimeError("bug in probe")))
    assert estimator.estimate().tier.name == "480p"


def test_estimator_is_single_shot():
    probe = StubProbe(speed=10.0)
    estimator = BandwidthEstimator(probe)
    estimator.estimate()
    estimator.estimate()
    assert probe.calls == 1


# --- Session service ---

class ManualClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_service_caches_per_session_until_expiry():
    clock = ManualClock()
    probe = StubProbe(speed=8.0)
    service = BandwidthService(probe=probe, cache=TTLCache(ttl_seconds=1800, clock=clock), config=Settings())

    first = service.estimate_bandwidth("s1")
    clock.now = 1799
    assert service.estimate_bandwidth("s1") is first
    assert probe.calls == 1

    clock.now = 1800
    service.estimate_bandwidth("s1")
    assert probe.calls == 2


def test_sessions_are_independent():
    probe = StubProbe(speed=8.0)
    service = BandwidthService(probe=probe, cache=TTLCache(ttl_seconds=60), config=Settings())
    service.estimate_bandwidth("a")
    service.estimate_bandwidth("b")
    assert probe.calls == 2


def test_refresh_bypasses_cache():
    probe = StubProbe(speed=8.0)
    service = BandwidthService(probe=probe, cache=TTLCache(ttl_seconds=60), config=Settings())
    service.estimate_bandwidth("a")
    service.estimate_bandwidth("a", refresh=True)
    assert probe.calls == 2


def test_default_sample_is_cached_too():
    probe = StubProbe(error=TransientUpstreamError("down", provider="speed-test"))
    service = BandwidthService(probe=probe, cache=TTLCache(ttl_seconds=60), config=Settings())

    assert service.estimate_bandwidth("a").tier.name == "480p"
    service.estimate_bandwidth("a")
    assert probe.calls == 1


def test_concurrent_requests_share_one_probe():
    probe = StubProbe(speed=3.0, delay=0.3)
    service = BandwidthService(probe=probe, cache=TTLCache(ttl_seconds=60), config=Settings())
    results = []

    threads = [threading.Thread(target=lambda: results.append(service.estimate_bandwidth("s1"))) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert probe.calls == 1
    assert len(results) == 8
    assert len({id(r) for r in results}) == 1
