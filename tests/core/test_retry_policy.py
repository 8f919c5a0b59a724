import pytest

from namesplice.core.errors import NonRetryableReferenceError, TransientUpstreamError, ValidationError
from namesplice.core.retry import RetryPolicy, call_with_retry, is_retryable_error


class FlakyOperation:
    """Fails with the given errors in order, then returns 'ok'."""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return "ok"


def _transient():
    return TransientUpstreamError("boom", provider="test", status_code=503)


def test_backoff_curve_is_exponential_and_capped():
    policy = RetryPolicy(max_attempts=6, initial_delay=1.0, backoff_factor=2.0, max_delay=5.0)
    assert [policy.delay_for(n) for n in range(1, 6)] == [1.0, 2.0, 4.0, 5.0, 5.0]


def test_retries_transient_errors_until_success():
    sleeps = []
    op = FlakyOperation(_transient(), _transient())

    result = call_with_retry(op, RetryPolicy(max_attempts=3, initial_delay=0.5), sleep=sleeps.append)

    assert result == "ok"
    assert op.calls == 3
    assert sleeps == [0.5, 1.0]


def test_reraises_last_error_when_attempts_exhausted():
    sleeps = []
    last = _transient()
    op = FlakyOperation(_transient(), _transient(), last)

    with pytest.raises(TransientUpstreamError) as exc_info:
        call_with_retry(op, RetryPolicy(max_attempts=3), sleep=sleeps.append)

    assert exc_info.value is last
    assert op.calls == 3
    assert len(sleeps) == 2


@pytest.mark.parametrize("error", [
    ValidationError("bad input"),
    NonRetryableReferenceError("unknown voice"),
    KeyError("not ours"),
])
def test_non_retryable_errors_fail_fast(error):
    sleeps = []
    op = FlakyOperation(error)

    with pytest.raises(type(error)):
        call_with_retry(op, RetryPolicy(max_attempts=5), sleep=sleeps.append)

    assert op.calls == 1
    assert sleeps == []


def test_custom_classifier_is_honoured():
    op = FlakyOperation(ConnectionError("reset"))
    result = call_with_retry(
        op,
        RetryPolicy(max_attempts=2, initial_delay=0),
        is_retryable=lambda e: isinstance(e, ConnectionError),
        sleep=lambda _: None,
    )
    assert result == "ok"
    assert op.calls == 2


def test_default_classifier():
    assert is_retryable_error(_transient())
    assert not is_retryable_error(ValidationError("x"))
    assert not is_retryable_error(RuntimeError("x"))


def test_policy_rejects_zero_attempts():
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)
