import httpx
import pytest

from projersey.payments.retry import RetryPolicy

REQUEST = httpx.Request("POST", "https://api.stripe.com/v1/payment_intents")


class Flaky:
    def __init__(self, failures, exc=httpx.ConnectError):
        self.failures = failures
        self.exc = exc
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc(f"fail {self.calls}", request=REQUEST)
        return httpx.Response(200, json={"ok": True})


def test_resends_after_transport_errors():
    sleeps = []
    fn = Flaky(2)

    resp = RetryPolicy(attempts=3, sleep=sleeps.append).send(fn, operation="create_payment_intent")

    assert resp.status_code == 200
    assert fn.calls == 3
    assert len(sleeps) == 2


def test_last_transport_error_propagates():
    fn = Flaky(5, exc=httpx.ReadTimeout)

    with pytest.raises(httpx.ReadTimeout, match="fail 3"):
        RetryPolicy(attempts=3, sleep=lambda s: None).send(fn, operation="create_payment_intent")
    assert fn.calls == 3


def test_other_errors_are_not_resent():
    calls = []

    def boom():
        calls.append(1)
        raise ValueError("bad")

    with pytest.raises(ValueError):
        RetryPolicy(attempts=3, sleep=lambda s: None).send(boom, operation="create_payment_intent")
    assert len(calls) == 1


def test_http_answers_are_final():
    calls = []

    def server_error():
        calls.append(1)
        return httpx.Response(503)

    resp = RetryPolicy(attempts=3, sleep=lambda s: None).send(server_error, operation="retrieve")

    assert resp.status_code == 503
    assert len(calls) == 1


def test_single_attempt_does_not_sleep():
    sleeps = []

    with pytest.raises(httpx.ConnectError):
        RetryPolicy(attempts=1, sleep=sleeps.append).send(Flaky(1), operation="create_payment_intent")
    assert sleeps == []


def test_attempts_must_be_positive():
    with pytest.raises(ValueError):
        RetryPolicy(attempts=0)


def test_delay_grows_and_is_capped():
    policy = RetryPolicy(base=0.2, factor=2.0, cap=1.0, jitter=0.0)

    assert [policy.delay(n) for n in (1, 2, 3, 4, 5)] == [0.2, 0.4, 0.8, 1.0, 1.0]


def test_jitter_stays_within_bound():
    policy = RetryPolicy(base=0.2, factor=2.0, cap=1.0, jitter=0.25)

    for n in range(1, 10):
        assert 0 <= policy.delay(n) <= 1.25
