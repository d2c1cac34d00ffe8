"""retry_with_backoff のテスト。"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from superops.config import RetryConfig
from superops.errors import SuperOpsRateLimitError, SuperOpsServerError, SuperOpsValidationError
from superops.errors_catalog import ErrorClassifier
from superops.http import decide_wait_ms, parse_retry_after, retry_with_backoff


class _Flaky:
    def __init__(self, failures: list[Exception], result: Any = "ok") -> None:
        self.failures = list(failures)
        self.result = result
        self.calls = 0

    async def __call__(self) -> Any:
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.result


class _AlwaysFails:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc
        self.calls = 0

    async def __call__(self) -> Any:
        self.calls += 1
        raise self.exc


def _recording_sleep(sleeps: list[float]) -> Any:
    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return fake_sleep


@pytest.fixture
def no_jitter(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("superops.http.random.random", lambda: 0.0)


def test_succeeds_after_one_failure() -> None:
    operation = _Flaky([RuntimeError("temporary")])
    sleeps: list[float] = []

    result = asyncio.run(
        retry_with_backoff(
            operation,
            RetryConfig(max_retries=3, base_delay_ms=10),
            sleep=_recording_sleep(sleeps),
        )
    )

    assert result == "ok"
    assert operation.calls == 2
    assert len(sleeps) == 1


def test_exhausted_retries_reraise_last_failure() -> None:
    exc = SuperOpsServerError("boom")
    operation = _AlwaysFails(exc)

    with pytest.raises(SuperOpsServerError) as info:
        asyncio.run(
            retry_with_backoff(
                operation,
                RetryConfig(max_retries=1, base_delay_ms=0),
                sleep=_recording_sleep([]),
            )
        )

    assert info.value is exc
    assert operation.calls == 2


def test_should_retry_false_stops_immediately() -> None:
    operation = _AlwaysFails(SuperOpsValidationError("bad input"))
    sleeps: list[float] = []

    with pytest.raises(SuperOpsValidationError):
        asyncio.run(
            retry_with_backoff(
                operation,
                RetryConfig(
                    max_retries=5,
                    base_delay_ms=10,
                    should_retry=ErrorClassifier().should_retry,
                ),
                sleep=_recording_sleep(sleeps),
            )
        )

    assert operation.calls == 1
    assert sleeps == []


def test_zero_retries_runs_once() -> None:
    operation = _AlwaysFails(RuntimeError("nope"))

    with pytest.raises(RuntimeError):
        asyncio.run(retry_with_backoff(operation, RetryConfig(max_retries=0, base_delay_ms=10)))

    assert operation.calls == 1


def test_backoff_doubles_and_is_capped(no_jitter: None) -> None:
    operation = _AlwaysFails(RuntimeError("down"))
    sleeps: list[float] = []

    with pytest.raises(RuntimeError):
        asyncio.run(
            retry_with_backoff(
                operation,
                RetryConfig(max_retries=3, base_delay_ms=100, max_delay_ms=250),
                sleep=_recording_sleep(sleeps),
            )
        )

    assert sleeps == [0.1, 0.2, 0.25]
    assert operation.calls == 4


def test_jitter_adds_at_most_ten_percent(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("superops.http.random.random", lambda: 0.999)
    operation = _Flaky([RuntimeError("x")])
    sleeps: list[float] = []

    asyncio.run(
        retry_with_backoff(
            operation,
            RetryConfig(max_retries=1, base_delay_ms=1_000),
            sleep=_recording_sleep(sleeps),
        )
    )

    assert 1.0 <= sleeps[0] <= 1.1


def test_server_retry_after_hint_extends_wait(no_jitter: None) -> None:
    classifier = ErrorClassifier()
    operation = _Flaky([SuperOpsRateLimitError(retry_after_ms=3_000)])
    sleeps: list[float] = []

    asyncio.run(
        retry_with_backoff(
            operation,
            RetryConfig(
                max_retries=3,
                base_delay_ms=100,
                should_retry=classifier.should_retry,
                retry_after_ms=classifier.retry_after_ms,
            ),
            sleep=_recording_sleep(sleeps),
        )
    )

    assert sleeps == [3.0]
    assert operation.calls == 2


def test_decide_wait_prefers_longer_hint() -> None:
    assert decide_wait_ms(backoff_ms=100.0, retry_after_ms=None).source == "backoff"
    assert decide_wait_ms(backoff_ms=100.0, retry_after_ms=50).ms == 100.0
    decision = decide_wait_ms(backoff_ms=100.0, retry_after_ms=500)
    assert decision.source == "retry_after"
    assert decision.ms == 500


def test_parse_retry_after_accepts_seconds_and_rejects_garbage() -> None:
    assert parse_retry_after("12") == 12.0
    assert parse_retry_after(None) is None
    assert parse_retry_after("soon") is None
    assert parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT") == 0.0


def test_retry_config_rejects_negative_values() -> None:
    with pytest.raises(ValueError):
        RetryConfig(max_retries=-1, base_delay_ms=0)
    with pytest.raises(ValueError):
        RetryConfig(max_retries=0, base_delay_ms=-5)
