# tests/unit/infrastructure/resilience/test_retry.py
from __future__ import annotations

import pytest

from exact_online.infrastructure.resilience import retry as retry_module
from exact_online.infrastructure.resilience.retry import RetryPolicy, retry_async


@pytest.fixture(autouse=True)
def _no_sleep(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    slept: list[float] = []

    async def _fake_sleep(delay: float) -> None:
        slept.append(delay)

    monkeypatch.setattr(retry_module.asyncio, "sleep", _fake_sleep)
    return slept


def test_backoff_without_jitter_is_capped_exponential() -> None:
    policy = RetryPolicy(total=5, base=0.5, cap=3.0, jitter=False)
    assert [policy.backoff(n) for n in range(4)] == [0.5, 1.0, 2.0, 3.0]


def test_backoff_with_jitter_stays_within_bounds() -> None:
    policy = RetryPolicy(total=5, base=1.0, cap=4.0, jitter=True)
    for attempt in range(5):
        assert 0.0 <= policy.backoff(attempt) <= min(4.0, 2**attempt)


@pytest.mark.asyncio
async def test_retry_async_retries_until_success(_no_sleep: list[float]) -> None:
    calls = {"n": 0}
    retried: list[int] = []

    async def flaky() -> str:
        calls["n"] += 1
        if calls["n"] < 3:
            raise ConnectionError("transient")
        return "ok"

    result = await retry_async(
        flaky,
        policy=RetryPolicy(total=3, base=0.1, cap=1.0, jitter=False),
        retry_on=lambda exc: isinstance(exc, ConnectionError),
        on_retry=lambda attempt, exc: retried.append(attempt),
    )

    assert result == "ok"
    assert calls["n"] == 3
    assert retried == [0, 1]
    assert _no_sleep == [0.1, 0.2]


@pytest.mark.asyncio
async def test_retry_async_gives_up_after_budget() -> None:
    calls = {"n": 0}

    async def always_fails() -> None:
        calls["n"] += 1
        raise ConnectionError("down")

    with pytest.raises(ConnectionError):
        await retry_async(
            always_fails,
            policy=RetryPolicy(total=2, base=0.0, cap=0.0, jitter=False),
            retry_on=lambda exc: True,
        )
    assert calls["n"] == 3


@pytest.mark.asyncio
async def test_retry_async_does_not_retry_non_retryable() -> None:
    calls = {"n": 0}

    async def bad_request() -> None:
        calls["n"] += 1
        raise ValueError("bad")

    with pytest.raises(ValueError):
        await retry_async(
            bad_request,
            policy=RetryPolicy(total=5, base=0.0, cap=0.0),
            retry_on=lambda exc: isinstance(exc, ConnectionError),
        )
    assert calls["n"] == 1


class _Throttled(Exception):
    def __init__(self, wait: float | None) -> None:
        super().__init__("throttled")
        self.wait = wait


@pytest.mark.asyncio
async def test_delay_for_overrides_backoff(_no_sleep: list[float]) -> None:
    waits = iter([1.5, None])

    async def throttled() -> str:
        wait = next(waits, "done")
        if wait == "done":
            return "ok"
        raise _Throttled(wait)

    result = await retry_async(
        throttled,
        policy=RetryPolicy(total=3, base=0.1, cap=1.0, jitter=False),
        retry_on=lambda exc: isinstance(exc, _Throttled),
        delay_for=lambda exc: exc.wait if isinstance(exc, _Throttled) else None,
    )

    assert result == "ok"
    assert _no_sleep == [1.5, 0.2]


@pytest.mark.asyncio
async def test_no_sleep_before_final_raise(_no_sleep: list[float]) -> None:
    async def throttled() -> None:
        raise _Throttled(10.0)

    with pytest.raises(_Throttled):
        await retry_async(
            throttled,
            policy=RetryPolicy(total=1, base=0.0, cap=0.0, jitter=False),
            retry_on=lambda exc: True,
            delay_for=lambda exc: 10.0,
        )
    assert _no_sleep == [10.0]
