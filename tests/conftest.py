"""Shared fixtures: a controllable clock and a hermetic ThingSpeak upstream."""

from typing import Callable

import httpx
import pytest


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def channel_record(**fields: str) -> dict:
    """ThingSpeak-shaped record with the given fieldN values."""
    return {
        "channel": {"id": 3195161, "name": "Weather station", **fields},
        "feeds": [{"entry_id": 1, **fields}],
    }


class Upstream:
    """Scripted ThingSpeak: each request consumes the next outcome.

    An outcome is an ``httpx.Response``, an exception class to raise with the
    request attached, or a callable taking the request.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, type) and issubclass(outcome, Exception):
            raise outcome("simulated failure", request=request)
        if isinstance(outcome, httpx.Response):
            return outcome
        return outcome(request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_upstream() -> Callable[..., Upstream]:
    return Upstream
