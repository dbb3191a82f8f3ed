from datetime import UTC, datetime
from pathlib import Path
from uuid import UUID

import pytest

from pressroom.adapters.identity import StaticIdentity
from pressroom.adapters.soup_parser import SoupMarkupParser
from pressroom.rules.loader import load_rules
from pressroom.rules.provider import RulesProvider

ROOT = Path(__file__).resolve().parents[1]
AUTHOR_ID = UUID("11111111-1111-1111-1111-111111111111")


class FakeClock:
    """Deterministic clock; time only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.t = start
        self.now = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)

    def now_utc(self) -> datetime:
        return self.now

    def monotonic(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


class FakeSleeper:
    """Records sleeps and advances the fake clock instead of blocking."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.sleeps: list[float] = []

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.clock.advance(seconds)


@pytest.fixture
def rules_path() -> Path:
    return ROOT / "rules.yaml"


@pytest.fixture
def rules(rules_path):
    return RulesProvider(load_rules(rules_path))


@pytest.fixture
def parser() -> SoupMarkupParser:
    return SoupMarkupParser()


@pytest.fixture
def identity() -> StaticIdentity:
    return StaticIdentity(AUTHOR_ID)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleeper(clock) -> FakeSleeper:
    return FakeSleeper(clock)
