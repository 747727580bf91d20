from datetime import datetime, timedelta

import pytest

from libranet.lending import LendingService
from libranet.money import Money


class FakeClock:
    """Settable clock so overdue behaviour can be tested without sleeping."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 1, 12, 0))


@pytest.fixture
def service(clock):
    # Every test gets its own stores
    svc = LendingService(daily_fine_rate=Money.from_major(10.0), clock=clock, enforce_borrow_limit=True)
    svc.seed_demo_catalog()
    yield svc
