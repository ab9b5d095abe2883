"""
Shared pytest fixtures for Earth Vitals.

Provides:
  - a pinned clock
  - scriptable stand-ins for the remote feeds
  - fast refresh periods so scheduler tests finish quickly
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Ensure backend/ is on sys.path so the vitals package imports without install
# ---------------------------------------------------------------------------
BACKEND_DIR = Path(__file__).resolve().parent.parent / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from vitals.clock import FixedClock  # noqa: E402
from vitals.feeds import FeedError  # noqa: E402
from vitals.models import CrewMember, HistoricalFact, SatelliteFix, SpaceRoster  # noqa: E402
from vitals.scheduler import RefreshPeriods  # noqa: E402

FIXED_INSTANT = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


class StubFeeds:
    """Feed client double. Each ``*_results`` list is consumed one call at a time;
    an Exception entry is raised, anything else is returned. The last entry
    repeats once the list runs out."""

    def __init__(self, iss=None, roster=None, facts=None):
        self.iss_results = list(iss or [SatelliteFix(latitude=51.5, longitude=-0.1, timestamp=1750000000)])
        self.roster_results = list(roster or [SpaceRoster(
            number=2,
            people=[CrewMember(name="Ada", craft="ISS"), CrewMember(name="Yuri", craft="Tiangong")],
        )])
        self.fact_results = list(facts or [[HistoricalFact(year="1969", text="Apollo 11 lands.")]])
        self.calls = {"iss": 0, "roster": 0, "facts": 0}
        self.fact_dates: list[tuple[int, int]] = []
        self.closed = False

    @staticmethod
    def _next(results):
        item = results.pop(0) if len(results) > 1 else results[0]
        if isinstance(item, Exception):
            raise item
        return item

    async def fetch_iss(self):
        self.calls["iss"] += 1
        return self._next(self.iss_results)

    async def fetch_roster(self):
        self.calls["roster"] += 1
        return self._next(self.roster_results)

    async def fetch_on_this_day(self, month, day):
        self.calls["facts"] += 1
        self.fact_dates.append((month, day))
        return self._next(self.fact_results)

    async def aclose(self):
        self.closed = True


def feed_down(name="stub"):
    return FeedError(name, "ConnectError: connection refused")


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(FIXED_INSTANT)


@pytest.fixture()
def fast_periods() -> RefreshPeriods:
    return RefreshPeriods(population=0.01, orbit=0.01, clock=0.01, moon=0.01, iss=0.01)
