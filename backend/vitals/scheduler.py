"""Refresh scheduler: one asyncio timer per live quantity, cached results.

Every stream has a single writer (its own task) and a ``CacheCell`` the API
reads snapshots from. Computed streams cannot fail. Remote streams move through
uninitialized → loading → loaded | degraded and never lose a value once they
have one.

All tasks live in one registry and are cancelled together by ``stop()``;
a fetch in flight is cancelled with its task, so nothing writes a cell after
teardown.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Generic, TypeVar

from vitals import moon_phase, orbital_math, population, settings
from vitals.clock import Clock, SystemClock
from vitals.feeds import FeedClient, FeedError, fallback_fact, fallback_roster, pick_fact
from vitals.models import (
    ClockReading,
    DashboardSnapshot,
    HistoricalFact,
    MoonPhase,
    OrbitalState,
    SatelliteFix,
    SpaceRoster,
    StreamSnapshot,
    StreamStatus,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

TickCallback = Callable[[], Awaitable[None]]


class CacheCell(Generic[T]):
    """Latest value of one stream. Written only by that stream's task."""

    def __init__(self, name: str, value_type: type[T]):
        self.name = name
        self.status = StreamStatus.UNINITIALIZED
        self.value: T | None = None
        self.updated_at: datetime | None = None
        self._view = StreamSnapshot[value_type]

    def begin_load(self) -> None:
        self.status = StreamStatus.LOADING

    def store(self, value: T, at: datetime) -> None:
        self.value = value
        self.updated_at = at
        self.status = StreamStatus.LOADED

    def degrade(self, at: datetime, fallback: T | None = None) -> None:
        """Mark a failed load. ``fallback`` only fills a cell that never loaded."""
        if self.value is None and fallback is not None:
            self.value = fallback
            self.updated_at = at
        self.status = StreamStatus.DEGRADED

    def snapshot(self) -> StreamSnapshot[T]:
        return self._view(status=self.status, value=self.value, updated_at=self.updated_at)


class OneShot:
    """Completed/not-completed latch for a fetch allowed once per lifetime."""

    def __init__(self, name: str):
        self.name = name
        self.fired = False

    def claim(self) -> bool:
        if self.fired:
            logger.debug("%s already requested this session, skipping", self.name)
            return False
        self.fired = True
        return True


class IntervalTask:
    """Runs ``callback`` now and then every ``period`` seconds until cancelled."""

    def __init__(self, name: str, period: float, callback: TickCallback):
        self.name = name
        self.period = period
        self.callback = callback
        self.task: asyncio.Task | None = None

    def start(self) -> asyncio.Task:
        self.task = asyncio.create_task(self._run(), name=f"vitals:{self.name}")
        return self.task

    async def _run(self) -> None:
        while True:
            try:
                await self.callback()
            except Exception:
                logger.exception("%s tick failed", self.name)
            await asyncio.sleep(self.period)


@dataclass(frozen=True)
class RefreshPeriods:
    population: float = settings.POPULATION_PERIOD_S
    orbit: float = settings.ORBIT_PERIOD_S
    clock: float = settings.CLOCK_PERIOD_S
    moon: float = settings.MOON_PERIOD_S
    iss: float = settings.ISS_PERIOD_S


class RefreshScheduler:
    """Keeps every dashboard quantity live and holds the latest of each."""

    def __init__(
        self,
        feeds: FeedClient | None = None,
        clock: Clock | None = None,
        periods: RefreshPeriods | None = None,
        rng: random.Random | None = None,
    ):
        self.feeds = feeds or FeedClient()
        self.clock = clock or SystemClock()
        self.periods = periods or RefreshPeriods()
        self.rng = rng

        self.population: CacheCell[int] = CacheCell("population", int)
        self.orbit: CacheCell[OrbitalState] = CacheCell("orbit", OrbitalState)
        self.clock_cell: CacheCell[ClockReading] = CacheCell("clock", ClockReading)
        self.moon: CacheCell[MoonPhase] = CacheCell("moon", MoonPhase)
        self.iss: CacheCell[SatelliteFix] = CacheCell("iss", SatelliteFix)
        self.roster: CacheCell[SpaceRoster] = CacheCell("astronauts", SpaceRoster)
        self.fact: CacheCell[HistoricalFact] = CacheCell("on_this_day", HistoricalFact)

        self._roster_once = OneShot("astronauts")
        self._fact_once = OneShot("on_this_day")

        self._tasks: set[asyncio.Task] = set()
        self.running = False

        # computed streams are never empty, even before start()
        self.compute_all()

    # --- Computed streams ---

    def compute_population(self) -> None:
        now = self.clock.now()
        self.population.store(population.estimate(now), now)

    def compute_orbit(self) -> None:
        now = self.clock.now()
        self.orbit.store(orbital_math.orbital_state_at(now), now)

    def compute_clock(self) -> None:
        now = self.clock.now()
        self.clock_cell.store(ClockReading(utc=now, local=now.astimezone()), now)

    def compute_moon(self) -> None:
        now = self.clock.now()
        self.moon.store(moon_phase.phase_at(now.astimezone().date()), now)

    def compute_all(self) -> None:
        self.compute_population()
        self.compute_orbit()
        self.compute_clock()
        self.compute_moon()

    # --- Remote streams ---

    async def poll_iss(self) -> None:
        self.iss.begin_load()
        try:
            fix = await self.feeds.fetch_iss()
        except FeedError as exc:
            stale = "keeping last fix" if self.iss.value else "no fix yet"
            logger.warning("ISS fetch failed (%s): %s", stale, exc)
            self.iss.degrade(self.clock.now())
            return
        if self.iss.value is None:
            logger.info("ISS position acquired: %.2f, %.2f", fix.latitude, fix.longitude)
        self.iss.store(fix, self.clock.now())

    async def refresh_roster(self) -> None:
        if not self._roster_once.claim():
            return
        self.roster.begin_load()
        try:
            roster = await self.feeds.fetch_roster()
        except FeedError as exc:
            logger.warning("People-in-space fetch failed, using fallback: %s", exc)
            self.roster.degrade(self.clock.now(), fallback_roster())
            return
        except Exception:
            logger.exception("People-in-space fetch crashed, using fallback")
            self.roster.degrade(self.clock.now(), fallback_roster())
            return
        logger.info("People in space: %d", roster.number)
        self.roster.store(roster, self.clock.now())

    async def refresh_fact(self) -> None:
        if not self._fact_once.claim():
            return
        self.fact.begin_load()
        today = self.clock.now().astimezone()
        try:
            events = await self.feeds.fetch_on_this_day(today.month, today.day)
            fact = pick_fact(events, self.rng)
        except FeedError as exc:
            logger.warning("On-this-day fetch failed, using fallback: %s", exc)
            self.fact.degrade(self.clock.now(), fallback_fact())
            return
        except Exception:
            logger.exception("On-this-day fetch crashed, using fallback")
            self.fact.degrade(self.clock.now(), fallback_fact())
            return
        self.fact.store(fact, self.clock.now())

    # --- Lifecycle ---

    def _computed(self, compute: Callable[[], None]) -> TickCallback:
        async def tick() -> None:
            compute()
        return tick

    def start(self) -> None:
        """Register every stream's timer. Must run inside the event loop."""
        if self.running:
            return
        self.running = True

        intervals = [
            IntervalTask("population", self.periods.population, self._computed(self.compute_population)),
            IntervalTask("orbit", self.periods.orbit, self._computed(self.compute_orbit)),
            IntervalTask("clock", self.periods.clock, self._computed(self.compute_clock)),
            IntervalTask("moon", self.periods.moon, self._computed(self.compute_moon)),
            IntervalTask("iss", self.periods.iss, self.poll_iss),
        ]
        for interval in intervals:
            self._tasks.add(interval.start())

        for name, once in (("astronauts", self.refresh_roster), ("on_this_day", self.refresh_fact)):
            self._tasks.add(asyncio.create_task(once(), name=f"vitals:{name}"))

        logger.info("Refresh scheduler started with %d tasks", len(self._tasks))

    async def stop(self) -> None:
        """Cancel every task together and wait for them to unwind."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self.running = False
        await self.feeds.aclose()
        logger.info("Refresh scheduler stopped (%d tasks cancelled)", len(tasks))

    @property
    def tasks(self) -> frozenset[asyncio.Task]:
        return frozenset(self._tasks)

    def pending_tasks(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    # --- Read side ---

    def snapshot(self) -> DashboardSnapshot:
        return DashboardSnapshot(
            generated_at=self.clock.now(),
            population=self.population.snapshot(),
            moon=self.moon.snapshot(),
            orbit=self.orbit.snapshot(),
            clock=self.clock_cell.snapshot(),
            iss=self.iss.snapshot(),
            astronauts=self.roster.snapshot(),
            on_this_day=self.fact.snapshot(),
        )
