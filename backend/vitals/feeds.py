"""Remote feed clients: ISS position, people in space, on-this-day events."""

from __future__ import annotations

import logging
import random
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from vitals import settings
from vitals.models import CrewMember, HistoricalFact, SatelliteFix, SpaceRoster

logger = logging.getLogger(__name__)


class FeedError(Exception):
    """A remote feed could not be fetched or did not parse."""

    def __init__(self, feed: str, reason: str):
        super().__init__(f"{feed}: {reason}")
        self.feed = feed
        self.reason = reason


# --- Wire payloads (extra fields ignored) ---

class _ISSPayload(BaseModel):
    latitude: float
    longitude: float
    timestamp: int


class _AstrosPayload(BaseModel):
    number: int
    people: list[CrewMember] = []


class _Event(BaseModel):
    year: int | str
    description: str


class _EventsPayload(BaseModel):
    events: list[_Event] = []


class FeedClient:
    """Async client for the public feeds. One request per call, no retries."""

    def __init__(self, client: httpx.AsyncClient | None = None):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=settings.REQUEST_TIMEOUT_S,
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get_json(self, feed: str, url: str) -> Any:
        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as exc:
            raise FeedError(feed, f"{type(exc).__name__}: {exc}") from exc
        except ValueError as exc:
            # body was not JSON
            raise FeedError(feed, f"invalid JSON: {exc}") from exc

    async def fetch_iss(self) -> SatelliteFix:
        data = await self._get_json("iss", settings.ISS_URL)
        try:
            payload = _ISSPayload.model_validate(data)
            return SatelliteFix(
                latitude=payload.latitude,
                longitude=payload.longitude,
                timestamp=payload.timestamp,
            )
        except ValidationError as exc:
            raise FeedError("iss", f"unexpected payload: {exc.error_count()} errors") from exc

    async def fetch_roster(self) -> SpaceRoster:
        data = await self._get_json("astronauts", settings.ROSTER_URL)
        try:
            payload = _AstrosPayload.model_validate(data)
            return SpaceRoster(number=payload.number, people=payload.people)
        except ValidationError as exc:
            raise FeedError("astronauts", f"unexpected payload: {exc.error_count()} errors") from exc

    async def fetch_on_this_day(self, month: int, day: int) -> list[HistoricalFact]:
        url = settings.ON_THIS_DAY_URL.format(month=month, day=day)
        data = await self._get_json("on_this_day", url)
        try:
            payload = _EventsPayload.model_validate(data)
        except ValidationError as exc:
            raise FeedError("on_this_day", f"unexpected payload: {exc.error_count()} errors") from exc
        return [HistoricalFact(year=str(e.year), text=e.description) for e in payload.events]


def pick_fact(facts: list[HistoricalFact], rng: random.Random | None = None) -> HistoricalFact:
    """Uniform random pick from the day's events."""
    if not facts:
        raise FeedError("on_this_day", "no events for this date")
    return (rng or random).choice(facts)


def fallback_roster() -> SpaceRoster:
    return SpaceRoster(number=settings.FALLBACK_ROSTER_COUNT, people=[])


def fallback_fact() -> HistoricalFact:
    return HistoricalFact(year=settings.FALLBACK_FACT_YEAR, text=settings.FALLBACK_FACT_TEXT)
