from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# --- Computed quantities ---

class MoonPhase(_Frozen):
    name: str
    emoji: str
    age: float = Field(description="Days into the current synodic cycle", ge=0)
    illumination: int = Field(description="Illuminated fraction, percent", ge=0, le=100)


class OrbitalState(_Frozen):
    sun_distance_km: int
    sun_distance_au: float
    orbital_speed_km_s: float
    distance_today_km: int = Field(ge=0)
    rotation_deg: float = Field(description="Earth rotation since UTC midnight", ge=0, lt=360)


class ClockReading(_Frozen):
    utc: datetime
    local: datetime


# --- Remote quantities ---

class SatelliteFix(_Frozen):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    timestamp: int = Field(description="Epoch seconds reported by the feed")


class CrewMember(_Frozen):
    name: str
    craft: str


class SpaceRoster(_Frozen):
    number: int = Field(ge=0)
    people: list[CrewMember] = []


class HistoricalFact(_Frozen):
    year: str
    text: str


# --- Cache views ---

class StreamStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    LOADED = "loaded"
    DEGRADED = "degraded"


class StreamSnapshot(_Frozen, Generic[T]):
    status: StreamStatus
    value: T | None = None
    updated_at: datetime | None = None


class DashboardSnapshot(_Frozen):
    generated_at: datetime
    population: StreamSnapshot[int]
    moon: StreamSnapshot[MoonPhase]
    orbit: StreamSnapshot[OrbitalState]
    clock: StreamSnapshot[ClockReading]
    iss: StreamSnapshot[SatelliteFix]
    astronauts: StreamSnapshot[SpaceRoster]
    on_this_day: StreamSnapshot[HistoricalFact]


class HealthResponse(BaseModel):
    status: str = "ok"
