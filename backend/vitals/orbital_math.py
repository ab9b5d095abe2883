"""Earth orbital data: simplified Kepler, computed from the clock alone.

Perihelion ~Jan 3, aphelion ~Jul 4. Distance and speed use first-order
eccentricity terms rather than a full elliptical solution, which is plenty for
a live display.

"Today" for distance travelled is the local calendar day, while rotation is
referenced to UTC midnight.
"""

from __future__ import annotations

import math
from datetime import datetime, time, timezone

from vitals.models import OrbitalState

MEAN_DISTANCE_KM = 149_598_023
AU_KM = 149_597_870.7
ECCENTRICITY = 0.0167086
MEAN_SPEED_KM_S = 29.78
PERIHELION_DAY = 3  # Jan 3
YEAR_DAYS = 365.25

SECONDS_PER_DAY = 86_400
# Largest rotation value that survives rounding to 2 decimals below a full turn
MAX_ROTATION_DEG = 359.99


def _as_local(now: datetime) -> datetime:
    # naive datetimes are local wall time, as everywhere in vitals
    return now if now.tzinfo is None else now.astimezone()


def day_of_year(now: datetime) -> int:
    """1-based ordinal day in the local calendar year."""
    local = _as_local(now)
    return (local.date() - local.date().replace(month=1, day=1)).days + 1


def perihelion_angle(now: datetime) -> float:
    """Mean anomaly proxy in radians: 0 at perihelion."""
    days_from_perihelion = (day_of_year(now) - PERIHELION_DAY + 365) % 365
    return days_from_perihelion / YEAR_DAYS * 2 * math.pi


def sun_distance_km(angle: float) -> float:
    return MEAN_DISTANCE_KM * (1 - ECCENTRICITY * math.cos(angle))


def orbital_speed_km_s(angle: float) -> float:
    # symmetric approximation, not vis-viva
    return MEAN_SPEED_KM_S * (1 + ECCENTRICITY * math.cos(angle))


def seconds_since_local_midnight(now: datetime) -> float:
    """Elapsed real seconds since the start of the local calendar day.

    Midnight is resolved with the zone rules for that date, so days with a
    daylight-saving shift are 23 or 25 hours long.
    """
    instant = now.astimezone()
    midnight = datetime.combine(instant.date(), time()).astimezone()
    return (instant - midnight).total_seconds()


def rotation_degrees(now: datetime) -> float:
    """Earth rotation since UTC midnight, whole seconds, in [0, 360)."""
    utc = now.astimezone(timezone.utc)
    seconds = utc.hour * 3600 + utc.minute * 60 + utc.second
    degrees = round(seconds / SECONDS_PER_DAY * 360, 2)
    return min(degrees, MAX_ROTATION_DEG)


def orbital_state_at(now: datetime) -> OrbitalState:
    angle = perihelion_angle(now)
    distance = sun_distance_km(angle)
    speed = orbital_speed_km_s(angle)
    travelled = speed * seconds_since_local_midnight(now)

    return OrbitalState(
        sun_distance_km=round(distance),
        sun_distance_au=round(distance / AU_KM, 4),
        orbital_speed_km_s=round(speed, 2),
        distance_today_km=round(travelled),
        rotation_deg=rotation_degrees(now),
    )
