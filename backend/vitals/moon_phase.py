"""Moon phase from a simple lunation model (no API).

Counts synodic months since a lunation epoch on a Julian-style day count, then
buckets the position in the current cycle into one of the eight
named phases.
"""

from __future__ import annotations

import math
from datetime import date, datetime

from vitals.models import MoonPhase

SYNODIC_MONTH = 29.53058867  # days
NEW_MOON_REFERENCE_JD = 2451549.5  # epoch on the julian_day() scale (1999-12-24)

# (upper bound on fraction, name, emoji); the last bucket wraps back to new moon
_PHASES: tuple[tuple[float, str, str], ...] = (
    (0.0339, "New Moon", "🌑"),
    (0.216, "Waxing Crescent", "🌒"),
    (0.283, "First Quarter", "🌓"),
    (0.466, "Waxing Gibbous", "🌔"),
    (0.533, "Full Moon", "🌕"),
    (0.716, "Waning Gibbous", "🌖"),
    (0.783, "Last Quarter", "🌗"),
    (0.966, "Waning Crescent", "🌘"),
    (1.0, "New Moon", "🌑"),
)

PHASE_NAMES = frozenset(name for _, name, _ in _PHASES)


def julian_day(day: date) -> float:
    """Day count for a calendar date, Jan/Feb counted as months 13/14.

    No Gregorian century term; the lunation epoch is on this same scale.
    """
    year, month = day.year, day.month
    if month < 3:
        year -= 1
        month += 12

    return math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1)) + day.day - 1524.5


def phase_for_fraction(fraction: float) -> tuple[str, str]:
    """Name and emoji for a position in the cycle, ``fraction`` in [0, 1)."""
    for upper, name, emoji in _PHASES:
        if fraction < upper:
            return name, emoji
    return _PHASES[-1][1], _PHASES[-1][2]


def illumination_percent(fraction: float) -> int:
    return round(abs(-0.5 * math.cos(2 * math.pi * fraction) + 0.5) * 100)


def phase_at(day: date) -> MoonPhase:
    """Moon phase for a calendar date (a datetime uses its own date part)."""
    if isinstance(day, datetime):
        day = day.date()

    days_since_reference = julian_day(day) - NEW_MOON_REFERENCE_JD
    lunation = days_since_reference / SYNODIC_MONTH
    age = (lunation - math.floor(lunation)) * SYNODIC_MONTH
    fraction = age / SYNODIC_MONTH

    name, emoji = phase_for_fraction(fraction)
    return MoonPhase(
        name=name,
        emoji=emoji,
        age=round(age, 1),
        illumination=illumination_percent(fraction),
    )
