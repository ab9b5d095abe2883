"""
Tests for the lunation-based moon phase calculator.

Verifies:
  - the lunation epoch date (1999-12-24) yields fraction 0
  - phases for fixed dates, including the wraparound back to "New Moon"
  - age range and label set over a long span of days
  - periodicity of one synodic month
  - bucket boundaries, including the wraparound back to "New Moon"
  - illumination shape across one cycle
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from vitals.moon_phase import (
    NEW_MOON_REFERENCE_JD,
    PHASE_NAMES,
    SYNODIC_MONTH,
    illumination_percent,
    julian_day,
    phase_at,
    phase_for_fraction,
)


def _cycle_distance(a: float, b: float) -> float:
    d = abs(a - b) % SYNODIC_MONTH
    return min(d, SYNODIC_MONTH - d)


def test_julian_day_reference_dates():
    assert julian_day(date(2000, 1, 1)) == 2451557.5
    assert julian_day(date(1999, 12, 24)) == NEW_MOON_REFERENCE_JD
    # Jan/Feb use the previous-year adjustment
    assert julian_day(date(2024, 2, 29)) == 2460382.5
    assert julian_day(date(2024, 3, 1)) == 2460383.5
    assert julian_day(date(2025, 1, 1)) == 2460689.5


def test_epoch_date_has_zero_fraction():
    phase = phase_at(date(1999, 12, 24))
    assert phase.name == "New Moon"
    assert phase.emoji == "🌑"
    assert phase.illumination == 0
    assert phase.age == 0.0


@pytest.mark.parametrize(
    "day,name,emoji,age",
    [
        (date(2025, 1, 1), "Full Moon", "🌕", 15.0),
        (date(2026, 10, 19), "Last Quarter", "🌗", 21.4),
        (date(2024, 4, 8), "Waxing Gibbous", "🌔", 12.8),
    ],
)
def test_phase_for_fixed_dates(day, name, emoji, age):
    phase = phase_at(day)
    assert (phase.name, phase.emoji, phase.age) == (name, emoji, age)


def test_end_of_cycle_wraps_to_new_moon_label():
    phase = phase_at(date(2024, 3, 26))
    assert phase.name == "New Moon"
    assert phase.emoji == "🌑"
    assert phase.age == 29.4
    assert phase.illumination == 0


def test_full_moon_is_fully_lit():
    assert phase_at(date(2025, 1, 1)).illumination == 100


def test_datetime_uses_its_calendar_date():
    moment = datetime(2025, 1, 1, 21, 30, tzinfo=timezone.utc)
    assert phase_at(moment) == phase_at(date(2025, 1, 1))


def test_age_range_and_labels_over_many_days():
    start = date(1990, 1, 1)
    for offset in range(0, 20000, 7):
        phase = phase_at(start + timedelta(days=offset))
        assert 0 <= phase.age < SYNODIC_MONTH
        assert phase.name in PHASE_NAMES
        assert 0 <= phase.illumination <= 100
    assert len(PHASE_NAMES) == 8


def test_periodic_over_one_synodic_month():
    start = date(2023, 5, 1)
    for offset in range(0, 60):
        day = start + timedelta(days=offset)
        # 59 days is two synodic months less ~0.06 days
        later = day + timedelta(days=59)
        assert _cycle_distance(phase_at(day).age, phase_at(later).age) < 0.2


@pytest.mark.parametrize(
    "fraction,name,emoji",
    [
        (0.0, "New Moon", "🌑"),
        (0.0338, "New Moon", "🌑"),
        (0.0339, "Waxing Crescent", "🌒"),
        (0.215, "Waxing Crescent", "🌒"),
        (0.25, "First Quarter", "🌓"),
        (0.4, "Waxing Gibbous", "🌔"),
        (0.5, "Full Moon", "🌕"),
        (0.6, "Waning Gibbous", "🌖"),
        (0.75, "Last Quarter", "🌗"),
        (0.9, "Waning Crescent", "🌘"),
        (0.966, "New Moon", "🌑"),
        (0.9999, "New Moon", "🌑"),
    ],
)
def test_phase_buckets(fraction, name, emoji):
    assert phase_for_fraction(fraction) == (name, emoji)


def test_buckets_cover_cycle_without_gaps():
    seen = []
    for i in range(10000):
        name, _ = phase_for_fraction(i / 10000)
        if not seen or seen[-1] != name:
            seen.append(name)
    assert seen == [
        "New Moon",
        "Waxing Crescent",
        "First Quarter",
        "Waxing Gibbous",
        "Full Moon",
        "Waning Gibbous",
        "Last Quarter",
        "Waning Crescent",
        "New Moon",
    ]


def test_illumination_endpoints():
    assert illumination_percent(0.0) == 0
    assert illumination_percent(0.5) == 100
    assert illumination_percent(0.25) == 50


def test_illumination_rises_then_falls():
    waxing = [illumination_percent(i / 200) for i in range(0, 101)]
    waning = [illumination_percent(i / 200) for i in range(100, 200)]
    assert waxing == sorted(waxing)
    assert waning == sorted(waning, reverse=True)
