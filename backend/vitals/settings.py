"""Service constants: feed endpoints, refresh cadences, fallbacks."""

from __future__ import annotations

import os

# --- Remote feeds ---

ISS_NORAD_ID = 25544
ISS_URL = f"https://api.wheretheiss.at/v1/satellites/{ISS_NORAD_ID}"
ROSTER_URL = "http://api.open-notify.org/astros.json"
ON_THIS_DAY_URL = "https://byabbe.se/on-this-day/{month}/{day}/events.json"

REQUEST_TIMEOUT_S = 10.0

# --- Refresh cadences (seconds) ---

POPULATION_PERIOD_S = 0.1
ORBIT_PERIOD_S = 1.0
CLOCK_PERIOD_S = 1.0
MOON_PERIOD_S = 60.0
ISS_PERIOD_S = 5.0

# WebSocket push rate for /ws/dashboard
DASHBOARD_PUSH_S = 1.0

# --- Fallbacks for one-shot feeds ---

FALLBACK_ROSTER_COUNT = 7  # known approximate crew count

FALLBACK_FACT_YEAR = "1990"
FALLBACK_FACT_TEXT = (
    'Voyager 1 took the famous "Pale Blue Dot" photograph of Earth '
    "from 6 billion kilometers away."
)

# --- Logging ---

DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def log_level() -> str:
    """Read at call time so a .env loaded after import still applies."""
    return os.getenv("VITALS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
