"""World population counter: linear extrapolation, no API needed.

UN estimate: ~8.12B at the start of 2025, growing ~0.9%/year ≈ 2.3 people/sec.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone

BASE_POPULATION = 8_121_000_000
BASE_EPOCH = datetime(2025, 1, 1, tzinfo=timezone.utc)
RATE_PER_MS = 2.3 / 1000


def _epoch_ms(instant: datetime) -> float:
    # naive datetimes are local wall time, as everywhere in vitals
    return instant.timestamp() * 1000


_BASE_EPOCH_MS = _epoch_ms(BASE_EPOCH)


def estimate(now: datetime) -> int:
    """Estimated world population at ``now`` (naive datetimes are local time).

    Instants before the base epoch extrapolate backwards unclamped.
    """
    return math.floor(BASE_POPULATION + (_epoch_ms(now) - _BASE_EPOCH_MS) * RATE_PER_MS)
