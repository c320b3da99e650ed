"""
Weighted spherical centroid of located access points.

Each candidate is projected onto the unit sphere, the vectors are summed with
signal-derived weights, and the sum is converted back to latitude/longitude.
Averaging vectors rather than angles keeps the result correct across the
±180° meridian.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from wloc.analysis.types import Candidate
from wloc.utils.geo import from_vector, to_unit_vector
from wloc.utils.validate import TriangulatedEstimate

SIGNAL_FLOOR_DBM = -120.0
SIGNAL_CEIL_DBM = -5.0
MIN_CANDIDATES = 2
COORD_DECIMALS = 7


def weight_from_signal(signal: float) -> float:
    """
    Linear-power proxy for a dBm reading: 10^(dBm/10), clamped to a
    plausible RSSI range. Non-finite readings weigh nothing.
    """
    if signal is None or not math.isfinite(signal):
        return 0.0
    clamped = max(min(signal, SIGNAL_CEIL_DBM), SIGNAL_FLOOR_DBM)
    return 10 ** (clamped / 10)


def compute_triangulated_location(
    candidates: Sequence[Candidate],
) -> Optional[TriangulatedEstimate]:
    """
    Combine candidates into a single position.

    Returns None with fewer than two candidates or when no candidate carries
    a positive weight. `points_used` counts every candidate given.
    """
    if len(candidates) < MIN_CANDIDATES:
        return None

    total_weight = 0.0
    x = y = z = 0.0
    for c in candidates:
        if not c.weight > 0:
            continue
        cx, cy, cz = to_unit_vector(c.lat, c.lon)
        x += cx * c.weight
        y += cy * c.weight
        z += cz * c.weight
        total_weight += c.weight

    if total_weight <= 0:
        return None

    lat, lon = from_vector(x / total_weight, y / total_weight, z / total_weight)
    return TriangulatedEstimate(
        latitude=round(lat, COORD_DECIMALS),
        longitude=round(lon, COORD_DECIMALS),
        points_used=len(candidates),
        weight_sum=total_weight,
    )
