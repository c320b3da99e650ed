# wloc/analysis/types.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

E8 = 1e8
SENTINEL_E8 = -180 * 10**8


@dataclass(frozen=True)
class AccessPointQuery:
    """
    One access point supplied by the caller.

    Parameters
    ----------
    bssid : str
        Canonical BSSID, e.g. "34:db:fd:43:e3:a1".
    signal : Optional[int | float]
        Received signal strength in dBm, if the caller measured it.
    """
    bssid: str
    signal: Optional[int | float] = None


@dataclass(frozen=True)
class FixedPointCoordinate:
    """
    Decimal degrees scaled by 1e8, as signed 64-bit integers.
    """
    latitude_e8: int
    longitude_e8: int

    @property
    def latitude(self) -> float:
        return self.latitude_e8 / E8

    @property
    def longitude(self) -> float:
        return self.longitude_e8 / E8

    @property
    def is_sentinel(self) -> bool:
        """(-180, -180) is how the service says "location unknown"."""
        return self.latitude_e8 == SENTINEL_E8 and self.longitude_e8 == SENTINEL_E8


@dataclass(frozen=True)
class DecodedDevice:
    """
    Device record as read off the wire, before any normalization.
    """
    bssid: Optional[str]
    location: Optional[FixedPointCoordinate]


@dataclass(frozen=True)
class LocatedDevice:
    """
    Decoded device with a canonical BSSID and a usable location.
    """
    bssid: str
    coordinate: FixedPointCoordinate


@dataclass(frozen=True)
class Candidate:
    """
    Point taking part in triangulation.

    Parameters
    ----------
    lat : float
        Latitude in decimal degrees.
    lon : float
        Longitude in decimal degrees.
    weight : float
        Linear-power weight derived from the caller's signal readings.
    """
    lat: float
    lon: float
    weight: float


@dataclass(frozen=True)
class SignalSummary:
    """
    Statistics over the caller's readings for one BSSID.

    Parameters
    ----------
    signal : float
        Mean reading in dBm, rounded to 2 decimals.
    signal_min : float
        Weakest reading.
    signal_max : float
        Strongest reading.
    signal_count : int
        Number of readings.
    """
    signal: float
    signal_min: float
    signal_max: float
    signal_count: int
