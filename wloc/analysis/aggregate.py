"""
Normalize caller input and join decoded devices against it.

- canonical BSSIDs and finite signals at ingestion (hard failures)
- dedup of queries before dispatch, and of devices across responses
- per-BSSID signal statistics and triangulation candidates
- result selection: requested BSSIDs only, or every located device
"""

from __future__ import annotations

import math
import re
from dataclasses import asdict
from typing import Any, Iterable, Optional, Sequence, Union

from wloc.analysis.triangulate import compute_triangulated_location, weight_from_signal
from wloc.analysis.types import (
    AccessPointQuery,
    Candidate,
    DecodedDevice,
    LocatedDevice,
    SignalSummary,
)
from wloc.errors import InvalidBssidError, InvalidSignalError
from wloc.utils.geo import map_url
from wloc.utils.validate import (
    AccessPointOut,
    AggregatedResult,
    LocateResult,
    QueryEcho,
)

_NON_HEX = re.compile(r"[^0-9a-f]", re.IGNORECASE)


def canonicalize_bssid(text: str) -> str:
    """
    Canonical "aa:bb:cc:dd:ee:ff" form of a BSSID.

    Any separator (or none) is accepted; exactly 12 hex digits must remain.
    """
    hexdigits = _NON_HEX.sub("", text).lower()
    if len(hexdigits) != 12:
        raise InvalidBssidError(text)
    return ":".join(hexdigits[i:i + 2] for i in range(0, 12, 2))


def try_canonicalize_bssid(text: Any) -> Optional[str]:
    """Best-effort variant for upstream data: None instead of an error."""
    if not isinstance(text, str):
        return None
    try:
        return canonicalize_bssid(text)
    except InvalidBssidError:
        return None


def normalize_signal(value: Any) -> Optional[Union[int, float]]:
    """
    Validate a caller-supplied signal reading.

    Parameters
    ----------
    value
        None, an empty string, a number, or a numeric string.

    Returns
    -------
    Optional[Union[int, float]]
        The reading in dBm, or None when no reading was given. Integer
        readings (and integer strings) stay ints.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidSignalError(value)
    if isinstance(value, (int, float)):
        numeric = value
    elif isinstance(value, str):
        try:
            numeric = int(value)
        except ValueError:
            try:
                numeric = float(value)
            except ValueError:
                raise InvalidSignalError(value) from None
    else:
        raise InvalidSignalError(value)
    try:
        finite = math.isfinite(numeric)
    except OverflowError:
        # ints beyond float range
        finite = False
    if not finite:
        raise InvalidSignalError(value)
    return numeric


def prepare_queries(points: Iterable[tuple[str, Any]]) -> list[AccessPointQuery]:
    """
    Canonicalize (bssid, signal) pairs. Duplicates are kept so that every
    reading counts towards the signal statistics.
    """
    return [
        AccessPointQuery(bssid=canonicalize_bssid(bssid), signal=normalize_signal(signal))
        for bssid, signal in points
    ]


def unique_queries(queries: Iterable[AccessPointQuery]) -> list[AccessPointQuery]:
    """One query per BSSID, in first-seen order; the last signal wins."""
    by_bssid: dict[str, AccessPointQuery] = {}
    for q in queries:
        by_bssid[q.bssid] = q
    return list(by_bssid.values())


def merge_devices(batches: Iterable[Iterable[DecodedDevice]]) -> list[LocatedDevice]:
    """
    Flatten the device lists returned for each dispatched access point.

    A response may include neighbours of the queried point, so the same
    device can appear in several batches; the first occurrence wins.
    Devices without a location or with an unparseable BSSID are dropped.
    """
    seen: set[str] = set()
    merged: list[LocatedDevice] = []
    for devices in batches:
        for device in devices:
            if not device.bssid or device.location is None or device.location.is_sentinel:
                continue
            bssid = try_canonicalize_bssid(device.bssid)
            if bssid is None or bssid in seen:
                continue
            seen.add(bssid)
            merged.append(LocatedDevice(bssid=bssid, coordinate=device.location))
    return merged


def summarize_signals(signals: Sequence[Union[int, float]]) -> Optional[SignalSummary]:
    if not signals:
        return None
    average = round(sum(signals) / len(signals), 2)
    if average.is_integer() and all(isinstance(s, int) for s in signals):
        average = int(average)
    return SignalSummary(
        signal=average,
        signal_min=min(signals),
        signal_max=max(signals),
        signal_count=len(signals),
    )


def format_results(
    devices: Sequence[LocatedDevice],
    queries: Sequence[AccessPointQuery],
    include_all: bool,
) -> LocateResult:
    """
    Build the lookup result.

    Parameters
    ----------
    devices
        Merged, deduplicated devices from every response.
    queries
        Every canonicalized input point, duplicates included.
    include_all
        Return every located device instead of only the requested ones.

    Returns
    -------
    LocateResult
        Results in device order, `found`, and a triangulated estimate when
        at least two located devices carry caller signal readings.
    """
    signals_by_bssid: dict[str, list[Union[int, float]]] = {}
    for q in queries:
        readings = signals_by_bssid.setdefault(q.bssid, [])
        if q.signal is not None and math.isfinite(q.signal):
            readings.append(q.signal)

    results: list[AggregatedResult] = []
    candidates: list[Candidate] = []
    for device in devices:
        lat = device.coordinate.latitude
        lon = device.coordinate.longitude
        signals = signals_by_bssid.get(device.bssid, [])
        summary = summarize_signals(signals)
        results.append(
            AggregatedResult(
                bssid=device.bssid,
                latitude=lat,
                longitude=lon,
                map_url=map_url(lat, lon),
                **(asdict(summary) if summary else {}),
            )
        )
        weight = sum(weight_from_signal(s) for s in signals)
        if weight > 0:
            candidates.append(Candidate(lat, lon, weight))

    if not include_all:
        results = [r for r in results if r.bssid in signals_by_bssid]

    return LocateResult(
        query=QueryEcho(
            access_points=[AccessPointOut(bssid=q.bssid, signal=q.signal) for q in queries],
            all=include_all,
        ),
        found=bool(results),
        results=results,
        triangulated=compute_triangulated_location(candidates),
    )
