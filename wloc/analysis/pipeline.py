"""
Resolve a set of access points to locations.

- Pass 0: canonicalize + validate input (nothing goes upstream on failure)
- Pass 1: dedup queries by BSSID
- Pass 2: one upstream lookup per unique access point, in order
- Pass 3: merge + dedup devices across responses
- Pass 4: join against the query, signal stats, triangulation
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from wloc.analysis.aggregate import (
    format_results,
    merge_devices,
    prepare_queries,
    unique_queries,
)
from wloc.analysis.types import AccessPointQuery, DecodedDevice
from wloc.errors import EmptyRequestError
from wloc.transport.client import WlocClient
from wloc.utils.log import get_logger
from wloc.utils.validate import LocateResult

logger = get_logger(__name__)


class LocatePipeline:
    """
    Stateless lookup pipeline bound to one upstream client.
    """
    def __init__(self, client: Optional[WlocClient] = None) -> None:
        self.client = client or WlocClient()

    def run(self, points: Iterable[tuple[str, Any]], include_all: bool = False) -> LocateResult:
        """
        Parameters
        ----------
        points
            (bssid, signal) pairs; signal may be None.
        include_all
            Return every located neighbour, not just the requested BSSIDs.
        """
        queries = prepare_queries(points)
        if not queries:
            raise EmptyRequestError()
        unique = unique_queries(queries)
        logger.info("Locating %d access points (%d unique), all=%s",
                    len(queries), len(unique), include_all)
        batches = self._collect(unique, include_all)
        devices = merge_devices(batches)
        logger.info("Merged %d located devices", len(devices))
        result = format_results(devices, queries, include_all)
        logger.info("Returning %d results, triangulated=%s",
                    len(result.results), result.triangulated is not None)
        return result

    def _collect(
        self, unique: list[AccessPointQuery], include_all: bool
    ) -> list[list[DecodedDevice]]:
        """
        Query upstream once per access point. The first failure aborts the
        whole lookup.
        """
        batches: list[list[DecodedDevice]] = []
        for query in unique:
            devices = self.client.fetch_devices([query], include_all)
            logger.debug("%s: %d devices", query.bssid, len(devices), extra={"bssid": query.bssid})
            batches.append(devices)
        return batches
