"""
Pydantic schemas for the lookup API: inbound requests and the result shape.

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Any, Optional, Union
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AccessPointIn(CamelModel):
    """
    Access point as supplied by an API client. The signal is kept raw and
    normalized later so that bad values produce a domain error.
    """
    bssid: str
    signal: Any = None

class LocateRequest(CamelModel):
    """
    POST body: either `accessPoints` or a single `bssid`/`signal` pair.
    """
    access_points: Optional[list[AccessPointIn]] = None
    bssid: Optional[str] = None
    signal: Any = None
    all: Any = None

class AccessPointOut(CamelModel):
    bssid: str
    signal: Optional[Union[int, float]] = None

class QueryEcho(CamelModel):
    """
    The canonicalized query, echoed back with every result.
    """
    access_points: list[AccessPointOut]
    all: bool

class AggregatedResult(CamelModel):
    """
    One located access point. Signal fields are present only when the
    caller supplied readings for this BSSID.
    """
    bssid: str
    latitude: float
    longitude: float
    map_url: str
    signal: Optional[Union[int, float]] = None
    signal_count: Optional[int] = None
    signal_min: Optional[Union[int, float]] = None
    signal_max: Optional[Union[int, float]] = None

class TriangulatedEstimate(CamelModel):
    latitude: float
    longitude: float
    points_used: int
    weight_sum: float
    method: str = "weighted-centroid"
    signal_weight_model: str = "10^(dBm/10)"

class LocateResult(CamelModel):
    query: QueryEcho
    found: bool
    results: list[AggregatedResult]
    triangulated: Optional[TriangulatedEstimate] = None

    def to_json_dict(self) -> dict[str, Any]:
        """camelCase dict with absent optional fields left out."""
        return self.model_dump(by_alias=True, exclude_none=True)
