# wloc/protocol/response.py
"""
Decoder for location service responses.

Layout (field numbers as observed on the wire):

    response
      2: device       (length-delimited, repeated)
    device
      1: bssid        (length-delimited, UTF-8 text)
      2: location     (length-delimited)
    location
      1: latitude     (varint, int64 degrees * 1e8)
      2: longitude    (varint, int64 degrees * 1e8)

Everything else is skipped.
"""

from typing import Iterator, Optional

from wloc.analysis.types import DecodedDevice, FixedPointCoordinate
from wloc.errors import MalformedResponseError
from wloc.protocol.varint import to_signed64
from wloc.protocol.wire import WireType, iter_fields

# upstream-specific header in front of the message, not modelled
RESPONSE_PREFIX_LEN = 10


def decode_response(body: bytes) -> list[DecodedDevice]:
    """
    Strip the fixed prefix from a raw response body and decode every device.

    Raises MalformedResponseError when the body is no longer than the prefix,
    and the codec's protocol errors when the message itself is unreadable.
    """
    if len(body) <= RESPONSE_PREFIX_LEN:
        raise MalformedResponseError(len(body))
    return list(iter_devices(body[RESPONSE_PREFIX_LEN:]))


def iter_devices(message: bytes) -> Iterator[DecodedDevice]:
    for field in iter_fields(message):
        if field.field_number == 2 and field.wire_type is WireType.LENGTH_DELIMITED:
            yield parse_device(field.payload)


def parse_device(buffer: bytes) -> DecodedDevice:
    bssid: Optional[str] = None
    location: Optional[FixedPointCoordinate] = None
    for field in iter_fields(buffer):
        if field.wire_type is not WireType.LENGTH_DELIMITED:
            continue
        if field.field_number == 1:
            bssid = field.payload.decode("utf-8", errors="replace")
        elif field.field_number == 2:
            location = parse_location(field.payload)
    return DecodedDevice(bssid=bssid, location=location)


def parse_location(buffer: bytes) -> Optional[FixedPointCoordinate]:
    """
    Read a location submessage.

    Returns None when either coordinate is missing or when the service
    reports its "unknown" sentinel.
    """
    latitude: Optional[int] = None
    longitude: Optional[int] = None
    for field in iter_fields(buffer):
        if field.wire_type is not WireType.VARINT:
            continue
        if field.field_number == 1:
            latitude = to_signed64(field.payload)
        elif field.field_number == 2:
            longitude = to_signed64(field.payload)

    if latitude is None or longitude is None:
        return None
    coordinate = FixedPointCoordinate(latitude, longitude)
    if coordinate.is_sentinel:
        return None
    return coordinate
