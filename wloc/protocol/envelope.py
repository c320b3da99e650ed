# wloc/protocol/envelope.py
"""
Outbound request encoding.

The request is a small tagged message wrapped in a fixed binary envelope.
Every constant below is an interoperability contract with the location
service and must be sent byte for byte.
"""

import struct
from typing import Sequence

from wloc.analysis.types import AccessPointQuery
from wloc.errors import EmptyRequestError, EnvelopeOverflowError
from wloc.protocol.wire import write_bytes_field, write_varint_field

DEFAULT_LOCALE = "en_US"
DEFAULT_CLIENT_ID = "com.apple.locationd"
DEFAULT_CLIENT_VERSION = "8.1.12B411"

ENVELOPE_VERSION = b"\x00\x01"
ENVELOPE_TRAILER = b"\x00\x00\x00\x01\x00\x00\x00"
# the message length is sent as a single byte
MAX_MESSAGE_LEN = 0xFF


def encode_request(queries: Sequence[AccessPointQuery], include_all: bool) -> bytes:
    """
    Encode the inner request message.

    Parameters
    ----------
    queries
        Access points to look up; BSSIDs must already be canonical.
    include_all
        Ask for every known neighbour instead of just the exact match.
        Only honoured by the service when a single access point is sent.

    Returns
    -------
    bytes
        One field-2 wrapper per access point, then field 3 (always 0) and
        field 4 (1 to return only the exact match, else 0).
    """
    if not queries:
        raise EmptyRequestError()

    message = bytearray()
    for query in queries:
        device = write_bytes_field(1, query.bssid.encode("utf-8"))
        message += write_bytes_field(2, device)

    message += write_varint_field(3, 0)
    return_single = 1 if len(queries) == 1 and not include_all else 0
    message += write_varint_field(4, return_single)
    return bytes(message)


def _prefixed(text: str) -> bytes:
    data = text.encode("utf-8")
    return struct.pack(">H", len(data)) + data


def build_envelope(
    message: bytes,
    locale: str = DEFAULT_LOCALE,
    client_id: str = DEFAULT_CLIENT_ID,
    client_version: str = DEFAULT_CLIENT_VERSION,
) -> bytes:
    """
    Wrap an encoded request message in the service envelope.

    With the default identifiers this yields
    `00 01 00 05 en_US 00 13 com.apple.locationd 00 0a 8.1.12B411
    00 00 00 01 00 00 00 <len> <message>`.
    """
    if len(message) > MAX_MESSAGE_LEN:
        raise EnvelopeOverflowError(len(message), MAX_MESSAGE_LEN)
    return b"".join(
        [
            ENVELOPE_VERSION,
            _prefixed(locale),
            _prefixed(client_id),
            _prefixed(client_version),
            ENVELOPE_TRAILER,
            bytes([len(message)]),
            message,
        ]
    )
