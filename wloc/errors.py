# wloc/errors.py
"""
Exception hierarchy for the wloc toolkit.

Every error raised on a lookup path derives from `WlocError` and carries the
HTTP status the service should answer with, a short machine-readable
`reason`, and any structured details as typed attributes.
"""

from __future__ import annotations

from typing import Any


class WlocError(Exception):
    """
    Base class for all lookup failures.
    """
    status_code: int = 500
    reason: str = "internal_error"

    def details(self) -> dict[str, Any]:
        """Extra JSON-safe fields describing the failure."""
        return {}

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": str(self), "reason": self.reason}
        payload.update(self.details())
        return payload


# -----------------------------------------------------------------------------
# Input errors: the caller's fault, nothing is sent upstream.

class InputError(WlocError):
    status_code = 400
    reason = "invalid_input"


class EmptyRequestError(InputError):
    def __init__(self, message: str = "At least one access point is required.") -> None:
        super().__init__(message)


class InvalidBssidError(InputError):
    def __init__(self, bssid: str) -> None:
        super().__init__("Each BSSID must contain 12 hexadecimal characters.")
        self.bssid = bssid

    def details(self) -> dict[str, Any]:
        return {"bssid": self.bssid}


class InvalidSignalError(InputError):
    def __init__(self, value: Any) -> None:
        super().__init__("Signal strength must be a finite number.")
        self.value = value


class EnvelopeOverflowError(InputError):
    """
    The inner request message does not fit the envelope's one-byte length.
    """
    def __init__(self, length: int, limit: int) -> None:
        super().__init__(
            f"Request message is {length} bytes; the envelope holds at most {limit}."
        )
        self.length = length
        self.limit = limit

    def details(self) -> dict[str, Any]:
        return {"length": self.length, "limit": self.limit}


# -----------------------------------------------------------------------------
# Upstream protocol errors: the response could not be read.

class UpstreamProtocolError(WlocError):
    status_code = 502
    reason = "upstream_unreadable"


class TruncatedInputError(UpstreamProtocolError):
    def __init__(self, what: str = "varint") -> None:
        super().__init__(f"Encountered truncated {what}.")
        self.what = what


class UnsupportedWireTypeError(UpstreamProtocolError):
    def __init__(self, wire_type: int) -> None:
        super().__init__(f"Unsupported wire type: {wire_type}")
        self.wire_type = wire_type

    def details(self) -> dict[str, Any]:
        return {"wireType": self.wire_type}


class VarintOverflowError(UpstreamProtocolError):
    """
    A varint that should carry an int64 has bits set above bit 63.
    """
    def __init__(self, value: int) -> None:
        super().__init__(f"Varint does not fit in 64 bits ({value.bit_length()} bits).")
        self.value = value

    def details(self) -> dict[str, Any]:
        return {"bits": self.value.bit_length()}


class MalformedResponseError(UpstreamProtocolError):
    def __init__(self, length: int) -> None:
        super().__init__("Location service returned an unexpected payload.")
        self.length = length

    def details(self) -> dict[str, Any]:
        return {"length": self.length}


# -----------------------------------------------------------------------------
# Upstream transport errors.

class UpstreamUnavailableError(WlocError):
    status_code = 502
    reason = "upstream_unavailable"

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status

    def details(self) -> dict[str, Any]:
        if self.upstream_status is None:
            return {}
        return {"status": self.upstream_status}
