import pytest

from wloc.protocol.varint import UINT64_MASK
from wloc.protocol.wire import write_bytes_field, write_varint_field

PARIS_BSSID = "34:db:fd:43:e3:a1"
PARIS = (48.856613, 2.352222)


def to_unsigned64(value):
    """The unsigned varint carrying a two's-complement int64."""
    return value & UINT64_MASK


def _location(lat, lon):
    return (
        write_varint_field(1, to_unsigned64(round(lat * 1e8)))
        + write_varint_field(2, to_unsigned64(round(lon * 1e8)))
    )


def _device(bssid, lat=None, lon=None):
    msg = write_bytes_field(1, bssid.encode("utf-8"))
    if lat is not None:
        msg += write_bytes_field(2, _location(lat, lon))
    return msg


def _body(*devices, prefix=b"\x00" * 10):
    """Response body: fixed prefix + one field-2 wrapper per device tuple."""
    msg = b"".join(write_bytes_field(2, _device(*d)) for d in devices)
    return prefix + msg


class FakeResponse:
    def __init__(self, content=b"", status_code=200):
        self.content = content
        self.status_code = status_code

    @property
    def ok(self):
        return self.status_code < 400


class FakeUpstream:
    """
    Stand-in for requests.post: replays queued responses and records
    every call.
    """
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def post(self, url, data=None, headers=None, timeout=None):
        self.calls.append({"url": url, "data": data, "headers": headers, "timeout": timeout})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def location_msg():
    return _location


@pytest.fixture
def device_msg():
    return _device


@pytest.fixture
def response_body():
    return _body


@pytest.fixture
def fake_upstream():
    """Factory: fake_upstream(FakeResponse(...), ...)."""
    return FakeUpstream


@pytest.fixture
def ok():
    """Factory for a 200 response carrying the given devices."""
    def make(*devices):
        return FakeResponse(_body(*devices))
    return make


@pytest.fixture
def fake_response():
    return FakeResponse
