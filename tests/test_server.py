import pytest
from fastapi.testclient import TestClient

from wloc.server import create_app, parse_boolean
from wloc.transport.client import WlocClient
from wloc.transport.config import ServiceConfig

A = "34:db:fd:43:e3:a1"
B = "00:11:22:33:44:55"


@pytest.fixture
def serve(fake_upstream):
    """Factory: a TestClient whose upstream replays the given responses."""
    def make(*responses):
        upstream = fake_upstream(*responses)
        app = create_app(client=WlocClient(ServiceConfig(), post=upstream.post))
        return TestClient(app), upstream
    return make


def test_status(serve):
    client, _ = serve()
    resp = client.get("/api/status")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_get_single_bssid(serve, ok):
    client, upstream = serve(ok(("34:DB:FD:43:E3:A1", 48.856613, 2.352222)))
    resp = client.get("/api/locate", params={"bssid": "34-DB-FD-43-E3-A1"})

    assert resp.status_code == 200
    assert resp.headers["cache-control"] == "no-store"
    body = resp.json()
    assert body["found"] is True
    assert body["query"] == {"accessPoints": [{"bssid": A}], "all": False}
    [r] = body["results"]
    assert r["bssid"] == A
    assert r["latitude"] == pytest.approx(48.856613)
    assert r["mapUrl"].startswith("https://www.google.com/maps/place/48.856613,")
    assert "signal" not in r
    assert len(upstream.calls) == 1


def test_get_bare_all_flag_means_true(serve, ok):
    client, upstream = serve(ok((A, 48.0, 2.0), (B, 48.1, 2.1)))
    resp = client.get(f"/api/locate?bssid={A}&all")
    assert resp.status_code == 200
    assert [r["bssid"] for r in resp.json()["results"]] == [A, B]
    assert upstream.calls[0]["data"].endswith(b"\x20\x00")


def test_get_without_bssid(serve):
    client, upstream = serve()
    resp = client.get("/api/locate")
    assert resp.status_code == 400
    assert resp.json()["reason"] == "invalid_input"
    assert upstream.calls == []


def test_post_access_points(serve, ok):
    client, _ = serve(ok((A, 48.0, 2.0)), ok((B, 48.0, 2.01)))
    resp = client.post(
        "/api/locate",
        json={"accessPoints": [{"bssid": A, "signal": -52}, {"bssid": B, "signal": "-60"}]},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["found"] is True
    first = body["results"][0]
    assert first["signal"] == -52
    assert first["signalCount"] == 1
    assert first["signalMin"] == -52
    assert first["signalMax"] == -52
    assert isinstance(first["signalMin"], int)
    assert body["query"]["accessPoints"][0]["signal"] == -52
    assert "-52.0" not in resp.text
    tri = body["triangulated"]
    assert tri["pointsUsed"] == 2
    assert tri["method"] == "weighted-centroid"
    assert 2.0 < tri["longitude"] < 2.01


def test_post_single_bssid_body(serve, ok):
    client, _ = serve(ok((A, 48.0, 2.0)))
    resp = client.post("/api/locate", json={"bssid": A, "signal": -70})
    assert resp.status_code == 200
    [r] = resp.json()["results"]
    assert r["signal"] == -70
    assert "triangulated" not in resp.json()


def test_body_all_overrides_query(serve, ok):
    client, _ = serve(ok((A, 48.0, 2.0), (B, 48.1, 2.1)))
    resp = client.post("/api/locate?all=1", json={"bssid": A, "all": False})
    assert resp.status_code == 200
    assert resp.json()["query"]["all"] is False
    assert [r["bssid"] for r in resp.json()["results"]] == [A]


def test_post_invalid_bssid(serve):
    client, upstream = serve()
    resp = client.post("/api/locate", json={"accessPoints": [{"bssid": "nope"}]})
    assert resp.status_code == 400
    assert resp.json() == {
        "error": "Each BSSID must contain 12 hexadecimal characters.",
        "reason": "invalid_input",
        "bssid": "nope",
    }
    assert upstream.calls == []


def test_post_invalid_signal(serve):
    client, _ = serve()
    resp = client.post("/api/locate", json={"bssid": A, "signal": "loud"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Signal strength must be a finite number."


def test_post_signal_beyond_float_range(serve):
    client, upstream = serve()
    resp = client.post("/api/locate", json={"bssid": A, "signal": 10**400})
    assert resp.status_code == 400
    assert resp.json()["reason"] == "invalid_input"
    assert upstream.calls == []


@pytest.mark.parametrize(
    "payload", [{}, {"accessPoints": []}, {"accessPoints": [{"signal": -50}]}, {"bssid": 12}]
)
def test_post_bad_payloads(serve, payload):
    client, upstream = serve()
    resp = client.post("/api/locate", json=payload)
    assert resp.status_code == 400
    assert resp.json()["reason"] == "invalid_input"
    assert upstream.calls == []


def test_upstream_failure_is_502(serve, fake_response):
    client, _ = serve(fake_response(b"", status_code=500))
    resp = client.post("/api/locate", json={"bssid": A})
    assert resp.status_code == 502
    assert resp.json() == {
        "error": "Location service returned a non-success status.",
        "reason": "upstream_unavailable",
        "status": 500,
    }


def test_unreadable_upstream_is_502(serve, fake_response):
    client, _ = serve(fake_response(b"\x00" * 4))
    resp = client.post("/api/locate", json={"bssid": A})
    assert resp.status_code == 502
    assert resp.json()["reason"] == "upstream_unreadable"
    assert resp.json()["length"] == 4


@pytest.mark.parametrize(
    "value, expected",
    [(None, False), (True, True), (False, False), ("", True), ("1", True), ("Yes", True),
     (" true ", True), ("0", False), ("no", False), ("null", False)],
)
def test_parse_boolean(value, expected):
    assert parse_boolean(value) is expected
