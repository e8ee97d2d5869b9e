import pytest
import requests

from leadscan.core.models import GeoBias
from leadscan.vendors import geolocation


class DummyResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError("http error")

    def json(self):
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []
        self.response = None
        self.exc = None

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(geolocation, "_SESSION", session)
    return session


def test_lookup_success(patch_session):
    patch_session.response = DummyResponse(payload={"status": "success", "lat": 6.45, "lon": 3.39})

    position = geolocation.get_current_position("http://geo.test/json", timeout_ms=5000)

    assert position == GeoBias(latitude=6.45, longitude=3.39)
    assert patch_session.calls == [("http://geo.test/json", 5.0)]


def test_latitude_longitude_keys_are_accepted(patch_session):
    patch_session.response = DummyResponse(payload={"latitude": "51.5", "longitude": "-0.12"})
    assert geolocation.get_current_position("http://geo.test") == GeoBias(51.5, -0.12)


def test_pinned_position_skips_lookup(patch_session):
    pinned = GeoBias(1.0, 2.0)
    assert geolocation.get_current_position("http://geo.test", enabled=False, pinned=pinned) is pinned
    assert patch_session.calls == []


def test_disabled_lookup_raises(patch_session):
    with pytest.raises(geolocation.GeolocationUnavailable):
        geolocation.get_current_position("http://geo.test", enabled=False)
    assert patch_session.calls == []


def test_timeout_raises_unavailable(patch_session):
    patch_session.exc = requests.Timeout("timed out")
    with pytest.raises(geolocation.GeolocationUnavailable):
        geolocation.get_current_position("http://geo.test", timeout_ms=10)


def test_failed_status_raises_unavailable(patch_session):
    patch_session.response = DummyResponse(payload={"status": "fail", "message": "private range"})
    with pytest.raises(geolocation.GeolocationUnavailable, match="private range"):
        geolocation.get_current_position("http://geo.test")


def test_missing_coordinates_raise_unavailable(patch_session):
    patch_session.response = DummyResponse(payload={"status": "success", "lat": "n/a"})
    with pytest.raises(geolocation.GeolocationUnavailable):
        geolocation.get_current_position("http://geo.test")
