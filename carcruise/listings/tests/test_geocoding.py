from decimal import Decimal

import httpx
import pytest

from carcruise.listings import geocoding


def fake_get(payload=None, status_code=200, exc=None):
    def _get(url, params=None, headers=None, timeout=None):
        if exc is not None:
            raise exc
        return httpx.Response(status_code, json=payload, request=httpx.Request("GET", url, params=params))
    return _get


def test_build_query():
    assert geocoding.build_query("Pune", "India") == "Pune, India"
    assert geocoding.build_query("  ", "India") == "India"
    assert geocoding.build_query(None, None) == ""


def test_geocode_returns_first_match(monkeypatch):
    monkeypatch.setattr(geocoding.httpx, "get", fake_get([{"lat": "18.5204303", "lon": "73.8567437"}]))
    assert geocoding.geocode("Pune, India") == (Decimal("18.520430"), Decimal("73.856744"))


def test_geocode_without_results(monkeypatch):
    monkeypatch.setattr(geocoding.httpx, "get", fake_get([]))
    assert geocoding.geocode("Atlantis") is None


@pytest.mark.parametrize("kwargs", [
    {"exc": httpx.ConnectError("boom")},
    {"payload": {"error": "x"}, "status_code": 503},
    {"payload": [{"lat": "north"}]},
])
def test_geocode_failures(monkeypatch, kwargs):
    monkeypatch.setattr(geocoding.httpx, "get", fake_get(**kwargs))
    with pytest.raises(geocoding.GeocodingError):
        geocoding.geocode("Pune")
