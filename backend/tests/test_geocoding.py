from unittest.mock import MagicMock, patch

import pytest
import requests

from domain.errors import UpstreamError
from domain.models import GeocodeResult
from services import geocoding as geo


@pytest.fixture(autouse=True)
def no_throttle(monkeypatch):
    geo._search_cached.cache_clear()
    monkeypatch.setattr(geo, "_MIN_INTERVAL_SEC", 0.0)
    yield
    geo._search_cached.cache_clear()


@patch("services.geocoding._session.get")
def test_geocode_search_parses_results(mock_get):
    mock_resp = MagicMock()
    mock_resp.ok = True
    mock_resp.json.return_value = [
        {
            "display_name": "San Francisco, California, United States",
            "lat": "37.7790262",
            "lon": "-122.419906",
            "type": "city",
            "importance": 0.88,
        }
    ]
    mock_get.return_value = mock_resp

    results = geo.geocode_search("San Francisco")

    assert results == [
        GeocodeResult(
            display_name="San Francisco, California, United States",
            lat=37.7790262,
            lng=-122.419906,
            type="city",
            importance=0.88,
        )
    ]
    params = mock_get.call_args.kwargs["params"]
    assert params["q"] == "San Francisco"
    assert params["limit"] == "5"
    assert mock_get.call_args.kwargs["headers"]["User-Agent"]


@patch("services.geocoding._session.get")
def test_geocode_search_caches_successful_lookups(mock_get):
    mock_resp = MagicMock()
    mock_resp.ok = True
    mock_resp.json.return_value = []
    mock_get.return_value = mock_resp

    geo.geocode_search("nowhere")
    geo.geocode_search("nowhere")

    assert mock_get.call_count == 1


@patch("services.geocoding._session.get")
def test_geocode_search_non_success_raises(mock_get):
    mock_resp = MagicMock()
    mock_resp.ok = False
    mock_resp.status_code = 503
    mock_get.return_value = mock_resp

    with pytest.raises(UpstreamError):
        geo.geocode_search("Paris")


@patch("services.geocoding._session.get", side_effect=requests.Timeout("slow"))
def test_geocode_search_network_error_raises_and_is_not_cached(mock_get):
    with pytest.raises(UpstreamError):
        geo.geocode_search("Paris")
    with pytest.raises(UpstreamError):
        geo.geocode_search("Paris")
    assert mock_get.call_count == 2
