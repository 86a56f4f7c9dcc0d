from unittest.mock import MagicMock

import pytest
import requests

from client.api_client import ApiClientError, LandmarkApiClient
from domain.models import BoundingBox, LandmarkType


def _response(status_code=200, json_data=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    resp.json.return_value = json_data
    return resp


LANDMARK_JSON = {
    "id": 7,
    "title": "Coit Tower",
    "description": "Art deco tower",
    "lat": 37.8024,
    "lng": -122.4058,
    "type": "Architecture",
    "imageUrl": None,
    "wikipediaUrl": "https://en.wikipedia.org/wiki/Coit_Tower",
    "wikipediaPageId": 123,
    "opened": None,
    "categories": ["Architecture"],
    "createdAt": "2024-05-01T12:00:00",
}


def _client(*responses):
    session = MagicMock()
    session.get.side_effect = list(responses)
    return LandmarkApiClient("http://api.test/", session=session), session


def test_landmarks_in_bounds_parses_camel_case_payload():
    client, session = _client(_response(json_data=[LANDMARK_JSON]))

    (landmark,) = client.landmarks_in_bounds(BoundingBox(north=38, south=37, east=-122, west=-123))

    assert landmark.id == 7
    assert landmark.type == LandmarkType.ARCHITECTURE
    assert landmark.wikipedia_page_id == 123
    assert landmark.created_at.year == 2024
    url = session.get.call_args.args[0]
    assert url == "http://api.test/api/landmarks/bounds"
    assert session.get.call_args.kwargs["params"] == {"north": 38, "south": 37, "east": -122, "west": -123}


def test_get_landmark_returns_none_on_404():
    client, _ = _client(_response(status_code=404))
    assert client.get_landmark(1) is None


def test_get_landmark_invalid_json_raises_client_error():
    resp = _response()
    resp.json.side_effect = ValueError("Expecting value")
    client, _ = _client(resp)
    with pytest.raises(ApiClientError) as info:
        client.get_landmark(7)
    assert info.value.status_code == 200


def test_non_success_raises_client_error():
    client, _ = _client(_response(status_code=500))
    with pytest.raises(ApiClientError) as info:
        client.search_landmarks("coit")
    assert info.value.status_code == 500


def test_transport_error_raises_client_error():
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("refused")
    client = LandmarkApiClient(session=session)
    with pytest.raises(ApiClientError):
        client.geocode("Paris")


def test_search_passes_location_only_when_complete():
    client, session = _client(_response(json_data=[]), _response(json_data=[]))
    client.search_landmarks("coit", lat=37.8, lng=-122.4)
    assert session.get.call_args.kwargs["params"] == {"query": "coit", "lat": 37.8, "lng": -122.4}
    client.search_landmarks("coit", lat=37.8)
    assert session.get.call_args.kwargs["params"] == {"query": "coit"}


def test_geocode_parses_results():
    client, _ = _client(_response(json_data=[
        {"display_name": "Paris, France", "lat": 48.85, "lng": 2.35, "type": "city", "importance": 0.9}
    ]))
    (result,) = client.geocode("Paris")
    assert result.display_name == "Paris, France"
    assert result.lng == 2.35
