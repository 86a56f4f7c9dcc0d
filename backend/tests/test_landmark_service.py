import pytest

from conftest import FakePlacesClient
from domain.errors import NotFoundError, UpstreamError, ValidationError
from domain.models import BoundingBox, LandmarkType
from repositories import MemoryLandmarkStore
from services.landmark_service import LandmarkQueryService
from services.places_types import PlaceCandidate

BOX = BoundingBox(north=37.81, south=37.79, east=-122.39, west=-122.42)


def _candidate(title, lat=37.80, lng=-122.40, **kw):
    return PlaceCandidate(title=title, lat=lat, lng=lng, **kw)


def _service(client, store=None, **kw):
    return LandmarkQueryService(store or MemoryLandmarkStore(), client, **kw)


def test_cache_hit_never_calls_provider():
    store = MemoryLandmarkStore()
    store.upsert({"title": "Coit Tower", "lat": 37.8024, "lng": -122.4058})
    client = FakePlacesClient()

    result = _service(client, store).landmarks_in_bounds(BOX)

    assert result.cache_hit is True
    assert [l.title for l in result.landmarks] == ["Coit Tower"]
    assert client.calls == []
    assert store.recent_search_logs() == []


def test_miss_fetches_materializes_and_logs_search():
    client = FakePlacesClient(near=[
        _candidate("Coit Tower", summary="Art deco tower"),
        _candidate("Exploratorium Museum"),
        _candidate("Washington Square Park", wikipedia_url="https://en.wikipedia.org/wiki/Washington_Square_Park", page_id=7),
    ])
    store = MemoryLandmarkStore()
    service = _service(client, store)

    result = service.landmarks_in_bounds(BOX)

    assert result.cache_hit is False
    assert [l.type for l in result.landmarks] == [
        LandmarkType.ARCHITECTURE,
        LandmarkType.MUSEUMS,
        LandmarkType.PARKS_AND_NATURE,
    ]
    coit = result.landmarks[0]
    assert coit.description == "Art deco tower"
    assert coit.categories == ["Architecture"]
    assert coit.wikipedia_url == "https://en.wikipedia.org/wiki/Coit%20Tower"
    assert result.landmarks[2].wikipedia_page_id == 7
    assert [l.id for l in result.pending_backfill] == [l.id for l in result.landmarks]

    (call,) = client.calls
    assert call[0] == "find_near"
    assert call[1] == pytest.approx(BOX.center)
    assert call[2] == pytest.approx(BOX.approximate_radius_m)

    (log,) = store.recent_search_logs()
    assert log.query == "bounds:37.81,37.79,-122.39,-122.42"
    assert log.result_count == 3
    assert log.radius == pytest.approx(BOX.approximate_radius_m)

    # The next request over the same area is served from the store
    again = service.landmarks_in_bounds(BOX)
    assert again.cache_hit is True
    assert len(client.calls) == 1


def test_miss_caps_candidates():
    client = FakePlacesClient(near=[_candidate(f"Place {i}") for i in range(30)])
    result = _service(client).landmarks_in_bounds(BOX)
    assert len(result.landmarks) == 20


def test_bounds_classification_uses_title_only():
    client = FakePlacesClient(near=[_candidate("Old Mint", summary="Now a museum")])
    result = _service(client).landmarks_in_bounds(BOX)
    assert result.landmarks[0].type == LandmarkType.HISTORICAL_SITES


def test_invalid_candidates_are_skipped():
    client = FakePlacesClient(near=[_candidate("Bad", lat=120.0), _candidate("Good")])
    result = _service(client).landmarks_in_bounds(BOX)
    assert [l.title for l in result.landmarks] == ["Good"]


def test_provider_error_propagates_and_stores_nothing():
    store = MemoryLandmarkStore()
    client = FakePlacesClient(fail_near=True)
    with pytest.raises(UpstreamError):
        _service(client, store).landmarks_in_bounds(BOX)
    assert store.count() == 0


def test_search_log_failure_does_not_fail_request():
    class BrokenLogStore(MemoryLandmarkStore):
        def append_search_log(self, entry):
            raise RuntimeError("disk full")

    client = FakePlacesClient(near=[_candidate("Coit Tower")])
    result = _service(client, BrokenLogStore()).landmarks_in_bounds(BOX)
    assert len(result.landmarks) == 1


def test_backfill_updates_existing_records_and_swallows_failures(summary):
    store = MemoryLandmarkStore()
    client = FakePlacesClient(
        near=[_candidate("Coit Tower", summary="basic"), _candidate("Missing Page", summary="basic")],
        summaries={"Coit Tower": summary("Coit Tower", extract="Full extract", image_url="http://img/coit.jpg")},
    )
    service = _service(client, store)
    result = service.landmarks_in_bounds(BOX)

    updated = service.backfill(result.pending_backfill)

    assert [l.title for l in updated] == ["Coit Tower"]
    coit, missing = (store.get(l.id) for l in result.landmarks)
    assert coit.description == "Full extract"
    assert coit.image_url == "http://img/coit.jpg"
    assert coit.created_at == result.landmarks[0].created_at
    assert missing.description == "basic"
    assert store.count() == 2


def test_backfill_disabled_leaves_nothing_pending():
    client = FakePlacesClient(near=[_candidate("Coit Tower")])
    result = _service(client, backfill_enabled=False).landmarks_in_bounds(BOX)
    assert result.pending_backfill == []


def test_search_prefers_local_results():
    store = MemoryLandmarkStore()
    store.upsert({"title": "Alcatraz Island", "lat": 37.82, "lng": -122.42})
    client = FakePlacesClient()

    result = _service(client, store).search("alcatraz")

    assert result.cache_hit is True
    assert client.calls == []


def test_search_falls_back_to_provider_and_logs():
    store = MemoryLandmarkStore()
    client = FakePlacesClient(text=[_candidate("Alcatraz Island", summary="Island with a former prison and park")])

    result = _service(client, store).search("alcatraz", lat=37.7, lng=-122.4)

    assert [l.title for l in result.landmarks] == ["Alcatraz Island"]
    assert result.landmarks[0].type == LandmarkType.PARKS_AND_NATURE
    assert result.pending_backfill == []
    (log,) = store.recent_search_logs()
    assert (log.query, log.lat, log.lng, log.radius, log.result_count) == ("alcatraz", 37.7, -122.4, None, 1)


def test_search_rejects_blank_query():
    with pytest.raises(ValidationError):
        _service(FakePlacesClient()).search("   ")


def test_get_landmark_not_found():
    with pytest.raises(NotFoundError):
        _service(FakePlacesClient()).get_landmark(42)
