import sys
from pathlib import Path

import pytest

# Ensure the backend package root is on sys.path for direct pytest runs
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from db import init_db, make_engine, make_session_factory  # noqa: E402
from domain.errors import UpstreamError  # noqa: E402
from repositories import MemoryLandmarkStore, SqlLandmarkStore  # noqa: E402
from services.places_types import PlaceSummary  # noqa: E402


class FakePlacesClient:
    """Records calls; returns canned candidates or raises."""

    def __init__(self, near=None, text=None, summaries=None, fail_near=False, fail_text=False):
        self.near = list(near or [])
        self.text = list(text or [])
        self.summaries = dict(summaries or {})
        self.fail_near = fail_near
        self.fail_text = fail_text
        self.calls = []

    def find_near(self, center, radius_m):
        self.calls.append(("find_near", center, radius_m))
        if self.fail_near:
            raise UpstreamError("GeoNames API error: 503", provider="geonames", status_code=503)
        return list(self.near)

    def search_by_text(self, query):
        self.calls.append(("search_by_text", query))
        if self.fail_text:
            raise UpstreamError("Wikipedia search API error: 500", provider="wikipedia", status_code=500)
        return list(self.text)

    def fetch_summary(self, title):
        self.calls.append(("fetch_summary", title))
        summary = self.summaries.get(title)
        if summary is None:
            raise UpstreamError(f"wikipedia API error: 404 for {title}", provider="wikipedia", status_code=404)
        if isinstance(summary, Exception):
            raise summary
        return summary


def make_sql_store():
    engine = make_engine("sqlite://")
    init_db(engine)
    return SqlLandmarkStore(make_session_factory(engine))


@pytest.fixture(params=["memory", "sql"])
def store(request):
    if request.param == "memory":
        return MemoryLandmarkStore()
    return make_sql_store()


@pytest.fixture
def summary():
    def _make(title, extract="", image_url=None, lat=None, lng=None):
        return PlaceSummary(title=title, extract=extract, image_url=image_url, lat=lat, lng=lng)

    return _make


class FakeTimer:
    """Stands in for threading.Timer; tests fire it by hand."""

    created = []

    def __init__(self, interval, function, args=()):
        self.interval = interval
        self.function = function
        self.args = args
        self.cancelled = False
        self.started = False
        self.daemon = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        # A real Timer that was cancelled before expiry never runs its function
        if not self.cancelled:
            self.function(*self.args)
