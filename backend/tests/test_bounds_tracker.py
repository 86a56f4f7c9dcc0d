from client.bounds_tracker import BoundsTracker
from conftest import FakeTimer
from domain.models import BoundingBox, Landmark


def _box(n):
    return BoundingBox(north=n + 1, south=n, east=n + 1, west=n)


def _tracker(fetch, results, errors=None):
    FakeTimer.created = []
    return BoundsTracker(
        fetch=fetch,
        on_result=results.append,
        on_error=errors.append if errors is not None else None,
        delay=1.0,
        timer_factory=FakeTimer,
    )


def test_only_last_event_in_burst_fetches():
    fetched, results = [], []
    tracker = _tracker(lambda box: fetched.append(box) or [], results)

    tracker.viewport_settled(_box(1))
    tracker.viewport_settled(_box(2))
    tracker.viewport_settled(_box(3))

    first, second, third = FakeTimer.created
    assert first.cancelled and second.cancelled and not third.cancelled
    assert all(t.interval == 1.0 and t.started and t.daemon for t in FakeTimer.created)

    for timer in FakeTimer.created:
        timer.fire()
    assert fetched == [_box(3)]
    assert results == [[]]
    assert not tracker.pending


def test_stale_timer_that_fires_after_restart_is_ignored():
    fetched = []
    tracker = _tracker(lambda box: fetched.append(box) or [], [])
    tracker.viewport_settled(_box(1))
    stale = FakeTimer.created[0]
    tracker.viewport_settled(_box(2))

    # simulate the race where the old timer already started running
    stale.function(*stale.args)
    assert fetched == []

    FakeTimer.created[1].fire()
    assert fetched == [_box(2)]


def test_at_most_one_pending_invocation():
    tracker = _tracker(lambda box: [], [])
    for i in range(5):
        tracker.viewport_settled(_box(i))
    live = [t for t in FakeTimer.created if not t.cancelled]
    assert len(live) == 1
    assert tracker.pending


def test_results_are_passed_to_renderer():
    landmark = Landmark(id=1, title="Coit Tower", lat=0.5, lng=0.5)
    results = []
    tracker = _tracker(lambda box: [landmark], results)
    tracker.viewport_settled(_box(0))
    tracker.flush()
    assert results == [[landmark]]


def test_fetch_failure_notifies_and_renders_empty():
    def failing(box):
        raise RuntimeError("network down")

    results, errors = [], []
    tracker = _tracker(failing, results, errors)
    tracker.viewport_settled(_box(0))
    FakeTimer.created[0].fire()

    assert results == [[]]
    assert len(errors) == 1 and isinstance(errors[0], RuntimeError)


def test_cancel_drops_pending_fetch():
    fetched = []
    tracker = _tracker(lambda box: fetched.append(box) or [], [])
    tracker.viewport_settled(_box(0))
    tracker.cancel()
    FakeTimer.created[0].function(*FakeTimer.created[0].args)
    assert fetched == []
    assert not tracker.pending
