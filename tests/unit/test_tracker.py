import json
from datetime import timedelta

from jobtracker.config import HISTORY_LIMIT, STATUS_HISTORY_KEY, STATUS_KEY
from jobtracker.models import JobStatus
from jobtracker.tracker import StatusTracker


def test_untracked_job_is_not_applied(store):
    tracker = StatusTracker(store)
    assert tracker.get("42") is JobStatus.NOT_APPLIED
    assert tracker.statuses() == {}


def test_set_persists_and_records_history(store, clock):
    tracker = StatusTracker(store, clock=clock)
    assert tracker.set("1", JobStatus.APPLIED, "Backend Engineer", "Razorpay") is True

    # a fresh tracker over the same store sees the change
    again = StatusTracker(store, clock=clock)
    assert again.get("1") is JobStatus.APPLIED
    [entry] = again.history()
    assert entry.job_id == "1"
    assert entry.job_title == "Backend Engineer"
    assert entry.company == "Razorpay"
    assert entry.status is JobStatus.APPLIED
    assert entry.changed_at == clock.now.isoformat()


def test_setting_same_status_is_a_no_op(store, clock):
    tracker = StatusTracker(store, clock=clock)
    tracker.set("1", "Applied", "Backend Engineer", "Razorpay")
    assert tracker.set("1", "Applied", "Backend Engineer", "Razorpay") is False
    assert len(tracker.history()) == 1


def test_not_applied_changes_are_not_recorded(store, clock):
    tracker = StatusTracker(store, clock=clock)
    tracker.set("1", JobStatus.APPLIED, "Backend Engineer", "Razorpay")
    assert tracker.set("1", JobStatus.NOT_APPLIED, "Backend Engineer", "Razorpay") is True
    assert tracker.get("1") is JobStatus.NOT_APPLIED
    assert [e.status for e in tracker.history()] == [JobStatus.APPLIED]


def test_history_is_newest_first(store, clock):
    tracker = StatusTracker(store, clock=clock)
    tracker.set("1", JobStatus.APPLIED, "Backend Engineer", "Razorpay")
    clock.now += timedelta(hours=1)
    tracker.set("1", JobStatus.SELECTED, "Backend Engineer", "Razorpay")
    assert [e.status for e in tracker.history()] == [JobStatus.SELECTED, JobStatus.APPLIED]


def test_history_is_capped_and_evicts_oldest(store, clock):
    tracker = StatusTracker(store, clock=clock)
    for i in range(HISTORY_LIMIT + 1):
        clock.now += timedelta(minutes=1)
        tracker.set(str(i), JobStatus.APPLIED, f"Job {i}", "Acme")

    history = tracker.history()
    assert len(history) == HISTORY_LIMIT
    assert history[0].job_id == str(HISTORY_LIMIT)
    assert "0" not in {e.job_id for e in history}


def test_recent_updates_window_is_inclusive(store, clock):
    tracker = StatusTracker(store, clock=clock)
    start = clock.now

    clock.now = start - timedelta(days=8)
    tracker.set("old", JobStatus.REJECTED, "Old Job", "Acme")
    clock.now = start - timedelta(days=7)
    tracker.set("edge", JobStatus.APPLIED, "Edge Job", "Acme")
    clock.now = start - timedelta(hours=2)
    tracker.set("new", JobStatus.SELECTED, "New Job", "Acme")

    clock.now = start
    assert [e.job_id for e in tracker.recent_updates()] == ["new", "edge"]
    assert [e.job_id for e in tracker.recent_updates(days=1)] == ["new"]


def test_malformed_status_map_reads_as_empty(store):
    store.set(STATUS_KEY, "{not json")
    tracker = StatusTracker(store)
    assert tracker.statuses() == {}
    assert tracker.get("1") is JobStatus.NOT_APPLIED


def test_unknown_stored_status_falls_back_to_default(store):
    store.set(STATUS_KEY, json.dumps({"1": "Ghosted"}))
    assert StatusTracker(store).get("1") is JobStatus.NOT_APPLIED


def test_malformed_history_entries_are_skipped(store, clock):
    good = {
        "job_id": "1",
        "job_title": "Backend Engineer",
        "company": "Razorpay",
        "status": "Applied",
        "changed_at": clock.now.isoformat(),
    }
    store.set(STATUS_HISTORY_KEY, json.dumps([{"oops": True}, good, "nonsense"]))
    history = StatusTracker(store, clock=clock).history()
    assert [e.job_id for e in history] == ["1"]


def test_clear_drops_statuses_but_keeps_history(store, clock):
    tracker = StatusTracker(store, clock=clock)
    tracker.set("1", JobStatus.APPLIED, "Backend Engineer", "Razorpay")
    tracker.clear()
    assert tracker.get("1") is JobStatus.NOT_APPLIED
    assert store.get(STATUS_KEY) is None
    assert len(tracker.history()) == 1


def test_default_status_on_untracked_job_is_a_no_op(store, clock):
    tracker = StatusTracker(store, clock=clock)
    assert tracker.set("9", JobStatus.NOT_APPLIED, "Data Engineer", "Acme") is False
    assert store.get(STATUS_KEY) is None
    assert tracker.history() == []
