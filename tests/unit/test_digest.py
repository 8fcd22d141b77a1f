from datetime import date, datetime, timedelta, timezone

from jobtracker.config import DIGEST_SIZE
from jobtracker.digest import (
    DIGEST_FOOTER,
    DIGEST_TITLE,
    DigestStore,
    copy_digest,
    display_date,
    format_digest_text,
    generate_digest,
    has_matches,
)
from jobtracker.models import DigestData, DigestJob, Preferences

FIXED_NOW = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)


def _many_jobs(make_job, n=12):
    """Alternating backend and frontend roles, oldest first."""
    jobs = []
    for i in range(n):
        title = "Backend Engineer" if i % 2 == 0 else "Frontend Developer"
        jobs.append(make_job(str(i), title=title, posted_days_ago=n - i))
    return jobs


def test_digest_holds_at_most_ten_jobs(make_job, backend_prefs):
    digest = generate_digest(_many_jobs(make_job), backend_prefs, now=FIXED_NOW)
    assert len(digest.jobs) == DIGEST_SIZE


def test_digest_with_few_jobs_keeps_them_all(sample_jobs, backend_prefs):
    digest = generate_digest(sample_jobs, backend_prefs, now=FIXED_NOW)
    assert len(digest.jobs) == len(sample_jobs)


def test_digest_orders_by_score_then_freshness(make_job, backend_prefs):
    digest = generate_digest(_many_jobs(make_job), backend_prefs, now=FIXED_NOW)
    keys = [(-d.match_score, d.job.posted_days_ago) for d in digest.jobs]
    assert keys == sorted(keys)
    # all six backend roles outrank the frontend ones, freshest first
    assert [d.job.id for d in digest.jobs[:6]] == ["10", "8", "6", "4", "2", "0"]


def test_digest_without_preferences_scores_zero(sample_jobs):
    digest = generate_digest(sample_jobs, None, now=FIXED_NOW)
    assert {d.match_score for d in digest.jobs} == {0}
    assert [d.job.id for d in digest.jobs] == ["1", "2", "4", "3", "5"]
    assert has_matches(digest) is False


def test_digest_dates(sample_jobs, backend_prefs):
    digest = generate_digest(sample_jobs, backend_prefs, now=FIXED_NOW)
    assert digest.date == "2026-10-18"
    assert digest.generated_at == FIXED_NOW.isoformat()


def test_has_matches(sample_jobs, backend_prefs):
    assert has_matches(None) is False
    assert has_matches(generate_digest(sample_jobs, backend_prefs, now=FIXED_NOW)) is True
    unrelated = Preferences(role_keywords=["designer"])
    assert has_matches(generate_digest(sample_jobs, unrelated, now=FIXED_NOW)) is False


def test_display_date():
    assert display_date(date(2026, 10, 18)) == "Sunday, October 18, 2026"


def test_format_digest_text(make_job):
    job = make_job("7", title="Backend Engineer", company="Razorpay", location="Bangalore",
                   experience=3, apply_url="https://example.com/apply/7")
    digest = DigestData(date="2026-10-18", jobs=[DigestJob(job=job, match_score=55)],
                        generated_at=FIXED_NOW.isoformat())
    assert format_digest_text(digest).split("\n") == [
        DIGEST_TITLE,
        "Date: Sunday, October 18, 2026",
        "",
        "---",
        "",
        "1. Backend Engineer",
        "   Company: Razorpay",
        "   Location: Bangalore",
        "   Experience: 3 years",
        "   Match Score: 55%",
        "   Apply: https://example.com/apply/7",
        "",
        "---",
        "",
        DIGEST_FOOTER,
    ]


def test_format_uses_the_digest_date_not_today(sample_jobs):
    digest = generate_digest(sample_jobs, None, now=FIXED_NOW - timedelta(days=3))
    assert "Date: Thursday, October 15, 2026" in format_digest_text(digest)


def test_copy_digest_passes_text_to_clipboard(sample_jobs, backend_prefs):
    digest = generate_digest(sample_jobs, backend_prefs, now=FIXED_NOW)
    copied = []
    assert copy_digest(digest, copied.append) is True
    assert copied == [format_digest_text(digest)]


def test_copy_digest_swallows_clipboard_errors(sample_jobs):
    def broken(_text):
        raise RuntimeError("clipboard unavailable")

    digest = generate_digest(sample_jobs, None, now=FIXED_NOW)
    assert copy_digest(digest, broken) is False


def test_store_key_format():
    assert DigestStore.key_for(date(2026, 10, 18)) == "jobTrackerDigest_2026-10-18"


def test_generate_today_persists_for_the_day(store, clock, sample_jobs, backend_prefs):
    digests = DigestStore(store, clock=clock)
    assert digests.load() is None

    created = digests.generate_today(sample_jobs, backend_prefs)
    assert store.get("jobTrackerDigest_2026-10-18") is not None
    assert DigestStore(store, clock=clock).load() == created


def test_load_for_another_day_is_empty(store, clock, sample_jobs):
    digests = DigestStore(store, clock=clock)
    digests.generate_today(sample_jobs, None)
    assert digests.load(date(2026, 10, 19)) is None


def test_save_replaces_same_day_record(store, clock, sample_jobs, backend_prefs):
    digests = DigestStore(store, clock=clock)
    digests.generate_today(sample_jobs, None)
    second = digests.generate_today(sample_jobs, backend_prefs)
    assert digests.load() == second
    assert has_matches(digests.load())


def test_malformed_stored_digest_is_ignored(store, clock):
    store.set("jobTrackerDigest_2026-10-18", "{broken")
    assert DigestStore(store, clock=clock).load() is None
    store.set("jobTrackerDigest_2026-10-18", '{"jobs": []}')
    assert DigestStore(store, clock=clock).load() is None


def test_stored_digest_with_bad_date_is_ignored(store, clock):
    store.set("jobTrackerDigest_2026-10-18", '{"date": "someday", "jobs": [], "generated_at": ""}')
    assert DigestStore(store, clock=clock).load() is None
    store.set("jobTrackerDigest_2026-10-18", '{"date": 20261018, "jobs": []}')
    assert DigestStore(store, clock=clock).load() is None
