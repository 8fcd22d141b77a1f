import os
from datetime import datetime, timezone

import pytest

# Keep test runs from writing log files into the repo.
os.environ.setdefault("JOBTRACKER_LOG_FILE", "false")

from jobtracker.models import Job, JobSource, Preferences  # noqa: E402
from jobtracker.store import MemoryStore  # noqa: E402

FIXED_NOW = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def make_job():
    """
    Fixture that returns a factory: make_job(id="x", title=...) -> Job
    Unspecified fields get neutral defaults.
    """
    def _make(job_id: str = "1", **overrides) -> Job:
        fields = dict(
            id=job_id,
            title="Software Engineer",
            company="Acme",
            location="Pune",
            mode="Onsite",
            experience=1,
            salary_range="₹5-8 LPA",
            skills=(),
            source=JobSource.LINKEDIN,
            posted_days_ago=0,
            apply_url=f"https://example.com/jobs/{job_id}",
        )
        fields.update(overrides)
        fields["skills"] = tuple(fields["skills"])
        return Job(**fields)
    return _make


@pytest.fixture
def sample_jobs(make_job) -> list[Job]:
    return [
        make_job("1", title="Backend Engineer", company="Razorpay", location="Bangalore",
                 mode="Hybrid", experience=3, salary_range="₹15-25 LPA",
                 skills=["Go", "SQL"], source=JobSource.LINKEDIN, posted_days_ago=0),
        make_job("2", title="Frontend Developer", company="Swiggy", location="Bangalore",
                 mode="Onsite", experience=1, salary_range="₹10-18 LPA",
                 skills=["React", "TypeScript"], source=JobSource.NAUKRI, posted_days_ago=2),
        make_job("3", title="Python Developer", company="Zoho", location="Chennai",
                 mode="Onsite", experience=1, salary_range="₹6-10 LPA",
                 skills=["Python", "SQL"], source=JobSource.INDEED, posted_days_ago=5),
        make_job("4", title="DevOps Engineer", company="Freshworks", location="Chennai",
                 mode="Remote", experience=3, salary_range="₹12-20 LPA",
                 skills=["AWS", "Kubernetes"], source=JobSource.LINKEDIN, posted_days_ago=4),
        make_job("5", title="Product Analyst", company="Meesho", location="Bangalore",
                 mode="Hybrid", experience=1, salary_range="Not disclosed",
                 skills=["SQL"], source=JobSource.NAUKRI, posted_days_ago=12),
    ]


@pytest.fixture
def backend_prefs() -> Preferences:
    return Preferences(role_keywords=["backend"], locations=["Bangalore"], skills=["Go"], min_match_score=40)


@pytest.fixture
def clock():
    """A controllable clock: clock.now is returned on every call."""
    class _Clock:
        def __init__(self) -> None:
            self.now = FIXED_NOW

        def __call__(self) -> datetime:
            return self.now

    return _Clock()
