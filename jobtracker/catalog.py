"""The static job catalog and dropdown facets."""
from __future__ import annotations

import webbrowser
from functools import lru_cache
from pathlib import Path
from typing import Callable, Iterable

from jobtracker.config import JOBS_PATH, load_jobs_data
from jobtracker.log import get_logger
from jobtracker.models import Job

log = get_logger(__name__)


def load_jobs(path: Path | None = None) -> list[Job]:
    """Read the catalog; duplicate ids are dropped (first one wins)."""
    jobs: list[Job] = []
    seen: set[str] = set()
    for raw in load_jobs_data(path):
        job = Job.from_dict(raw)
        if job.id in seen:
            log.warning("Duplicate job id %s in catalog, skipped", job.id)
            continue
        seen.add(job.id)
        jobs.append(job)
    log.debug("Loaded %d jobs from %s", len(jobs), (path or JOBS_PATH).name)
    return jobs


@lru_cache(maxsize=1)
def all_jobs() -> tuple[Job, ...]:
    return tuple(load_jobs())


def find_job(job_id: str, jobs: Iterable[Job] | None = None) -> Job | None:
    for job in jobs if jobs is not None else all_jobs():
        if job.id == job_id:
            return job
    return None


def _unique_sorted(values: Iterable) -> list:
    return sorted(set(values))


def unique_locations(jobs: Iterable[Job]) -> list[str]:
    return _unique_sorted(j.location for j in jobs)


def unique_modes(jobs: Iterable[Job]) -> list[str]:
    return _unique_sorted(j.mode for j in jobs)


def unique_experiences(jobs: Iterable[Job]) -> list[int]:
    return _unique_sorted(j.experience for j in jobs)


def unique_sources(jobs: Iterable[Job]) -> list[str]:
    return _unique_sorted(j.source.value for j in jobs)


def format_posted(days: int) -> str:
    if days == 0:
        return "Today"
    if days == 1:
        return "1 day ago"
    return f"{days} days ago"


def open_apply_url(url: str, opener: Callable[[str], bool] = webbrowser.open_new_tab) -> bool:
    """Open an apply link in a new browser tab."""
    if not url:
        return False
    opened = bool(opener(url))
    if not opened:
        log.warning("No browser available to open %s", url)
    return opened
