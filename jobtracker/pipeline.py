"""Filter and sort the job list for the dashboard."""
from __future__ import annotations

import re
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Callable, Iterable, Mapping

from jobtracker.config import DEFAULT_MIN_MATCH_SCORE
from jobtracker.log import get_logger
from jobtracker.models import DEFAULT_STATUS, Job, JobStatus

log = get_logger(__name__)

_FIRST_INT = re.compile(r"\d+")


class SortKey(str, Enum):
    LATEST = "latest"
    OLDEST = "oldest"
    MATCH_SCORE = "match-score"
    SALARY_HIGH = "salary-high"
    SALARY_LOW = "salary-low"


@dataclass(frozen=True)
class FilterCriteria:
    keyword: str = ""
    location: str = ""
    mode: str = ""
    experience: int | None = None
    source: str = ""
    status: JobStatus | None = None
    sort: SortKey = SortKey.LATEST
    only_matches: bool = False


def update_filter(criteria: FilterCriteria, key: str, value: Any) -> FilterCriteria:
    """Return a copy of *criteria* with one field changed; "" clears a filter."""
    names = {f.name for f in fields(FilterCriteria)}
    if key not in names:
        raise ValueError(f"Unknown filter: {key}")

    if key == "experience":
        value = None if value in ("", None) else int(value)
    elif key == "status":
        value = None if value in ("", None) else JobStatus(value)
    elif key == "sort":
        value = SortKey(value)
    elif key == "only_matches":
        value = bool(value)
    else:
        value = value or ""
    return replace(criteria, **{key: value})


def salary_floor(salary_range: str) -> int:
    """First integer in a free-text salary; 0 when there is none."""
    match = _FIRST_INT.search(salary_range or "")
    return int(match.group()) if match else 0


def _job_filters(
    criteria: FilterCriteria,
    scores: Mapping[str, int | None],
    statuses: Mapping[str, JobStatus],
    min_match_score: int | None,
) -> list[Callable[[Job], bool]]:
    checks: list[Callable[[Job], bool]] = []

    if criteria.only_matches and min_match_score is not None:
        checks.append(lambda j: (scores.get(j.id) or 0) >= min_match_score)

    if criteria.keyword:
        kw = criteria.keyword.lower()
        checks.append(lambda j: kw in j.title.lower() or kw in j.company.lower())

    if criteria.location:
        checks.append(lambda j: j.location == criteria.location)

    if criteria.mode:
        checks.append(lambda j: j.mode == criteria.mode)

    if criteria.experience is not None:
        checks.append(lambda j: j.experience == criteria.experience)

    if criteria.source:
        checks.append(lambda j: j.source.value == criteria.source)

    if criteria.status is not None:
        checks.append(lambda j: statuses.get(j.id, DEFAULT_STATUS) == criteria.status)

    return checks


def apply_filters(
    jobs: Iterable[Job],
    criteria: FilterCriteria,
    scores: Mapping[str, int | None] | None = None,
    statuses: Mapping[str, JobStatus] | None = None,
    min_match_score: int | None = DEFAULT_MIN_MATCH_SCORE,
) -> list[Job]:
    """
    Keep jobs that pass every active filter.

    *min_match_score* is None when the user has no preferences; the
    only-matches toggle is then inert.
    """
    checks = _job_filters(criteria, scores or {}, statuses or {}, min_match_score)
    return [j for j in jobs if all(check(j) for check in checks)]


def sort_jobs(
    jobs: Iterable[Job],
    sort: SortKey | str,
    scores: Mapping[str, int | None] | None = None,
) -> list[Job]:
    """Stable sort; equal keys keep their input order."""
    sort = SortKey(sort)
    scores = scores or {}
    result = list(jobs)
    if sort is SortKey.LATEST:
        result.sort(key=lambda j: j.posted_days_ago)
    elif sort is SortKey.OLDEST:
        result.sort(key=lambda j: -j.posted_days_ago)
    elif sort is SortKey.MATCH_SCORE:
        result.sort(key=lambda j: -(scores.get(j.id) or 0))
    elif sort is SortKey.SALARY_HIGH:
        result.sort(key=lambda j: -salary_floor(j.salary_range))
    elif sort is SortKey.SALARY_LOW:
        result.sort(key=lambda j: salary_floor(j.salary_range))
    return result


def filter_and_sort(
    jobs: Iterable[Job],
    criteria: FilterCriteria,
    scores: Mapping[str, int | None] | None = None,
    statuses: Mapping[str, JobStatus] | None = None,
    min_match_score: int | None = DEFAULT_MIN_MATCH_SCORE,
) -> list[Job]:
    jobs = list(jobs)
    kept = apply_filters(jobs, criteria, scores, statuses, min_match_score)
    result = sort_jobs(kept, criteria.sort, scores)
    log.debug("Filtered %d → %d jobs (sort=%s)", len(jobs), len(result), criteria.sort.value)
    return result
