"""Data models for jobs, preferences, statuses and digests."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from jobtracker.config import DEFAULT_MIN_MATCH_SCORE


class JobSource(str, Enum):
    LINKEDIN = "LinkedIn"
    NAUKRI = "Naukri"
    INDEED = "Indeed"

    @classmethod
    def parse(cls, value: Any) -> JobSource:
        try:
            return cls(value)
        except ValueError:
            return cls.LINKEDIN


class JobStatus(str, Enum):
    NOT_APPLIED = "Not Applied"
    APPLIED = "Applied"
    REJECTED = "Rejected"
    SELECTED = "Selected"

    @classmethod
    def parse(cls, value: Any) -> JobStatus:
        """Coerce a stored value; anything unrecognised is the default."""
        try:
            return cls(value)
        except ValueError:
            return cls.NOT_APPLIED


DEFAULT_STATUS = JobStatus.NOT_APPLIED


def _unique(values: Any) -> list[str]:
    if not isinstance(values, (list, tuple, set, frozenset)):
        return []
    cleaned = [str(v).strip() for v in values if str(v).strip()]
    return list(dict.fromkeys(cleaned))


@dataclass(frozen=True)
class Job:
    id: str
    title: str
    company: str
    location: str
    mode: str
    experience: int
    salary_range: str
    skills: tuple[str, ...]
    source: JobSource
    posted_days_ago: int
    apply_url: str
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Job:
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            company=data.get("company", ""),
            location=data.get("location", ""),
            mode=data.get("mode", ""),
            experience=int(data.get("experience", 0)),
            salary_range=data.get("salary_range", ""),
            skills=tuple(data.get("skills") or ()),
            source=JobSource.parse(data.get("source")),
            posted_days_ago=max(0, int(data.get("posted_days_ago", 0))),
            apply_url=data.get("apply_url", ""),
            description=data.get("description", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["skills"] = list(self.skills)
        d["source"] = self.source.value
        return d


@dataclass
class Preferences:
    role_keywords: list[str] = field(default_factory=list)
    locations: list[str] = field(default_factory=list)
    skills: list[str] = field(default_factory=list)
    min_match_score: int = DEFAULT_MIN_MATCH_SCORE

    def __post_init__(self) -> None:
        self.role_keywords = _unique(self.role_keywords)
        self.locations = _unique(self.locations)
        self.skills = _unique(self.skills)
        try:
            score = int(self.min_match_score)
        except (TypeError, ValueError):
            score = DEFAULT_MIN_MATCH_SCORE
        self.min_match_score = min(100, max(0, score))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Preferences:
        return cls(
            role_keywords=data.get("role_keywords", []),
            locations=data.get("locations", []),
            skills=data.get("skills", []),
            min_match_score=data.get("min_match_score", DEFAULT_MIN_MATCH_SCORE),
        )

    def is_empty(self) -> bool:
        return not (self.role_keywords or self.locations or self.skills)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class StatusHistoryEntry:
    job_id: str
    job_title: str
    company: str
    status: JobStatus
    changed_at: str  # ISO-8601

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatusHistoryEntry:
        return cls(
            job_id=str(data["job_id"]),
            job_title=data.get("job_title", ""),
            company=data.get("company", ""),
            status=JobStatus.parse(data.get("status")),
            changed_at=data["changed_at"],
        )

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["status"] = self.status.value
        return d


@dataclass
class ScoredJob:
    job: Job
    score: int | None
    match_reasons: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DigestJob:
    job: Job
    match_score: int

    def to_dict(self) -> dict[str, Any]:
        d = self.job.to_dict()
        d["match_score"] = self.match_score
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DigestJob:
        return cls(job=Job.from_dict(data), match_score=int(data.get("match_score", 0)))


@dataclass(frozen=True)
class DigestData:
    date: str  # YYYY-MM-DD
    jobs: list[DigestJob]
    generated_at: str  # ISO-8601

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DigestData:
        return cls(
            date=data["date"],
            jobs=[DigestJob.from_dict(j) for j in data.get("jobs", [])],
            generated_at=data.get("generated_at", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "jobs": [j.to_dict() for j in self.jobs],
            "generated_at": self.generated_at,
        }
