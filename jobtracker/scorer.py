"""Score jobs against the user's preferences."""
from __future__ import annotations

from functools import lru_cache
from typing import Iterable

from jobtracker.config import load_scoring_weights
from jobtracker.log import get_logger
from jobtracker.models import Job, Preferences, ScoredJob

log = get_logger(__name__)


def _normalize(s: str) -> str:
    return (s or "").lower().strip()


LOCATION_ALIASES: dict[str, list[str]] = {
    "bangalore": ["bangalore", "bengaluru"],
    "gurgaon": ["gurgaon", "gurugram"],
    "mumbai": ["mumbai", "bombay"],
    "chennai": ["chennai", "madras"],
    "delhi": ["delhi", "new delhi", "delhi ncr"],
    "remote": ["remote", "anywhere", "work from home", "wfh"],
}

MATCH_BANDS: list[tuple[int, str]] = [
    (80, "strong"),
    (60, "good"),
    (40, "fair"),
]


def _expand_locations(locations: Iterable[str]) -> set[str]:
    expanded: set[str] = set()
    for loc in locations:
        key = _normalize(loc)
        if not key:
            continue
        expanded.add(key)
        for aliases in LOCATION_ALIASES.values():
            if key in aliases:
                expanded.update(aliases)
    return expanded


@lru_cache(maxsize=1)
def default_weights() -> dict[str, dict[str, int]]:
    """Scoring weights from config/scoring.yaml, read once per process."""
    return load_scoring_weights()


def _capped(hits: int, rule: dict[str, int]) -> int:
    return min(hits * rule["points"], rule["cap"])


def _evaluate(
    job: Job,
    prefs: Preferences,
    weights: dict[str, dict[str, int]],
) -> tuple[int, list[str]]:
    reasons: list[str] = []
    title = _normalize(job.title)

    # --- Role keywords (substring of title) ---
    keyword_hits = [k for k in prefs.role_keywords if _normalize(k) and _normalize(k) in title]
    reasons.extend(f"Role keyword: {k}" for k in keyword_hits)

    # --- Skills overlap ---
    job_skills = {_normalize(s) for s in job.skills}
    skill_hits = [s for s in prefs.skills if _normalize(s) in job_skills]
    reasons.extend(f"Skill: {s}" for s in skill_hits)

    # --- Location ---
    wanted = _expand_locations(prefs.locations)
    has_location = _normalize(job.location) in wanted or (
        _normalize(job.mode) == "remote" and "remote" in wanted
    )
    if has_location:
        reasons.append("Location match")

    score = 0
    score += _capped(len(keyword_hits), weights["role_keyword"])
    score += _capped(len(skill_hits), weights["skill"])
    if has_location:
        score += _capped(1, weights["location"])

    return min(100, max(0, score)), reasons


def score_job(
    job: Job,
    prefs: Preferences | None,
    weights: dict[str, dict[str, int]] | None = None,
) -> int | None:
    """Match score 0–100, or None when there are no preferences to score against."""
    if prefs is None:
        return None
    score, _ = _evaluate(job, prefs, weights or default_weights())
    return score


def explain_match(
    job: Job,
    prefs: Preferences | None,
    weights: dict[str, dict[str, int]] | None = None,
) -> ScoredJob:
    if prefs is None:
        return ScoredJob(job=job, score=None, match_reasons=[])
    score, reasons = _evaluate(job, prefs, weights or default_weights())
    return ScoredJob(job=job, score=score, match_reasons=reasons)


def score_jobs(jobs: Iterable[Job], prefs: Preferences | None) -> dict[str, int | None]:
    """Scores keyed by job id; every value is None without preferences."""
    weights = default_weights()
    scores = {j.id: score_job(j, prefs, weights) for j in jobs}
    if prefs is not None:
        matched = sum(1 for s in scores.values() if (s or 0) >= prefs.min_match_score)
        log.info("Scored %d jobs → %d at or above %d%%", len(scores), matched, prefs.min_match_score)
    return scores


def match_band(score: int | None) -> str:
    """Colour band for a score badge: strong, good, fair or low."""
    if score is None:
        return "none"
    for threshold, band in MATCH_BANDS:
        if score >= threshold:
            return band
    return "low"
