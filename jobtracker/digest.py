"""Generate the daily digest of top job matches."""
from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Iterable

from jobtracker.config import DIGEST_KEY_PREFIX, DIGEST_SIZE
from jobtracker.log import get_logger
from jobtracker.models import DigestData, DigestJob, Job, Preferences
from jobtracker.scorer import default_weights, score_job
from jobtracker.store import KeyValueStore, read_json, write_json

log = get_logger(__name__)

DIGEST_TITLE = "Top 10 Jobs For You — 9AM Digest"
DIGEST_FOOTER = "This digest was generated based on your preferences."


def local_now() -> datetime:
    return datetime.now().astimezone()


def display_date(day: date) -> str:
    """e.g. "Sunday, October 18, 2026"."""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def generate_digest(
    jobs: Iterable[Job],
    prefs: Preferences | None,
    now: datetime | None = None,
) -> DigestData:
    """Top jobs by score (desc), then freshness (posted_days_ago asc)."""
    now = now or local_now()
    weights = default_weights()
    scored = [
        DigestJob(job=j, match_score=score_job(j, prefs, weights) if prefs is not None else 0)
        for j in jobs
    ]
    scored.sort(key=lambda d: (-d.match_score, d.job.posted_days_ago))
    top = scored[:DIGEST_SIZE]
    log.info("Built digest for %s: %d jobs, best score %d",
             now.date().isoformat(), len(top), top[0].match_score if top else 0)
    return DigestData(date=now.date().isoformat(), jobs=top, generated_at=now.isoformat())


def has_matches(digest: DigestData | None) -> bool:
    return digest is not None and any(j.match_score > 0 for j in digest.jobs)


def format_digest_text(digest: DigestData) -> str:
    """Plain-text digest used for clipboard copy and the email draft body."""
    day = date.fromisoformat(digest.date)
    lines: list[str] = [
        DIGEST_TITLE,
        f"Date: {display_date(day)}",
        "",
        "---",
        "",
    ]
    for i, d in enumerate(digest.jobs, 1):
        job = d.job
        lines.append(f"{i}. {job.title}")
        lines.append(f"   Company: {job.company}")
        lines.append(f"   Location: {job.location}")
        lines.append(f"   Experience: {job.experience} years")
        lines.append(f"   Match Score: {d.match_score}%")
        lines.append(f"   Apply: {job.apply_url}")
        lines.append("")
    lines.append("---")
    lines.append("")
    lines.append(DIGEST_FOOTER)
    return "\n".join(lines)


def copy_digest(digest: DigestData, clipboard: Callable[[str], object]) -> bool:
    """Hand the digest text to a clipboard writer; failures are not surfaced."""
    try:
        clipboard(format_digest_text(digest))
    except Exception as exc:
        log.debug("Clipboard copy failed: %s", exc)
        return False
    return True


class DigestStore:
    """One digest record per calendar day, under jobTrackerDigest_YYYY-MM-DD."""

    def __init__(self, store: KeyValueStore, clock: Callable[[], datetime] | None = None) -> None:
        self.store = store
        self.clock = clock or local_now

    @staticmethod
    def key_for(day: date) -> str:
        return f"{DIGEST_KEY_PREFIX}{day.isoformat()}"

    def load(self, day: date | None = None) -> DigestData | None:
        day = day or self.clock().date()
        raw = read_json(self.store, self.key_for(day), None)
        if not isinstance(raw, dict):
            return None
        try:
            date.fromisoformat(raw["date"])
            return DigestData.from_dict(raw)
        except (KeyError, TypeError, ValueError) as exc:
            log.warning("Discarding malformed digest for %s: %s", day, exc)
            return None

    def save(self, digest: DigestData) -> None:
        """Write the digest, replacing any record for the same day."""
        key = self.key_for(date.fromisoformat(digest.date))
        write_json(self.store, key, digest.to_dict())
        log.info("Digest stored → %s", key)

    def generate_today(self, jobs: Iterable[Job], prefs: Preferences | None) -> DigestData:
        digest = generate_digest(jobs, prefs, now=self.clock())
        self.save(digest)
        return digest
