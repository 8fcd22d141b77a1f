"""Track application status per job, with a capped change history."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

from jobtracker.config import HISTORY_LIMIT, RECENT_UPDATE_DAYS, STATUS_HISTORY_KEY, STATUS_KEY
from jobtracker.log import get_logger
from jobtracker.models import DEFAULT_STATUS, JobStatus, StatusHistoryEntry
from jobtracker.store import KeyValueStore, read_json, write_json

log = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_dt(value: str) -> datetime | None:
    try:
        dt = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


class StatusTracker:
    """
    Status map and history, both kept in the store.

    Layout:
      jobTrackerStatus        -> { "<job_id>": "Applied", ... }
      jobTrackerStatusHistory -> [ {StatusHistoryEntry...}, ... ]  newest first
    """

    def __init__(self, store: KeyValueStore, clock: Callable[[], datetime] | None = None) -> None:
        self.store = store
        self.clock = clock or utc_now

    def statuses(self) -> dict[str, JobStatus]:
        raw = read_json(self.store, STATUS_KEY, {})
        return {str(job_id): JobStatus.parse(value) for job_id, value in raw.items()}

    def get(self, job_id: str) -> JobStatus:
        return self.statuses().get(job_id, DEFAULT_STATUS)

    def set(self, job_id: str, status: JobStatus | str, title: str, company: str) -> bool:
        """Persist a status change; returns False when the status is unchanged."""
        status = JobStatus(status)
        if self.get(job_id) is status:
            return False

        raw = read_json(self.store, STATUS_KEY, {})
        raw[job_id] = status.value
        write_json(self.store, STATUS_KEY, raw)
        log.debug("Updated %s → %s", job_id, status.value)

        if status is not DEFAULT_STATUS:
            self._record_history(job_id, title, company, status)
        return True

    def _record_history(self, job_id: str, title: str, company: str, status: JobStatus) -> None:
        entry = StatusHistoryEntry(
            job_id=job_id,
            job_title=title,
            company=company,
            status=status,
            changed_at=self.clock().isoformat(),
        )
        history = read_json(self.store, STATUS_HISTORY_KEY, [])
        updated = [entry.to_dict(), *history][:HISTORY_LIMIT]
        write_json(self.store, STATUS_HISTORY_KEY, updated)

    def history(self) -> list[StatusHistoryEntry]:
        entries: list[StatusHistoryEntry] = []
        for raw in read_json(self.store, STATUS_HISTORY_KEY, []):
            try:
                entries.append(StatusHistoryEntry.from_dict(raw))
            except (KeyError, TypeError, AttributeError):
                log.warning("Skipping malformed history entry: %r", raw)
        return entries

    def recent_updates(self, days: int = RECENT_UPDATE_DAYS) -> list[StatusHistoryEntry]:
        """History entries changed within the last *days* days (cutoff inclusive)."""
        cutoff = self.clock() - timedelta(days=days)
        recent: list[StatusHistoryEntry] = []
        for entry in self.history():
            changed = _parse_dt(entry.changed_at)
            if changed is not None and changed >= cutoff:
                recent.append(entry)
        return recent

    def clear(self) -> None:
        """Forget every stored status (history is kept)."""
        self.store.remove(STATUS_KEY)
        log.info("Cleared job statuses")
