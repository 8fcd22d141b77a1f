"""Saved (bookmarked) jobs."""
from __future__ import annotations

from typing import Iterable

from jobtracker.config import SAVED_JOBS_KEY
from jobtracker.log import get_logger
from jobtracker.models import Job
from jobtracker.store import KeyValueStore, read_json, write_json

log = get_logger(__name__)


def toggle_saved(saved_ids: list[str], job_id: str) -> list[str]:
    """Return a new id list with *job_id* added at the end, or removed if present."""
    if job_id in saved_ids:
        return [i for i in saved_ids if i != job_id]
    return [*saved_ids, job_id]


class SavedJobs:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def ids(self) -> list[str]:
        return [str(i) for i in read_json(self.store, SAVED_JOBS_KEY, [])]

    def is_saved(self, job_id: str) -> bool:
        return job_id in self.ids()

    def toggle(self, job_id: str) -> bool:
        """Flip the saved state of a job; returns True when it is now saved."""
        updated = toggle_saved(self.ids(), job_id)
        write_json(self.store, SAVED_JOBS_KEY, updated)
        now_saved = job_id in updated
        log.debug("%s job %s", "Saved" if now_saved else "Unsaved", job_id)
        return now_saved

    def jobs(self, catalog: Iterable[Job]) -> list[Job]:
        """Saved jobs in catalog order; ids no longer in the catalog are ignored."""
        saved = set(self.ids())
        return [j for j in catalog if j.id in saved]
