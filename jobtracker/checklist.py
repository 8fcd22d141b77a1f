"""Manual release checklist and the ship lock that depends on it."""
from __future__ import annotations

from dataclasses import dataclass

from jobtracker.config import TEST_CHECKLIST_KEY
from jobtracker.log import get_logger
from jobtracker.store import KeyValueStore, read_json, write_json

log = get_logger(__name__)


@dataclass(frozen=True)
class CheckItem:
    id: str
    label: str
    hint: str


CHECK_ITEMS: list[CheckItem] = [
    CheckItem("preferences-persist", "Preferences persist after refresh",
              "Set preferences in Settings, refresh the page, and verify they are still there."),
    CheckItem("match-score", "Match score calculates correctly",
              "Set role keywords and skills, then check that jobs show appropriate match scores."),
    CheckItem("show-matches", '"Show only matches" toggle works',
              "Enable the toggle on dashboard and verify only jobs above threshold are shown."),
    CheckItem("save-persist", "Save job persists after refresh",
              "Save a job, refresh the page, and verify it appears in Saved Jobs."),
    CheckItem("apply-tab", "Apply opens in new tab",
              "Click Apply on any job card and verify it opens in a new tab."),
    CheckItem("status-persist", "Status update persists after refresh",
              "Change a job status, refresh, and verify the status is maintained."),
    CheckItem("status-filter", "Status filter works correctly",
              "Use the Status filter dropdown and verify only matching jobs are shown."),
    CheckItem("digest-generate", "Digest generates top 10 by score",
              "Generate a digest and verify it shows top 10 jobs sorted by match score."),
    CheckItem("digest-persist", "Digest persists for the day",
              "Generate a digest, refresh the page, and verify it loads automatically."),
    CheckItem("no-console-errors", "No errors on main pages",
              "Open Dashboard, Saved, Settings and Digest and verify no errors are shown or logged."),
]


class Checklist:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def state(self) -> dict[str, bool]:
        raw = read_json(self.store, TEST_CHECKLIST_KEY, {})
        return {str(k): bool(v) for k, v in raw.items()}

    def toggle(self, item_id: str) -> bool:
        """Flip one item; returns its new checked state."""
        state = self.state()
        state[item_id] = not state.get(item_id, False)
        write_json(self.store, TEST_CHECKLIST_KEY, state)
        return state[item_id]

    def reset(self) -> None:
        write_json(self.store, TEST_CHECKLIST_KEY, {})
        log.info("Checklist reset")

    def passed_count(self) -> int:
        known = {item.id for item in CHECK_ITEMS}
        return sum(1 for k, v in self.state().items() if v and k in known)

    def ship_unlocked(self) -> bool:
        return self.passed_count() == len(CHECK_ITEMS)
