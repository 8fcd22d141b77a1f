"""Load and save the user's matching preferences."""
from __future__ import annotations

from jobtracker.config import PREFERENCES_KEY
from jobtracker.log import get_logger
from jobtracker.models import Preferences
from jobtracker.store import KeyValueStore, read_json, write_json

log = get_logger(__name__)


def load_preferences(store: KeyValueStore) -> Preferences | None:
    """Stored preferences, or None when nothing usable is saved."""
    data = read_json(store, PREFERENCES_KEY, None)
    if not isinstance(data, dict):
        return None
    return Preferences.from_dict(data)


def save_preferences(store: KeyValueStore, prefs: Preferences) -> None:
    write_json(store, PREFERENCES_KEY, prefs.to_dict())
    log.info(
        "Saved preferences: %d keywords, %d locations, %d skills, min score %d",
        len(prefs.role_keywords), len(prefs.locations), len(prefs.skills), prefs.min_match_score,
    )


def has_preferences(store: KeyValueStore) -> bool:
    """True once the user has entered at least one matching criterion."""
    return active_preferences(store) is not None


def active_preferences(store: KeyValueStore) -> Preferences | None:
    """Preferences to score against; None until at least one criterion is set."""
    prefs = load_preferences(store)
    if prefs is None or prefs.is_empty():
        return None
    return prefs


def parse_list(text: str) -> list[str]:
    """Split comma- or newline-separated form input into clean entries."""
    parts = text.replace("\n", ",").split(",")
    return list(dict.fromkeys(p.strip() for p in parts if p.strip()))
