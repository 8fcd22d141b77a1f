#!/usr/bin/env python3
"""
Interactive preferences wizard.

    python onboard.py

Walks through: role keywords → locations → skills → minimum match score → save.
"""
from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from jobtracker.catalog import all_jobs, unique_locations
from jobtracker.config import DEFAULT_MIN_MATCH_SCORE, ensure_dirs
from jobtracker.log import get_logger
from jobtracker.models import Preferences
from jobtracker.preferences import load_preferences, parse_list, save_preferences
from jobtracker.scorer import score_jobs
from jobtracker.store import default_store

log = get_logger(__name__)

TOTAL_STEPS = 4

# ── Helpers ──────────────────────────────────────────────────────────────


def _ask(prompt: str, default: str = "") -> str:
    hint = f" [{default}]" if default else ""
    val = input(f"  {prompt}{hint}: ").strip()
    return val or default


def _ask_yn(prompt: str, default: bool = True) -> bool:
    hint = "Y/n" if default else "y/N"
    val = input(f"  {prompt} ({hint}): ").strip().lower()
    if not val:
        return default
    return val in ("y", "yes")


def _ask_int(prompt: str, default: int, lo: int = 0, hi: int = 100) -> int:
    while True:
        raw = _ask(prompt, str(default))
        try:
            value = int(raw)
        except ValueError:
            print(f"  ✗ Enter a whole number between {lo} and {hi}")
            continue
        if lo <= value <= hi:
            return value
        print(f"  ✗ Enter a whole number between {lo} and {hi}")


def _banner() -> None:
    print()
    print("╔════════════════════════════════════════════╗")
    print("║   Job Notification Tracker — Preferences   ║")
    print("╚════════════════════════════════════════════╝")
    print()


def _step(num: int, title: str) -> None:
    print(f"\n{'─'*50}")
    print(f"  Step {num}/{TOTAL_STEPS}: {title}")
    print(f"{'─'*50}")


# ── Steps ────────────────────────────────────────────────────────────────


def step_keywords(existing: Preferences) -> list[str]:
    _step(1, "Role keywords")
    print("  Words to look for in job titles, e.g. backend, developer, sre.\n")
    return parse_list(_ask("Role keywords (comma-separated)", ", ".join(existing.role_keywords)))


def step_locations(existing: Preferences) -> list[str]:
    _step(2, "Locations")
    print(f"  Locations in the catalog: {', '.join(unique_locations(all_jobs()))}")
    print("  Add \"Remote\" to also match remote-mode jobs.\n")
    return parse_list(_ask("Preferred locations (comma-separated)", ", ".join(existing.locations)))


def step_skills(existing: Preferences) -> list[str]:
    _step(3, "Skills")
    return parse_list(_ask("Your skills (comma-separated)", ", ".join(existing.skills)))


def step_threshold(existing: Preferences) -> int:
    _step(4, "Minimum match score")
    print("  Jobs at or above this score count as matches on the dashboard.\n")
    return _ask_int("Minimum match score (0-100)", existing.min_match_score)


# ── Main ─────────────────────────────────────────────────────────────────


def main() -> None:
    _banner()
    print("  Press Enter to keep the value shown in brackets.\n")

    ensure_dirs()
    store = default_store()
    existing = load_preferences(store) or Preferences(min_match_score=DEFAULT_MIN_MATCH_SCORE)

    prefs = Preferences(
        role_keywords=step_keywords(existing),
        locations=step_locations(existing),
        skills=step_skills(existing),
        min_match_score=step_threshold(existing),
    )

    if prefs.is_empty() and not _ask_yn("\n  No keywords, locations or skills given. Save anyway?", default=False):
        print("  Nothing saved.")
        return

    save_preferences(store, prefs)
    scores = score_jobs(all_jobs(), prefs)
    matched = sum(1 for s in scores.values() if (s or 0) >= prefs.min_match_score)

    print()
    print("╔════════════════════════════════════════════╗")
    print("║           Preferences Saved!               ║")
    print("╚════════════════════════════════════════════╝")
    print()
    print(f"  {matched} of {len(scores)} jobs currently score {prefs.min_match_score}% or higher.")
    print()
    print("  Open the app:")
    print("    streamlit run app.py")
    print()
    print("  Print today's digest:")
    print("    python run_digest.py")
    print()


if __name__ == "__main__":
    main()
