#!/usr/bin/env python3
"""
Generate today's 9AM digest and print it.

Usage:
  python run_digest.py            # show today's digest, generating it if missing
  python run_digest.py --force    # regenerate, replacing today's record
  python run_digest.py --mailto   # also print a pre-filled email draft link
"""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from jobtracker.catalog import all_jobs
from jobtracker.config import ensure_dirs
from jobtracker.digest import DigestStore, format_digest_text, has_matches
from jobtracker.email_draft import build_mailto_link
from jobtracker.log import get_logger
from jobtracker.preferences import active_preferences, has_preferences
from jobtracker.store import default_store
from jobtracker.tracker import StatusTracker

log = get_logger(__name__)


def main(argv: list[str]) -> int:
    ensure_dirs()
    store = default_store()

    if not has_preferences(store):
        print()
        print("  No preferences found. Set them first:")
        print("    python onboard.py   (or the Settings page in the app)")
        print()
        return 1

    digests = DigestStore(store)
    digest = None if "--force" in argv else digests.load()
    if digest is None:
        digest = digests.generate_today(list(all_jobs()), active_preferences(store))
    else:
        log.info("Using digest already generated at %s", digest.generated_at)

    if not has_matches(digest):
        print("No matching roles today. Check again tomorrow.")
    else:
        print(format_digest_text(digest))

    updates = StatusTracker(store).recent_updates()
    if updates:
        print()
        print("Recent Status Updates")
        for u in updates:
            print(f"  - {u.job_title} @ {u.company} — {u.status.value} ({u.changed_at[:16]})")

    if "--mailto" in argv and has_matches(digest):
        print()
        print(build_mailto_link(digest))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
