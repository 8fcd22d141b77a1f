"""Load catalog, scoring policy and env configuration."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobtracker.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
SCORING_PATH: Path = CONFIG_DIR / "scoring.yaml"
JOBS_PATH: Path = Path(__file__).resolve().parent / "data" / "jobs.yaml"
DATA_DIR: Path = Path(os.environ.get("JOBTRACKER_DATA_DIR") or ROOT_DIR / "data")
STORE_PATH: Path = DATA_DIR / "store.json"

# Store keys
SAVED_JOBS_KEY = "jnt_saved_jobs"
PREFERENCES_KEY = "jobTrackerPreferences"
STATUS_KEY = "jobTrackerStatus"
STATUS_HISTORY_KEY = "jobTrackerStatusHistory"
DIGEST_KEY_PREFIX = "jobTrackerDigest_"
TEST_CHECKLIST_KEY = "jobTrackerTestStatus"

HISTORY_LIMIT = 20
DIGEST_SIZE = 10
RECENT_UPDATE_DAYS = 7
DEFAULT_MIN_MATCH_SCORE = 40

# Scoring policy: points per hit and the cap for each criterion.
SCORE_WEIGHTS: dict[str, dict[str, int]] = {
    "role_keyword": {"points": 25, "cap": 50},
    "skill": {"points": 10, "cap": 30},
    "location": {"points": 20, "cap": 20},
}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# Cosmetic pause before the UI shows a freshly generated digest.
DIGEST_DELAY_SECONDS: float = _env_float("JOBTRACKER_DIGEST_DELAY", 0.0)


def load_jobs_data(path: Path | None = None) -> list[dict[str, Any]]:
    """Raw job records from the bundled catalog YAML."""
    path = path or JOBS_PATH
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return list(data.get("jobs", []))


def load_scoring_weights(path: Path | None = None) -> dict[str, dict[str, int]]:
    """SCORE_WEIGHTS merged with any overrides from config/scoring.yaml."""
    path = path or SCORING_PATH
    weights = {k: dict(v) for k, v in SCORE_WEIGHTS.items()}
    if not path.exists():
        return weights
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        log.warning("Ignoring unreadable scoring config %s: %s", path.name, exc)
        return weights
    if not isinstance(data, dict):
        log.warning("Ignoring scoring config %s: expected a mapping", path.name)
        return weights

    for name, override in (data.get("weights") or {}).items():
        if name not in weights or not isinstance(override, dict):
            log.warning("Unknown scoring criterion in %s: %s", path.name, name)
            continue
        for field in ("points", "cap"):
            if field not in override:
                continue
            try:
                weights[name][field] = int(override[field])
            except (TypeError, ValueError):
                log.warning("Ignoring non-numeric %s.%s in %s: %r",
                            name, field, path.name, override[field])
    return weights


def ensure_dirs() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
