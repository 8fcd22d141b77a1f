"""Local job tracker: match scoring, filtering, status tracking and a daily digest."""

__version__ = "0.3.0"
