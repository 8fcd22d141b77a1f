"""Streamlit UI for the Job Notification Tracker."""
from __future__ import annotations

import sys
import time
from datetime import date
from pathlib import Path

import pandas as pd
import streamlit as st

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from jobtracker.catalog import (
    all_jobs,
    find_job,
    format_posted,
    unique_experiences,
    unique_locations,
    unique_modes,
    unique_sources,
)
from jobtracker.checklist import CHECK_ITEMS, Checklist
from jobtracker.config import DEFAULT_MIN_MATCH_SCORE, DIGEST_DELAY_SECONDS, ensure_dirs
from jobtracker.digest import DIGEST_FOOTER, DIGEST_TITLE, DigestStore, display_date, format_digest_text, has_matches
from jobtracker.email_draft import build_mailto_link
from jobtracker.log import get_logger
from jobtracker.models import DEFAULT_STATUS, Job, JobStatus, Preferences
from jobtracker.pipeline import FilterCriteria, SortKey, filter_and_sort, update_filter
from jobtracker.preferences import (
    active_preferences,
    has_preferences,
    load_preferences,
    parse_list,
    save_preferences,
)
from jobtracker.saved import SavedJobs
from jobtracker.scorer import match_band, score_jobs
from jobtracker.store import JsonFileStore, default_store
from jobtracker.tracker import StatusTracker

log = get_logger(__name__)

# ── Constants ────────────────────────────────────────────────────────────

CITIES: list[str] = [
    "Bangalore", "Mumbai", "Delhi", "Hyderabad", "Pune", "Chennai",
    "Kolkata", "Gurgaon", "Noida", "Ahmedabad", "Remote",
]

SORT_LABELS: dict[SortKey, str] = {
    SortKey.LATEST: "Latest",
    SortKey.OLDEST: "Oldest",
    SortKey.MATCH_SCORE: "Match Score",
    SortKey.SALARY_HIGH: "Salary: High to Low",
    SortKey.SALARY_LOW: "Salary: Low to High",
}

_BAND_COLORS: dict[str, str] = {
    "strong": "#5A7D5A",
    "good": "#B8860B",
    "fair": "#6B6B6B",
    "low": "#9B9B9B",
}

_CSS = """
<style>
[data-testid="stAppViewContainer"] { background: #F7F6F3; }
h1, h2, h3 { font-family: Georgia, serif; color: #111111; }
.badge {
    padding: 2px 10px; border-radius: 6px; font-size: 0.85rem;
    font-weight: 600; white-space: nowrap;
}
.muted { color: #6B6B6B; font-size: 0.9rem; }
</style>
"""

# ── Helpers ──────────────────────────────────────────────────────────────


@st.cache_resource
def _store() -> JsonFileStore:
    ensure_dirs()
    return default_store()


def _jobs() -> list[Job]:
    return list(all_jobs())


def _criteria() -> FilterCriteria:
    if "criteria" not in st.session_state:
        st.session_state["criteria"] = FilterCriteria()
    return st.session_state["criteria"]


def _set_filter(key: str, widget_key: str) -> None:
    value = st.session_state[widget_key]
    st.session_state["criteria"] = update_filter(_criteria(), key, value)


def _badge(text: str, color: str) -> str:
    return f'<span class="badge" style="color:{color};border:1px solid {color}">{text}</span>'


def _on_status_change(job_id: str, widget_key: str) -> None:
    job = find_job(job_id)
    if job is None:
        return
    status = JobStatus(st.session_state[widget_key])
    if StatusTracker(_store()).set(job_id, status, job.title, job.company):
        st.toast(f"Status updated: {status.value}")


def _on_save_toggle(job_id: str) -> None:
    now_saved = SavedJobs(_store()).toggle(job_id)
    st.toast("Saved" if now_saved else "Removed from saved")


def _job_card(job: Job, score: int | None, status: JobStatus, saved: bool, key_prefix: str) -> None:
    with st.container(border=True):
        c1, c2 = st.columns([4, 1])
        with c1:
            st.markdown(f"### {job.title}")
            st.markdown(f'<span class="muted">{job.company}</span>', unsafe_allow_html=True)
        with c2:
            if score is not None:
                st.markdown(_badge(f"{score}% match", _BAND_COLORS[match_band(score)]), unsafe_allow_html=True)

        st.markdown(
            f'<span class="muted">{job.location} • {job.mode} • {job.experience} years</span>',
            unsafe_allow_html=True,
        )
        st.markdown(f"**{job.salary_range}**")
        if job.skills:
            st.caption(" · ".join(job.skills))
        st.caption(f"{job.source.value} — {format_posted(job.posted_days_ago)}")

        a1, a2, a3 = st.columns([2, 1, 1])
        with a1:
            widget_key = f"{key_prefix}_status_{job.id}"
            options = [s.value for s in JobStatus]
            st.selectbox(
                "Status",
                options,
                index=options.index(status.value),
                key=widget_key,
                on_change=_on_status_change,
                args=(job.id, widget_key),
                label_visibility="collapsed",
            )
        with a2:
            st.button(
                "Unsave" if saved else "Save",
                key=f"{key_prefix}_save_{job.id}",
                on_click=_on_save_toggle,
                args=(job.id,),
                use_container_width=True,
            )
        with a3:
            st.link_button("Apply", job.apply_url, use_container_width=True)


# ── Page: Dashboard ──────────────────────────────────────────────────────


def page_dashboard() -> None:
    st.header("Dashboard")
    st.write("Browse and filter job opportunities. Save jobs to review later or apply directly.")

    store = _store()
    jobs = _jobs()
    prefs = active_preferences(store)
    user_has_prefs = prefs is not None
    min_score = prefs.min_match_score if prefs else DEFAULT_MIN_MATCH_SCORE

    if not user_has_prefs:
        st.info("Set your preferences in **Settings** to activate intelligent matching.")

    criteria = _criteria()
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.text_input("Search title or company", value=criteria.keyword, key="f_keyword",
                      on_change=_set_filter, args=("keyword", "f_keyword"))
    with c2:
        locs = [""] + unique_locations(jobs)
        st.selectbox("Location", locs, index=locs.index(criteria.location), key="f_location",
                     format_func=lambda v: v or "All Locations",
                     on_change=_set_filter, args=("location", "f_location"))
    with c3:
        modes = [""] + unique_modes(jobs)
        st.selectbox("Mode", modes, index=modes.index(criteria.mode), key="f_mode",
                     format_func=lambda v: v or "All Modes",
                     on_change=_set_filter, args=("mode", "f_mode"))
    with c4:
        exps = [""] + unique_experiences(jobs)
        current_exp = "" if criteria.experience is None else criteria.experience
        st.selectbox("Experience", exps, index=exps.index(current_exp), key="f_experience",
                     format_func=lambda v: "All Levels" if v == "" else f"{v} years",
                     on_change=_set_filter, args=("experience", "f_experience"))

    c1, c2, c3, c4 = st.columns(4)
    with c1:
        sources = [""] + unique_sources(jobs)
        st.selectbox("Source", sources, index=sources.index(criteria.source), key="f_source",
                     format_func=lambda v: v or "All Sources",
                     on_change=_set_filter, args=("source", "f_source"))
    with c2:
        statuses = [""] + [s.value for s in JobStatus]
        current_status = criteria.status.value if criteria.status else ""
        st.selectbox("Status", statuses, index=statuses.index(current_status), key="f_status",
                     format_func=lambda v: v or "All Statuses",
                     on_change=_set_filter, args=("status", "f_status"))
    with c3:
        sort_keys = list(SortKey)
        st.selectbox("Sort", sort_keys, index=sort_keys.index(criteria.sort), key="f_sort",
                     format_func=lambda k: SORT_LABELS[k],
                     on_change=_set_filter, args=("sort", "f_sort"))
    with c4:
        st.toggle(f"Show only jobs above {min_score}%", value=criteria.only_matches,
                  key="f_only_matches", disabled=not user_has_prefs,
                  on_change=_set_filter, args=("only_matches", "f_only_matches"))

    scores = score_jobs(jobs, prefs)
    job_statuses = StatusTracker(store).statuses()
    saved_ids = set(SavedJobs(store).ids())
    result = filter_and_sort(
        jobs, _criteria(), scores, job_statuses,
        min_match_score=min_score if user_has_prefs else None,
    )

    st.divider()
    if not result:
        st.info("No roles match your criteria. Adjust filters or lower your match threshold.")
        return

    suffix = f" (above {min_score}% match)" if _criteria().only_matches and user_has_prefs else ""
    st.caption(f"Showing {len(result)} of {len(jobs)} jobs{suffix}")

    cols = st.columns(2)
    for i, job in enumerate(result):
        with cols[i % 2]:
            _job_card(
                job, scores.get(job.id), job_statuses.get(job.id, DEFAULT_STATUS),
                job.id in saved_ids, key_prefix="dash",
            )


# ── Page: Saved ──────────────────────────────────────────────────────────


def page_saved() -> None:
    st.header("Saved Jobs")
    st.write("Jobs you have saved for quick access. They persist between sessions.")

    store = _store()
    saved_jobs = SavedJobs(store).jobs(_jobs())
    if not saved_jobs:
        st.info("No saved jobs yet. Browse the **Dashboard** to find and save jobs.")
        return

    st.caption(f"{len(saved_jobs)} saved job{'s' if len(saved_jobs) != 1 else ''}")
    job_statuses = StatusTracker(store).statuses()
    cols = st.columns(2)
    for i, job in enumerate(saved_jobs):
        with cols[i % 2]:
            _job_card(job, None, job_statuses.get(job.id, DEFAULT_STATUS), True, key_prefix="saved")


# ── Page: Digest ─────────────────────────────────────────────────────────


def page_digest() -> None:
    st.header("Daily Digest")
    store = _store()

    if not has_preferences(store):
        st.warning("Set preferences to generate a personalized digest.")
        st.write("Configure your role keywords, preferred locations, and skills in **Settings**.")
        return

    st.write("Your personalized 9AM job summary based on your preferences.")
    st.caption("Demo mode: the daily 9AM trigger is simulated manually.")

    digests = DigestStore(store)
    digest = digests.load()

    if digest is None:
        if st.button("Generate Today's 9AM Digest (Simulated)", type="primary", use_container_width=True):
            with st.spinner("Generating…"):
                time.sleep(DIGEST_DELAY_SECONDS)
                digests.generate_today(_jobs(), active_preferences(store))
            st.rerun()
    else:
        with st.container(border=True):
            st.subheader(DIGEST_TITLE)
            st.caption(display_date(date.fromisoformat(digest.date)))
            if not has_matches(digest):
                st.write("No matching roles today. Check again tomorrow.")
            else:
                for i, d in enumerate(digest.jobs, 1):
                    c1, c2 = st.columns([4, 1])
                    with c1:
                        st.markdown(f"**#{i} {d.job.title}** — {d.job.company}")
                        st.caption(f"{d.job.location} • {d.job.experience} years exp")
                    with c2:
                        st.markdown(
                            _badge(f"{d.match_score}% match", _BAND_COLORS[match_band(d.match_score)]),
                            unsafe_allow_html=True,
                        )
                        st.link_button("Apply", d.job.apply_url)
            st.caption(DIGEST_FOOTER)

        if has_matches(digest):
            st.markdown("**Copy digest**")
            st.code(format_digest_text(digest), language=None)
            st.link_button("Create Email Draft", build_mailto_link(digest), type="primary")

    updates = StatusTracker(store).recent_updates()
    if updates:
        st.divider()
        st.subheader("Recent Status Updates")
        df = pd.DataFrame([u.to_dict() for u in updates])
        df["changed_at"] = pd.to_datetime(df["changed_at"], errors="coerce")
        st.dataframe(
            df[["job_title", "company", "status", "changed_at"]],
            use_container_width=True,
            column_config={
                "job_title": "Job",
                "company": "Company",
                "status": "Status",
                "changed_at": st.column_config.DatetimeColumn("Changed", format="MMM D, HH:mm"),
            },
            hide_index=True,
        )


# ── Page: Settings ───────────────────────────────────────────────────────


def page_settings() -> None:
    st.header("Settings")
    st.write("Preferences drive the match score on the dashboard and the daily digest.")

    store = _store()
    existing = load_preferences(store) or Preferences()

    with st.form("preferences_form"):
        keywords = st.text_area(
            "Role keywords (comma or one per line)",
            value="\n".join(existing.role_keywords),
            height=100,
            help="Matched against job titles, case-insensitive",
        )
        loc_opts = list(dict.fromkeys(existing.locations + CITIES + unique_locations(_jobs())))
        locations = st.multiselect("Preferred locations", options=loc_opts, default=existing.locations)
        skills = st.text_area(
            "Skills (comma or one per line)",
            value="\n".join(existing.skills),
            height=100,
        )
        min_score = st.slider("Minimum match score", 0, 100, existing.min_match_score)
        save = st.form_submit_button("Save Preferences", type="primary", use_container_width=True)

    if save:
        save_preferences(store, Preferences(
            role_keywords=parse_list(keywords),
            locations=locations,
            skills=parse_list(skills),
            min_match_score=min_score,
        ))
        st.success("Preferences saved!")


# ── Page: Test checklist ─────────────────────────────────────────────────


def page_test() -> None:
    st.header("Test Checklist")
    checklist = Checklist(_store())
    state = checklist.state()
    passed = checklist.passed_count()

    c1, c2 = st.columns([3, 1])
    c1.metric("Tests Passed", f"{passed} / {len(CHECK_ITEMS)}")
    with c2:
        if st.button("Reset Test Status", use_container_width=True):
            checklist.reset()
            st.rerun()

    if passed < len(CHECK_ITEMS):
        st.warning("Resolve all issues before shipping.")
    else:
        st.success("All tests passed. Ready to ship.")

    for item in CHECK_ITEMS:
        checked = st.checkbox(item.label, value=state.get(item.id, False), help=item.hint, key=f"chk_{item.id}")
        if checked != state.get(item.id, False):
            checklist.toggle(item.id)
            st.rerun()


# ── Page: Ship ───────────────────────────────────────────────────────────


def page_ship() -> None:
    st.header("Ship")
    checklist = Checklist(_store())
    if not checklist.ship_unlocked():
        st.error(f"Locked — {checklist.passed_count()} / {len(CHECK_ITEMS)} tests passed.")
        st.write("Return to the test checklist and verify all functionality.")
        return
    st.success("Ready to ship. All tests passed.")
    st.markdown("- Preferences, saved jobs and statuses persisted\n- Match scoring verified\n- Digest verified")


# ── Main ─────────────────────────────────────────────────────────────────


def _inject_css() -> None:
    st.markdown(_CSS, unsafe_allow_html=True)


def _sidebar_status() -> None:
    with st.sidebar:
        st.divider()
        store = _store()
        st.markdown("**Status**")
        st.markdown(("✅" if has_preferences(store) else "⬜") + "  Preferences set")
        st.markdown(f"🔖  {len(SavedJobs(store).ids())} saved")
        applied = sum(1 for s in StatusTracker(store).statuses().values() if s is JobStatus.APPLIED)
        st.markdown(f"📨  {applied} applied")


def _wrap(page):
    def _run() -> None:
        _inject_css()
        _sidebar_status()
        page()
    _run.__name__ = page.__name__
    return _run


pages = [
    st.Page(_wrap(page_dashboard), title="Dashboard", icon="🚀", url_path="dashboard", default=True),
    st.Page(_wrap(page_saved), title="Saved", icon="🔖", url_path="saved"),
    st.Page(_wrap(page_digest), title="Digest", icon="📰", url_path="digest"),
    st.Page(_wrap(page_settings), title="Settings", icon="⚙️", url_path="settings"),
    st.Page(_wrap(page_test), title="Test", icon="🧪", url_path="test"),
    st.Page(_wrap(page_ship), title="Ship", icon="📦", url_path="ship"),
]
nav = st.navigation(pages)
nav.run()
