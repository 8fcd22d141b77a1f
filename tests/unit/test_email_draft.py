from datetime import datetime, timezone
from urllib.parse import unquote

import pytest

from jobtracker.digest import format_digest_text, generate_digest
from jobtracker.email_draft import build_mailto_link, open_email_draft


@pytest.fixture
def digest(sample_jobs, backend_prefs):
    return generate_digest(sample_jobs, backend_prefs, now=datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc))


def test_mailto_link_has_encoded_subject_and_body(digest):
    link = build_mailto_link(digest)
    assert link.startswith("mailto:?subject=My%209AM%20Job%20Digest&body=")

    body = link.split("&body=", 1)[1]
    assert unquote(body) == format_digest_text(digest)


def test_mailto_link_escapes_reserved_characters(digest):
    body = build_mailto_link(digest).split("&body=", 1)[1]
    assert " " not in body
    assert "\n" not in body
    assert "&" not in body
    assert "%0A" in body
    # the em dash in the title is sent as UTF-8
    assert "%E2%80%94" in body
    assert "%25" in body  # the "%" after each match score


def test_custom_subject(digest):
    link = build_mailto_link(digest, subject="Jobs (today)")
    assert link.startswith("mailto:?subject=Jobs%20(today)&body=")


def test_open_email_draft_uses_opener(digest):
    opened = []

    def opener(url):
        opened.append(url)
        return True

    assert open_email_draft(digest, opener=opener) is True
    assert opened == [build_mailto_link(digest)]


def test_open_email_draft_reports_missing_mail_client(digest):
    assert open_email_draft(digest, opener=lambda url: False) is False
