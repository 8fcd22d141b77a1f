"""Pre-filled email drafts for the daily digest (no mail is sent)."""
from __future__ import annotations

import webbrowser
from typing import Callable
from urllib.parse import quote

from jobtracker.digest import format_digest_text
from jobtracker.log import get_logger
from jobtracker.models import DigestData

log = get_logger(__name__)

DIGEST_EMAIL_SUBJECT = "My 9AM Job Digest"

# Characters left unescaped by a URI-component encoder.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def _encode(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def build_mailto_link(digest: DigestData, subject: str = DIGEST_EMAIL_SUBJECT) -> str:
    body = format_digest_text(digest)
    return f"mailto:?subject={_encode(subject)}&body={_encode(body)}"


def open_email_draft(
    digest: DigestData,
    opener: Callable[[str], bool] = webbrowser.open,
) -> bool:
    """Hand the mailto link to the system mail client."""
    link = build_mailto_link(digest)
    opened = bool(opener(link))
    if opened:
        log.info("Opened email draft (%d chars)", len(link))
    else:
        log.warning("No mail client available for the digest draft")
    return opened
