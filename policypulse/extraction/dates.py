"""Best-effort parsing of publisher date strings.

Publisher pages print things like "January 19, 2026 10:30 AM IST" or
"Updated: Jan 19, 2026 10:30 AM IST". We try a direct parse, then a cleaned
parse, then fall back to the ingestion time. This never raises.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil import parser as date_parser


IST = timezone(timedelta(hours=5, minutes=30), "IST")

# Abbreviations dateutil does not resolve on its own.
TZINFOS = {"IST": int(IST.utcoffset(None).total_seconds())}

_LABEL_RE = re.compile(r"\b(?:first\s+)?(?:updated|published)(?:\s+on)?\s*:?", re.IGNORECASE)
_TZ_RE = re.compile(r"\s+IST\b", re.IGNORECASE)


def _to_utc(dt: datetime, assumed_tz: timezone = timezone.utc) -> datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=assumed_tz)
    return dt.astimezone(timezone.utc)


def _try_parse(text: str) -> Optional[datetime]:
    try:
        return date_parser.parse(text, tzinfos=TZINFOS)
    except (ValueError, OverflowError):
        return None


def clean_date_text(text: str) -> str:
    cleaned = _LABEL_RE.sub(" ", text or "")
    cleaned = _TZ_RE.sub("", cleaned)
    return " ".join(cleaned.split())


def parse_published_at(text: Optional[str], *, now: Optional[datetime] = None) -> datetime:
    """Parse a published-time string into an aware UTC datetime.

    Falls back to `now` (default: current UTC time) when nothing parses.
    """
    fallback = now or datetime.now(timezone.utc)
    raw = (text or "").strip()
    if not raw:
        return fallback

    parsed = _try_parse(raw)
    if parsed is not None:
        return _to_utc(parsed)

    # the stripped zone token still tells us which offset the page meant
    assumed = IST if _TZ_RE.search(raw) else timezone.utc
    cleaned = clean_date_text(raw)
    if cleaned:
        parsed = _try_parse(cleaned)
        if parsed is not None:
            return _to_utc(parsed, assumed)

    return fallback
