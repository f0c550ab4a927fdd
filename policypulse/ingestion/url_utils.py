"""URL helpers for ingestion/dedup."""

from __future__ import annotations

import hashlib
from typing import Iterable, Optional
from urllib.parse import parse_qsl, urlencode, urljoin, urlparse, urlunparse


DEFAULT_STRIP_QUERY_PARAMS = {
    # tracking
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
    "utm_id",
    "gclid",
    "fbclid",
    "ref",
    "ref_src",
}


def canonicalize_url(url: str, *, strip_params: Optional[Iterable[str]] = None) -> str:
    """Canonicalize a URL for dedup.

    - Lowercase scheme + hostname
    - Remove fragments
    - Strip common tracking query parameters
    - Preserve order-stable remaining query params
    """
    if not url:
        return ""
    strip = set(strip_params) if strip_params is not None else set(DEFAULT_STRIP_QUERY_PARAMS)
    p = urlparse(url.strip())
    scheme = (p.scheme or "https").lower()
    netloc = (p.netloc or "").lower()
    path = p.path or "/"

    kept = [(k, v) for k, v in parse_qsl(p.query, keep_blank_values=True) if k.lower() not in strip]
    kept.sort(key=lambda kv: (kv[0].lower(), kv[1]))
    query = urlencode(kept, doseq=True)

    return urlunparse((scheme, netloc, path, "", query, ""))


def absolutize_url(href: str, base_url: str) -> str:
    """Resolve a listing href against the site root.

    Absolute and protocol-relative (`//host/path`) links keep their own host.
    """
    href = (href or "").strip()
    return urljoin(base_url.rstrip("/") + "/", href)


def url_hash(url: str) -> str:
    """Stable hash for a canonicalized URL."""
    canon = canonicalize_url(url)
    return hashlib.sha256(canon.encode("utf-8")).hexdigest()


def derive_source_id(source: str, url: str) -> str:
    """Deterministic dedup key: `<source>_<last path segment>`.

    Publisher slugs end in a numeric article id, so the last segment is stable
    across tracking params, fragments and listing pages. URLs without a path
    fall back to a short hash of the canonical URL.
    """
    path = urlparse(canonicalize_url(url)).path
    segments = [s for s in path.split("/") if s]
    stem = segments[-1] if segments else url_hash(url)[:16]
    return f"{source}_{stem}"
