"""Bounded-timeout page fetching.

Policy:
- One attempt per call; retries and pacing belong to the pipeline.
- Every failure (bad URL, timeout, connection error, non-200) comes back as a
  FETCH `StageFailure`, never as an exception.
"""

from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional
from urllib.parse import urlparse

import requests

from policypulse.ingestion.results import FailureKind, StageResult


logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml",
}

_PRIVATE_NETS = [
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("169.254.0.0/16"),
    ipaddress.ip_network("0.0.0.0/8"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
    ipaddress.ip_network("fe80::/10"),
]


def _is_private_ip(hostname: str) -> bool:
    try:
        ip = ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return any(ip in net for net in _PRIVATE_NETS)


def validate_fetch_url(url: str) -> Optional[str]:
    """Return an error string if the URL should not be fetched."""
    try:
        p = urlparse(url)
    except ValueError:
        return "invalid_url"
    if p.scheme not in ("http", "https"):
        return "bad_scheme"
    host = (p.hostname or "").strip().lower()
    if not host:
        return "missing_host"
    if host in ("localhost", "localhost.localdomain"):
        return "blocked_host"
    if _is_private_ip(host):
        return "blocked_private_ip"
    return None


@dataclass
class Fetcher:
    """Thin wrapper over a `requests.Session` returning `StageResult[str]`."""

    timeout_ms: int = 15000
    max_bytes: int = 3_000_000
    headers: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_HEADERS))
    session: requests.Session = field(default_factory=requests.Session)

    def get(self, url: str) -> StageResult[str]:
        if not url:
            return StageResult.fail(FailureKind.FETCH, "empty_url", url=url)
        err = validate_fetch_url(url)
        if err:
            return StageResult.fail(FailureKind.FETCH, err, url=url)

        timeout = max(self.timeout_ms, 1) / 1000.0
        try:
            resp = self.session.get(url, headers=self.headers, timeout=timeout, allow_redirects=True, stream=True)
        except requests.exceptions.Timeout:
            return StageResult.fail(FailureKind.FETCH, f"timeout after {timeout:.1f}s", url=url)
        except requests.exceptions.RequestException as e:
            return StageResult.fail(FailureKind.FETCH, f"request_error: {e}", url=url)

        try:
            if resp.status_code != 200:
                return StageResult.fail(FailureKind.FETCH, f"http_{resp.status_code}", url=url)
            # Size guardrail: stop reading once past max_bytes
            content = b""
            for chunk in resp.iter_content(chunk_size=64 * 1024):
                if not chunk:
                    continue
                content += chunk
                if len(content) > self.max_bytes:
                    return StageResult.fail(FailureKind.FETCH, "too_large", url=url)
        except requests.exceptions.RequestException as e:
            return StageResult.fail(FailureKind.FETCH, f"request_error: {e}", url=url)
        finally:
            resp.close()

        try:
            html = content.decode(resp.encoding or "utf-8", errors="replace")
        except LookupError:
            html = content.decode("utf-8", errors="replace")
        if not html.strip():
            return StageResult.fail(FailureKind.FETCH, "empty_html", url=url)
        logger.debug(f"Fetched {url} ({len(content)} bytes)")
        return StageResult.success(html)
