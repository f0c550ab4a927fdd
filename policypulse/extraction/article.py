"""Article page -> body text, author and published-time text."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

import trafilatura
from bs4 import BeautifulSoup

from policypulse.extraction.categories import category_from_url
from policypulse.extraction.dates import parse_published_at
from policypulse.extraction.profiles import SiteProfile
from policypulse.extraction.selectors import first_result
from policypulse.ingestion.article_types import ArticleFragment, ArticleRecord, CandidateLink
from policypulse.ingestion.results import FailureKind, StageResult
from policypulse.ingestion.url_utils import derive_source_id


logger = logging.getLogger(__name__)


def _generic_main_text(html: str) -> Optional[str]:
    """Last-resort body extraction for layouts none of the profile selectors know."""
    text = trafilatura.extract(html, include_comments=False, include_tables=False)
    if not text:
        return None
    lines = [line.strip() for line in text.splitlines()]
    return "\n".join(line for line in lines if line) or None


def extract_article(html: str, profile: SiteProfile, *, url: Optional[str] = None) -> StageResult[ArticleFragment]:
    if not (html or "").strip():
        return StageResult.fail(FailureKind.EXTRACTION, "empty_html", url=url)

    soup = BeautifulSoup(html, "html.parser")
    body = first_result(profile.body_strategies, soup)
    if not body:
        body = _generic_main_text(html)
        if body:
            logger.info(f"Profile selectors missed the body; used generic extraction for {url}")
    if not body:
        return StageResult.fail(FailureKind.EXTRACTION, "content container not found", url=url)

    return StageResult.success(
        ArticleFragment(
            body=body,
            author=first_result(profile.author_strategies, soup),
            published_text=first_result(profile.published_strategies, soup),
        )
    )


def build_record(
    link: CandidateLink,
    fragment: ArticleFragment,
    profile: SiteProfile,
    *,
    listing_url: str,
    now: Optional[datetime] = None,
) -> ArticleRecord:
    """Attach provenance to an extracted fragment, producing the storable record."""
    scraped_at = now or datetime.now(timezone.utc)
    return ArticleRecord(
        source=profile.name,
        source_id=derive_source_id(profile.name, link.url),
        title=link.title,
        content=fragment.body or link.title,
        url=link.url,
        author=fragment.author or None,
        published_at=parse_published_at(fragment.published_text, now=scraped_at),
        metadata={
            "category": category_from_url(listing_url),
            "raw_published_text": fragment.published_text,
            "scraped_from": listing_url,
            "scraped_at": scraped_at.isoformat(),
        },
    )
