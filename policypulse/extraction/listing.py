"""Listing page -> candidate article links."""

from __future__ import annotations

import logging
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from policypulse.extraction.profiles import SiteProfile
from policypulse.extraction.selectors import node_text
from policypulse.ingestion.article_types import CandidateLink
from policypulse.ingestion.url_utils import absolutize_url


logger = logging.getLogger(__name__)


def _find_entries(soup: BeautifulSoup, profile: SiteProfile) -> List[Tag]:
    for container_selector, entry_selector in profile.listing_layouts:
        container = soup.select_one(container_selector)
        if container is None:
            continue
        entries = container.select(entry_selector)
        if entries:
            logger.debug(f"Listing layout {container_selector} {entry_selector} matched {len(entries)} entries")
            return entries
    return []


def _headline(entry: Tag, profile: SiteProfile) -> Optional[Tag]:
    for selector in profile.headline_selectors:
        node = entry.select_one(selector)
        if node is not None:
            return node
    return None


def is_premium(headline: Tag, profile: SiteProfile) -> bool:
    return headline.select_one(f"span.{profile.premium_marker_class}") is not None


def extract_listing(html: str, profile: SiteProfile) -> List[CandidateLink]:
    """Candidate links in document order; premium entries are dropped.

    An unrecognised page yields an empty list, not an error.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    entries = _find_entries(soup, profile)
    if not entries:
        logger.warning("Could not find the news list container. Structure may have changed.")
        return []

    links: List[CandidateLink] = []
    premium = 0
    for entry in entries:
        headline = _headline(entry, profile)
        if headline is None:
            continue
        if is_premium(headline, profile):
            premium += 1
            continue
        anchor = headline.find("a")
        if anchor is None:
            continue
        title = node_text(anchor)
        href = anchor.get("href")
        if not title or not href:
            continue
        links.append(CandidateLink(title=title, url=absolutize_url(href, profile.base_url)))

    if premium:
        logger.info(f"Skipped {premium} premium entries")
    return links
