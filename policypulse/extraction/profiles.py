"""Site profiles: where each field lives on a publisher's pages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from policypulse.extraction.selectors import (
    Strategy,
    attr_of,
    byline_from_bio,
    paragraphs_in,
    text_of,
)


@dataclass(frozen=True)
class SiteProfile:
    name: str
    base_url: str
    listing_urls: Tuple[str, ...]
    # (container selector, entry selector) pairs, tried in order
    listing_layouts: Tuple[Tuple[str, str], ...]
    headline_selectors: Tuple[str, ...]
    premium_marker_class: str
    body_strategies: Sequence[Strategy]
    author_strategies: Sequence[Strategy]
    published_strategies: Sequence[Strategy]


MONEYCONTROL = SiteProfile(
    name="moneycontrol",
    base_url="https://www.moneycontrol.com",
    listing_urls=(
        "https://www.moneycontrol.com/news/business/personal-finance/",
        "https://www.moneycontrol.com/news/politics/",
        "https://www.moneycontrol.com/news/business/economy/",
    ),
    listing_layouts=(
        # "cagetory" is the id Moneycontrol actually ships
        ("#cagetory", "li.clearfix"),
        ("#category", "li.clearfix"),
        ("ul.listing", "li"),
    ),
    headline_selectors=("h2", "h3"),
    premium_marker_class="isPremiumCrown",
    body_strategies=(
        paragraphs_in("#contentdata"),
        paragraphs_in(".content_wrapper"),
        paragraphs_in(".arti-flow"),
    ),
    author_strategies=(
        text_of(".article_author", "a"),
        byline_from_bio(".content_block"),
    ),
    published_strategies=(
        text_of(".article_schedule"),
        text_of(".tags_last_line"),
        attr_of('meta[property="article:published_time"]', "content"),
    ),
)

PROFILES = {MONEYCONTROL.name: MONEYCONTROL}


def get_profile(name: str) -> SiteProfile:
    try:
        return PROFILES[name]
    except KeyError:
        raise ValueError(f"Unknown site profile: {name!r} (known: {', '.join(sorted(PROFILES))})") from None
