"""Category inference from listing URLs."""

from __future__ import annotations

from typing import Sequence, Tuple

DEFAULT_CATEGORY = "general"

# Checked in order; first fragment contained in the listing URL wins.
CATEGORY_FRAGMENTS: Sequence[Tuple[str, str]] = (
    ("personal-finance", "personal-finance"),
    ("banking", "banking"),
    ("/india/", "india"),
    ("city", "city"),
    ("world", "world"),
    ("politics", "politics"),
    ("defence", "defence"),
    ("economy", "economy"),
)


def category_from_url(listing_url: str, fragments: Sequence[Tuple[str, str]] = CATEGORY_FRAGMENTS) -> str:
    url = (listing_url or "").lower()
    for fragment, category in fragments:
        if fragment in url:
            return category
    return DEFAULT_CATEGORY
