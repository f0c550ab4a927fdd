"""Ordered extraction strategies.

A strategy is a pure function `soup -> Optional[T]`. Markup drifts between page
revisions, so each field is described by a list of strategies and the first
non-empty result wins.
"""

from __future__ import annotations

import re
from typing import Callable, List, Optional, Sequence, TypeVar

from bs4 import BeautifulSoup, Tag

T = TypeVar("T")

Strategy = Callable[[BeautifulSoup], Optional[T]]


def first_result(strategies: Sequence[Strategy], soup: BeautifulSoup) -> Optional[T]:
    for strategy in strategies:
        value = strategy(soup)
        if value:
            return value
    return None


def node_text(node: Optional[Tag]) -> str:
    if node is None:
        return ""
    return " ".join(node.get_text(" ", strip=True).split())


def text_of(selector: str, sub_selector: Optional[str] = None) -> Strategy:
    """Text of the first `selector` match (or of its first `sub_selector` child)."""

    def strategy(soup: BeautifulSoup) -> Optional[str]:
        node = soup.select_one(selector)
        if node is not None and sub_selector:
            node = node.select_one(sub_selector)
        return node_text(node) or None

    return strategy


def attr_of(selector: str, attribute: str) -> Strategy:
    """Attribute value of the first `selector` match."""

    def strategy(soup: BeautifulSoup) -> Optional[str]:
        node = soup.select_one(selector)
        if node is None:
            return None
        value = node.get(attribute)
        return value.strip() if isinstance(value, str) and value.strip() else None

    return strategy


def paragraphs_in(selector: str, paragraph_selector: str = "p") -> Strategy:
    """Non-blank paragraph texts inside the first `selector` match, newline-joined."""

    def strategy(soup: BeautifulSoup) -> Optional[str]:
        container = soup.select_one(selector)
        if container is None:
            return None
        parts: List[str] = [node_text(p) for p in container.select(paragraph_selector)]
        body = "\n".join(p for p in parts if p)
        return body or None

    return strategy


_IS_CLAUSE_RE = re.compile(r"^(.*?)\s+is\s+")


def byline_from_bio(selector: str) -> Strategy:
    """Author name from a bio blurb such as "Jane Doe is a senior editor ...".

    Without the "is" clause the first two words are used.
    """

    def strategy(soup: BeautifulSoup) -> Optional[str]:
        text = node_text(soup.select_one(selector))
        if not text:
            return None
        match = _IS_CLAUSE_RE.match(text)
        if match and match.group(1).strip():
            return match.group(1).strip()
        words = text.split()
        if len(words) >= 2:
            return " ".join(words[:2])
        return None

    return strategy
