"""Shared ingestion data types."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class CandidateLink:
    """One entry of a listing page; lives only for a single extraction pass."""

    title: str
    url: str


@dataclass(frozen=True)
class ArticleFragment:
    """What the article page itself tells us (before provenance is attached)."""

    body: str
    author: Optional[str] = None
    published_text: Optional[str] = None


@dataclass(frozen=True)
class ArticleRecord:
    """Normalized article: the unit of work and the unit of storage.

    `is_interesting` is tri-state: True / False once classified, None while
    unknown (never classified, or classification failed).
    `embedding` is always computed from the raw scraped content, even when
    `content` has since been replaced by the Q&A transform.
    """

    source: str
    source_id: str
    title: str
    content: str
    url: str
    published_at: datetime
    author: Optional[str] = None
    embedding: Optional[List[float]] = None
    embedding_model: Optional[str] = None
    is_interesting: Optional[bool] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def embedding_dimensions(self) -> Optional[int]:
        return len(self.embedding) if self.embedding else None

    def with_changes(self, **changes: Any) -> "ArticleRecord":
        return replace(self, **changes)
