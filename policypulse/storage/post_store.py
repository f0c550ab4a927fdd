"""Contract every post store implements."""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from policypulse.ingestion.article_types import ArticleRecord


class PostStore(Protocol):
    def exists(self, source_id: str) -> bool:
        ...

    def insert(self, record: ArticleRecord) -> ArticleRecord:
        """Persist a new record; returns it with id and timestamps assigned."""
        ...

    def update_classification(
        self, post_id: int, is_interesting: Optional[bool], metadata_patch: Dict[str, Any]
    ) -> Optional[ArticleRecord]:
        """Set the label and merge `metadata_patch` into metadata. None if the id is unknown."""
        ...
