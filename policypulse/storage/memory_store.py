"""In-process post store, used by tests and dry runs."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from policypulse.errors import DatabaseError
from policypulse.ingestion.article_types import ArticleRecord


class InMemoryPostStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_id: Dict[int, ArticleRecord] = {}
        self._ids_by_source_id: Dict[str, int] = {}
        self._next_id = 1

    def exists(self, source_id: str) -> bool:
        with self._lock:
            return source_id in self._ids_by_source_id

    def insert(self, record: ArticleRecord) -> ArticleRecord:
        now = datetime.now(timezone.utc)
        with self._lock:
            if record.source_id in self._ids_by_source_id:
                raise DatabaseError(f"duplicate key value violates unique constraint: source_id={record.source_id}")
            stored = record.with_changes(
                id=self._next_id,
                metadata=dict(record.metadata or {}),
                created_at=now,
                updated_at=now,
            )
            self._by_id[stored.id] = stored
            self._ids_by_source_id[stored.source_id] = stored.id
            self._next_id += 1
            return stored

    def update_classification(
        self, post_id: int, is_interesting: Optional[bool], metadata_patch: Dict[str, Any]
    ) -> Optional[ArticleRecord]:
        with self._lock:
            current = self._by_id.get(post_id)
            if current is None:
                return None
            merged = dict(current.metadata or {})
            merged.update(metadata_patch or {})
            updated = current.with_changes(
                is_interesting=is_interesting,
                metadata=merged,
                updated_at=datetime.now(timezone.utc),
            )
            self._by_id[post_id] = updated
            return updated

    def get(self, post_id: int) -> Optional[ArticleRecord]:
        with self._lock:
            return self._by_id.get(post_id)

    def get_by_source_id(self, source_id: str) -> Optional[ArticleRecord]:
        with self._lock:
            post_id = self._ids_by_source_id.get(source_id)
            return self._by_id.get(post_id) if post_id is not None else None

    def all(self) -> List[ArticleRecord]:
        with self._lock:
            return [self._by_id[k] for k in sorted(self._by_id)]
