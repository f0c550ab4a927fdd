from __future__ import annotations

import logging
from typing import Set

from policypulse.storage.post_store import PostStore


logger = logging.getLogger(__name__)


class Deduplicator:
    """Filters candidates whose source_id is already stored (or already seen this run).

    `is_new` propagates `DatabaseError` from the store; the caller decides
    whether to skip the candidate. An id whose check failed is not remembered,
    so a later occurrence in the same run is checked again.
    """

    def __init__(self, store: PostStore):
        self.store = store
        self._seen: Set[str] = set()

    def is_new(self, source_id: str) -> bool:
        if source_id in self._seen:
            logger.debug(f"Duplicate within run: {source_id}")
            return False
        exists = self.store.exists(source_id)
        self._seen.add(source_id)
        if exists:
            logger.debug(f"Already stored: {source_id}")
            return False
        return True
