"""Embedding stage: raw title + content -> vector."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from policypulse.errors import ProviderError
from policypulse.ingestion.results import FailureKind, StageResult
from policypulse.providers.base import EmbeddingProvider


logger = logging.getLogger(__name__)

DEFAULT_MAX_CHARS = 8000


def embedding_input(title: Optional[str], content: Optional[str]) -> str:
    """Text the vector is computed from: always the raw, pre-transform content."""
    return f"{title or ''}\n\n{content or ''}".strip()


@dataclass
class EmbeddingStage:
    provider: EmbeddingProvider
    max_chars: int = DEFAULT_MAX_CHARS

    @property
    def model(self) -> str:
        return self.provider.model

    def embed(self, text: str) -> StageResult[List[float]]:
        text = (text or "").strip()
        if not text:
            return StageResult.fail(FailureKind.VALIDATION, "Text is required for embedding generation")
        if len(text) > self.max_chars:
            logger.debug(f"Truncating embedding input from {len(text)} to {self.max_chars} chars")
            text = text[: self.max_chars]
        try:
            vector = self.provider.embed(text)
        except ProviderError as e:
            logger.warning(f"Embedding generation failed: {e}")
            return StageResult.fail(FailureKind.EMBEDDING, str(e))
        if not vector:
            return StageResult.fail(FailureKind.EMBEDDING, "No embedding data returned")
        return StageResult.success(vector)

    def embed_article(self, title: Optional[str], content: Optional[str]) -> StageResult[List[float]]:
        return self.embed(embedding_input(title, content))
