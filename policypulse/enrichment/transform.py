"""Transform stage: raw article content -> public-facing Q&A explainer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from policypulse.enrichment.prompts import TRANSFORMER_SYSTEM_PROMPT, format_content_to_qa_prompt
from policypulse.errors import ProviderError
from policypulse.ingestion.results import FailureKind, StageResult
from policypulse.providers.base import TextProvider


logger = logging.getLogger(__name__)


@dataclass
class TransformStage:
    provider: TextProvider

    def transform(self, title: Optional[str], content: Optional[str], url: Optional[str]) -> StageResult[str]:
        try:
            prompt = format_content_to_qa_prompt(title, content, url)
        except ValueError as e:
            return StageResult.fail(FailureKind.TRANSFORM, str(e), url=url)
        try:
            transformed = self.provider.complete(TRANSFORMER_SYSTEM_PROMPT, prompt).strip()
        except ProviderError as e:
            logger.warning(f"Q&A transform failed for {url}: {e}")
            return StageResult.fail(FailureKind.TRANSFORM, str(e), url=url)
        if not transformed:
            return StageResult.fail(FailureKind.TRANSFORM, "LLM returned empty content for Q&A transformation", url=url)
        return StageResult.success(transformed)
