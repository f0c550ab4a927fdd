"""Provider contracts the enrichment stages depend on."""

from __future__ import annotations

import logging
from typing import List, Protocol, Tuple, Type

from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_exponential


logger = logging.getLogger(__name__)


class EmbeddingProvider(Protocol):
    model: str

    def embed(self, text: str) -> List[float]:
        ...


class TextProvider(Protocol):
    model: str

    def complete(self, system_prompt: str, user_prompt: str, *, json_mode: bool = False) -> str:
        ...


class TransientProviderError(Exception):
    """Retryable failure (timeouts, connection resets, 429/5xx)."""


def provider_retrying(max_retries: int, retry_on: Tuple[Type[BaseException], ...] = (TransientProviderError,)) -> Retrying:
    """Exponential backoff for provider calls; the last error is re-raised."""
    return Retrying(
        stop=stop_after_attempt(max(0, max_retries) + 1),
        wait=wait_exponential(min=1, max=8),
        retry=retry_if_exception_type(retry_on),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
