"""Voyage embeddings adapter."""

from __future__ import annotations

from typing import List, Optional

import voyageai

from policypulse.errors import EmptyProviderResponse, ProviderError


class VoyageEmbeddingProvider:
    def __init__(self, model: str, *, api_key: str, max_retries: int = 2, timeout_ms: int = 120000, client=None):
        if not api_key and client is None:
            raise ProviderError("VOYAGE_API_KEY not configured")
        self.model = model
        self.client = client or voyageai.Client(api_key=api_key, max_retries=max_retries, timeout=timeout_ms / 1000.0)

    def embed(self, text: str) -> List[float]:
        try:
            res = self.client.embed(texts=[text], model=self.model, input_type="document", truncation=True)
        except Exception as e:
            # voyageai surfaces transport and API errors under several unrelated base classes
            raise ProviderError(f"Voyage embed failed: {e}") from e
        embeddings: Optional[list] = getattr(res, "embeddings", None)
        if not embeddings or not embeddings[0]:
            raise EmptyProviderResponse("No embedding data returned from Voyage")
        return [float(x) for x in embeddings[0]]
