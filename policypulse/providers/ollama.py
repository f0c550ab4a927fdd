"""
Ollama provider client.

Thin HTTP client over Ollama's native REST API (/api/embed and /api/chat).
Non-streaming only, so every call returns one complete answer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

import requests

from policypulse.errors import EmptyProviderResponse, ProviderError
from policypulse.providers.base import TransientProviderError, provider_retrying


logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_URL = "http://localhost:11434"


@dataclass
class OllamaClient:
    """
    HTTP client for a local or remote Ollama server.

    Example:
        >>> client = OllamaClient(model="gemma3")
        >>> client.complete("You are terse.", "What is 2+2?")
    """

    model: str
    base_url: str = DEFAULT_OLLAMA_URL
    timeout_ms: int = 120000
    max_retries: int = 2
    session: requests.Session = field(default_factory=requests.Session)

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url.rstrip('/')}{path}"
        for attempt in provider_retrying(self.max_retries):
            with attempt:
                try:
                    resp = self.session.post(url, json=payload, timeout=self.timeout_ms / 1000.0)
                except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                    raise TransientProviderError(f"Ollama request to {path} failed: {e}") from e
                if resp.status_code == 429 or resp.status_code >= 500:
                    raise TransientProviderError(f"Ollama {path} returned HTTP {resp.status_code}")
                if resp.status_code >= 400:
                    raise ProviderError(f"Ollama {path} returned HTTP {resp.status_code}: {resp.text[:200]}")
                try:
                    return resp.json()
                except ValueError as e:
                    raise ProviderError(f"Ollama {path} returned non-JSON body") from e
        raise ProviderError(f"Ollama {path} gave no response")

    def embed(self, text: str) -> List[float]:
        try:
            data = self._post("/api/embed", {"model": self.model, "input": text})
        except TransientProviderError as e:
            raise ProviderError(str(e)) from e
        embeddings = data.get("embeddings") or []
        if not embeddings or not embeddings[0]:
            raise EmptyProviderResponse("No embedding data returned from Ollama")
        return [float(x) for x in embeddings[0]]

    def complete(self, system_prompt: str, user_prompt: str, *, json_mode: bool = False) -> str:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "stream": False,
        }
        if json_mode:
            payload["format"] = "json"
        try:
            data = self._post("/api/chat", payload)
        except TransientProviderError as e:
            raise ProviderError(str(e)) from e
        content = ((data.get("message") or {}).get("content") or "").strip()
        if not content:
            raise EmptyProviderResponse("No response content from Ollama")
        return content
