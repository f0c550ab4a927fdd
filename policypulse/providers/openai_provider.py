"""OpenAI (or any OpenAI-compatible endpoint) chat + embedding adapters."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import openai

from policypulse.errors import EmptyProviderResponse, ProviderError
from policypulse.providers.base import TransientProviderError, provider_retrying


logger = logging.getLogger(__name__)

_TRANSIENT = (
    openai.APIConnectionError,
    openai.APITimeoutError,
    openai.RateLimitError,
    openai.InternalServerError,
)


class OpenAIProvider:
    """Implements both provider contracts on top of `openai.OpenAI`.

    `base_url` lets the same adapter talk to OpenRouter or a local server that
    speaks the OpenAI protocol.
    """

    def __init__(
        self,
        model: str,
        *,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_ms: int = 120000,
        max_retries: int = 2,
        temperature: float = 0.3,
        client: Optional[openai.OpenAI] = None,
    ):
        self.model = model
        self.max_retries = max_retries
        self.temperature = temperature
        # SDK-level retries are disabled; retries go through tenacity so they are logged uniformly
        self.client = client or openai.OpenAI(
            api_key=api_key,
            base_url=base_url or None,
            timeout=timeout_ms / 1000.0,
            max_retries=0,
        )

    def _call(self, fn, **kwargs: Any) -> Any:
        try:
            for attempt in provider_retrying(self.max_retries):
                with attempt:
                    try:
                        return fn(**kwargs)
                    except _TRANSIENT as e:
                        raise TransientProviderError(str(e)) from e
        except TransientProviderError as e:
            raise ProviderError(f"OpenAI call failed after retries: {e}") from e
        except openai.OpenAIError as e:
            raise ProviderError(f"OpenAI API error: {e}") from e
        raise ProviderError("OpenAI call gave no response")

    def embed(self, text: str) -> List[float]:
        response = self._call(self.client.embeddings.create, model=self.model, input=[text])
        if not response.data or not response.data[0].embedding:
            raise EmptyProviderResponse("No embedding data returned")
        return [float(x) for x in response.data[0].embedding]

    def complete(self, system_prompt: str, user_prompt: str, *, json_mode: bool = False) -> str:
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        response = self._call(self.client.chat.completions.create, **kwargs)
        content = (response.choices[0].message.content or "").strip() if response.choices else ""
        if not content:
            raise EmptyProviderResponse("No response content from LLM")
        return content
