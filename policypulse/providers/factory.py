from __future__ import annotations

import logging

from policypulse.config.settings import PipelineConfig
from policypulse.providers.base import EmbeddingProvider, TextProvider
from policypulse.providers.ollama import OllamaClient
from policypulse.providers.openai_provider import OpenAIProvider
from policypulse.providers.voyage_provider import VoyageEmbeddingProvider


logger = logging.getLogger(__name__)


def _text_provider(config: PipelineConfig, model: str) -> TextProvider:
    if config.llm_provider == "openai":
        return OpenAIProvider(
            model,
            api_key=config.openai_api_key or "not-needed",
            base_url=config.openai_base_url or None,
            timeout_ms=config.provider_timeout_ms,
            max_retries=config.provider_max_retries,
        )
    return OllamaClient(
        model=model,
        base_url=config.ollama_base_url,
        timeout_ms=config.provider_timeout_ms,
        max_retries=config.provider_max_retries,
    )


def build_embedding_provider(config: PipelineConfig) -> EmbeddingProvider:
    logger.info(f"Embedding provider: {config.embedding_provider} ({config.embedding_model})")
    if config.embedding_provider == "voyage":
        return VoyageEmbeddingProvider(
            config.embedding_model,
            api_key=config.voyage_api_key,
            max_retries=config.provider_max_retries,
            timeout_ms=config.provider_timeout_ms,
        )
    if config.embedding_provider == "openai":
        return OpenAIProvider(
            config.embedding_model,
            api_key=config.openai_api_key or "not-needed",
            base_url=config.openai_base_url or None,
            timeout_ms=config.provider_timeout_ms,
            max_retries=config.provider_max_retries,
        )
    return OllamaClient(
        model=config.embedding_model,
        base_url=config.ollama_base_url,
        timeout_ms=config.provider_timeout_ms,
        max_retries=config.provider_max_retries,
    )


def build_classifier_provider(config: PipelineConfig) -> TextProvider:
    logger.info(f"Classifier provider: {config.llm_provider} ({config.classifier_model})")
    return _text_provider(config, config.classifier_model)


def build_transformer_provider(config: PipelineConfig) -> TextProvider:
    logger.info(f"Content transformer provider: {config.llm_provider} ({config.transformer_model})")
    return _text_provider(config, config.transformer_model)
