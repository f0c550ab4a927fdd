"""Pipeline configuration.

Everything the orchestrator needs is read once from the environment (and an
optional .env file) into an immutable `PipelineConfig` that is passed in at
construction. Nothing downstream reads `os.environ` directly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

from dotenv import load_dotenv

from policypulse.extraction.profiles import MONEYCONTROL


DEFAULT_PG_DSN = "dbname=policypulse user=policypulse password=policypulse host=localhost port=5432"

EMBEDDING_PROVIDERS = ("ollama", "openai", "voyage")
LLM_PROVIDERS = ("ollama", "openai")


def _bool(value: Optional[str], default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _int(env: Mapping[str, str], key: str, default: int, errors: List[str]) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        errors.append(f"{key} must be an integer (got {raw!r})")
        return default


@dataclass(frozen=True)
class PipelineConfig:
    """Configuration for one pipeline instance (all delays/timeouts in milliseconds)."""

    site: str = MONEYCONTROL.name
    listing_urls: Tuple[str, ...] = MONEYCONTROL.listing_urls
    max_articles_per_source: int = 5

    request_timeout_ms: int = 15000
    article_delay_ms: int = 1000
    source_delay_ms: int = 2000
    item_delay_ms: int = 200
    classify_delay_ms: int = 500

    # Scheduler
    scheduler_enabled: bool = True
    schedule_interval_minutes: int = 120
    run_on_startup: bool = False

    # Providers
    embedding_provider: str = "ollama"
    embedding_model: str = "embeddinggemma"
    embedding_max_chars: int = 8000
    llm_provider: str = "ollama"
    classifier_model: str = "gemma3"
    transformer_model: str = "gemma3"
    ollama_base_url: str = "http://localhost:11434"
    openai_api_key: str = field(default="", repr=False)
    openai_base_url: str = ""
    voyage_api_key: str = field(default="", repr=False)
    provider_timeout_ms: int = 120000
    provider_max_retries: int = 2

    # Storage / process
    pg_dsn: str = field(default=DEFAULT_PG_DSN, repr=False)
    log_level: str = "INFO"
    log_file: str = ""
    port: int = 3000

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, *, dotenv: bool = True) -> "PipelineConfig":
        """Load and validate configuration from environment variables"""
        if env is None:
            if dotenv:
                load_dotenv()
            env = os.environ
        errors: List[str] = []

        urls_raw = env.get("LISTING_URLS", "")
        listing_urls = tuple(u.strip() for u in urls_raw.split(",") if u.strip()) or MONEYCONTROL.listing_urls
        llm_model = env.get("LLM_MODEL", "").strip() or "gemma3"

        config = cls(
            site=env.get("SITE_PROFILE", "").strip() or MONEYCONTROL.name,
            listing_urls=listing_urls,
            max_articles_per_source=_int(env, "MAX_ARTICLES_PER_URL", 5, errors),
            request_timeout_ms=_int(env, "REQUEST_TIMEOUT_MS", 15000, errors),
            article_delay_ms=_int(env, "SCRAPING_DELAY_MS", 1000, errors),
            source_delay_ms=_int(env, "SOURCE_DELAY_MS", 2000, errors),
            item_delay_ms=_int(env, "ITEM_DELAY_MS", 200, errors),
            classify_delay_ms=_int(env, "CLASSIFY_DELAY_MS", 500, errors),
            scheduler_enabled=_bool(env.get("ENABLE_SCHEDULER"), True),
            schedule_interval_minutes=_int(env, "SCHEDULE_INTERVAL_MINUTES", 120, errors),
            run_on_startup=_bool(env.get("RUN_ON_STARTUP"), False),
            embedding_provider=(env.get("EMBEDDING_PROVIDER", "").strip().lower() or "ollama"),
            embedding_model=env.get("EMBEDDING_MODEL", "").strip() or "embeddinggemma",
            embedding_max_chars=_int(env, "EMBEDDING_MAX_CHARS", 8000, errors),
            llm_provider=(env.get("LLM_PROVIDER", "").strip().lower() or "ollama"),
            classifier_model=llm_model,
            transformer_model=env.get("CONTENT_TRANSFORMER_MODEL", "").strip() or llm_model,
            ollama_base_url=env.get("OLLAMA_BASE_URL", "").strip() or "http://localhost:11434",
            openai_api_key=env.get("OPENAI_API_KEY", "").strip(),
            openai_base_url=env.get("OPENAI_BASE_URL", "").strip(),
            voyage_api_key=env.get("VOYAGE_API_KEY", "").strip(),
            provider_timeout_ms=_int(env, "PROVIDER_TIMEOUT_MS", 120000, errors),
            provider_max_retries=_int(env, "PROVIDER_MAX_RETRIES", 2, errors),
            pg_dsn=env.get("PG_DSN", "").strip() or DEFAULT_PG_DSN,
            log_level=(env.get("LOG_LEVEL", "").strip().upper() or "INFO"),
            log_file=env.get("LOG_FILE", "").strip(),
            port=_int(env, "PORT", 3000, errors),
        )
        config._validate(errors)
        return config

    def _validate(self, errors: Optional[List[str]] = None) -> None:
        """Validate configuration values"""
        errors = list(errors or [])

        if self.request_timeout_ms < 1000 or self.request_timeout_ms > 300000:
            errors.append("REQUEST_TIMEOUT_MS should be between 1000 and 300000")
        for name, value in (
            ("SCRAPING_DELAY_MS", self.article_delay_ms),
            ("SOURCE_DELAY_MS", self.source_delay_ms),
            ("ITEM_DELAY_MS", self.item_delay_ms),
            ("CLASSIFY_DELAY_MS", self.classify_delay_ms),
        ):
            if value < 0:
                errors.append(f"{name} must not be negative")
        if self.max_articles_per_source < 1:
            errors.append("MAX_ARTICLES_PER_URL must be at least 1")
        if self.schedule_interval_minutes < 1:
            errors.append("SCHEDULE_INTERVAL_MINUTES must be at least 1")
        if self.embedding_max_chars < 1:
            errors.append("EMBEDDING_MAX_CHARS must be at least 1")
        if self.provider_max_retries < 0:
            errors.append("PROVIDER_MAX_RETRIES must not be negative")

        if self.embedding_provider not in EMBEDDING_PROVIDERS:
            errors.append(f"EMBEDDING_PROVIDER must be one of {', '.join(EMBEDDING_PROVIDERS)}")
        if self.llm_provider not in LLM_PROVIDERS:
            errors.append(f"LLM_PROVIDER must be one of {', '.join(LLM_PROVIDERS)}")
        if self.embedding_provider == "voyage" and not self.voyage_api_key:
            errors.append("EMBEDDING_PROVIDER=voyage requires VOYAGE_API_KEY")
        uses_openai = "openai" in (self.embedding_provider, self.llm_provider)
        if uses_openai and not (self.openai_api_key or self.openai_base_url):
            errors.append("OpenAI provider selected but neither OPENAI_API_KEY nor OPENAI_BASE_URL is set")

        for url in self.listing_urls:
            if not url.startswith(("http://", "https://")):
                errors.append(f"Listing URL is not absolute: {url}")

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors)
            raise ValueError(error_msg)
