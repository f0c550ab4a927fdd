"""
Ingestion pipeline orchestrator.

One run walks the configured listing pages in order:

    fetch listing -> extract candidates -> dedup -> fetch article -> extract
      -> embed (raw content) -> Q&A transform -> insert -> classify (merge update)

Sources and items are processed sequentially with politeness delays. Every
stage returns a `StageResult`; only a listing fetch failure ends a source
early, and nothing at item level ends the run.
"""

from __future__ import annotations

import logging
import threading
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from policypulse.config.settings import PipelineConfig
from policypulse.contracts.classification import Classification
from policypulse.enrichment.classification import ClassificationOutcome, ClassificationStage
from policypulse.enrichment.embedding import EmbeddingStage
from policypulse.enrichment.transform import TransformStage
from policypulse.errors import DatabaseError, RunInProgressError
from policypulse.extraction.article import build_record, extract_article
from policypulse.extraction.listing import extract_listing
from policypulse.extraction.profiles import SiteProfile, get_profile
from policypulse.ingestion.article_types import ArticleRecord, CandidateLink
from policypulse.ingestion.fetcher import Fetcher
from policypulse.ingestion.results import FailureKind, StageFailure, StageResult
from policypulse.ingestion.url_utils import derive_source_id
from policypulse.pipeline.dedup import Deduplicator
from policypulse.pipeline.summary import RunSummary, SourceReport
from policypulse.providers.factory import (
    build_classifier_provider,
    build_embedding_provider,
    build_transformer_provider,
)
from policypulse.storage.post_store import PostStore


logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    IDLE = "idle"
    FETCHING_SOURCES = "fetching_sources"
    DEDUPLICATING = "deduplicating"
    ENRICHING = "enriching"
    SUMMARIZING = "summarizing"


def _guarded(kind: FailureKind, url: Optional[str], fn: Callable[[], StageResult]) -> StageResult:
    """Run a stage; unexpected exceptions become a failure of that stage."""
    try:
        return fn()
    except Exception as e:
        logger.exception(f"Unexpected {kind.value} error for {url}")
        return StageResult.fail(kind, f"unexpected error: {e}", url=url)


class IngestionPipeline:
    def __init__(
        self,
        config: PipelineConfig,
        store: PostStore,
        *,
        embedder: EmbeddingStage,
        transformer: TransformStage,
        classifier: ClassificationStage,
        fetcher: Optional[Fetcher] = None,
        profile: Optional[SiteProfile] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.config = config
        self.store = store
        self.embedder = embedder
        self.transformer = transformer
        self.classifier = classifier
        self.fetcher = fetcher or Fetcher(timeout_ms=config.request_timeout_ms)
        self.profile = profile or get_profile(config.site)
        self._sleep = sleep
        self._clock = clock
        self._run_lock = threading.Lock()
        self.state = PipelineState.IDLE
        self.last_summary: Optional[RunSummary] = None

    @classmethod
    def from_config(cls, config: PipelineConfig, store: PostStore, **kwargs) -> "IngestionPipeline":
        """Wire provider-backed stages from configuration."""
        return cls(
            config,
            store,
            embedder=EmbeddingStage(build_embedding_provider(config), max_chars=config.embedding_max_chars),
            transformer=TransformStage(build_transformer_provider(config)),
            classifier=ClassificationStage(build_classifier_provider(config)),
            **kwargs,
        )

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    def _pause(self, delay_ms: int) -> None:
        if delay_ms > 0:
            self._sleep(delay_ms / 1000.0)

    def run(self) -> RunSummary:
        """Execute one complete run. Raises RunInProgressError if one is already active."""
        if not self._run_lock.acquire(blocking=False):
            raise RunInProgressError("An ingestion run is already in progress")
        try:
            summary = RunSummary(started_at=self._clock())
            logger.info(f"Starting ingestion run over {len(self.config.listing_urls)} listing page(s)")
            dedup = Deduplicator(self.store)
            for i, listing_url in enumerate(self.config.listing_urls):
                if i > 0:
                    self._pause(self.config.source_delay_ms)
                report = SourceReport(listing_url=listing_url)
                summary.sources.append(report)
                self._run_source(listing_url, dedup, summary, report)

            self.state = PipelineState.SUMMARIZING
            summary.finished_at = self._clock()
            logger.info(f"Ingestion run complete: {summary.log_line()}")
            for report in summary.sources:
                if report.status == "failed":
                    logger.error(f"Source {report.listing_url} failed: {report.error}")
            self.last_summary = summary
            return summary
        finally:
            self.state = PipelineState.IDLE
            self._run_lock.release()

    def _run_source(self, listing_url: str, dedup: Deduplicator, summary: RunSummary, report: SourceReport) -> None:
        self.state = PipelineState.FETCHING_SOURCES
        logger.info(f"Scraping listing: {listing_url}")
        listing = self.fetcher.get(listing_url)
        if not listing.ok:
            summary.record_failure(listing.failure)
            report.status = "failed"
            report.error = listing.failure.reason
            logger.warning(f"Skipping source: {listing.failure}")
            return

        candidates = extract_listing(listing.value, self.profile)[: self.config.max_articles_per_source]
        report.found = len(candidates)
        summary.found += len(candidates)
        report.status = "ok" if candidates else "empty"
        logger.info(f"Found {len(candidates)} candidate(s) on {listing_url}")

        self.state = PipelineState.DEDUPLICATING
        fresh = []
        for link in candidates:
            source_id = derive_source_id(self.profile.name, link.url)
            try:
                if dedup.is_new(source_id):
                    fresh.append(link)
            except DatabaseError as e:
                summary.record_failure(StageFailure(FailureKind.PERSISTENCE, f"existence check failed: {e}", url=link.url))
                logger.warning(f"Existence check failed for {source_id}: {e}")
        report.new = len(fresh)
        summary.new += len(fresh)
        logger.info(f"{len(fresh)} new article(s) from {listing_url}")

        self.state = PipelineState.ENRICHING
        stored_in_source = 0
        for link in fresh:
            if stored_in_source > 0:
                self._pause(self.config.item_delay_ms)
            stored = self._process_item(link, listing_url, summary)
            if stored is not None:
                stored_in_source += 1
        report.stored = stored_in_source

    def _scrape(self, link: CandidateLink, listing_url: str) -> StageResult[ArticleRecord]:
        self._pause(self.config.article_delay_ms)
        page = self.fetcher.get(link.url)
        if not page.ok:
            return StageResult(failure=page.failure)
        fragment = extract_article(page.value, self.profile, url=link.url)
        if not fragment.ok:
            return StageResult(failure=fragment.failure)
        return StageResult.success(build_record(link, fragment.value, self.profile, listing_url=listing_url, now=self._clock()))

    def _enrich(self, record: ArticleRecord, summary: RunSummary) -> ArticleRecord:
        # The embedding input is captured from the raw record before any transform result is applied.
        raw_title, raw_content = record.title, record.content

        embedded = _guarded(FailureKind.EMBEDDING, record.url, lambda: self.embedder.embed_article(raw_title, raw_content))
        if embedded.ok:
            record = record.with_changes(embedding=embedded.value, embedding_model=self.embedder.model)
        else:
            summary.record_failure(embedded.failure)
            logger.warning(f"Storing {record.source_id} without embedding: {embedded.failure.reason}")

        transformed = _guarded(
            FailureKind.TRANSFORM, record.url, lambda: self.transformer.transform(raw_title, raw_content, record.url)
        )
        if transformed.ok:
            record = record.with_changes(
                content=transformed.value,
                metadata={**record.metadata, "content_transformed": True},
            )
        else:
            summary.record_failure(transformed.failure)
            record = record.with_changes(metadata={**record.metadata, "content_transformed": False})
            logger.warning(f"Keeping raw content for {record.source_id}: {transformed.failure.reason}")
        return record

    def _classify(self, stored: ArticleRecord) -> ClassificationOutcome:
        try:
            return self.classifier.classify(stored.title, stored.content, stored.url)
        except Exception as e:
            logger.exception(f"Unexpected classification error for {stored.url}")
            reason = f"unexpected error: {e}"
            return ClassificationOutcome(
                classification=Classification.unknown(reason),
                failure=StageFailure(FailureKind.CLASSIFICATION, reason, url=stored.url),
            )

    def _process_item(self, link: CandidateLink, listing_url: str, summary: RunSummary) -> Optional[ArticleRecord]:
        scraped = self._scrape(link, listing_url)
        if not scraped.ok:
            summary.record_failure(scraped.failure)
            logger.warning(f"Skipping article: {scraped.failure}")
            return None

        record = self._enrich(scraped.value, summary)

        try:
            stored = self.store.insert(record)
        except DatabaseError as e:
            summary.record_failure(StageFailure(FailureKind.PERSISTENCE, str(e), url=record.url))
            logger.error(f"Failed to store {record.source_id}: {e}")
            return None
        summary.stored += 1
        logger.info(f"Stored post {stored.id}: {stored.title[:80]}")

        self._pause(self.config.classify_delay_ms)
        outcome = self._classify(stored)
        if not outcome.ok:
            summary.record_failure(outcome.failure)

        label = outcome.classification.is_interesting
        try:
            updated = self.store.update_classification(stored.id, label, outcome.classification.metadata_patch())
        except DatabaseError as e:
            summary.record_failure(StageFailure(FailureKind.PERSISTENCE, f"classification update failed: {e}", url=stored.url))
            logger.error(f"Failed to save classification for post {stored.id}: {e}")
            return stored
        if updated is None:
            summary.record_failure(StageFailure(FailureKind.PERSISTENCE, f"post {stored.id} not found", url=stored.url))
            return stored

        if label is True:
            summary.interesting += 1
        logger.info(f"Classified post {stored.id}: is_interesting={label}")
        return updated
