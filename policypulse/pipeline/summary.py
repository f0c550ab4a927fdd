"""Run summary: what one pipeline invocation found, stored and failed on."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from policypulse.ingestion.results import FailureKind, StageFailure


@dataclass
class SourceReport:
    listing_url: str
    status: str = "pending"  # ok | failed | empty
    found: int = 0
    new: int = 0
    stored: int = 0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "listing_url": self.listing_url,
            "status": self.status,
            "found": self.found,
            "new": self.new,
            "stored": self.stored,
            "error": self.error,
        }


@dataclass
class RunSummary:
    started_at: datetime
    finished_at: Optional[datetime] = None
    found: int = 0
    new: int = 0
    stored: int = 0
    interesting: int = 0
    failures: Counter = field(default_factory=Counter)
    sources: List[SourceReport] = field(default_factory=list)

    @property
    def elapsed_seconds(self) -> float:
        if self.finished_at is None:
            return 0.0
        return max(0.0, (self.finished_at - self.started_at).total_seconds())

    def record_failure(self, failure: StageFailure) -> None:
        self.failures[failure.kind.value] += 1

    def failure_count(self, kind: FailureKind) -> int:
        return int(self.failures.get(kind.value, 0))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "elapsed_seconds": round(self.elapsed_seconds, 2),
            "found": self.found,
            "new": self.new,
            "stored": self.stored,
            "interesting": self.interesting,
            "failures": dict(self.failures),
            "sources": [s.to_dict() for s in self.sources],
        }

    def log_line(self) -> str:
        failed = ", ".join(f"{k}={v}" for k, v in sorted(self.failures.items())) or "none"
        return (
            f"found={self.found} new={self.new} stored={self.stored} "
            f"interesting={self.interesting} elapsed={self.elapsed_seconds:.2f}s failures: {failed}"
        )
