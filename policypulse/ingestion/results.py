"""Per-stage result values.

Every fallible step of the pipeline returns a `StageResult`: either a value or a
`StageFailure` naming the failure kind. The orchestrator branches on these
instead of relying on exception suppression.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class FailureKind(str, Enum):
    FETCH = "fetch"
    EXTRACTION = "extraction"
    VALIDATION = "validation"
    EMBEDDING = "embedding"
    TRANSFORM = "transform"
    CLASSIFICATION = "classification"
    PERSISTENCE = "persistence"


@dataclass(frozen=True)
class StageFailure:
    kind: FailureKind
    reason: str
    url: Optional[str] = None

    def __str__(self) -> str:
        where = f" ({self.url})" if self.url else ""
        return f"{self.kind.value} failure{where}: {self.reason}"


@dataclass(frozen=True)
class StageResult(Generic[T]):
    value: Optional[T] = None
    failure: Optional[StageFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> "StageResult[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, kind: FailureKind, reason: str, *, url: Optional[str] = None) -> "StageResult[T]":
        return cls(failure=StageFailure(kind=kind, reason=reason, url=url))
