"""Exception types shared across the ingestion pipeline.

Provider adapters and stores raise these; the pipeline stages catch them and
convert them into typed `StageFailure` values so that one article never takes
down a whole run.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for errors raised by pipeline components."""


class ProviderError(PipelineError):
    """An embedding or text-generation provider call failed."""


class EmptyProviderResponse(ProviderError):
    """The provider answered, but with nothing usable."""


class DatabaseError(PipelineError):
    """Custom exception for persistence operations"""


class RunInProgressError(PipelineError):
    """Raised when a run is requested while another one is still active."""
