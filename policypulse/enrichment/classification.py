"""
Classification stage.

Asks the text provider for a strict-JSON relevance decision and normalizes it
into a `Classification`. Any failure (provider error, unparseable output,
contract violation) yields an "unknown" label rather than `False`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from policypulse.contracts.classification import (
    Classification,
    classification_from_payload,
    validate_classification,
)
from policypulse.enrichment.prompts import CLASSIFIER_SYSTEM_PROMPT, format_classification_prompt
from policypulse.errors import ProviderError
from policypulse.ingestion.results import FailureKind, StageFailure
from policypulse.providers.base import TextProvider


logger = logging.getLogger(__name__)


class ClassificationParseError(ValueError):
    pass


def parse_classification_response(text: str) -> Any:
    """Parse the model output as JSON, falling back to the first decodable {...} object."""
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        pass
    text = text or ""
    decoder = json.JSONDecoder()
    last_error: Optional[ValueError] = None
    idx = text.find("{")
    while idx != -1:
        try:
            obj, _ = decoder.raw_decode(text, idx)
            return obj
        except ValueError as e:
            last_error = e
        idx = text.find("{", idx + 1)
    if last_error is None:
        raise ClassificationParseError("Could not parse LLM response as JSON")
    raise ClassificationParseError(f"Could not parse LLM response as JSON: {last_error}") from last_error


@dataclass(frozen=True)
class ClassificationOutcome:
    classification: Classification
    failure: Optional[StageFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass
class ClassificationStage:
    provider: TextProvider

    def _fail(self, reason: str, url: Optional[str]) -> ClassificationOutcome:
        logger.warning(f"Error classifying article {url}: {reason}")
        return ClassificationOutcome(
            classification=Classification.unknown(reason),
            failure=StageFailure(kind=FailureKind.CLASSIFICATION, reason=reason, url=url),
        )

    def classify(self, title: Optional[str], content: Optional[str], url: Optional[str]) -> ClassificationOutcome:
        prompt = format_classification_prompt(title, content, url)
        try:
            raw = self.provider.complete(CLASSIFIER_SYSTEM_PROMPT, prompt, json_mode=True)
        except ProviderError as e:
            return self._fail(str(e), url)

        try:
            payload = parse_classification_response(raw)
        except ClassificationParseError as e:
            return self._fail(str(e), url)

        errors = validate_classification(payload)
        if errors:
            return self._fail("Invalid classification payload: " + "; ".join(errors), url)

        return ClassificationOutcome(classification=classification_from_payload(payload))
