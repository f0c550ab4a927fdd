"""Classification payload contract.

The classifier model is asked for a strict-JSON object of the form

    {"is_interesting": true, "reasoning": "...", "content_pillar": "SCHEMES", "policy_anchor": "PM-KISAN"}

This module defines:
- A JSON Schema (for validation)
- A helper that turns a validated payload into a `Classification`

Important:
- Models are inconsistent about booleans, so "true"/"false" strings are accepted
  alongside native booleans. Anything else is a contract violation and yields unknown.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator


CONTENT_PILLARS = (
    "SCHEMES",
    "TOOLS",
    "CURRENT AFFAIRS IN INDIA",
    "INDIA AND THE WORLD",
    "RULES, ACTS, BILLS",
    "CASE STUDIES",
)

CLASSIFICATION_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["is_interesting"],
    "properties": {
        "is_interesting": {
            "anyOf": [
                {"type": "boolean"},
                {"type": "string", "enum": ["true", "false"]},
            ]
        },
        "reasoning": {"type": ["string", "null"]},
        "content_pillar": {"type": ["string", "null"]},
        "policy_anchor": {"type": ["string", "null"]},
    },
    "additionalProperties": True,
}


_VALIDATOR = Draft202012Validator(CLASSIFICATION_SCHEMA)


def validate_classification(payload: Any) -> List[str]:
    """Return a list of human-readable validation errors (empty means valid)."""
    errors = []
    for e in sorted(_VALIDATOR.iter_errors(payload), key=lambda x: list(x.path)):
        path = ".".join(str(p) for p in e.path) if e.path else "<root>"
        errors.append(f"{path}: {e.message}")
    return errors


@dataclass(frozen=True)
class Classification:
    """Outcome of one classification attempt. `is_interesting=None` means unknown."""

    is_interesting: Optional[bool]
    reasoning: Optional[str] = None
    content_pillar: Optional[str] = None
    policy_anchor: Optional[str] = None

    @classmethod
    def unknown(cls, reason: str) -> "Classification":
        return cls(is_interesting=None, reasoning=f"Classification failed: {reason}")

    def metadata_patch(self) -> Dict[str, Any]:
        """Keys merged into the stored record's metadata."""
        return {
            "reasoning": self.reasoning,
            "content_pillar": self.content_pillar,
            "policy_anchor": self.policy_anchor,
        }


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def classification_from_payload(payload: Dict[str, Any]) -> Classification:
    """Normalize a payload that already passed `validate_classification`."""
    label = payload["is_interesting"]
    if isinstance(label, str):
        label = label == "true"
    return Classification(
        is_interesting=bool(label),
        reasoning=_optional_text(payload.get("reasoning")),
        content_pillar=_optional_text(payload.get("content_pillar")),
        policy_anchor=_optional_text(payload.get("policy_anchor")),
    )
