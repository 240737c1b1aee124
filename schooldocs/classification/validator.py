"""Validates parsed AI JSON and builds an AIResult."""

import math
from typing import Any

from schooldocs.classification.exceptions import ClassificationValidationError
from schooldocs.classification.extraction import normalize_date, to_iso_date
from schooldocs.classification.models import AIResult, DocumentType, ExtractedMetadata

_REQUIRED_FIELDS = ("classification", "confidence", "suggestedTags", "summary")
_URGENCY_LEVELS = frozenset({"low", "medium", "high"})

# snake_case key -> camelCase alias some models answer with
_EXTRACTED_KEYS = {
    "due_date": "dueDate",
    "event_date": "eventDate",
    "teacher": "teacher",
    "subject": "subject",
    "grade_level": "gradeLevel",
    "urgency": "urgency",
    "school_name": "schoolName",
}


def validate_and_build(data: dict[str, Any]) -> AIResult:
    """Validate raw parsed JSON and build an AIResult.

    Confidence is clamped to [0, 1] and unknown classifications become Other.

    Raises:
        ClassificationValidationError: on any missing field or wrong shape.
    """
    _require_top_level_fields(data)
    return AIResult(
        classification=DocumentType.coerce(data["classification"]),
        confidence=_build_confidence(data["confidence"]),
        extracted=_build_extracted(data.get("extracted")),
        suggested_tags=_build_tags(data["suggestedTags"]),
        summary=_build_summary(data["summary"]),
    )


def _require_top_level_fields(data: dict[str, Any]) -> None:
    for field in _REQUIRED_FIELDS:
        if data.get(field) is None:
            raise ClassificationValidationError(f"Missing required top-level field: {field}")


def _build_confidence(raw: Any) -> float:
    if isinstance(raw, bool):
        raise ClassificationValidationError("'confidence' must be a number")
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ClassificationValidationError("'confidence' must be a number") from exc
    if math.isnan(value):
        raise ClassificationValidationError("'confidence' must not be NaN")
    return value


def _build_tags(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        raise ClassificationValidationError("'suggestedTags' must be a list")
    return [item.strip() for item in raw if isinstance(item, str) and item.strip()]


def _build_summary(raw: Any) -> str:
    if not isinstance(raw, str):
        raise ClassificationValidationError("'summary' must be a string")
    return raw.strip()


def _build_extracted(raw: Any) -> ExtractedMetadata:
    if raw is None:
        return ExtractedMetadata()
    if not isinstance(raw, dict):
        raise ClassificationValidationError("'extracted' must be an object or null")
    values = {
        key: _optional_text(raw.get(key, raw.get(alias)))
        for key, alias in _EXTRACTED_KEYS.items()
    }
    values["due_date"] = _iso_date_or_none(values["due_date"])
    values["event_date"] = _iso_date_or_none(values["event_date"])
    urgency = values["urgency"]
    values["urgency"] = urgency.lower() if urgency and urgency.lower() in _URGENCY_LEVELS else None
    return ExtractedMetadata(**values)


def _optional_text(raw: Any) -> str | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return str(raw)
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return None


def _iso_date_or_none(raw: str | None) -> str | None:
    if raw is None:
        return None
    return to_iso_date(normalize_date(raw))
