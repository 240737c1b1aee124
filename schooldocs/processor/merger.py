from datetime import date

from schooldocs.classification.models import ClassificationResult
from schooldocs.logging.logger import Log
from schooldocs.processor.models import DocumentUpdate
from schooldocs.vision.models import VisualSignal

MAX_TAGS = 10


class MetadataMerger:
    """Combines the classification result and visual signal into a DocumentUpdate."""

    def merge(
        self,
        result: ClassificationResult,
        visual_signal: VisualSignal,
        ocr_text: str,
    ) -> DocumentUpdate:
        extracted = result.extracted
        return DocumentUpdate(
            doc_type=result.classification.value,
            ocr_text=ocr_text,
            tags=merge_tags(
                result.suggested_tags,
                visual_signal.semantic_tags,
                [obj.name for obj in visual_signal.detected_objects],
            ),
            due_date=_as_date(extracted.due_date, "due_date"),
            event_date=_as_date(extracted.event_date, "event_date"),
            teacher=extracted.teacher,
            subject=extracted.subject,
        )


def merge_tags(*groups: list[str], limit: int = MAX_TAGS) -> list[str]:
    """Concatenate tag groups: lowercase, strip, drop empties, dedupe, cap."""
    merged: list[str] = []
    for group in groups:
        for raw in group:
            tag = raw.strip().lower()
            if tag and tag not in merged:
                merged.append(tag)
    return merged[:limit]


def _as_date(value: str | None, field_name: str) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        Log.warning(f"Dropping {field_name} '{value}': not a YYYY-MM-DD date")
        return None
