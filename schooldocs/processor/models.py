from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class DocumentUpdate:
    """Fields written onto a Document when the pipeline succeeds."""

    doc_type: str
    ocr_text: str
    tags: list[str] = field(default_factory=list)
    due_date: date | None = None
    event_date: date | None = None
    teacher: str | None = None
    subject: str | None = None
