from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass
class DocumentRecord:
    """Represents a row from the documents table."""

    id: str
    user_id: str
    title: str
    storage_paths: list[str]
    status: str
    doc_type: str = "Other"
    child_id: str | None = None
    ocr_text: str | None = None
    tags: list[str] = field(default_factory=list)
    due_date: date | None = None
    event_date: date | None = None
    teacher: str | None = None
    subject: str | None = None
    error_message: str | None = None
    claimed_at: datetime | None = None
    created_at: datetime | None = None
