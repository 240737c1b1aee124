from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field

from schooldocs.classification.models import DocumentType


class CreateDocumentRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str = Field(min_length=1)
    title: str = Field(min_length=1, max_length=500)
    storage_paths: list[str] = Field(min_length=1, description="Page storage references in order.")
    child_id: str | None = None


class UpdateDocumentRequest(BaseModel):
    """Partial update. status is checked against the lifecycle, not the schema."""

    model_config = ConfigDict(frozen=True)

    status: str | None = None
    title: str | None = Field(default=None, min_length=1, max_length=500)
    child_id: str | None = None
    doc_type: DocumentType | None = None
    tags: list[str] | None = None
    due_date: date | None = None
    event_date: date | None = None
    teacher: str | None = None
    subject: str | None = None
    error_message: str | None = None


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    child_id: str | None = None
    title: str
    storage_paths: list[str]
    status: str
    doc_type: str
    ocr_text: str | None = None
    tags: list[str] = Field(default_factory=list)
    due_date: date | None = None
    event_date: date | None = None
    teacher: str | None = None
    subject: str | None = None
    error_message: str | None = None
    created_at: datetime | None = None
