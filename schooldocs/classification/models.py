from dataclasses import dataclass, field
from enum import Enum


class DocumentType(str, Enum):
    """Fixed set of school document classifications."""

    HOMEWORK = "Homework"
    PERMISSION_SLIP = "Permission Slip"
    FLYER = "Flyer"
    REPORT_CARD = "Report Card"
    OTHER = "Other"

    @classmethod
    def coerce(cls, value: object) -> "DocumentType":
        """Return the matching member, or OTHER for anything unrecognized."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == value:
                return member
        return cls.OTHER


@dataclass(frozen=True)
class ExtractedMetadata:
    """Structured fields pulled out of a document's text."""

    due_date: str | None = None
    event_date: str | None = None
    teacher: str | None = None
    subject: str | None = None
    grade_level: str | None = None
    urgency: str | None = None
    school_name: str | None = None


@dataclass(frozen=True)
class ClassificationResult:
    """Classifier output. Identical shape whichever classifier produced it."""

    classification: DocumentType
    confidence: float
    extracted: ExtractedMetadata = field(default_factory=ExtractedMetadata)
    suggested_tags: list[str] = field(default_factory=list)
    summary: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "confidence", clamp_confidence(self.confidence))


@dataclass(frozen=True)
class AIResult(ClassificationResult):
    """Result accepted from the AI provider after validation."""


@dataclass(frozen=True)
class FallbackResult(ClassificationResult):
    """Heuristic result used because the AI path failed."""

    reason: str = ""


def clamp_confidence(value: float) -> float:
    return max(0.0, min(1.0, float(value)))
