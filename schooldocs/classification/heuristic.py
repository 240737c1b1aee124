import re

from schooldocs.classification.extraction import (
    extract_dates,
    extract_subject,
    extract_teacher,
    generate_tags,
)
from schooldocs.classification.models import (
    ClassificationResult,
    DocumentType,
    ExtractedMetadata,
)

MATCHED_CONFIDENCE = 0.6
UNMATCHED_CONFIDENCE = 0.3

# First match wins.
_RULES: tuple[tuple[DocumentType, re.Pattern[str]], ...] = (
    (DocumentType.PERMISSION_SLIP, re.compile(r"permission\s*slip", re.IGNORECASE)),
    (DocumentType.REPORT_CARD, re.compile(r"report\s*card|grade|gpa", re.IGNORECASE)),
    (DocumentType.HOMEWORK, re.compile(r"homework|worksheet|assignment", re.IGNORECASE)),
    (DocumentType.FLYER, re.compile(r"field trip|pta|fair|event|flyer", re.IGNORECASE)),
)


def classify_document(text: str) -> DocumentType:
    for doc_type, pattern in _RULES:
        if pattern.search(text):
            return doc_type
    return DocumentType.OTHER


class HeuristicClassifier:
    """Keyword classifier with no external dependencies.

    Used on its own or as the fallback when the AI classifier fails.
    """

    def classify(self, text: str) -> ClassificationResult:
        if not text.strip():
            return ClassificationResult(
                classification=DocumentType.OTHER,
                confidence=UNMATCHED_CONFIDENCE,
                summary="No text found in document.",
            )

        classification = classify_document(text)
        due_date, event_date = extract_dates(text, classification)
        teacher = extract_teacher(text)
        subject = extract_subject(text)
        confidence = (
            UNMATCHED_CONFIDENCE
            if classification is DocumentType.OTHER
            else MATCHED_CONFIDENCE
        )
        return ClassificationResult(
            classification=classification,
            confidence=confidence,
            extracted=ExtractedMetadata(
                due_date=due_date,
                event_date=event_date,
                teacher=teacher,
                subject=subject,
            ),
            suggested_tags=generate_tags(text, classification, teacher, subject),
            summary=f"{classification.value} detected from keyword patterns.",
        )
