"""Deterministic text-pattern extraction of dates, teacher, subject and tags."""

import re
from datetime import datetime

from schooldocs.classification.models import DocumentType

_FULL_MONTHS = (
    "january|february|march|april|may|june|july|"
    "august|september|october|november|december"
)
_SHORT_MONTHS = "jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec"

# Order matters: at equal positions the earlier pattern wins.
_DATE_PATTERNS = (
    re.compile(r"(?<!\d)\d{1,2}/\d{1,2}/\d{4}"),
    re.compile(r"(?<!\d)\d{1,2}/\d{1,2}/\d{2}(?!\d)"),
    re.compile(rf"\b(?:{_FULL_MONTHS})\s+\d{{1,2}},?\s+\d{{4}}", re.IGNORECASE),
    re.compile(rf"\b(?:{_SHORT_MONTHS})\s+\d{{1,2}},?\s+\d{{4}}", re.IGNORECASE),
)
_DATE_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%y",
    "%B %d, %Y",
    "%B %d %Y",
    "%b %d, %Y",
    "%b %d %Y",
)

_DUE_CONTEXT = re.compile(r"(?:due|return\s+by|submit\s+by)[\s:]*[^.\n]+", re.IGNORECASE)
_EVENT_CONTEXT = re.compile(
    r"(?:event|meet|pta|concert|performance|trip)[\s:]*[^.\n]+", re.IGNORECASE
)

_TEACHER_LABEL = re.compile(
    r"teacher\s*:\s*((?:(?:mrs|mr|ms|mx|dr)\.\s*)?[^\n.]+)", re.IGNORECASE
)
_TEACHER_HONORIFIC = re.compile(r"\b(?:mrs|mr|ms|mx)\.\s+[a-z]+", re.IGNORECASE)
_LAST_NAME = re.compile(r"([a-z]+)$", re.IGNORECASE)

_SUBJECT_LABEL = re.compile(r"subject\s*:\s*([^\n.]+)", re.IGNORECASE)
SUBJECT_KEYWORDS = (
    "math",
    "reading",
    "writing",
    "science",
    "social studies",
    "art",
    "music",
    "pe",
    "english",
)

TAG_KEYWORDS = ("pta", "field trip", "homework", "test", "quiz", "project", "assignment")
_GRADE_LEVEL = re.compile(r"(\d+)(st|nd|rd|th)\s+grade", re.IGNORECASE)


def find_dates(text: str) -> list[str]:
    """Return date literals in order of appearance."""
    found: list[tuple[int, int, str]] = []
    for priority, pattern in enumerate(_DATE_PATTERNS):
        for match in pattern.finditer(text):
            found.append((match.start(), priority, match.group(0)))
    found.sort()
    dates: list[str] = []
    seen_positions: set[int] = set()
    for position, _priority, literal in found:
        if position in seen_positions:
            continue
        seen_positions.add(position)
        dates.append(literal)
    return dates


def normalize_date(literal: str) -> str:
    """Convert a date literal to YYYY-MM-DD, or return it unchanged."""
    cleaned = " ".join(literal.split())
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date().isoformat()
        except ValueError:
            continue
    return literal


def to_iso_date(value: str) -> str | None:
    """Return value as a zero-padded YYYY-MM-DD string, or None if it is not one."""
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date().isoformat()
    except ValueError:
        return None


def extract_dates(
    text: str, classification: DocumentType
) -> tuple[str | None, str | None]:
    """Pick (due_date, event_date) from the text's date literals."""
    dates = find_dates(text)
    if not dates:
        return None, None
    first = normalize_date(dates[0])
    due_date = first if _DUE_CONTEXT.search(text) else None
    event_date = first if _EVENT_CONTEXT.search(text) else None
    if due_date is None and event_date is None:
        if classification is DocumentType.HOMEWORK:
            due_date = first
        elif classification is DocumentType.FLYER:
            event_date = first
    return due_date, event_date


def extract_teacher(text: str) -> str | None:
    match = _TEACHER_LABEL.search(text)
    if match:
        teacher = match.group(1).strip(" \t,;:")
        if teacher:
            return teacher
    match = _TEACHER_HONORIFIC.search(text)
    if match:
        return match.group(0).strip()
    return None


def extract_subject(text: str) -> str | None:
    match = _SUBJECT_LABEL.search(text)
    if match:
        subject = match.group(1).strip(" \t,;:")
        if subject:
            return subject
    lower_text = text.lower()
    for keyword in SUBJECT_KEYWORDS:
        if re.search(rf"\b{re.escape(keyword)}\b", lower_text):
            return keyword.capitalize()
    return None


def generate_tags(
    text: str,
    classification: DocumentType,
    teacher: str | None = None,
    subject: str | None = None,
) -> list[str]:
    tags = [classification.value.lower()]
    if subject:
        tags.append(subject.lower())
    if teacher:
        last_name = _LAST_NAME.search(teacher.strip())
        if last_name:
            tags.append(last_name.group(1).lower())

    lower_text = text.lower()
    for keyword in TAG_KEYWORDS:
        if keyword in lower_text:
            tags.append(keyword.replace(" ", "-"))

    grade = _GRADE_LEVEL.search(text)
    if grade:
        tags.append(f"{grade.group(1)}{grade.group(2).lower()}-grade")

    return dedupe(tags)


def dedupe(items: list[str]) -> list[str]:
    """Remove duplicates, keeping the first occurrence."""
    return list(dict.fromkeys(items))
