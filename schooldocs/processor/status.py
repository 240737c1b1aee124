"""Document status lifecycle: processing -> processed | failed."""

from enum import Enum

from schooldocs.processor.exceptions import InvalidStatusTransitionError


class DocumentStatus(str, Enum):
    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({DocumentStatus.PROCESSED, DocumentStatus.FAILED})

_ALLOWED_TRANSITIONS: dict[DocumentStatus, frozenset[DocumentStatus]] = {
    DocumentStatus.PROCESSING: TERMINAL_STATUSES,
    DocumentStatus.PROCESSED: frozenset(),
    DocumentStatus.FAILED: frozenset(),
}


def ensure_transition(current: str, target: str) -> DocumentStatus:
    """Validate a status change and return the target status.

    Raises:
        InvalidStatusTransitionError: if either status is unknown or the
            change is not processing -> processed/failed.
    """
    try:
        current_status = DocumentStatus(current)
        target_status = DocumentStatus(target)
    except ValueError as exc:
        raise InvalidStatusTransitionError(f"Unknown document status: {exc}") from exc
    if target_status not in _ALLOWED_TRANSITIONS[current_status]:
        raise InvalidStatusTransitionError(
            f"Illegal status transition {current_status.value} -> {target_status.value}"
        )
    return target_status
