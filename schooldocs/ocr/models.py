from dataclasses import dataclass
from enum import Enum


class OperationStatus(str, Enum):
    NOT_STARTED = "notStarted"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @classmethod
    def parse(cls, value: object) -> "OperationStatus":
        for member in cls:
            if member.value == value:
                return member
        return cls.RUNNING


@dataclass(frozen=True)
class OcrSubmission:
    """Provider answer to a recognition request.

    Exactly one of text (synchronous providers) or operation_url
    (asynchronous providers) is set.
    """

    text: str | None = None
    operation_url: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.text is None


@dataclass(frozen=True)
class OcrOperation:
    status: OperationStatus
    text: str = ""
