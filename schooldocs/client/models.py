from dataclasses import dataclass
from enum import Enum


class UploadStatus(str, Enum):
    UPLOADING = "uploading"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadProgress:
    """Snapshot of one upload as shown to listeners."""

    id: str
    title: str
    progress: int
    status: UploadStatus
    error: str | None = None
    document_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "progress", max(0, min(100, int(self.progress))))

    @property
    def is_finished(self) -> bool:
        return self.status in (UploadStatus.COMPLETED, UploadStatus.FAILED)
