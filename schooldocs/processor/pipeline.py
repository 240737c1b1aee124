from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from schooldocs.classification.models import ClassificationResult
from schooldocs.database.models import DocumentRecord
from schooldocs.processor.models import DocumentUpdate
from schooldocs.vision.models import VisualSignal


@dataclass(slots=True)
class PipelineContext:
    document: DocumentRecord
    image_urls: list[str] = field(default_factory=list)
    ocr_text: str = ""
    visual_signal: VisualSignal = field(default_factory=VisualSignal.empty)
    classification: ClassificationResult | None = None
    update: DocumentUpdate | None = None
    error_message: str = ""

    @property
    def document_id(self) -> str:
        return self.document.id


class PipelineStep(ABC):
    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release resources owned by the step."""
