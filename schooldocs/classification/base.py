from abc import ABC, abstractmethod

from schooldocs.classification.models import ClassificationResult
from schooldocs.vision.models import VisualSignal


class BaseClassifier(ABC):
    """Contract for document classifiers used by the pipeline."""

    @abstractmethod
    async def classify(
        self,
        text: str,
        visual_signal: VisualSignal | None = None,
    ) -> ClassificationResult:
        """Classify OCR text, optionally using the image's visual signal.

        Args:
            text: Raw OCR text (may be empty).
            visual_signal: Objects/tags/caption from the vision provider.

        Returns:
            ClassificationResult. Implementations never raise for provider
            failures; they return a FallbackResult instead.
        """
