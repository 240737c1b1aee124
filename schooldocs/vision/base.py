from abc import ABC, abstractmethod

from schooldocs.vision.models import VisualSignal


class BaseVisionClient(ABC):
    """Contract for image-analysis provider adapters."""

    @abstractmethod
    async def analyze(self, image_url: str) -> VisualSignal:
        """Detect objects, tags and a caption for the image.

        Raises:
            VisualAnalysisError: on any provider, network or payload failure.
        """

    async def aclose(self) -> None:
        """Release network resources held by the adapter."""
