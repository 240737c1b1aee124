from schooldocs.logging.logger import Log
from schooldocs.vision.base import BaseVisionClient
from schooldocs.vision.exceptions import VisualAnalysisError
from schooldocs.vision.models import VisualSignal


class VisualSignalExtractor:
    """Best-effort visual analysis. Never fails the pipeline.

    With no client configured every call returns the empty signal.
    """

    def __init__(self, client: BaseVisionClient | None) -> None:
        self._client = client

    async def extract(self, image_url: str) -> VisualSignal:
        if self._client is None:
            return VisualSignal.empty()
        try:
            signal = await self._client.analyze(image_url)
        except VisualAnalysisError as exc:
            Log.warning(f"Visual analysis failed, continuing without it: {exc}")
            return VisualSignal.empty()
        Log.info(
            f"Visual analysis: {len(signal.detected_objects)} objects, "
            f"{len(signal.semantic_tags)} tags"
        )
        return signal

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
