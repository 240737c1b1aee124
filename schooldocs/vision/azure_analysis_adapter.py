from typing import Any

import httpx

from schooldocs.vision.base import BaseVisionClient
from schooldocs.vision.exceptions import VisualAnalysisError
from schooldocs.vision.models import DetectedObject, VisualSignal

TAG_CONFIDENCE_THRESHOLD = 0.5


class AzureImageAnalysisAdapter(BaseVisionClient):
    """Azure Computer Vision Analyze Image (v3.2) adapter."""

    ANALYZE_PATH = "/vision/v3.2/analyze"
    VISUAL_FEATURES = "Objects,Tags,Description,Categories"

    def __init__(
        self,
        *,
        endpoint: str,
        api_key: str,
        timeout_seconds: int,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not endpoint or not api_key:
            raise ValueError("azure_vision_endpoint and azure_vision_api_key are required")
        self._endpoint = endpoint.rstrip("/")
        self._api_key = api_key
        self._client = http_client or httpx.AsyncClient(timeout=timeout_seconds)

    async def analyze(self, image_url: str) -> VisualSignal:
        try:
            response = await self._client.post(
                f"{self._endpoint}{self.ANALYZE_PATH}",
                params={"visualFeatures": self.VISUAL_FEATURES},
                headers={"Ocp-Apim-Subscription-Key": self._api_key},
                json={"url": image_url},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise VisualAnalysisError(
                f"Azure image analysis error: {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise VisualAnalysisError(f"Azure image analysis network error: {exc}") from exc
        except ValueError as exc:
            raise VisualAnalysisError(f"Azure image analysis returned invalid JSON: {exc}") from exc

        if not isinstance(payload, dict):
            raise VisualAnalysisError("Azure image analysis returned an unexpected payload")
        try:
            return self._build_signal(payload)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise VisualAnalysisError(f"Malformed image analysis payload: {exc}") from exc

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _build_signal(payload: dict[str, Any]) -> VisualSignal:
        objects = [
            DetectedObject(name=str(item["object"]), confidence=float(item["confidence"]))
            for item in payload.get("objects") or []
        ]
        tags = [
            str(item["name"])
            for item in payload.get("tags") or []
            if float(item.get("confidence", 0.0)) > TAG_CONFIDENCE_THRESHOLD
        ]
        captions = (payload.get("description") or {}).get("captions") or []
        description = str(captions[0].get("text", "")) if captions else ""
        return VisualSignal(
            detected_objects=objects,
            semantic_tags=tags,
            image_description=description,
        )
