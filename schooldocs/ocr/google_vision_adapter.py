import httpx

from schooldocs.ocr.base import BaseOcrClient
from schooldocs.ocr.exceptions import OcrError
from schooldocs.ocr.models import OcrSubmission


class GoogleVisionOcrAdapter(BaseOcrClient):
    """Google Cloud Vision TEXT_DETECTION over the REST API. Synchronous."""

    ANNOTATE_URL = "https://vision.googleapis.com/v1/images:annotate"

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("google_vision_api_key is required")
        self._api_key = api_key
        self._client = http_client or httpx.AsyncClient(timeout=timeout_seconds)

    async def submit(self, image_url: str) -> OcrSubmission:
        body = {
            "requests": [
                {
                    "image": {"source": {"imageUri": image_url}},
                    "features": [{"type": "TEXT_DETECTION"}],
                }
            ]
        }
        try:
            response = await self._client.post(
                self.ANNOTATE_URL, params={"key": self._api_key}, json=body
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise OcrError(
                f"Google Vision API error: {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise OcrError(f"Google Vision network error: {exc}") from exc
        except ValueError as exc:
            raise OcrError(f"Google Vision returned invalid JSON: {exc}") from exc

        responses = payload.get("responses") or [{}]
        first = responses[0]
        if "error" in first:
            message = first["error"].get("message", "unknown error")
            raise OcrError(f"Google Vision error: {message}")
        annotations = first.get("textAnnotations") or []
        text = annotations[0].get("description", "") if annotations else ""
        return OcrSubmission(text=text)

    async def aclose(self) -> None:
        await self._client.aclose()
