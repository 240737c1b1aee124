from typing import Any

import httpx

from schooldocs.ocr.base import BaseOcrClient
from schooldocs.ocr.exceptions import OcrError
from schooldocs.ocr.models import OcrOperation, OcrSubmission, OperationStatus


class AzureReadOcrAdapter(BaseOcrClient):
    """Azure Computer Vision Read API (v3.2) adapter.

    The Read API is asynchronous: analyze returns 202 with an
    Operation-Location header that is polled for the result.
    """

    READ_PATH = "/vision/v3.2/read/analyze"

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
        self._client = http_client or httpx.AsyncClient(timeout=timeout_seconds)
        self._headers = {"Ocp-Apim-Subscription-Key": api_key}

    async def submit(self, image_url: str) -> OcrSubmission:
        response = await self._request(
            "POST",
            f"{self._endpoint}{self.READ_PATH}",
            json={"url": image_url},
        )
        operation_url = response.headers.get("Operation-Location")
        if not operation_url:
            raise OcrError("No operation location returned from Azure OCR")
        return OcrSubmission(operation_url=operation_url)

    async def fetch_operation(self, operation_url: str) -> OcrOperation:
        response = await self._request("GET", operation_url)
        try:
            payload = response.json()
        except ValueError as exc:
            raise OcrError(f"Azure OCR returned invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise OcrError("Azure OCR returned an unexpected payload")
        status = OperationStatus.parse(payload.get("status"))
        if status is not OperationStatus.SUCCEEDED:
            return OcrOperation(status=status)
        return OcrOperation(status=status, text=self._collect_text(payload))

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, headers=self._headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise OcrError(
                f"Azure OCR API error: {exc.response.status_code} {exc.response.reason_phrase}"
            ) from exc
        except httpx.HTTPError as exc:
            raise OcrError(f"Azure OCR network error: {exc}") from exc
        return response

    @staticmethod
    def _collect_text(payload: dict[str, Any]) -> str:
        analyze_result = payload.get("analyzeResult") or {}
        lines = [
            line.get("text", "")
            for page in analyze_result.get("readResults") or []
            for line in page.get("lines") or []
        ]
        return " ".join(text for text in lines if text).strip()
