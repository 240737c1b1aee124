from typing import Any

import httpx
from pydantic import ValidationError

from schooldocs.api.schemas import DocumentResponse
from schooldocs.client.exceptions import DocumentApiError


class DocumentApiClient:
    """Async HTTP client for the Document API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"), timeout=timeout_seconds
        )

    async def create_document(
        self,
        *,
        user_id: str,
        title: str,
        storage_paths: list[str],
        child_id: str | None = None,
    ) -> DocumentResponse:
        payload: dict[str, Any] = {
            "user_id": user_id,
            "title": title,
            "storage_paths": storage_paths,
        }
        if child_id is not None:
            payload["child_id"] = child_id
        return await self._request("POST", "/documents", json=payload)

    async def get_document(self, document_id: str) -> DocumentResponse:
        return await self._request("GET", f"/documents/{document_id}")

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> DocumentResponse:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            return DocumentResponse.model_validate(response.json())
        except httpx.HTTPStatusError as exc:
            raise DocumentApiError(
                _error_detail(exc.response), status_code=exc.response.status_code
            ) from exc
        except httpx.HTTPError as exc:
            raise DocumentApiError(f"Document API network error: {exc}") from exc
        except (ValueError, ValidationError) as exc:
            raise DocumentApiError(f"Document API returned an invalid document: {exc}") from exc


def _error_detail(response: httpx.Response) -> str:
    try:
        detail = response.json().get("detail")
    except (ValueError, AttributeError):
        detail = None
    return str(detail or f"Document API error: {response.status_code}")
