"""Text extraction: submit a page image and wait for its OCR text."""

import asyncio
from collections.abc import Awaitable, Callable

from schooldocs.logging.logger import Log
from schooldocs.ocr.base import BaseOcrClient
from schooldocs.ocr.exceptions import OcrError, OcrTimeoutError
from schooldocs.ocr.models import OperationStatus

Sleep = Callable[[float], Awaitable[None]]


class TextExtractor:
    """Runs OCR for one or more page images.

    Asynchronous providers are polled every poll_interval_seconds for at
    most max_poll_attempts attempts. The wait happens before each poll.
    """

    def __init__(
        self,
        client: BaseOcrClient,
        *,
        poll_interval_seconds: float = 1.0,
        max_poll_attempts: int = 10,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._client = client
        self._poll_interval_seconds = poll_interval_seconds
        self._max_poll_attempts = max_poll_attempts
        self._sleep = sleep

    async def extract(self, image_url: str) -> str:
        """Return the text of a single image ("" when it has none).

        Raises:
            OcrError: provider failure or a failed operation.
            OcrTimeoutError: the operation did not finish within the attempts.
        """
        submission = await self._client.submit(image_url)
        if not submission.is_pending:
            return submission.text or ""
        if not submission.operation_url:
            raise OcrError("OCR provider returned neither text nor an operation handle")
        return await self._poll(submission.operation_url)

    async def extract_pages(self, image_urls: list[str]) -> str:
        """Extract every page in order and join the texts with newlines."""
        texts = []
        for index, url in enumerate(image_urls, start=1):
            text = await self.extract(url)
            Log.debug(f"OCR page {index}/{len(image_urls)}: {len(text)} chars")
            texts.append(text)
        return "\n".join(texts)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _poll(self, operation_url: str) -> str:
        for _attempt in range(self._max_poll_attempts):
            await self._sleep(self._poll_interval_seconds)
            operation = await self._client.fetch_operation(operation_url)
            if operation.status is OperationStatus.SUCCEEDED:
                return operation.text
            if operation.status is OperationStatus.FAILED:
                raise OcrError("OCR processing failed")
        raise OcrTimeoutError(
            f"OCR processing timed out after {self._max_poll_attempts} attempts"
        )
