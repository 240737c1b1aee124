from abc import ABC, abstractmethod

from schooldocs.ocr.exceptions import OcrError
from schooldocs.ocr.models import OcrOperation, OcrSubmission


class BaseOcrClient(ABC):
    """Contract for OCR provider adapters."""

    @abstractmethod
    async def submit(self, image_url: str) -> OcrSubmission:
        """Send an image for recognition.

        Args:
            image_url: Publicly reachable URL of the page image.

        Returns:
            OcrSubmission holding either the text or an operation handle.

        Raises:
            OcrError: on network failure or a non-2xx provider answer.
        """

    async def fetch_operation(self, operation_url: str) -> OcrOperation:
        """Fetch the state of a pending operation.

        Only asynchronous providers override this; synchronous ones raise OcrError.
        """
        raise OcrError(f"{type(self).__name__} does not return operation handles")

    async def aclose(self) -> None:
        """Release network resources held by the adapter."""
