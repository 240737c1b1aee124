"""Example OCR adapter.

Use this module as a reference when implementing new OCR providers.
Implement BaseOcrClient and register the provider in OcrClientFactory.
"""

from schooldocs.ocr.base import BaseOcrClient
from schooldocs.ocr.models import OcrSubmission


class ExampleOcrAdapter(BaseOcrClient):
    """Returns fixed text without network calls."""

    def __init__(self, text: str = "") -> None:
        self._text = text

    async def submit(self, image_url: str) -> OcrSubmission:
        _ = image_url
        return OcrSubmission(text=self._text)
