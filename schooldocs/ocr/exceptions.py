class OcrError(Exception):
    """Base exception for text extraction failures."""


class OcrTimeoutError(OcrError):
    """Raised when an asynchronous OCR operation does not finish in time."""
