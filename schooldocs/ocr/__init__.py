from schooldocs.ocr.base import BaseOcrClient
from schooldocs.ocr.extractor import TextExtractor
from schooldocs.ocr.factory import OcrClientFactory

__all__ = ["BaseOcrClient", "OcrClientFactory", "TextExtractor"]
