from schooldocs.config.settings import Settings
from schooldocs.ocr.azure_read_adapter import AzureReadOcrAdapter
from schooldocs.ocr.base import BaseOcrClient
from schooldocs.ocr.example_adapter import ExampleOcrAdapter
from schooldocs.ocr.extractor import TextExtractor
from schooldocs.ocr.google_vision_adapter import GoogleVisionOcrAdapter


class OcrClientFactory:
    """Creates the configured OCR adapter and text extractor."""

    PROVIDERS = ("azure", "google", "example")

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrClient:
        provider = settings.ocr_provider.lower()
        if provider == "azure":
            return AzureReadOcrAdapter(
                endpoint=settings.azure_vision_endpoint,
                api_key=settings.azure_vision_api_key,
                timeout_seconds=settings.ocr_timeout_seconds,
            )
        if provider == "google":
            return GoogleVisionOcrAdapter(
                api_key=settings.google_vision_api_key,
                timeout_seconds=settings.ocr_timeout_seconds,
            )
        if provider == "example":
            return ExampleOcrAdapter()
        raise ValueError(
            f"Unknown OCR provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )

    @classmethod
    def create_extractor(cls, settings: Settings) -> TextExtractor:
        return TextExtractor(
            client=cls.create(settings),
            poll_interval_seconds=settings.ocr_poll_interval_seconds,
            max_poll_attempts=settings.ocr_max_poll_attempts,
        )
