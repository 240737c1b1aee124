from schooldocs.config.settings import Settings
from schooldocs.vision.azure_analysis_adapter import AzureImageAnalysisAdapter
from schooldocs.vision.base import BaseVisionClient
from schooldocs.vision.extractor import VisualSignalExtractor


class VisionClientFactory:
    """Creates the configured vision adapter. "none" disables the stage."""

    PROVIDERS = ("azure", "none")

    @classmethod
    def create(cls, settings: Settings) -> BaseVisionClient | None:
        provider = settings.vision_provider.lower()
        if provider == "none":
            return None
        if provider == "azure":
            return AzureImageAnalysisAdapter(
                endpoint=settings.azure_vision_endpoint,
                api_key=settings.azure_vision_api_key,
                timeout_seconds=settings.vision_timeout_seconds,
            )
        raise ValueError(
            f"Unknown vision provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )

    @classmethod
    def create_extractor(cls, settings: Settings) -> VisualSignalExtractor:
        return VisualSignalExtractor(cls.create(settings))
