from typing import ClassVar

from schooldocs.classification.ai_classifier import AIClassifier
from schooldocs.classification.base import BaseClassifier
from schooldocs.classification.example_client_adapter import ExampleClientAdapter
from schooldocs.classification.openai_client_adapter import OpenAIClientAdapter
from schooldocs.config.settings import Settings


class ClassifierFactory:
    """Creates the configured classifier with its AI client adapter."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseClassifier:
        """Create a configured classifier from application settings."""
        provider = settings.classification_provider.lower()
        if provider == "example":
            return AIClassifier(
                client=ExampleClientAdapter(),
                model="example",
                temperature=0.0,
            )
        client = OpenAIClientAdapter(
            api_key=settings.classification_api_key,
            timeout_seconds=settings.classification_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )
        return AIClassifier(
            client=client,
            model=settings.classification_model_name,
            temperature=settings.classification_temperature,
            max_tokens=settings.classification_max_tokens,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        configured = settings.classification_base_url.strip()
        if provider == "openai":
            return configured or None
        if provider == "openai_compatible":
            if not configured:
                raise ValueError(
                    "classification_base_url is required for "
                    "classification_provider=openai_compatible"
                )
            return configured
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return configured or default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown classification provider '{provider}'. Choose from: {supported}"
        )
