"""Example classification client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseClassificationClient and register the provider in ClassifierFactory.
"""

import json
from typing import ClassVar

from schooldocs.classification.client_base import BaseClassificationClient


class ExampleClientAdapter(BaseClassificationClient):
    """Example adapter that returns a fixed valid classification JSON.

    No network calls. Useful for local development and tests.
    """

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "classification": "Other",
        "confidence": 0.5,
        "extracted": {},
        "suggestedTags": ["document", "school"],
        "summary": "Example classification without an AI provider.",
    }

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        _ = model, temperature, max_tokens, system_prompt, user_prompt
        return json.dumps(self.DEFAULT_RESPONSE)
