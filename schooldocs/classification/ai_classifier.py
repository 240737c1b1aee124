"""AI-powered school document classifier with heuristic fallback."""

import json
from pathlib import Path

from schooldocs.classification.base import BaseClassifier
from schooldocs.classification.client_base import BaseClassificationClient
from schooldocs.classification.exceptions import ClassificationError
from schooldocs.classification.extraction import dedupe
from schooldocs.classification.heuristic import HeuristicClassifier
from schooldocs.classification.models import (
    AIResult,
    ClassificationResult,
    FallbackResult,
)
from schooldocs.classification.prompt_loader import load_prompt
from schooldocs.classification.validator import validate_and_build
from schooldocs.logging.logger import Log
from schooldocs.vision.models import VisualSignal

FALLBACK_SUMMARY = "Document classification unavailable - basic analysis used."
FALLBACK_TAG = "document"


class AIClassifier(BaseClassifier):
    """Classifies OCR text with an LLM and falls back to keyword heuristics.

    The fallback is silent: callers always get a ClassificationResult and
    can tell the two paths apart only by its type (AIResult/FallbackResult).
    """

    def __init__(
        self,
        *,
        client: BaseClassificationClient,
        model: str,
        temperature: float = 0.1,
        max_tokens: int = 1000,
        heuristic: HeuristicClassifier | None = None,
        prompt_dir: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._max_tokens = max_tokens
        self._heuristic = heuristic or HeuristicClassifier()
        self._system_prompt = load_prompt("system_prompt.txt", prompt_dir).strip()
        self._prompt_template = load_prompt("classification_prompt.txt", prompt_dir)
        self._visual_template = load_prompt("visual_context.txt", prompt_dir)

    async def classify(
        self,
        text: str,
        visual_signal: VisualSignal | None = None,
    ) -> ClassificationResult:
        try:
            result = await self._classify_with_ai(text, visual_signal)
        except ClassificationError as exc:
            Log.warning(f"AI classification failed, using heuristic fallback: {exc}")
            return self._fallback(text, visual_signal, reason=str(exc))
        Log.info(
            f"AI classification complete: {result.classification.value} "
            f"(confidence {result.confidence:.2f})"
        )
        return result

    async def _classify_with_ai(
        self, text: str, visual_signal: VisualSignal | None
    ) -> AIResult:
        prompt = self._build_prompt(text, visual_signal)
        Log.debug(f"Classification prompt:\n{prompt}")
        raw_response = await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
        )
        Log.debug(f"AI raw response:\n{raw_response}")
        return validate_and_build(self._parse_json(raw_response))

    def _build_prompt(self, text: str, visual_signal: VisualSignal | None) -> str:
        visual_context = ""
        if visual_signal is not None and not visual_signal.is_empty:
            visual_context = self._visual_template.format(
                objects=", ".join(
                    f"{obj.name} ({round(obj.confidence * 100)}%)"
                    for obj in visual_signal.detected_objects
                ),
                tags=", ".join(visual_signal.semantic_tags),
                description=visual_signal.image_description,
            ).rstrip()
        return self._prompt_template.format(ocr_text=text, visual_context=visual_context)

    def _fallback(
        self, text: str, visual_signal: VisualSignal | None, reason: str
    ) -> FallbackResult:
        basic = self._heuristic.classify(text)
        visual_tags = visual_signal.semantic_tags if visual_signal is not None else []
        return FallbackResult(
            classification=basic.classification,
            confidence=basic.confidence,
            extracted=basic.extracted,
            suggested_tags=dedupe([*basic.suggested_tags, *visual_tags, FALLBACK_TAG]),
            summary=FALLBACK_SUMMARY,
            reason=reason,
        )

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise ClassificationError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise ClassificationError("JSON response must be an object")
        return parsed
