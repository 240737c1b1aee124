from dataclasses import dataclass, field


@dataclass(frozen=True)
class DetectedObject:
    """Object located in the image by the vision provider."""

    name: str
    confidence: float


@dataclass(frozen=True)
class VisualSignal:
    """Image-level metadata independent of OCR.

    semantic_tags are already filtered to the provider's confident tags.
    """

    detected_objects: list[DetectedObject] = field(default_factory=list)
    semantic_tags: list[str] = field(default_factory=list)
    image_description: str = ""

    @classmethod
    def empty(cls) -> "VisualSignal":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not (self.detected_objects or self.semantic_tags or self.image_description)
