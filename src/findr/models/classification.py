"""Classification result - structured output of the image classifier.

Results are ephemeral: they pre-fill a sighting draft or are discarded.

Example:
    >>> from findr.models.classification import ClassificationResult
    >>> r = ClassificationResult(detected=True, name="Gray Squirrel", confidence=31)
    >>> r.is_confident()
    True
    >>> r.model_copy(update={"confidence": 30}).is_confident()
    False
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from findr.models.base import FindrModel, Rarity
from findr.models.sighting import SightingDraft

# Minimum confidence (exclusive) before the app offers to log a detection.
CONFIDENCE_THRESHOLD = 30

NO_CREATURE_NAME = "No creature detected"


class ClassificationResult(FindrModel):
    """What the model reported about one photo."""

    detected: bool = False
    name: str = NO_CREATURE_NAME
    confidence: int = Field(default=0, ge=0, le=100)
    description: str | None = None
    species: str | None = None
    creature_type: str | None = None
    key_characteristics: str | None = None
    rarity: Rarity | None = None

    @field_validator("rarity", mode="before")
    @classmethod
    def _coerce_rarity(cls, value: Any) -> Rarity | None:
        return None if value is None else Rarity.parse(value)

    def is_confident(self, threshold: int = CONFIDENCE_THRESHOLD) -> bool:
        """Detected, with confidence strictly above ``threshold``."""
        return self.detected and self.confidence > threshold

    def to_draft(self, user_id: str, latitude: float, longitude: float) -> SightingDraft:
        """Pre-fill a sighting draft from this result.

        Example:
            >>> r = ClassificationResult(detected=True, name="Red Fox", creature_type="Mammal")
            >>> r.to_draft("u-1", 1.0, 2.0).type
            'Mammal'
        """
        creature_type = self.creature_type
        if not creature_type or creature_type.lower() in ("none", "unknown"):
            creature_type = "Unknown"
        return SightingDraft(
            user_id=user_id,
            name=self.name,
            type=creature_type,
            latitude=latitude,
            longitude=longitude,
        )
