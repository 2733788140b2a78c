"""Image classifier protocol.

Example:
    >>> from findr.protocols.classifier import ImageClassifier
    >>> hasattr(ImageClassifier, "classify")
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from findr.models.classification import ClassificationResult


@runtime_checkable
class ImageClassifier(Protocol):
    """Turns a photo into a ClassificationResult.

    Implementations raise ``ClassificationError`` for every failure and
    never retry internally.

    See Also:
        findr.classifier.gemini.GeminiClassifier
    """

    async def classify(self, image_uri: str) -> ClassificationResult:
        """Classify the photo at ``image_uri``."""
        ...

    async def classify_bytes(self, data: bytes, mime_type: str = "image/jpeg") -> ClassificationResult:
        """Classify already-loaded image bytes."""
        ...
