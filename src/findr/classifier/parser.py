"""Turn the model's free-text reply into a ClassificationResult.

Two tiers, because the JSON shape is only requested:

1. The first ``{...}`` block that parses as a JSON object.
2. Labeled lines (``name:``, ``confidence:``, ...) matched by pattern,
   with ``detected`` inferred from the absence of a "no creature
   detected" phrase.

Example:
    >>> from findr.classifier.parser import parse_response
    >>> r = parse_response('Sure! {"isAnimal": true, "name": "Red Fox", "confidence": 88}')
    >>> (r.detected, r.name, r.confidence)
    (True, 'Red Fox', 88)
    >>> r = parse_response("Name: Mallard\\nConfidence: 72\\nType: Bird")
    >>> (r.detected, r.name, r.confidence, r.creature_type)
    (True, 'Mallard', 72, 'Bird')
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from findr.core.exceptions import ClassificationError
from findr.models.base import Rarity
from findr.models.classification import ClassificationResult

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown Creature"
UNKNOWN_TYPE = "Unknown"
NO_CHARACTERISTICS = "No characteristics identified"

# Tier 2 confidence when the reply carries no number.
FALLBACK_CONFIDENCE = 50
FALLBACK_DESCRIPTION_CHARS = 100

NOT_DETECTED_PHRASES = ("no creature detected", "no animal detected")

NAME_PATTERN = re.compile(r"(?:name|creature|animal):\s*([^\n,]+)", re.IGNORECASE)
CONFIDENCE_PATTERN = re.compile(r"(?:confidence|confidence level):\s*(\d+)", re.IGNORECASE)
TYPE_PATTERN = re.compile(r"(?:type|creature type):\s*([^\n,]+)", re.IGNORECASE)
CHARACTERISTICS_PATTERN = re.compile(r"(?:characteristics|key characteristics):\s*([^\n,]+)", re.IGNORECASE)
RARITY_PATTERN = re.compile(r"(?:rarity):\s*([^\n]+)", re.IGNORECASE)


def parse_response(text: str) -> ClassificationResult:
    """Parse a model reply.

    Raises:
        ClassificationError: The reply is empty, so neither tier applies.
    """
    if not text or not text.strip():
        raise ClassificationError("Empty response from model")

    parsed = extract_json_object(text)
    if parsed is not None:
        return from_json(parsed)

    logger.debug("No JSON object in model reply, falling back to line matching")
    return from_labeled_lines(text)


def extract_json_object(text: str) -> dict[str, Any] | None:
    """First ``{...}`` block of ``text`` that decodes to a JSON object.

    Example:
        >>> extract_json_object('```json\\n{"a": 1}\\n``` and {"b": 2}')
        {'a': 1}
        >>> extract_json_object("no braces here") is None
        True
    """
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            value, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return None


def from_json(data: dict[str, Any]) -> ClassificationResult:
    """Tier 1: map the requested JSON shape, filling placeholders."""
    return ClassificationResult(
        detected=_as_bool(data.get("isAnimal")),
        name=_as_text(data.get("name")) or UNKNOWN_NAME,
        confidence=_as_confidence(data.get("confidence"), default=0),
        description=_as_text(data.get("description")),
        species=_as_text(data.get("species")),
        creature_type=_as_text(data.get("creatureType")) or UNKNOWN_TYPE,
        key_characteristics=_as_text(data.get("keyCharacteristics")) or NO_CHARACTERISTICS,
        rarity=Rarity.parse(data.get("rarity")),
    )


def from_labeled_lines(text: str) -> ClassificationResult:
    """Tier 2: best-effort extraction from ``label: value`` lines."""
    lowered = text.lower()
    detected = not any(phrase in lowered for phrase in NOT_DETECTED_PHRASES)

    confidence_match = CONFIDENCE_PATTERN.search(text)
    rarity_match = RARITY_PATTERN.search(text)

    return ClassificationResult(
        detected=detected,
        name=_first_group(NAME_PATTERN, text) or UNKNOWN_NAME,
        confidence=_as_confidence(confidence_match.group(1), default=FALLBACK_CONFIDENCE)
        if confidence_match
        else FALLBACK_CONFIDENCE,
        description=text.strip()[:FALLBACK_DESCRIPTION_CHARS],
        creature_type=_first_group(TYPE_PATTERN, text) or UNKNOWN_TYPE,
        key_characteristics=_first_group(CHARACTERISTICS_PATTERN, text) or NO_CHARACTERISTICS,
        rarity=Rarity.parse(rarity_match.group(1)) if rarity_match else None,
    )


def _first_group(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    if not match:
        return None
    return match.group(1).strip().strip('"') or None


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def _as_confidence(value: Any, default: int) -> int:
    """Integer percentage clamped to [0, 100].

    Example:
        >>> _as_confidence("87%", 0), _as_confidence(0.5, 0), _as_confidence(140, 0)
        (87, 0, 100)
    """
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, str):
        match = re.search(r"-?\d+(?:\.\d+)?", value)
        if not match:
            return default
        value = match.group(0)
    try:
        number = round(float(value))
    except (TypeError, ValueError):
        return default
    return max(0, min(100, number))
