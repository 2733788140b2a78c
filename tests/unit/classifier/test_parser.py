"""Tests for the two-tier model reply parser."""

from __future__ import annotations

import pytest

from findr.classifier.parser import (
    NO_CHARACTERISTICS,
    UNKNOWN_NAME,
    UNKNOWN_TYPE,
    extract_json_object,
    parse_response,
)
from findr.core.exceptions import ClassificationError
from findr.models.base import Rarity

FULL_REPLY = """Here is my analysis:
```json
{
  "isAnimal": true,
  "name": "Northern Cardinal",
  "species": "Cardinalis cardinalis",
  "creatureType": "Bird",
  "keyCharacteristics": "Bright red plumage, crest, orange beak",
  "rarity": "Commonly found in the area",
  "description": "A songbird common in eastern North America.",
  "confidence": 92
}
```"""


# =============================================================================
# Tier 1: JSON
# =============================================================================


class TestJsonTier:
    """Replies carrying a JSON object."""

    def test_full_reply(self) -> None:
        r = parse_response(FULL_REPLY)
        assert r.detected is True
        assert r.name == "Northern Cardinal"
        assert r.species == "Cardinalis cardinalis"
        assert r.creature_type == "Bird"
        assert r.rarity is Rarity.COMMON
        assert r.confidence == 92
        assert r.is_confident()

    def test_no_creature(self) -> None:
        r = parse_response('{"isAnimal": false, "confidence": 0}')
        assert r.detected is False
        assert r.confidence == 0
        assert not r.is_confident()

    def test_defaults_for_missing_fields(self) -> None:
        r = parse_response('{"isAnimal": true}')
        assert r.name == UNKNOWN_NAME
        assert r.creature_type == UNKNOWN_TYPE
        assert r.key_characteristics == NO_CHARACTERISTICS
        assert r.confidence == 0

    def test_confidence_clamped(self) -> None:
        assert parse_response('{"isAnimal": true, "confidence": 250}').confidence == 100
        assert parse_response('{"isAnimal": true, "confidence": -5}').confidence == 0

    def test_confidence_as_string(self) -> None:
        assert parse_response('{"isAnimal": true, "confidence": "85%"}').confidence == 85

    def test_unknown_rarity_unset(self) -> None:
        assert parse_response('{"isAnimal": true, "rarity": "Extinct"}').rarity is None

    def test_rarity_case_insensitive(self) -> None:
        r = parse_response('{"isAnimal": true, "rarity": "not supposed to be found in the area"}')
        assert r.rarity is Rarity.UNEXPECTED

    def test_first_valid_object_wins(self) -> None:
        assert extract_json_object('{broken {"a": 1} {"b": 2}') == {"a": 1}

    def test_non_object_json_ignored(self) -> None:
        assert extract_json_object("[1, 2] and nothing else") is None


# =============================================================================
# Tier 2: labeled lines
# =============================================================================


class TestLabeledLinesTier:
    """Replies without any JSON object."""

    def test_labeled_reply(self) -> None:
        text = "Name: Gray Squirrel\nConfidence: 78\nType: Mammal\nCharacteristics: bushy tail\nRarity: Commonly found in the area"
        r = parse_response(text)
        assert r.detected is True
        assert r.name == "Gray Squirrel"
        assert r.confidence == 78
        assert r.creature_type == "Mammal"
        assert r.key_characteristics == "bushy tail"
        assert r.rarity is Rarity.COMMON

    def test_defaults(self) -> None:
        text = "I think this is some kind of bird but I cannot tell which one from this angle at all, sorry about that friend."
        r = parse_response(text)
        assert r.detected is True
        assert r.name == UNKNOWN_NAME
        assert r.creature_type == UNKNOWN_TYPE
        assert r.key_characteristics == NO_CHARACTERISTICS
        assert r.confidence == 50
        assert r.description == text[:100]

    def test_no_creature_phrase(self) -> None:
        r = parse_response("No creature detected in this image.")
        assert r.detected is False
        assert not r.is_confident()

    def test_no_animal_phrase(self) -> None:
        assert parse_response("Sorry, NO ANIMAL DETECTED.").detected is False


class TestEmptyReply:
    """Neither tier applies."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_fails(self, text: str) -> None:
        with pytest.raises(ClassificationError):
            parse_response(text)
