"""Row <-> model mapping for the sightings table.

Both directions are pure. ``row_to_sighting`` is total: any missing,
null or empty optional column becomes an absent model field.

Example:
    >>> from findr.sightings.mapping import row_to_sighting
    >>> s = row_to_sighting({
    ...     "id": 7, "user_id": "u-1", "name": "Mallard", "type": "Bird",
    ...     "latitude": 1.0, "longitude": 2.0, "timestamp": "2025-05-01T10:00:00+00:00",
    ...     "confidence": None, "species": "", "rarity": "Unknown",
    ... })
    >>> (s.id, s.confidence, s.species, s.rarity, s.is_animal)
    ('7', 0, None, None, False)
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from findr.models.base import Origin, Rarity
from findr.models.classification import ClassificationResult
from findr.models.sighting import Sighting, SightingDraft, SightingUpdate
from findr.protocols.rows import Row

OPTIONAL_TEXT_COLUMNS = (
    "description",
    "species",
    "creature_type",
    "key_characteristics",
    "image_uri",
)


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _timestamp(row: Row) -> datetime:
    value = row.get("timestamp") or row.get("created_at")
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, str) and value:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return datetime.now(UTC)


def row_to_sighting(row: Row) -> Sighting:
    """Materialize a stored row."""
    confidence = row.get("confidence")
    return Sighting(
        id=str(row["id"]),
        user_id=str(row.get("user_id") or ""),
        name=_text(row.get("name")) or "",
        type=_text(row.get("type")) or "Unknown",
        latitude=float(row.get("latitude") or 0.0),
        longitude=float(row.get("longitude") or 0.0),
        timestamp=_timestamp(row),
        confidence=max(0, min(100, int(confidence))) if confidence is not None else 0,
        rarity=Rarity.parse(row.get("rarity")),
        is_animal=bool(row.get("is_animal") or False),
        origin=Origin.REMOTE,
        **{column: _text(row.get(column)) for column in OPTIONAL_TEXT_COLUMNS},
    )


def sighting_to_row(
    draft: SightingDraft,
    classification: ClassificationResult | None = None,
    image_uri: str | None = None,
    timestamp: datetime | None = None,
) -> Row:
    """Insert payload for a new sighting; the store assigns ``id``.

    Example:
        >>> from findr.models.sighting import SightingDraft
        >>> row = sighting_to_row(SightingDraft(user_id="u", name="Owl", latitude=0, longitude=0))
        >>> row["confidence"], row["is_animal"], row["rarity"]
        (0, False, None)
    """
    ai = classification
    return {
        "user_id": draft.user_id,
        "name": draft.name,
        "type": draft.type,
        "latitude": draft.latitude,
        "longitude": draft.longitude,
        "timestamp": (timestamp or datetime.now(UTC)).isoformat(),
        "confidence": ai.confidence if ai else 0,
        "description": ai.description if ai else None,
        "species": ai.species if ai else None,
        "creature_type": ai.creature_type if ai else None,
        "key_characteristics": ai.key_characteristics if ai else None,
        "rarity": ai.rarity.value if ai and ai.rarity else None,
        "is_animal": ai.detected if ai else False,
        "image_uri": image_uri,
    }


def update_to_row(update: SightingUpdate) -> Row:
    """Columns for a partial update; unset fields are left out.

    Example:
        >>> update_to_row(SightingUpdate(rarity="rarely found in the area"))
        {'rarity': 'Rarely found in the area'}
    """
    row = update.changes()
    if "rarity" in row and row["rarity"] is not None:
        row["rarity"] = Rarity(row["rarity"]).value
    return row


def local_sighting(
    sighting_id: str,
    draft: SightingDraft,
    classification: ClassificationResult | None = None,
    image_uri: str | None = None,
    timestamp: datetime | None = None,
) -> Sighting:
    """Sighting synthesized without the hosted store."""
    ai = classification
    return Sighting(
        id=sighting_id,
        user_id=draft.user_id,
        name=draft.name,
        type=draft.type,
        latitude=draft.latitude,
        longitude=draft.longitude,
        timestamp=timestamp or datetime.now(UTC),
        confidence=ai.confidence if ai else 0,
        description=ai.description if ai else None,
        species=ai.species if ai else None,
        creature_type=ai.creature_type if ai else None,
        key_characteristics=ai.key_characteristics if ai else None,
        rarity=ai.rarity if ai else None,
        is_animal=ai.detected if ai else False,
        image_uri=image_uri,
        origin=Origin.LOCAL_PENDING,
    )
