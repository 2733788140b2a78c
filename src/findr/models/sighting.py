"""Sighting model - one logged creature observation.

Sightings are created by the capture flow, replaced wholesale after an
update, and deleted explicitly. ``origin`` records whether the hosted
store accepted the record or it is a local fallback awaiting sync.

Example:
    >>> from findr.models.sighting import Sighting
    >>> s = Sighting(
    ...     id="b6f1",
    ...     user_id="u-1",
    ...     name="Red Cardinal",
    ...     type="Bird",
    ...     latitude=40.7,
    ...     longitude=-74.0,
    ...     rarity="rarely found in the area",
    ... )
    >>> s.rarity.is_rare
    True
    >>> s.confidence
    0
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import Field, field_validator

from findr.models.base import FindrModel, Origin, Rarity


def _parse_rarity(value: Any) -> Rarity | None:
    if value is None:
        return None
    return Rarity.parse(value)


class SightingDraft(FindrModel):
    """User-supplied fields of a sighting before it is persisted."""

    user_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, description="Common name")
    type: str = Field(default="Unknown", description="Coarse category, e.g. Bird")
    latitude: float
    longitude: float


class Sighting(FindrModel):
    """A materialized sighting.

    Latitude and longitude are accepted as given. AI fields default to
    empty values when no classification was attached.
    """

    id: str = Field(..., min_length=1, frozen=True)
    user_id: str
    name: str
    type: str
    latitude: float
    longitude: float
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    confidence: int = Field(default=0, ge=0, le=100)
    description: str | None = None
    species: str | None = None
    creature_type: str | None = None
    key_characteristics: str | None = None
    rarity: Rarity | None = None
    is_animal: bool = False
    image_uri: str | None = None

    origin: Origin = Origin.REMOTE

    @field_validator("rarity", mode="before")
    @classmethod
    def _coerce_rarity(cls, value: Any) -> Rarity | None:
        return _parse_rarity(value)

    @property
    def is_rare(self) -> bool:
        """Rarely found, or not supposed to be found, in the area."""
        return self.rarity is not None and self.rarity.is_rare

    @property
    def is_pending(self) -> bool:
        return self.origin is Origin.LOCAL_PENDING


class SightingUpdate(FindrModel):
    """Partial update; only explicitly set fields are applied.

    Example:
        >>> from findr.models.sighting import SightingUpdate
        >>> SightingUpdate(name="Blue Jay").changes()
        {'name': 'Blue Jay'}
    """

    name: str | None = None
    type: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    confidence: int | None = Field(default=None, ge=0, le=100)
    description: str | None = None
    species: str | None = None
    creature_type: str | None = None
    key_characteristics: str | None = None
    rarity: Rarity | None = None
    is_animal: bool | None = None
    image_uri: str | None = None

    @field_validator("rarity", mode="before")
    @classmethod
    def _coerce_rarity(cls, value: Any) -> Rarity | None:
        return _parse_rarity(value)

    def changes(self) -> dict[str, Any]:
        """Fields the caller set, keyed by model field name."""
        return self.model_dump(exclude_unset=True)
