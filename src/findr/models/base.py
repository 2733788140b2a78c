"""Base models and shared enums.

Example:
    >>> from findr.models.base import Rarity, Origin
    >>> Rarity.parse("rarely found in the area")
    <Rarity.RARE: 'Rarely found in the area'>
    >>> Origin.LOCAL_PENDING.value
    'local_pending'
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Rarity(str, Enum):
    """How expected a species is in the observation area.

    Example:
        >>> Rarity.UNEXPECTED.is_rare
        True
        >>> Rarity.COMMON.is_rare
        False
        >>> Rarity.parse("Unknown") is None
        True
    """

    COMMON = "Commonly found in the area"
    RARE = "Rarely found in the area"
    UNEXPECTED = "Not supposed to be found in the area"

    @property
    def is_rare(self) -> bool:
        return self is not Rarity.COMMON

    @classmethod
    def parse(cls, value: object) -> Rarity | None:
        """Match free text case-insensitively; anything else is unset."""
        if isinstance(value, Rarity):
            return value
        if not isinstance(value, str):
            return None
        text = value.strip().strip('"').rstrip(".").lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return None


class Origin(str, Enum):
    """Where a sighting currently lives."""

    REMOTE = "remote"  # Persisted in the hosted store
    LOCAL_PENDING = "local_pending"  # Local fallback, not yet synced


class FindrModel(BaseModel):
    """Base model with standard configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )
