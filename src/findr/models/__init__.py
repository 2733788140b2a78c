"""Findr domain models.

Example:
    >>> from findr.models import Sighting, Rarity
    >>> Rarity.RARE.value
    'Rarely found in the area'
"""

from findr.models.base import FindrModel, Origin, Rarity
from findr.models.classification import CONFIDENCE_THRESHOLD, ClassificationResult
from findr.models.sighting import Sighting, SightingDraft, SightingUpdate
from findr.models.user import CredentialRecord, SyncStatus, User

__all__ = [
    "FindrModel",
    "Origin",
    "Rarity",
    "CONFIDENCE_THRESHOLD",
    "ClassificationResult",
    "Sighting",
    "SightingDraft",
    "SightingUpdate",
    "CredentialRecord",
    "SyncStatus",
    "User",
]
