"""Capture pipeline - photo to logged sighting.

The pipeline handles the flow of:
1. Classifying the photo
2. Gating on detection and confidence (strictly above the threshold)
3. Asking the caller to confirm the pre-filled draft
4. Persisting through the sighting service (local fallback included)
5. Prepending the result to the in-memory collection

Anything that does not end in a logged sighting is reported as a
``CaptureOutcome`` status, never raised: the caller decides whether to
retry or to switch to manual entry.

Example:
    >>> from findr.pipeline import CapturePipeline, CaptureStatus
    >>> pipeline = CapturePipeline(classifier, sightings, collection)
    >>> outcome = await pipeline.capture("file:///tmp/owl.jpg", "u-1", 40.7, -74.0)
    >>> outcome.status in CaptureStatus
    True
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING

from findr.collection import SightingCollection
from findr.core.exceptions import ClassificationError
from findr.models.classification import CONFIDENCE_THRESHOLD, ClassificationResult
from findr.models.sighting import SightingDraft

if TYPE_CHECKING:
    from findr.models.sighting import Sighting, SightingUpdate
    from findr.protocols.classifier import ImageClassifier
    from findr.sightings.service import SightingService

logger = logging.getLogger(__name__)

Confirm = Callable[[ClassificationResult, SightingDraft], Awaitable[bool] | bool]


class CaptureStatus(str, Enum):
    LOGGED = "logged"
    REJECTED = "rejected"
    NEEDS_MANUAL_ENTRY = "needs_manual_entry"
    CLASSIFICATION_FAILED = "classification_failed"


@dataclass
class CaptureOutcome:
    """Result of one capture attempt.

    ``classification`` and ``draft`` are set whenever the model answered,
    so a manual-entry form can be pre-filled from them.
    """

    status: CaptureStatus
    sighting: Sighting | None = None
    classification: ClassificationResult | None = None
    draft: SightingDraft | None = None
    error: str | None = None

    @property
    def logged(self) -> bool:
        return self.status is CaptureStatus.LOGGED


@dataclass
class PipelineStats:
    """Counters across the pipeline's lifetime.

    Example:
        >>> stats = PipelineStats(captured=4, logged=1, local_pending=1)
        >>> stats.log_rate
        0.25
    """

    captured: int = 0
    logged: int = 0
    rejected: int = 0
    manual_entry: int = 0
    classification_failed: int = 0
    manual_logged: int = 0
    local_pending: int = 0
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def log_rate(self) -> float:
        if self.captured == 0:
            return 0.0
        return self.logged / self.captured

    def record(self, outcome: CaptureOutcome) -> None:
        self.captured += 1
        if outcome.status is CaptureStatus.LOGGED:
            self.logged += 1
        elif outcome.status is CaptureStatus.REJECTED:
            self.rejected += 1
        elif outcome.status is CaptureStatus.NEEDS_MANUAL_ENTRY:
            self.manual_entry += 1
        else:
            self.classification_failed += 1


class CapturePipeline:
    """Orchestrates classify, confirm, persist and append.

    Args:
        classifier: Image classifier
        sightings: Persistence client
        collection: In-memory collection updated on success
        threshold: Exclusive confidence threshold for the confirm path
    """

    def __init__(
        self,
        classifier: ImageClassifier,
        sightings: SightingService,
        collection: SightingCollection | None = None,
        *,
        threshold: int = CONFIDENCE_THRESHOLD,
    ) -> None:
        self._classifier = classifier
        self._sightings = sightings
        self._collection = collection if collection is not None else SightingCollection()
        self._threshold = threshold
        self._stats = PipelineStats()

    @property
    def collection(self) -> SightingCollection:
        return self._collection

    @property
    def stats(self) -> PipelineStats:
        return self._stats

    async def capture(
        self,
        image_uri: str,
        user_id: str,
        latitude: float,
        longitude: float,
        confirm: Confirm | None = None,
    ) -> CaptureOutcome:
        """Run one photo through the pipeline.

        Args:
            image_uri: Photo reference (path, file:// or http(s) URL)
            user_id: Observer
            latitude: Capture location
            longitude: Capture location
            confirm: Called with the result and pre-filled draft; returning
                False rejects. None accepts every confident result.
        """
        try:
            result = await self._classifier.classify(image_uri)
        except ClassificationError as e:
            logger.warning("Classification failed for %s: %s", image_uri, e)
            outcome = CaptureOutcome(CaptureStatus.CLASSIFICATION_FAILED, error=str(e))
            self._stats.record(outcome)
            return outcome

        draft = result.to_draft(user_id, latitude, longitude)
        if not result.is_confident(self._threshold):
            logger.info("No confident detection (%s, %d%%), manual entry needed", result.name, result.confidence)
            outcome = CaptureOutcome(CaptureStatus.NEEDS_MANUAL_ENTRY, classification=result, draft=draft)
            self._stats.record(outcome)
            return outcome

        if confirm is not None and not await _resolve(confirm(result, draft)):
            outcome = CaptureOutcome(CaptureStatus.REJECTED, classification=result, draft=draft)
            self._stats.record(outcome)
            return outcome

        sighting = await self._sightings.create(draft, result, image_uri)
        self._collection.add(sighting)
        if sighting.is_pending:
            self._stats.local_pending += 1
        outcome = CaptureOutcome(CaptureStatus.LOGGED, sighting=sighting, classification=result, draft=draft)
        self._stats.record(outcome)
        return outcome

    async def log_manual(
        self,
        draft: SightingDraft,
        classification: ClassificationResult | None = None,
        image_uri: str | None = None,
    ) -> Sighting:
        """Persist a user-entered sighting and prepend it."""
        sighting = await self._sightings.create(draft, classification, image_uri)
        self._collection.add(sighting)
        self._stats.manual_logged += 1
        if sighting.is_pending:
            self._stats.local_pending += 1
        return sighting

    async def edit(self, sighting_id: str, changes: SightingUpdate) -> Sighting:
        """Update in the store, then in the collection. Errors propagate."""
        updated = await self._sightings.update(sighting_id, changes)
        if not self._collection.replace(updated):
            self._collection.add(updated)
        return updated

    async def remove(self, sighting_id: str) -> None:
        """Delete from the store, then from the collection. Errors propagate."""
        await self._sightings.delete(sighting_id)
        self._collection.remove(sighting_id)

    async def refresh(self, user_id: str | None = None) -> list[Sighting]:
        """Reload the collection from the store.

        Local-only sightings are kept so a refresh never drops them. With
        ``user_id`` only that observer's pending sightings are kept.
        """
        pending = self._collection.pending()
        if user_id is None:
            fetched = await self._sightings.list_all()
        else:
            fetched = await self._sightings.list_by_owner(user_id)
            pending = [s for s in pending if s.user_id == user_id]
        self._collection.load([*fetched, *pending])
        return self._collection.items

    async def sync(self) -> int:
        """Push pending sightings and swap in their stored versions."""
        pending = self._collection.pending()
        synced = 0
        for before, after in zip(pending, await self._sightings.sync_pending(pending), strict=True):
            if not after.is_pending:
                self._collection.replace(after, previous_id=before.id)
                synced += 1
        return synced


async def _resolve(value: Awaitable[bool] | bool) -> bool:
    if inspect.isawaitable(value):
        return bool(await value)
    return bool(value)
