"""Findr - composition root for the service layer.

The Findr class wires the classifier, the persistence and identity
clients, the in-memory collection and the capture pipeline, and exposes
the aggregated views the app renders.

Example:
    >>> from findr import Findr, get_settings
    >>> async with Findr.from_settings(get_settings(database_url="memory://")) as app:
    ...     user = await app.identity.sign_up("ana@example.com", "s3cret", "ana")
    ...     outcome = await app.pipeline.capture("owl.jpg", user.id, 40.7, -74.0)
    ...     stats = app.stats_for(user.id)
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any

from findr.classifier.gemini import GeminiClassifier
from findr.collection import SightingCollection
from findr.core.logging import configure_logging
from findr.http.client import HttpClient
from findr.identity.service import IdentityService
from findr.keyvalue.file import FileKeyValueStore
from findr.pipeline import CapturePipeline
from findr.sightings.service import SightingService
from findr.stats.aggregation import LeaderboardEntry, Metric, UserStats, build_leaderboard, user_stats
from findr.stats.badges import BadgeStatus, evaluate_badges
from findr.storage.factory import create_backends

if TYPE_CHECKING:
    from findr.core.config import Settings
    from findr.protocols.blob import BlobStorage
    from findr.protocols.classifier import ImageClassifier
    from findr.protocols.keyvalue import KeyValueStore
    from findr.protocols.rows import RowStore

logger = logging.getLogger(__name__)


class Findr:
    """Service-layer orchestrator.

    Args:
        classifier: Image classifier
        local: Device key-value store for credentials and the session
        rows: Hosted row store, or None when unconfigured
        blobs: Photo storage, or None
        sightings_table: Sightings table name
        users_table: Users table name
        confidence_threshold: Exclusive threshold for the confirm path

    Example:
        >>> from findr.keyvalue import MemoryKeyValueStore
        >>> from findr.storage.memory import MemoryRowStore
        >>> app = Findr(classifier, MemoryKeyValueStore(), rows=MemoryRowStore())
        >>> len(app.collection)
        0
    """

    def __init__(
        self,
        classifier: ImageClassifier,
        local: KeyValueStore,
        *,
        rows: RowStore | None = None,
        blobs: BlobStorage | None = None,
        sightings_table: str = "creature_sightings",
        users_table: str = "users",
        confidence_threshold: int = 30,
    ) -> None:
        self._classifier = classifier
        self._local = local
        self._rows = rows
        self._blobs = blobs
        self._http = HttpClient()
        self._collection = SightingCollection()
        self._sightings = SightingService(rows, blobs, table=sightings_table, http=self._http)
        self._identity = IdentityService(local, rows, table=users_table)
        self._pipeline = CapturePipeline(
            classifier,
            self._sightings,
            self._collection,
            threshold=confidence_threshold,
        )
        self._initialized = False

    @classmethod
    def from_settings(cls, settings: Settings) -> Findr:
        """Build every backend from configuration and apply the log level."""
        configure_logging(settings.log_level)
        rows, blobs = create_backends(settings)
        if rows is None:
            logger.warning("No sighting store configured, sightings stay on this device")
        classifier = GeminiClassifier.from_settings(settings)
        if not classifier.configured:
            logger.warning("Classifier API key not configured, captures need manual entry")
        return cls(
            classifier,
            FileKeyValueStore(settings.data_dir),
            rows=rows,
            blobs=blobs,
            sightings_table=settings.sightings_table,
            users_table=settings.users_table,
            confidence_threshold=settings.confidence_threshold,
        )

    @property
    def classifier(self) -> ImageClassifier:
        return self._classifier

    @property
    def sightings(self) -> SightingService:
        return self._sightings

    @property
    def identity(self) -> IdentityService:
        return self._identity

    @property
    def collection(self) -> SightingCollection:
        return self._collection

    @property
    def pipeline(self) -> CapturePipeline:
        return self._pipeline

    # --- Views ---

    def stats_for(self, user_id: str, today: date | None = None) -> UserStats:
        """Counters for one observer over the current collection."""
        return user_stats(self._collection.items, user_id, today)

    def badges_for(self, user_id: str, today: date | None = None) -> list[BadgeStatus]:
        return evaluate_badges(self.stats_for(user_id, today))

    async def leaderboard(self, metric: Metric | str = Metric.OVERALL) -> list[LeaderboardEntry]:
        """Ranked observers with usernames where they can be looked up."""
        sightings = self._collection.items
        usernames = {}
        for user_id in dict.fromkeys(s.user_id for s in sightings):
            usernames[user_id] = await self._identity.get_username(user_id)
        return build_leaderboard(sightings, metric, usernames)

    # --- Lifecycle ---

    async def initialize(self) -> None:
        if self._initialized:
            return
        if self._rows is not None:
            await self._rows.initialize()
        if self._blobs is not None:
            await self._blobs.initialize()
        self._initialized = True

    async def close(self) -> None:
        close_classifier = getattr(self._classifier, "close", None)
        if close_classifier is not None:
            await close_classifier()
        await self._http.close()
        if self._blobs is not None:
            await self._blobs.close()
        if self._rows is not None:
            await self._rows.close()
        self._initialized = False

    async def __aenter__(self) -> Findr:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def info(self) -> dict[str, Any]:
        return {
            "store": type(self._rows).__name__ if self._rows is not None else None,
            "blobs": type(self._blobs).__name__ if self._blobs is not None else None,
            "classifier": type(self._classifier).__name__,
            "sightings": len(self._collection),
            "pending": len(self._collection.pending()),
            "initialized": self._initialized,
        }
