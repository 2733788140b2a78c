"""Persistence client for sightings.

Creates, reads, updates and deletes sighting rows in the hosted store,
uploading photos to object storage first. Creation never fails: when the
store is unconfigured or the insert fails, a local sighting tagged
``Origin.LOCAL_PENDING`` is returned instead, and ``sync_pending`` can
push it later.

Read/write policy:
    create          -> local fallback on any failure
    upload          -> keeps the original photo reference on failure
    update, delete  -> NotConfiguredError / NotFoundError / StorageError
    get, list_*     -> empty when unconfigured, StorageError when unreachable

Example:
    >>> from findr.sightings import SightingService
    >>> from findr.storage.memory import MemoryRowStore
    >>> from findr.models import SightingDraft
    >>>
    >>> service = SightingService(MemoryRowStore())
    >>> draft = SightingDraft(user_id="u-1", name="Mallard", type="Bird", latitude=40.7, longitude=-74.0)
    >>> sighting = await service.create(draft)
    >>> sighting.origin
    <Origin.REMOTE: 'remote'>
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from findr.core.exceptions import NotConfiguredError, NotFoundError, StorageError
from findr.http.client import HttpClient
from findr.models.base import Origin
from findr.models.sighting import Sighting, SightingDraft, SightingUpdate
from findr.protocols.rows import Filter
from findr.sightings.mapping import local_sighting, row_to_sighting, sighting_to_row, update_to_row
from findr.utils.ids import epoch_millis, local_id
from findr.utils.images import content_type_for, file_extension, read_image

if TYPE_CHECKING:
    from findr.core.config import Settings
    from findr.models.classification import ClassificationResult
    from findr.protocols.blob import BlobStorage
    from findr.protocols.rows import RowStore

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "creature_sightings"

# One degree of latitude is roughly 111 km.
KM_PER_DEGREE = 111.0


class SightingService:
    """CRUD over sightings with silent local fallback on create.

    Args:
        rows: Table store, or None when no backend is configured
        blobs: Photo storage, or None to keep local photo references
        table: Sightings table name
        http: Client used to fetch remote photo references before upload
    """

    def __init__(
        self,
        rows: RowStore | None,
        blobs: BlobStorage | None = None,
        *,
        table: str = DEFAULT_TABLE,
        http: HttpClient | None = None,
    ) -> None:
        self._rows = rows
        self._blobs = blobs
        self._table = table
        self._http = http

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        rows: RowStore | None,
        blobs: BlobStorage | None = None,
    ) -> SightingService:
        return cls(rows, blobs, table=settings.sightings_table)

    @property
    def configured(self) -> bool:
        return self._rows is not None

    def _require_rows(self, action: str) -> RowStore:
        if self._rows is None:
            logger.warning("Store not configured, cannot %s sighting", action)
            raise NotConfiguredError("Supabase not configured")
        return self._rows

    # --- Create ---

    async def create(
        self,
        draft: SightingDraft,
        classification: ClassificationResult | None = None,
        image_uri: str | None = None,
    ) -> Sighting:
        """Persist a new sighting, falling back to a local record.

        Returns:
            The stored sighting (``Origin.REMOTE``) or a local one
            (``Origin.LOCAL_PENDING``) carrying the original photo reference.
        """
        if self._rows is None:
            logger.warning("Store not configured, using local fallback")
            return self._local(draft, classification, image_uri)

        try:
            return await self._create_remote(draft, classification, image_uri)
        except Exception:
            logger.exception("Creating sighting failed, falling back to local storage")
            return self._local(draft, classification, image_uri)

    async def _create_remote(
        self,
        draft: SightingDraft,
        classification: ClassificationResult | None,
        image_uri: str | None,
    ) -> Sighting:
        rows = self._require_rows("create")
        stored_uri = image_uri
        if image_uri:
            stored_uri = await self.upload_image(image_uri, draft.user_id)

        row = await rows.insert(self._table, sighting_to_row(draft, classification, stored_uri))
        sighting = row_to_sighting(row)
        logger.info("Created sighting %s for %s", sighting.id, sighting.user_id)
        return sighting

    @staticmethod
    def _local(
        draft: SightingDraft,
        classification: ClassificationResult | None,
        image_uri: str | None,
    ) -> Sighting:
        sighting = local_sighting(local_id(), draft, classification, image_uri)
        logger.info("Created local sighting %s (pending sync)", sighting.id)
        return sighting

    async def upload_image(self, image_uri: str, user_id: str) -> str:
        """Upload a photo and return its public URL.

        The object key is ``<user_id>/<epoch-ms>.<ext>``. Any failure
        returns ``image_uri`` unchanged so the sighting can still be saved.
        """
        if self._blobs is None:
            logger.warning("Object storage not configured, keeping local image reference")
            return image_uri

        extension = file_extension(image_uri)
        key = f"{user_id}/{epoch_millis()}.{extension}"
        content_type = content_type_for(image_uri)
        try:
            data = await read_image(image_uri, self._http)
            info = await self._blobs.put(key, data, content_type)
        except Exception:
            logger.exception("Uploading %s failed, keeping local image reference", image_uri)
            return image_uri

        logger.info("Uploaded %s (%d bytes, %s)", key, info.size, content_type)
        return info.public_url

    # --- Update / delete ---

    async def update(self, sighting_id: str, changes: SightingUpdate) -> Sighting:
        """Apply a partial update and return the full stored record.

        Raises:
            NotConfiguredError: No backend configured
            NotFoundError: No sighting with this id
            StorageError: Backend unreachable or rejected the update
        """
        rows = self._require_rows("update")
        values = update_to_row(changes)
        if not values:
            current = await self.get(sighting_id)
            if current is None:
                raise NotFoundError(f"Sighting {sighting_id} not found")
            return current

        try:
            updated = await rows.update(self._table, [Filter.eq("id", sighting_id)], values)
        except StorageError:
            raise
        except Exception as e:
            logger.exception("Updating sighting %s failed", sighting_id)
            raise StorageError(f"Failed to update sighting: {e}") from e

        if not updated:
            raise NotFoundError(f"Sighting {sighting_id} not found")
        return row_to_sighting(updated[0])

    async def delete(self, sighting_id: str) -> None:
        """Hard delete.

        Raises:
            NotConfiguredError: No backend configured
            StorageError: Backend unreachable or rejected the delete
        """
        rows = self._require_rows("delete")
        try:
            deleted = await rows.delete(self._table, [Filter.eq("id", sighting_id)])
        except StorageError:
            raise
        except Exception as e:
            logger.exception("Deleting sighting %s failed", sighting_id)
            raise StorageError(f"Failed to delete sighting: {e}") from e
        logger.info("Deleted sighting %s (%d rows)", sighting_id, deleted)

    # --- Reads ---

    async def get(self, sighting_id: str) -> Sighting | None:
        """One sighting by id, or None."""
        if self._rows is None:
            logger.warning("Store not configured, cannot fetch sighting")
            return None
        rows = await self._select([Filter.eq("id", sighting_id)], limit=1)
        return row_to_sighting(rows[0]) if rows else None

    async def list_by_owner(self, user_id: str) -> list[Sighting]:
        """One observer's sightings, most recent first."""
        if self._rows is None:
            logger.warning("Store not configured, returning no sightings")
            return []
        rows = await self._select([Filter.eq("user_id", user_id)])
        return [row_to_sighting(r) for r in rows]

    async def list_all(self) -> list[Sighting]:
        """The shared feed, most recent first."""
        if self._rows is None:
            logger.warning("Store not configured, returning no sightings")
            return []
        rows = await self._select([])
        return [row_to_sighting(r) for r in rows]

    async def list_in_radius(
        self,
        latitude: float,
        longitude: float,
        radius_km: float = 10.0,
    ) -> list[Sighting]:
        """Sightings inside a square box of half-width ``radius_km``."""
        if self._rows is None:
            return []
        delta = radius_km / KM_PER_DEGREE
        rows = await self._select(
            [
                Filter.gte("latitude", latitude - delta),
                Filter.lte("latitude", latitude + delta),
                Filter.gte("longitude", longitude - delta),
                Filter.lte("longitude", longitude + delta),
            ]
        )
        return [row_to_sighting(r) for r in rows]

    async def _select(self, filters: list[Filter], limit: int | None = None) -> list[dict]:
        rows = self._require_rows("fetch")
        try:
            return await rows.select(
                self._table,
                filters,
                order_by="timestamp",
                descending=True,
                limit=limit,
            )
        except StorageError:
            raise
        except Exception as e:
            logger.exception("Fetching sightings failed")
            raise StorageError(f"Failed to fetch sightings: {e}") from e

    # --- Reconciliation ---

    async def sync_pending(self, sightings: Iterable[Sighting]) -> list[Sighting]:
        """Push local-only sightings to the store.

        Returns the input in order, with each successfully synced sighting
        replaced by its stored version. Failures stay ``LOCAL_PENDING``.
        """
        result: list[Sighting] = []
        for sighting in sightings:
            if sighting.origin is not Origin.LOCAL_PENDING or self._rows is None:
                result.append(sighting)
                continue
            try:
                result.append(await self._push(sighting))
            except Exception:
                logger.warning("Sighting %s still pending sync", sighting.id, exc_info=True)
                result.append(sighting)
        return result

    async def _push(self, sighting: Sighting) -> Sighting:
        rows = self._require_rows("sync")
        draft = SightingDraft(
            user_id=sighting.user_id,
            name=sighting.name,
            type=sighting.type,
            latitude=sighting.latitude,
            longitude=sighting.longitude,
        )
        image_uri = sighting.image_uri
        if image_uri:
            image_uri = await self.upload_image(image_uri, sighting.user_id)

        row = sighting_to_row(draft, image_uri=image_uri, timestamp=sighting.timestamp)
        row.update(
            confidence=sighting.confidence,
            description=sighting.description,
            species=sighting.species,
            creature_type=sighting.creature_type,
            key_characteristics=sighting.key_characteristics,
            rarity=sighting.rarity.value if sighting.rarity else None,
            is_animal=sighting.is_animal,
        )
        stored = row_to_sighting(await rows.insert(self._table, row))
        logger.info("Synced local sighting %s as %s", sighting.id, stored.id)
        return stored
