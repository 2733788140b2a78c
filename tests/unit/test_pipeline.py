"""Tests for the capture pipeline.

The classifier is faked with AsyncMock; persistence runs on the
in-memory row store or the unreachable fake.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import httpx
import pytest

from findr.classifier.gemini import GeminiClassifier
from findr.core.exceptions import ClassificationError, NotFoundError
from findr.models import ClassificationResult, Origin, SightingDraft, SightingUpdate
from findr.pipeline import CaptureOutcome, CapturePipeline, CaptureStatus, PipelineStats
from findr.sightings.service import SightingService

# =============================================================================
# Fixtures
# =============================================================================


def classifier_returning(result: ClassificationResult | Exception) -> AsyncMock:
    classifier = AsyncMock()
    if isinstance(result, Exception):
        classifier.classify.side_effect = result
    else:
        classifier.classify.return_value = result
    return classifier


def detection(confidence: int, detected: bool = True) -> ClassificationResult:
    return ClassificationResult(detected=detected, name="Gray Squirrel", confidence=confidence, creature_type="Mammal")


@pytest.fixture
def service(rows) -> SightingService:
    return SightingService(rows)


# =============================================================================
# Capture
# =============================================================================


class TestCapture:
    """Photo to sighting."""

    async def test_confident_detection_is_logged(self, service) -> None:
        pipeline = CapturePipeline(classifier_returning(detection(31)), service)
        outcome = await pipeline.capture("squirrel.jpg", "u-1", 40.7, -74.0)

        assert outcome.status is CaptureStatus.LOGGED
        assert outcome.logged
        assert outcome.sighting.name == "Gray Squirrel"
        assert outcome.sighting.type == "Mammal"
        assert outcome.sighting.confidence == 31
        assert pipeline.collection.get(outcome.sighting.id) is not None

    async def test_threshold_is_exclusive(self, service) -> None:
        pipeline = CapturePipeline(classifier_returning(detection(30)), service)
        outcome = await pipeline.capture("squirrel.jpg", "u-1", 40.7, -74.0)

        assert outcome.status is CaptureStatus.NEEDS_MANUAL_ENTRY
        assert outcome.draft.name == "Gray Squirrel"
        assert len(pipeline.collection) == 0
        assert await service.list_all() == []

    async def test_no_creature_never_confirms(self, service) -> None:
        confirm = AsyncMock(return_value=True)
        pipeline = CapturePipeline(classifier_returning(detection(0, detected=False)), service)
        outcome = await pipeline.capture("rock.jpg", "u-1", 0, 0, confirm=confirm)

        assert outcome.status is CaptureStatus.NEEDS_MANUAL_ENTRY
        confirm.assert_not_called()

    async def test_rejected_confirmation(self, service) -> None:
        pipeline = CapturePipeline(classifier_returning(detection(90)), service)
        outcome = await pipeline.capture("squirrel.jpg", "u-1", 0, 0, confirm=lambda result, draft: False)

        assert outcome.status is CaptureStatus.REJECTED
        assert len(pipeline.collection) == 0

    async def test_async_confirmation_sees_draft(self, service) -> None:
        confirm = AsyncMock(return_value=True)
        pipeline = CapturePipeline(classifier_returning(detection(90)), service)
        outcome = await pipeline.capture("squirrel.jpg", "u-1", 1.0, 2.0, confirm=confirm)

        assert outcome.logged
        result, draft = confirm.await_args.args
        assert result.confidence == 90
        assert (draft.user_id, draft.latitude, draft.longitude) == ("u-1", 1.0, 2.0)

    async def test_classification_failure(self, service) -> None:
        pipeline = CapturePipeline(
            classifier_returning(ClassificationError("Failed to analyze image with AI")), service
        )
        outcome = await pipeline.capture("squirrel.jpg", "u-1", 0, 0)

        assert outcome.status is CaptureStatus.CLASSIFICATION_FAILED
        assert outcome.error == "Failed to analyze image with AI"
        assert outcome.sighting is None

    async def test_malformed_model_reply(self, service, tmp_path) -> None:
        photo = tmp_path / "squirrel.jpg"
        photo.write_bytes(b"jpeg")
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json={"candidates": ["oops"]}))
        classifier = GeminiClassifier("test-key", transport=transport)
        pipeline = CapturePipeline(classifier, service)

        outcome = await pipeline.capture(str(photo), "u-1", 0, 0)
        await classifier.close()

        assert outcome.status is CaptureStatus.CLASSIFICATION_FAILED
        assert outcome.error == "Failed to analyze image with AI"
        assert pipeline.stats.classification_failed == 1

    async def test_unreachable_store_still_logs(self, unreachable) -> None:
        pipeline = CapturePipeline(classifier_returning(detection(80)), SightingService(unreachable))
        outcome = await pipeline.capture("squirrel.jpg", "u-1", 0, 0)

        assert outcome.logged
        assert outcome.sighting.origin is Origin.LOCAL_PENDING
        assert outcome.sighting.image_uri == "squirrel.jpg"
        assert pipeline.stats.local_pending == 1

    async def test_custom_threshold(self, service) -> None:
        pipeline = CapturePipeline(classifier_returning(detection(40)), service, threshold=50)
        outcome = await pipeline.capture("squirrel.jpg", "u-1", 0, 0)
        assert outcome.status is CaptureStatus.NEEDS_MANUAL_ENTRY


# =============================================================================
# Manual entry and maintenance
# =============================================================================


class TestMaintenance:
    """Keeping the collection consistent with the store."""

    async def test_log_manual(self, service, draft) -> None:
        pipeline = CapturePipeline(classifier_returning(detection(0)), service)
        sighting = await pipeline.log_manual(draft)
        assert pipeline.collection.items == [sighting]
        assert pipeline.stats.manual_logged == 1

    async def test_edit(self, service, draft) -> None:
        pipeline = CapturePipeline(classifier_returning(detection(0)), service)
        sighting = await pipeline.log_manual(draft)
        updated = await pipeline.edit(sighting.id, SightingUpdate(name="Blue Jay"))
        assert updated.name == "Blue Jay"
        assert pipeline.collection.get(sighting.id).name == "Blue Jay"

    async def test_edit_missing_propagates(self, service) -> None:
        pipeline = CapturePipeline(classifier_returning(detection(0)), service)
        with pytest.raises(NotFoundError):
            await pipeline.edit("missing", SightingUpdate(name="X"))

    async def test_remove(self, service, draft) -> None:
        pipeline = CapturePipeline(classifier_returning(detection(0)), service)
        sighting = await pipeline.log_manual(draft)
        await pipeline.remove(sighting.id)
        assert sighting.id not in pipeline.collection
        assert await service.get(sighting.id) is None

    async def test_refresh_keeps_pending(self, rows, draft) -> None:
        local = await SightingService(None).create(draft)
        service = SightingService(rows)
        stored = await service.create(draft.model_copy(update={"user_id": "u-2"}))

        pipeline = CapturePipeline(classifier_returning(detection(0)), service)
        pipeline.collection.add(local)
        items = await pipeline.refresh()

        assert {s.id for s in items} == {local.id, stored.id}

    async def test_refresh_by_owner(self, service, draft) -> None:
        await service.create(draft)
        await service.create(draft.model_copy(update={"user_id": "u-2"}))
        pipeline = CapturePipeline(classifier_returning(detection(0)), service)
        items = await pipeline.refresh("u-2")
        assert [s.user_id for s in items] == ["u-2"]

    async def test_refresh_by_owner_keeps_only_own_pending(self, rows, draft) -> None:
        offline = SightingService(None)
        mine = await offline.create(draft)
        theirs = await offline.create(draft.model_copy(update={"user_id": "u-2"}))

        pipeline = CapturePipeline(classifier_returning(detection(0)), SightingService(rows))
        pipeline.collection.add(mine)
        pipeline.collection.add(theirs)
        items = await pipeline.refresh(draft.user_id)

        assert [s.id for s in items] == [mine.id]

    async def test_sync(self, rows) -> None:
        pipeline = CapturePipeline(classifier_returning(detection(0)), SightingService(None))
        local = await pipeline.log_manual(SightingDraft(user_id="u-1", name="Owl", latitude=0, longitude=0))

        synced_pipeline = CapturePipeline(
            classifier_returning(detection(0)), SightingService(rows), pipeline.collection
        )
        assert await synced_pipeline.sync() == 1
        assert local.id not in pipeline.collection
        assert pipeline.collection.pending() == []
        assert len(pipeline.collection) == 1


class TestPipelineStats:
    """Outcome counters."""

    def test_record(self) -> None:
        stats = PipelineStats()
        stats.record(CaptureOutcome(CaptureStatus.LOGGED))
        stats.record(CaptureOutcome(CaptureStatus.REJECTED))
        stats.record(CaptureOutcome(CaptureStatus.NEEDS_MANUAL_ENTRY))
        stats.record(CaptureOutcome(CaptureStatus.CLASSIFICATION_FAILED))
        assert (stats.captured, stats.logged, stats.rejected, stats.manual_entry, stats.classification_failed) == (
            4,
            1,
            1,
            1,
            1,
        )
        assert stats.log_rate == 0.25

    def test_empty_rate(self) -> None:
        assert PipelineStats().log_rate == 0.0
