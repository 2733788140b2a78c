"""
Findr - Service Layer for a Wildlife-Spotting App.

Findr turns photos into logged creature sightings: a hosted multimodal
model identifies the creature, the sighting is stored in a hosted table
store (or kept on the device when the store is unreachable), and per-user
stats, streaks, leaderboards and badges are computed from the collection.

Key Features:
- Two-tier parsing of free-form model replies (JSON block, then labeled lines)
- Sightings tagged REMOTE or LOCAL_PENDING instead of silent fallback
- Local-first accounts with an explicit sync status per credential
- Protocol-based backends (swap the store without code changes)

Quick Start:
    >>> from findr import Findr, get_settings
    >>> async with Findr.from_settings(get_settings()) as app:
    ...     user = await app.identity.sign_in("ana@example.com", "s3cret")
    ...     outcome = await app.pipeline.capture("owl.jpg", user.id, 40.7, -74.0)

Architecture:
    Row Stores: MemoryRowStore, PostgrestRowStore, SQLAlchemyRowStore
    Photo Storage: FilesystemBlob, SupabaseBlob
    Device Stores: MemoryKeyValueStore, FileKeyValueStore
    Classifiers: GeminiClassifier
"""

# Photo storage backends
from findr.blob.filesystem import FilesystemBlob
from findr.blob.supabase import SupabaseBlob

# Classification
from findr.classifier.gemini import GeminiClassifier
from findr.classifier.parser import parse_response

# Collection and pipeline
from findr.collection import SightingCollection

# Core orchestration
from findr.core.app import Findr
from findr.core.config import Settings, get_settings
from findr.core.exceptions import (
    ClassificationError,
    DuplicateEmailError,
    DuplicateUsernameError,
    FindrError,
    InvalidCredentialsError,
    NotConfiguredError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from findr.core.logging import configure_logging

# Services
from findr.identity.service import IdentityService

# Device stores
from findr.keyvalue.file import FileKeyValueStore
from findr.keyvalue.memory import MemoryKeyValueStore
from findr.models.base import Origin, Rarity
from findr.models.classification import ClassificationResult
from findr.models.sighting import Sighting, SightingDraft, SightingUpdate
from findr.models.user import CredentialRecord, SyncStatus, User
from findr.pipeline import CaptureOutcome, CapturePipeline, CaptureStatus, PipelineStats
from findr.sightings.service import SightingService

# Stats
from findr.stats.aggregation import LeaderboardEntry, Metric, UserStats, build_leaderboard, user_stats
from findr.stats.badges import evaluate_badges

# Row stores
from findr.storage.memory import MemoryRowStore
from findr.storage.postgrest import PostgrestRowStore
from findr.storage.sqlalchemy_storage import SQLAlchemyRowStore

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core
    "Findr",
    "Settings",
    "get_settings",
    "configure_logging",
    # Models
    "ClassificationResult",
    "CredentialRecord",
    "Origin",
    "Rarity",
    "Sighting",
    "SightingDraft",
    "SightingUpdate",
    "SyncStatus",
    "User",
    # Services
    "GeminiClassifier",
    "IdentityService",
    "SightingService",
    "parse_response",
    # Collection and pipeline
    "CaptureOutcome",
    "CapturePipeline",
    "CaptureStatus",
    "PipelineStats",
    "SightingCollection",
    # Stats
    "LeaderboardEntry",
    "Metric",
    "UserStats",
    "build_leaderboard",
    "evaluate_badges",
    "user_stats",
    # Backends
    "FileKeyValueStore",
    "FilesystemBlob",
    "MemoryKeyValueStore",
    "MemoryRowStore",
    "PostgrestRowStore",
    "SQLAlchemyRowStore",
    "SupabaseBlob",
    # Errors
    "ClassificationError",
    "DuplicateEmailError",
    "DuplicateUsernameError",
    "FindrError",
    "InvalidCredentialsError",
    "NotConfiguredError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
]
