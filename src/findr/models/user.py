"""User accounts and device-local credential records.

Example:
    >>> from findr.models.user import CredentialRecord, SyncStatus
    >>> rec = CredentialRecord(username="birder", password_hash="ab12")
    >>> rec.sync_status
    <SyncStatus.PENDING: 'pending'>
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import Field

from findr.models.base import FindrModel


class User(FindrModel):
    """A signed-in account.

    ``id`` is the hosted store's id, or the email for accounts that have
    never reached the hosted store. ``join_date`` is only reliable when a
    remote record was found.
    """

    id: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)
    join_date: datetime = Field(default_factory=lambda: datetime.now(UTC))


class SyncStatus(str, Enum):
    """Whether a local credential has a mirror row in the hosted store."""

    SYNCED = "synced"
    PENDING = "pending"


class CredentialRecord(FindrModel):
    """One entry of the local credential store, keyed by email."""

    username: str = Field(..., min_length=1)
    password_hash: str = Field(..., min_length=1)
    sync_status: SyncStatus = SyncStatus.PENDING
    remote_id: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
