"""Identity client: sign-up, sign-in and session restore.

The device-local credential store is the authority for every credential
check. The hosted ``users`` table is a mirror: sign-up tries to create
the mirror row, sign-in tries to refresh it, and neither waits on it to
succeed. Accounts whose mirror row could not be written stay
``SyncStatus.PENDING`` until ``sync_pending_accounts`` runs.

Example:
    >>> from findr.identity import IdentityService
    >>> from findr.keyvalue import MemoryKeyValueStore
    >>>
    >>> identity = IdentityService(MemoryKeyValueStore())
    >>> user = await identity.sign_up("ana@example.com", "s3cret", "ana")
    >>> user.id  # no hosted store: the email doubles as id
    'ana@example.com'
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from findr.core.exceptions import (
    DuplicateEmailError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    NotConfiguredError,
)
from findr.models.user import CredentialRecord, SyncStatus, User
from findr.protocols.rows import Filter, Row

if TYPE_CHECKING:
    from findr.core.config import Settings
    from findr.protocols.keyvalue import KeyValueStore
    from findr.protocols.rows import RowStore

logger = logging.getLogger(__name__)

SESSION_KEY = "user_data"
CREDENTIALS_KEY = "registered_users"
DEFAULT_TABLE = "users"


def hash_password(password: str) -> str:
    """One-way SHA-256 hex digest.

    Example:
        >>> hash_password("abc")[:16]
        'ba7816bf8f01cfea'
    """
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def _parse_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return None


def row_to_user(row: Row) -> User:
    return User(
        id=str(row["id"]),
        email=row["email"],
        username=row["username"],
        join_date=_parse_datetime(row.get("created_at")) or datetime.now(UTC),
    )


def _maybe_user(row: Row) -> User | None:
    try:
        return row_to_user(row)
    except (KeyError, TypeError, ValueError):
        logger.warning("Skipping malformed user row %s", row.get("id"), exc_info=True)
        return None


class IdentityService:
    """Local-first account management.

    Args:
        local: Device key-value store holding credentials and the session
        rows: Hosted table store for the users mirror, or None
        table: Users table name
    """

    def __init__(
        self,
        local: KeyValueStore,
        rows: RowStore | None = None,
        *,
        table: str = DEFAULT_TABLE,
    ) -> None:
        self._local = local
        self._rows = rows
        self._table = table

    @classmethod
    def from_settings(cls, settings: Settings, local: KeyValueStore, rows: RowStore | None) -> IdentityService:
        return cls(local, rows, table=settings.users_table)

    # --- Local credential store ---

    async def _credentials(self) -> dict[str, CredentialRecord]:
        raw = await self._local.get(CREDENTIALS_KEY) or {}
        records: dict[str, CredentialRecord] = {}
        for email, data in raw.items():
            try:
                records[email] = CredentialRecord.model_validate(data)
            except ValueError:
                logger.warning("Skipping unreadable credential record for %s", email)
        return records

    async def _save_credentials(self, records: dict[str, CredentialRecord]) -> None:
        await self._local.set(
            CREDENTIALS_KEY,
            {email: rec.model_dump(mode="json") for email, rec in records.items()},
        )

    async def _save_session(self, user: User) -> None:
        await self._local.set(SESSION_KEY, user.model_dump(mode="json"))

    # --- Public API ---

    async def sign_up(self, email: str, password: str, username: str) -> User:
        """Register an account on this device.

        Raises:
            DuplicateEmailError: Email already registered locally
            DuplicateUsernameError: Username already taken locally
        """
        email = email.strip()
        username = username.strip()
        records = await self._credentials()

        if email in records:
            raise DuplicateEmailError("Email already registered")
        if any(rec.username == username for rec in records.values()):
            raise DuplicateUsernameError("Username already exists")

        password_hash = hash_password(password)
        record = CredentialRecord(username=username, password_hash=password_hash)
        user_id = email
        join_date = datetime.now(UTC)

        try:
            row = await self._create_remote(email, username, password_hash)
        except Exception:
            logger.warning("Could not create %s in the hosted store, keeping it local only", email, exc_info=True)
        else:
            user_id = str(row["id"])
            join_date = _parse_datetime(row.get("created_at")) or join_date
            record = record.model_copy(update={"sync_status": SyncStatus.SYNCED, "remote_id": user_id})
            logger.info("User %s created in hosted store as %s", email, user_id)

        records[email] = record
        await self._save_credentials(records)

        user = User(id=user_id, email=email, username=username, join_date=join_date)
        await self._save_session(user)
        return user

    async def sign_in(self, email: str, password: str) -> User:
        """Check credentials against the local store and start a session.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
        """
        email = email.strip()
        records = await self._credentials()
        record = records.get(email)
        if record is None or not hmac.compare_digest(record.password_hash, hash_password(password)):
            raise InvalidCredentialsError("Invalid email or password")

        user_id = record.remote_id or email
        join_date = datetime.now(UTC)

        try:
            remote = await self._find_remote(email, record.remote_id)
            if remote is not None:
                user_id = str(remote["id"])
                join_date = _parse_datetime(remote.get("created_at")) or join_date
                await self._touch_last_login(user_id)
                logger.info("User %s found in hosted store, updated last login", email)
        except Exception:
            logger.warning("Failed to sync %s with hosted store, using local data", email, exc_info=True)

        user = User(id=user_id, email=email, username=record.username, join_date=join_date)
        await self._save_session(user)
        return user

    async def sign_out(self) -> None:
        """End the session. Stored credentials are kept."""
        await self._local.delete(SESSION_KEY)

    async def get_current_user(self) -> User | None:
        """The session user, if any."""
        data = await self._local.get(SESSION_KEY)
        if not data:
            return None
        try:
            return User.model_validate(data)
        except ValueError:
            logger.warning("Discarding unreadable session")
            return None

    async def get_user_by_id(self, user_id: str) -> User | None:
        """Look a user up in the hosted store by id, then by email.

        Never raises; returns None when unconfigured, missing or unreachable.
        """
        if self._rows is None:
            return None
        for column in ("id", "email"):
            try:
                rows = await self._rows.select(
                    self._table,
                    [Filter.eq(column, user_id), Filter.eq("is_active", True)],
                    limit=1,
                )
            except Exception:
                logger.warning("Error fetching user by %s %s", column, user_id, exc_info=True)
                continue
            if rows:
                return _maybe_user(rows[0])
        return None

    async def get_username(self, user_id: str) -> str | None:
        """Username for display, or None; callers choose the fallback."""
        user = await self.get_user_by_id(user_id)
        return user.username if user else None

    async def list_users(self) -> list[User]:
        """Active users in the hosted store, newest first. Never raises."""
        if self._rows is None:
            return []
        try:
            rows = await self._rows.select(
                self._table,
                [Filter.eq("is_active", True)],
                order_by="created_at",
                descending=True,
            )
        except Exception:
            logger.warning("Error fetching users", exc_info=True)
            return []
        return [u for u in map(_maybe_user, rows) if u is not None]

    async def sync_pending_accounts(self) -> int:
        """Create mirror rows for accounts that only exist locally.

        Returns:
            Number of accounts that became SYNCED.
        """
        if self._rows is None:
            return 0
        records = await self._credentials()
        synced = 0
        for email, record in records.items():
            if record.sync_status is SyncStatus.SYNCED:
                continue
            try:
                existing = await self._find_remote(email, None)
                row = existing or await self._create_remote(email, record.username, record.password_hash)
            except Exception:
                logger.warning("Account %s still pending sync", email, exc_info=True)
                continue
            records[email] = record.model_copy(
                update={"sync_status": SyncStatus.SYNCED, "remote_id": str(row["id"])}
            )
            synced += 1

        if synced:
            await self._save_credentials(records)
            session = await self.get_current_user()
            if session is not None and session.email in records and records[session.email].remote_id:
                await self._save_session(session.model_copy(update={"id": records[session.email].remote_id}))
        return synced

    # --- Hosted mirror ---

    async def _create_remote(self, email: str, username: str, password_hash: str) -> Row:
        if self._rows is None:
            raise NotConfiguredError("Supabase not configured")
        return await self._rows.insert(
            self._table,
            {"email": email, "username": username, "password_hash": password_hash, "is_active": True},
        )

    async def _find_remote(self, email: str, remote_id: str | None) -> Row | None:
        if self._rows is None:
            return None
        rows = await self._rows.select(self._table, [Filter.eq("email", email)], limit=1)
        if not rows and remote_id:
            rows = await self._rows.select(self._table, [Filter.eq("id", remote_id)], limit=1)
        return rows[0] if rows else None

    async def _touch_last_login(self, user_id: str) -> None:
        if self._rows is None:
            return
        await self._rows.update(
            self._table,
            [Filter.eq("id", user_id)],
            {"last_login": datetime.now(UTC).isoformat()},
        )
