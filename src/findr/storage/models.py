"""
Findr SQLAlchemy models.

Mirror of the hosted store's schema, used by SQLAlchemyRowStore to run
the same service layer against a local or self-hosted SQL database.

Usage:
    from sqlalchemy import create_engine
    from findr.storage.models import create_all_tables

    engine = create_engine("sqlite:///data/findr.db")
    create_all_tables(engine)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all Findr models."""


# =============================================================================
# Sightings
# =============================================================================


class SightingModel(Base):
    """
    One creature sighting.

    Indexes optimized for:
    - Per-user feed ordered by time
    - Global feed ordered by time
    - Bounding-box lookups around a point
    """

    __tablename__ = "creature_sightings"
    __table_args__ = (
        Index("ix_sightings_user_timestamp", "user_id", "timestamp"),
        Index("ix_sightings_timestamp", "timestamp"),
        Index("ix_sightings_lat_lng", "latitude", "longitude"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    # AI analysis
    confidence: Mapped[int] = mapped_column(Integer, default=0)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    species: Mapped[str | None] = mapped_column(String(255), nullable=True)
    creature_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    key_characteristics: Mapped[str | None] = mapped_column(Text, nullable=True)
    rarity: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_animal: Mapped[bool] = mapped_column(Boolean, default=False)
    image_uri: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


# =============================================================================
# Users
# =============================================================================


class UserModel(Base):
    """Remote mirror of an account. Credentials are checked locally."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    username: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)


def create_all_tables(engine: Engine) -> None:
    """Create all tables if they don't exist."""
    Base.metadata.create_all(engine)
