"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Any

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from domain.entities.profile import MAX_USER_ID_LENGTH


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """Progression profile, stored as one document-shaped row per user."""

    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint("experience >= 0", name="ck_profiles_experience"),
        CheckConstraint("level >= 1", name="ck_profiles_level"),
        CheckConstraint("level_points >= 0", name="ck_profiles_level_points"),
    )

    user_id: Mapped[str] = mapped_column(String(MAX_USER_ID_LENGTH), primary_key=True)
    experience: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    level_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    stats: Mapped[dict[str, int]] = mapped_column(JSONB, nullable=False, default=dict)
    tasks: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, nullable=False, default=list)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
