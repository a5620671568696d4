"""SQLAlchemy model backing each user's favorite VKM set.

One row per ``(user_id, vkm_id)`` pair; the composite primary key is what
makes the set free of duplicates and what the toggle relies on to settle
racing inserts. ``vkm_id`` deliberately carries no foreign key: a favorite
may outlive the catalog entry it points at, and readers drop such ids when
hydrating.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from . import Base, User, utcnow


class UserFavorite(Base):
    """Membership row linking a user to one favorited catalog entry."""

    __tablename__ = "user_favorites"

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    vkm_id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        index=True,
    )
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    user: Mapped[User] = relationship("User", back_populates="favorites")
