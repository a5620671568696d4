from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
    validates,
)

from kiescompass.utils.identifiers import new_identifier


def utcnow() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_identifier)
    username: Mapped[str] = mapped_column(String(20), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    firstname: Mapped[str] = mapped_column(String(100), nullable=False)
    lastname: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="student",
        server_default="student",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    favorites: Mapped[list["UserFavorite"]] = relationship(
        "UserFavorite",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @validates("email")
    def _lowercase_email(self, key: str, value: str) -> str:
        return value.strip().lower()


# Case-insensitive uniqueness; email is already stored lower-cased.
Index("uq_users_username_lower", func.lower(User.username), unique=True)


class Vkm(Base):
    """A selectable course module in the catalog."""

    __tablename__ = "vkm"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_identifier)
    legacy_id: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        doc="Row number from the original CSV export, kept for traceability.",
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    short_description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    study_credit: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        doc="Indexed because recommendations sort on it",
    )
    location: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    contact_id: Mapped[str] = mapped_column(String(64), nullable=False)
    level: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    learning_outcomes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool | None] = mapped_column(
        Boolean,
        nullable=True,
        index=True,
        doc=(
            "NULL on records imported before the flag existed. NULL counts as"
            " active; see kiescompass.db.repositories.vkm_filters."
        ),
    )
    created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=utcnow,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=utcnow,
        onupdate=utcnow,
    )


from .favorites import UserFavorite  # noqa: E402

__all__ = ["Base", "User", "UserFavorite", "Vkm", "utcnow"]
