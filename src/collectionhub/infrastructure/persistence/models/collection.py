"""SQLAlchemy model for the collections table."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from collectionhub.infrastructure.persistence.database import Base


class CollectionModel(Base):
    """SQLAlchemy model for the collections table.

    Attributes:
        id: Primary key (UUID string).
        owner_user_id: ID of the user who created the collection.
        title: Display name.
        description: Short description.
        status: Visibility/moderation status value.
        icon_url: Fully-qualified icon URL.
        color: Dominant icon colour packed as 0xRRGGBB.
        created_at: Timestamp when the collection was created.
        updated_at: Timestamp when the collection was last updated.
    """

    __tablename__ = "collections"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Collection ID (UUID)",
    )
    owner_user_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        index=True,
        comment="ID of the creating user",
    )
    title: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Collection title (3-64 chars)",
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Collection description (3-255 chars)",
    )
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="Visibility/moderation status",
    )
    icon_url: Mapped[str | None] = mapped_column(
        String(2048),
        nullable=True,
    )
    color: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Dominant icon colour (0xRRGGBB)",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Collection(id={self.id}, title={self.title})>"
