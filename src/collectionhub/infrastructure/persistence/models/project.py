"""SQLAlchemy model for the projects table.

Projects are owned by another part of the system; collections only
reference them.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from collectionhub.infrastructure.persistence.database import Base


class ProjectModel(Base):
    """SQLAlchemy model for the projects table."""

    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Project ID (UUID)",
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, title={self.title})>"
