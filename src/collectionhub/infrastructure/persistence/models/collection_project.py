"""SQLAlchemy model for the collections_projects junction table.

Implements the many-to-many membership between collections and projects.
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from collectionhub.infrastructure.persistence.database import Base


class CollectionProjectModel(Base):
    """Junction table linking a collection to one of its member projects.

    The composite primary key makes each (collection, project) pair unique.

    Attributes:
        collection_id: Foreign key to collections table.
        project_id: Foreign key to projects table.
    """

    __tablename__ = "collections_projects"

    collection_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("collections.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Foreign key to collections table",
    )
    project_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
        comment="Foreign key to projects table",
    )

    def __repr__(self) -> str:
        return (
            f"<CollectionProject(collection_id={self.collection_id}, "
            f"project_id={self.project_id})>"
        )
