"""Persistence repositories for database operations."""

from collectionhub.infrastructure.persistence.repositories.collection_repository import (
    CollectionRepository,
)
from collectionhub.infrastructure.persistence.repositories.project_repository import (
    ProjectRepository,
)

__all__ = [
    "CollectionRepository",
    "ProjectRepository",
]
