"""SQLAlchemy models for CollectionHub tables.

All models inherit from the Base class defined in database.py and are
created on application startup in development mode.
"""

from collectionhub.infrastructure.persistence.models.collection import CollectionModel
from collectionhub.infrastructure.persistence.models.collection_project import (
    CollectionProjectModel,
)
from collectionhub.infrastructure.persistence.models.project import ProjectModel

__all__ = [
    "CollectionModel",
    "CollectionProjectModel",
    "ProjectModel",
]
