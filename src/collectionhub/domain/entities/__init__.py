"""Domain entities for CollectionHub.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from collectionhub.domain.entities.actor import ALL_SCOPES, Actor, Scope, UserRole
from collectionhub.domain.entities.collection import (
    DEFAULT_STATUS,
    Collection,
    CollectionStatus,
)

__all__ = [
    "ALL_SCOPES",
    "Actor",
    "Collection",
    "CollectionStatus",
    "DEFAULT_STATUS",
    "Scope",
    "UserRole",
]
