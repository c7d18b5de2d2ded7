"""Pydantic schemas for API requests and responses."""

from collectionhub.infrastructure.api.schemas.collection_schemas import (
    CollectionResponse,
    CreateCollectionRequest,
    EditCollectionRequest,
    ErrorResponse,
)

__all__ = [
    "CollectionResponse",
    "CreateCollectionRequest",
    "EditCollectionRequest",
    "ErrorResponse",
]
