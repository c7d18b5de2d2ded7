"""Pydantic schemas for collection endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from collectionhub.domain.entities import Collection


class CreateCollectionRequest(BaseModel):
    """Request body for creating a collection."""

    title: str = Field(..., description="Collection title (3-64 chars)")
    description: str = Field(..., description="Short description (3-255 chars)")
    projects: list[str] = Field(
        default_factory=list,
        description="Initial project IDs (at most 32)",
    )


class EditCollectionRequest(BaseModel):
    """Request body for editing a collection. Omitted fields are left alone."""

    title: str | None = None
    description: str | None = None
    status: str | None = None
    new_projects: list[str] | None = Field(
        default=None,
        description="Complete new membership list (at most 64)",
    )


class CollectionResponse(BaseModel):
    """Response for a single collection."""

    id: str
    user: str
    title: str
    description: str
    created: datetime
    updated: datetime
    icon_url: str | None = None
    color: int | None = None
    status: str
    projects: list[str]

    @classmethod
    def from_entity(cls, collection: Collection) -> "CollectionResponse":
        return cls(
            id=collection.id,
            user=collection.owner_user_id,
            title=collection.title,
            description=collection.description,
            created=collection.created,
            updated=collection.updated,
            icon_url=collection.icon_url,
            color=collection.color,
            status=collection.status.value,
            projects=list(collection.project_ids),
        )


class ErrorResponse(BaseModel):
    """Error body returned for failed requests."""

    error: str
    message: str
    details: list[dict[str, str]] | None = None
