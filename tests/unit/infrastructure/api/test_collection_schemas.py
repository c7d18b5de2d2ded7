"""Unit tests for collection API schemas."""

from datetime import datetime, timezone

from collectionhub.domain.entities import Collection, CollectionStatus
from collectionhub.infrastructure.api.schemas import (
    CollectionResponse,
    CreateCollectionRequest,
    EditCollectionRequest,
)


def test_response_from_entity():
    now = datetime(2026, 3, 1, tzinfo=timezone.utc)
    collection = Collection(
        id="col-1",
        owner_user_id="user-1",
        title="Favourites",
        description="Some mods",
        status=CollectionStatus.UNLISTED,
        created=now,
        updated=now,
        icon_url="https://cdn/x.png",
        color=0xABCDEF,
        project_ids=("p1", "p2"),
    )

    response = CollectionResponse.from_entity(collection)

    assert response.id == "col-1"
    assert response.user == "user-1"
    assert response.status == "unlisted"
    assert response.projects == ["p1", "p2"]
    assert response.color == 0xABCDEF


def test_create_request_defaults_projects():
    request = CreateCollectionRequest(title="Favourites", description="Some mods")

    assert request.projects == []


def test_edit_request_fields_are_optional():
    request = EditCollectionRequest()

    assert request.title is None
    assert request.new_projects is None
    assert request.model_fields_set == set()
