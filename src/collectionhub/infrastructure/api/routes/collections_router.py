"""Collection API routes.

Thin adapter over ``CollectionService``. Errors raised by the service are
mapped to HTTP responses by the application's exception handlers.
"""

import json

from fastapi import APIRouter, Query, Request, Response, status
from pydantic import TypeAdapter, ValidationError

from collectionhub.core.exceptions import ValidationFailedError
from collectionhub.infrastructure.api.dependencies import CurrentActor, Service
from collectionhub.infrastructure.api.schemas import (
    CollectionResponse,
    CreateCollectionRequest,
    EditCollectionRequest,
    ErrorResponse,
)

router = APIRouter()

_id_list = TypeAdapter(list[str])


def parse_id_list(raw: str) -> list[str]:
    """Parse the ``ids`` query parameter, a JSON array of strings."""
    try:
        return _id_list.validate_python(json.loads(raw))
    except (json.JSONDecodeError, ValidationError):
        raise ValidationFailedError.single(
            "ids", "Expected a JSON array of collection ids", "ids_invalid"
        ) from None


@router.get("/collections", response_model=list[CollectionResponse])
async def list_collections(
    actor: CurrentActor,
    service: Service,
    ids: str = Query(..., description='JSON array of ids, e.g. ["abc","def"]'),
) -> list[CollectionResponse]:
    """Get the visible subset of the requested collections."""
    collections = await service.list(actor, parse_id_list(ids))
    return [CollectionResponse.from_entity(c) for c in collections]


@router.post(
    "/collection",
    status_code=status.HTTP_200_OK,
    response_model=CollectionResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        401: {"model": ErrorResponse, "description": "Authentication required"},
        403: {"model": ErrorResponse, "description": "Missing scope"},
    },
)
async def create_collection(
    request: CreateCollectionRequest,
    actor: CurrentActor,
    service: Service,
) -> CollectionResponse:
    """Create a collection owned by the caller."""
    collection = await service.create(
        actor,
        title=request.title,
        description=request.description,
        project_ids=request.projects,
    )
    return CollectionResponse.from_entity(collection)


@router.get(
    "/collection/{collection_id}",
    response_model=CollectionResponse,
    responses={404: {"description": "Collection not found"}},
)
async def get_collection(
    collection_id: str,
    actor: CurrentActor,
    service: Service,
) -> CollectionResponse:
    """Get a single collection."""
    return CollectionResponse.from_entity(await service.get(actor, collection_id))


@router.patch(
    "/collection/{collection_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error or unknown project"},
        401: {"model": ErrorResponse, "description": "Authentication required"},
        403: {"model": ErrorResponse, "description": "Not permitted"},
        404: {"model": ErrorResponse, "description": "Collection not found"},
    },
)
async def edit_collection(
    collection_id: str,
    request: EditCollectionRequest,
    actor: CurrentActor,
    service: Service,
) -> Response:
    """Apply a partial edit to a collection."""
    await service.edit(
        actor,
        collection_id,
        title=request.title,
        description=request.description,
        status=request.status,
        new_project_ids=request.new_projects,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/collection/{collection_id}/icon",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        400: {"description": "Bad extension or payload too large"},
        404: {"description": "Collection not found"},
    },
)
async def set_collection_icon(
    collection_id: str,
    request: Request,
    actor: CurrentActor,
    service: Service,
    ext: str = Query(..., description="Image file extension, e.g. png"),
) -> Response:
    """Replace a collection's icon with the raw request body."""
    await service.set_icon(actor, collection_id, ext, request.stream())
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/collection/{collection_id}/icon", status_code=status.HTTP_204_NO_CONTENT)
async def clear_collection_icon(
    collection_id: str,
    actor: CurrentActor,
    service: Service,
) -> Response:
    """Remove a collection's icon."""
    await service.clear_icon(actor, collection_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/collection/{collection_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_collection(
    collection_id: str,
    actor: CurrentActor,
    service: Service,
) -> Response:
    """Delete a collection."""
    await service.delete(actor, collection_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
