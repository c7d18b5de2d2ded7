"""FastAPI dependencies for collection routes.

The caller's identity is resolved by the host's authentication layer,
which stores an ``Actor`` on ``request.state.actor``. Requests without one
are anonymous.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from collectionhub.core.config import get_settings
from collectionhub.domain.entities import Actor
from collectionhub.domain.services import ResourceCache
from collectionhub.domain.services.collection_service import CollectionService
from collectionhub.infrastructure.persistence.database import get_db_session
from collectionhub.infrastructure.storage import AssetStore, create_asset_store


def get_current_actor(request: Request) -> Actor | None:
    """Get the actor attached to the request, if any."""
    return getattr(request.state, "actor", None)


def get_resource_cache(request: Request) -> ResourceCache:
    """Get the process-wide resource cache from app state."""
    if not hasattr(request.app.state, "resource_cache"):
        request.app.state.resource_cache = ResourceCache(
            ttl_seconds=get_settings().cache_ttl_seconds
        )
    return request.app.state.resource_cache


def get_asset_store(request: Request) -> AssetStore:
    """Get the configured asset store from app state."""
    if not hasattr(request.app.state, "asset_store"):
        request.app.state.asset_store = create_asset_store(get_settings())
    return request.app.state.asset_store


def get_collection_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    cache: Annotated[ResourceCache, Depends(get_resource_cache)],
    asset_store: Annotated[AssetStore, Depends(get_asset_store)],
) -> CollectionService:
    """Build a collection service bound to the request's session."""
    return CollectionService(session, cache, asset_store)


CurrentActor = Annotated[Actor | None, Depends(get_current_actor)]
Service = Annotated[CollectionService, Depends(get_collection_service)]
