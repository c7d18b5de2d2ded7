"""Collection service for business logic.

Composes the authorization gate, repository, membership reconciler, status
policy and icon manager into the operations exposed to callers. Every
operation authorizes and validates before its first write, and runs all
of its writes inside one transaction.
"""

from __future__ import annotations

from typing import AsyncIterable

from sqlalchemy.ext.asyncio import AsyncSession

from collectionhub.core.config import Settings
from collectionhub.core.exceptions import NotFoundError, ValidationFailedError
from collectionhub.core.logging import get_logger
from collectionhub.domain.entities import Actor, Collection, CollectionStatus, Scope
from collectionhub.domain.services.authorization_gate import AuthorizationGate
from collectionhub.domain.services.collection_validator import CollectionValidator
from collectionhub.domain.services.icon_asset_manager import IconAssetManager
from collectionhub.domain.services.membership_reconciler import MembershipReconciler
from collectionhub.domain.services.project_lookup import ProjectLookup
from collectionhub.domain.services.resource_cache import ResourceCache
from collectionhub.domain.services.status_policy import StatusTransitionPolicy
from collectionhub.infrastructure.persistence.database import transaction
from collectionhub.infrastructure.persistence.repositories import (
    CollectionRepository,
    ProjectRepository,
)
from collectionhub.infrastructure.storage.base import AssetStore

logger = get_logger(__name__)


class CollectionService:
    """Service for collection business logic."""

    def __init__(
        self,
        session: AsyncSession,
        cache: ResourceCache,
        asset_store: AssetStore,
        projects: ProjectLookup | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session for this request.
            cache: Process-wide resource cache.
            asset_store: Blob store for icons.
            projects: Optional project lookup; defaults to the SQL repository.
            settings: Optional settings override.
        """
        self.session = session
        self.repository = CollectionRepository(session, cache)
        self.projects = projects or ProjectRepository(session)
        self.reconciler = MembershipReconciler(self.repository, self.projects)
        self.icons = IconAssetManager(self.repository, asset_store, settings)

    async def create(
        self,
        actor: Actor | None,
        title: str,
        description: str,
        project_ids: list[str] | None = None,
    ) -> Collection:
        """Create a collection owned by ``actor``.

        Initial project IDs that do not resolve to a project are dropped.

        Raises:
            UnauthenticatedError: No actor.
            ForbiddenError: Credential lacks the create scope.
            ValidationFailedError: Title, description or project list invalid.
        """
        actor = AuthorizationGate.require_scope(actor, Scope.COLLECTION_CREATE)
        title = title.strip()
        project_ids = project_ids or []
        CollectionValidator.ensure_valid(
            CollectionValidator.validate_create(title, description, project_ids)
        )

        async with transaction(self.session):
            initial = await self.projects.get_many(project_ids)
            collection = await self.repository.create(
                owner_user_id=actor.user_id,
                title=title,
                description=description,
                project_ids=initial,
            )

        logger.info(
            "Collection created",
            collection_id=collection.id,
            user_id=actor.user_id,
            projects=len(collection.project_ids),
            dropped_projects=len(set(project_ids)) - len(initial),
        )
        return collection

    async def list(self, actor: Actor | None, collection_ids: list[str]) -> list[Collection]:
        """Get the subset of ``collection_ids`` the caller may see."""
        viewer = AuthorizationGate.viewer(actor)
        collections = await self.repository.get_many(collection_ids)
        return AuthorizationGate.filter_visible(collections, viewer)

    async def get(self, actor: Actor | None, collection_id: str) -> Collection:
        """Get one collection.

        Raises:
            NotFoundError: Unknown ID, or hidden from the caller.
        """
        viewer = AuthorizationGate.viewer(actor)
        collection = await self.repository.get(collection_id)
        return AuthorizationGate.require_visible(collection_id, collection, viewer)

    async def edit(
        self,
        actor: Actor | None,
        collection_id: str,
        title: str | None = None,
        description: str | None = None,
        status: CollectionStatus | str | None = None,
        new_project_ids: list[str] | None = None,
    ) -> None:
        """Apply a partial edit atomically.

        Raises:
            UnauthenticatedError: No actor.
            ForbiddenError: Missing write scope, not owner/moderator, or
                disallowed status change.
            NotFoundError: Unknown collection.
            ValidationFailedError: Invalid field value.
            ReferencedEntityMissingError: Unknown project in ``new_project_ids``.
        """
        actor = AuthorizationGate.require_scope(actor, Scope.COLLECTION_WRITE)

        if title is not None:
            title = title.strip()
        CollectionValidator.ensure_valid(
            CollectionValidator.validate_edit(
                title=title, description=description, project_ids=new_project_ids
            )
        )
        if status is not None:
            try:
                status = CollectionStatus(status)
            except ValueError:
                raise ValidationFailedError.single(
                    "status", f"Unknown status '{status}'", "status_invalid"
                ) from None

        collection = AuthorizationGate.require_modify(
            collection_id, await self.repository.get(collection_id), actor
        )
        if status is not None:
            StatusTransitionPolicy.check(actor, collection.status, status)
        if new_project_ids is not None:
            new_project_ids = await self.reconciler.resolve(new_project_ids)

        async with transaction(self.session):
            await self.repository.update_fields(
                collection.id, title=title, description=description, status=status
            )
            if new_project_ids is not None:
                await self.reconciler.replace_links(
                    collection.id, new_project_ids, resolved=True
                )

        logger.info(
            "Collection edited",
            collection_id=collection.id,
            user_id=actor.user_id,
            title_changed=title is not None,
            description_changed=description is not None,
            status=status.value if status is not None else None,
        )

    async def set_icon(
        self,
        actor: Actor | None,
        collection_id: str,
        extension: str,
        payload: bytes | AsyncIterable[bytes],
    ) -> str:
        """Replace a collection's icon.

        Returns:
            The new icon URL.
        """
        self.icons.content_type_for(extension)
        actor = AuthorizationGate.require_scope(actor, Scope.COLLECTION_WRITE)
        collection = AuthorizationGate.require_modify(
            collection_id, await self.repository.get(collection_id), actor
        )
        return await self.icons.set_icon(collection, extension, payload)

    async def clear_icon(self, actor: Actor | None, collection_id: str) -> None:
        """Remove a collection's icon."""
        actor = AuthorizationGate.require_scope(actor, Scope.COLLECTION_WRITE)
        collection = AuthorizationGate.require_modify(
            collection_id, await self.repository.get(collection_id), actor
        )
        await self.icons.clear_icon(collection)

    async def delete(self, actor: Actor | None, collection_id: str) -> None:
        """Delete a collection and all of its membership links.

        Raises:
            NotFoundError: Unknown collection, or it vanished before the delete.
        """
        actor = AuthorizationGate.require_scope(actor, Scope.COLLECTION_DELETE)
        collection = AuthorizationGate.require_modify(
            collection_id, await self.repository.get(collection_id), actor
        )

        async with transaction(self.session):
            removed = await self.repository.remove(collection.id)
        if not removed:
            raise NotFoundError(collection_id)

        logger.info("Collection deleted", collection_id=collection.id, user_id=actor.user_id)
