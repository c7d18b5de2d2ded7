"""Authorization checks shared by every collection operation.

Two checks apply:

1. Scope: the caller's credential must carry the scope the operation
   requires. Anonymous callers only pass read-class checks.
2. Visibility/ownership: owners and moderators see and modify everything;
   everyone else only sees collections whose status is not hidden and may
   never modify them.

Hidden collections are reported as not found to viewers, so that their
existence does not leak. Writes by an authenticated actor who is neither
owner nor moderator are forbidden.
"""

from typing import Iterable

from collectionhub.core.exceptions import ForbiddenError, NotFoundError, UnauthenticatedError
from collectionhub.core.logging import get_logger
from collectionhub.domain.entities import Actor, Collection, Scope

logger = get_logger(__name__)


class AuthorizationGate:
    """Capability-scope and visibility/ownership checks."""

    @staticmethod
    def viewer(actor: Actor | None, scope: Scope = Scope.COLLECTION_READ) -> Actor | None:
        """Resolve the actor for a read-class operation.

        An actor whose credential lacks ``scope`` is treated as anonymous.
        """
        if actor is not None and not actor.has_scope(scope):
            return None
        return actor

    @staticmethod
    def require_scope(actor: Actor | None, scope: Scope) -> Actor:
        """Check that a write-class caller is authenticated and carries ``scope``.

        Raises:
            UnauthenticatedError: If there is no actor.
            ForbiddenError: If the actor's credential lacks ``scope``.
        """
        if actor is None:
            raise UnauthenticatedError()
        if not actor.has_scope(scope):
            logger.info("Scope check failed", user_id=actor.user_id, scope=scope.value)
            raise ForbiddenError(f"Your credential does not carry the '{scope.value}' scope")
        return actor

    @staticmethod
    def is_authorized(collection: Collection, actor: Actor | None) -> bool:
        """Whether ``actor`` may see ``collection``."""
        if not collection.status.is_hidden:
            return True
        if actor is None:
            return False
        return actor.is_mod or actor.user_id == collection.owner_user_id

    @staticmethod
    def can_modify(collection: Collection, actor: Actor) -> bool:
        """Whether ``actor`` may mutate ``collection``."""
        return actor.is_mod or actor.user_id == collection.owner_user_id

    @classmethod
    def filter_visible(
        cls, collections: Iterable[Collection], actor: Actor | None
    ) -> list[Collection]:
        return [c for c in collections if cls.is_authorized(c, actor)]

    @classmethod
    def require_visible(
        cls, collection_id: str, collection: Collection | None, actor: Actor | None
    ) -> Collection:
        """Return the collection if the actor may see it, else raise ``NotFoundError``."""
        if collection is None or not cls.is_authorized(collection, actor):
            raise NotFoundError(collection_id)
        return collection

    @classmethod
    def require_modify(
        cls, collection_id: str, collection: Collection | None, actor: Actor
    ) -> Collection:
        """Return the collection if the actor may mutate it.

        Raises:
            NotFoundError: If the collection does not exist.
            ForbiddenError: If the actor is neither owner nor moderator.
        """
        if collection is None:
            raise NotFoundError(collection_id)
        if not cls.can_modify(collection, actor):
            logger.info(
                "Collection modification denied",
                collection_id=collection_id,
                user_id=actor.user_id,
            )
            raise ForbiddenError()
        return collection
