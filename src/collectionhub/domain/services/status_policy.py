"""Decides who may move a collection to which status."""

from collectionhub.core.exceptions import ForbiddenError
from collectionhub.domain.entities import Actor, CollectionStatus


class StatusTransitionPolicy:
    """Pure decision function for status changes requested in an edit.

    Moderators may set any status. Everyone else may only move a collection
    that is currently approved to a status that can be requested.
    """

    @staticmethod
    def is_allowed(
        actor: Actor, current: CollectionStatus, requested: CollectionStatus
    ) -> bool:
        if actor.is_mod:
            return True
        return current.is_approved and requested.can_be_requested

    @classmethod
    def check(
        cls, actor: Actor, current: CollectionStatus, requested: CollectionStatus
    ) -> None:
        """Raise ``ForbiddenError`` unless the transition is allowed."""
        if not cls.is_allowed(actor, current, requested):
            raise ForbiddenError("You don't have permission to set this status!")
