"""Collection entity and its moderation status.

A collection is a user-owned, named group of references to projects.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class CollectionStatus(str, Enum):
    """Visibility/moderation status of a collection."""

    LISTED = "listed"
    UNLISTED = "unlisted"
    PRIVATE = "private"
    APPROVED = "approved"
    REJECTED = "rejected"
    UNKNOWN = "unknown"

    @property
    def is_approved(self) -> bool:
        """Whether the collection has passed moderation."""
        return self in _APPROVED

    @property
    def can_be_requested(self) -> bool:
        """Whether an owner may request this status without a moderator."""
        return self in _REQUESTABLE

    @property
    def is_hidden(self) -> bool:
        """Whether the collection is hidden from everyone but its owner and moderators."""
        return self in _HIDDEN


_APPROVED = frozenset(
    {
        CollectionStatus.LISTED,
        CollectionStatus.UNLISTED,
        CollectionStatus.PRIVATE,
        CollectionStatus.APPROVED,
    }
)
_REQUESTABLE = frozenset(
    {CollectionStatus.LISTED, CollectionStatus.UNLISTED, CollectionStatus.PRIVATE}
)
_HIDDEN = frozenset(
    {CollectionStatus.PRIVATE, CollectionStatus.REJECTED, CollectionStatus.UNKNOWN}
)

DEFAULT_STATUS = CollectionStatus.LISTED


@dataclass(frozen=True)
class Collection:
    """Collection entity.

    Instances are shared through the resource cache, so they are frozen and
    carry ``project_ids`` as a tuple in stable (sorted) order.

    Attributes:
        id: Opaque identifier assigned at creation.
        owner_user_id: Identifier of the creating user.
        title: Display name (3-64 chars).
        description: Short description (3-255 chars).
        status: Visibility/moderation status.
        created: Creation timestamp.
        updated: Timestamp of the last attribute change.
        icon_url: Fully-qualified icon URL, or None.
        color: Dominant icon colour packed as 0xRRGGBB, or None.
        project_ids: Member project identifiers.
    """

    id: str
    owner_user_id: str
    title: str
    description: str
    status: CollectionStatus
    created: datetime
    updated: datetime
    icon_url: str | None = None
    color: int | None = None
    project_ids: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate collection data after initialization."""
        if not self.id:
            raise ValueError("Collection ID is required")
        if not self.owner_user_id:
            raise ValueError("Collection owner is required")
        if self.icon_url is None and self.color is not None:
            raise ValueError("Collection color requires an icon")
