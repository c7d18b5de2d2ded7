"""The caller of a collection operation.

Credential parsing happens in the host's authentication layer; it hands
the core an ``Actor`` carrying the user's role and granted scopes.
"""

from dataclasses import dataclass, field
from enum import Enum


class Scope(str, Enum):
    """Capability granted to a credential."""

    COLLECTION_CREATE = "collection_create"
    COLLECTION_READ = "collection_read"
    COLLECTION_WRITE = "collection_write"
    COLLECTION_DELETE = "collection_delete"


ALL_SCOPES = frozenset(Scope)


class UserRole(str, Enum):
    """Role of a user account."""

    DEVELOPER = "developer"
    MODERATOR = "moderator"
    ADMIN = "admin"

    @property
    def is_mod(self) -> bool:
        return self in (UserRole.MODERATOR, UserRole.ADMIN)


@dataclass(frozen=True)
class Actor:
    """Represents an authenticated caller.

    Attributes:
        user_id: Identifier of the user.
        role: The user's role.
        scopes: Capabilities carried by the credential used for this request.
    """

    user_id: str
    role: UserRole = UserRole.DEVELOPER
    scopes: frozenset[Scope] = field(default=ALL_SCOPES)

    @property
    def is_mod(self) -> bool:
        return self.role.is_mod

    def has_scope(self, scope: Scope) -> bool:
        return scope in self.scopes
