"""Domain services for CollectionHub.

Only the framework-free services are exported here. The services that
drive persistence (``CollectionService``, ``MembershipReconciler``,
``IconAssetManager``) are imported from their own modules.
"""

from collectionhub.domain.services.authorization_gate import AuthorizationGate
from collectionhub.domain.services.collection_validator import CollectionValidator
from collectionhub.domain.services.project_lookup import ProjectLookup
from collectionhub.domain.services.resource_cache import ResourceCache
from collectionhub.domain.services.status_policy import StatusTransitionPolicy

__all__ = [
    "AuthorizationGate",
    "CollectionValidator",
    "ProjectLookup",
    "ResourceCache",
    "StatusTransitionPolicy",
]
