"""Replace-all reconciliation of collection membership.

The submitted list becomes the entire new membership set. Every project is
resolved before anything is written; the old links are then deleted and
the new ones inserted, all inside the caller's transaction.
"""

from dataclasses import dataclass, field

from collectionhub.core.exceptions import ReferencedEntityMissingError
from collectionhub.core.logging import get_logger
from collectionhub.domain.services.project_lookup import ProjectLookup
from collectionhub.infrastructure.persistence.repositories import CollectionRepository

logger = get_logger(__name__)


@dataclass
class MembershipDiff:
    """Outcome of a membership replacement."""

    added: set[str] = field(default_factory=set)
    removed: set[str] = field(default_factory=set)
    kept: set[str] = field(default_factory=set)

    @property
    def unchanged(self) -> bool:
        return not self.added and not self.removed


class MembershipReconciler:
    """Applies replace-all membership edits."""

    def __init__(self, repository: CollectionRepository, projects: ProjectLookup) -> None:
        self.repository = repository
        self.projects = projects

    async def resolve(self, project_ids: list[str]) -> list[str]:
        """Resolve every submitted project ID.

        Raises:
            ReferencedEntityMissingError: On the first ID that does not exist.
        """
        requested = list(dict.fromkeys(project_ids))
        existing = set(await self.projects.get_many(requested))
        for project_id in requested:
            if project_id not in existing:
                raise ReferencedEntityMissingError(project_id)
        return requested

    async def replace_links(
        self, collection_id: str, new_project_ids: list[str], resolved: bool = False
    ) -> MembershipDiff:
        """Make ``new_project_ids`` the complete membership of a collection.

        Nothing is written if any ID fails to resolve. Re-submitting the
        current membership leaves it unchanged.

        Args:
            collection_id: The collection whose membership is replaced.
            new_project_ids: The complete new membership.
            resolved: ``new_project_ids`` is the output of ``resolve`` and
                is not looked up again.
        """
        if not resolved:
            new_project_ids = await self.resolve(new_project_ids)

        current = await self.repository.get_project_ids(collection_id)
        target = set(new_project_ids)
        diff = MembershipDiff(
            added=target - current,
            removed=current - target,
            kept=current & target,
        )

        await self.repository.delete_links(collection_id)
        await self.repository.insert_links(collection_id, new_project_ids)

        logger.info(
            "Collection membership replaced",
            collection_id=collection_id,
            added=len(diff.added),
            removed=len(diff.removed),
            kept=len(diff.kept),
        )
        return diff
