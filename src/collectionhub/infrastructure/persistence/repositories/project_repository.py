"""Repository for reading the projects collections link to."""

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from collectionhub.domain.services.project_lookup import ProjectLookup
from collectionhub.infrastructure.persistence.models import ProjectModel


class ProjectRepository(ProjectLookup):
    """SQL-backed project lookup."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_many(self, project_ids: Iterable[str]) -> list[str]:
        ids = list(dict.fromkeys(project_ids))
        if not ids:
            return []
        result = await self.session.execute(
            select(ProjectModel.id).where(ProjectModel.id.in_(ids))
        )
        existing = set(result.scalars().all())
        return [pid for pid in ids if pid in existing]
