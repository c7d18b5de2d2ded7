"""Lookup of the projects a collection may reference."""

from abc import ABC, abstractmethod
from typing import Iterable


class ProjectLookup(ABC):
    """Resolves project IDs to existing projects."""

    @abstractmethod
    async def get_many(self, project_ids: Iterable[str]) -> list[str]:
        """Return the IDs among ``project_ids`` that exist, in input order."""
        ...
