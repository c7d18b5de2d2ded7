"""Repository for collection operations.

Provides transactional CRUD over the collections table and its membership
join table, fronted by the process-wide ResourceCache.

Cache contract: every change this repository makes to the cache while its
session is inside a transaction is deferred until that transaction commits.
Deferred invalidations are also applied on rollback (the cache may have been
filled from uncommitted state inside the transaction); deferred
write-through entries are dropped on rollback.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Iterable

from sqlalchemy import delete, event, insert, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from collectionhub.core.exceptions import NotFoundError, ValidationFailedError
from collectionhub.core.logging import get_logger
from collectionhub.domain.entities import DEFAULT_STATUS, Collection, CollectionStatus
from collectionhub.domain.services.collection_validator import CollectionValidator
from collectionhub.domain.services.resource_cache import ResourceCache
from collectionhub.infrastructure.persistence.models import (
    CollectionModel,
    CollectionProjectModel,
)

logger = get_logger(__name__)

_PENDING_KEY = "collectionhub.pending_cache_writes"


def _pending_writes(session: Session, cache: ResourceCache) -> dict[str, Collection | None]:
    return session.info.setdefault((_PENDING_KEY, id(cache)), {})


def _as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    SQLite hands back naive datetimes for ``DateTime(timezone=True)`` columns.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _install_cache_hooks(session: AsyncSession, cache: ResourceCache) -> None:
    """Apply deferred cache writes when the session's transaction ends."""
    sync_session = session.sync_session
    if (_PENDING_KEY, id(cache)) in sync_session.info:
        return
    _pending_writes(sync_session, cache)

    def flush_pending(committed: bool) -> None:
        pending = _pending_writes(sync_session, cache)
        if not pending:
            return
        writes = list(pending.items())
        pending.clear()
        for collection_id, value in writes:
            if committed and value is not None:
                cache.set(value)
            else:
                cache.invalidate(collection_id)

    @event.listens_for(sync_session, "after_commit")
    def _after_commit(session: Session) -> None:
        flush_pending(committed=True)

    @event.listens_for(sync_session, "after_soft_rollback")
    def _after_rollback(session: Session, previous_transaction: Any) -> None:
        flush_pending(committed=False)


class CollectionRepository:
    """Repository for collection database operations."""

    def __init__(self, session: AsyncSession, cache: ResourceCache) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
            cache: Process-wide resource cache.
        """
        self.session = session
        self.cache = cache
        _install_cache_hooks(session, cache)

    @property
    def _pending(self) -> dict[str, Collection | None]:
        return _pending_writes(self.session.sync_session, self.cache)

    async def generate_id(self) -> str:
        """Allocate an unused collection ID."""
        while True:
            collection_id = str(uuid.uuid4())
            result = await self.session.execute(
                select(CollectionModel.id).where(CollectionModel.id == collection_id)
            )
            if result.scalar_one_or_none() is None:
                return collection_id

    async def create(
        self,
        owner_user_id: str,
        title: str,
        description: str,
        project_ids: list[str],
        status: CollectionStatus = DEFAULT_STATUS,
    ) -> Collection:
        """Insert a collection and its membership links.

        The returned entity is built from the known inputs rather than
        re-read from the database.

        Args:
            owner_user_id: ID of the creating user.
            title: Collection title.
            description: Collection description.
            project_ids: IDs of existing projects to link.
            status: Initial status.

        Returns:
            The created collection.
        """
        collection_id = await self.generate_id()
        now = datetime.now(timezone.utc)

        self.session.add(
            CollectionModel(
                id=collection_id,
                owner_user_id=owner_user_id,
                title=title,
                description=description,
                status=status.value,
                created_at=now,
                updated_at=now,
            )
        )
        await self.session.flush()
        linked = await self.insert_links(collection_id, project_ids)

        collection = Collection(
            id=collection_id,
            owner_user_id=owner_user_id,
            title=title,
            description=description,
            status=status,
            created=now,
            updated=now,
            project_ids=tuple(sorted(linked)),
        )
        self._write_through(collection)
        return collection

    async def get(self, collection_id: str) -> Collection | None:
        """Get a collection by ID, cache first.

        Args:
            collection_id: The collection ID.

        Returns:
            The collection if found, None otherwise.
        """
        found = await self.get_many([collection_id])
        return found[0] if found else None

    async def get_many(self, collection_ids: Iterable[str]) -> list[Collection]:
        """Get several collections, cache first.

        Unknown IDs are silently omitted. Results follow the order of
        ``collection_ids`` with duplicates removed.
        """
        ids = list(dict.fromkeys(collection_ids))
        pending = self._pending
        cacheable = [cid for cid in ids if cid not in pending]

        found = self.cache.get_many(cacheable)
        misses = [cid for cid in ids if cid not in found]
        if misses:
            logger.debug("Collection cache miss", collection_ids=misses)
            generations = self.cache.generations(misses)
            loaded = await self._load_many(misses)
            for collection in loaded.values():
                if collection.id not in pending:
                    self.cache.set_if_generation(collection, generations[collection.id])
            found.update(loaded)

        return [found[cid] for cid in ids if cid in found]

    async def _load_many(self, collection_ids: list[str]) -> dict[str, Collection]:
        rows = await self.session.execute(
            select(CollectionModel)
            .where(CollectionModel.id.in_(collection_ids))
            .execution_options(populate_existing=True)
        )
        models = list(rows.scalars().all())
        if not models:
            return {}

        links = await self.session.execute(
            select(CollectionProjectModel.collection_id, CollectionProjectModel.project_id)
            .where(CollectionProjectModel.collection_id.in_([m.id for m in models]))
            .order_by(CollectionProjectModel.project_id)
        )
        members: dict[str, list[str]] = {m.id: [] for m in models}
        for collection_id, project_id in links.all():
            members[collection_id].append(project_id)

        return {
            m.id: Collection(
                id=m.id,
                owner_user_id=m.owner_user_id,
                title=m.title,
                description=m.description,
                status=CollectionStatus(m.status),
                created=_as_utc(m.created_at),
                updated=_as_utc(m.updated_at),
                icon_url=m.icon_url,
                color=m.color,
                project_ids=tuple(members[m.id]),
            )
            for m in models
        }

    async def update_fields(
        self,
        collection_id: str,
        title: str | None = None,
        description: str | None = None,
        status: CollectionStatus | str | None = None,
    ) -> None:
        """Apply the provided fields, one statement per field.

        All values are validated before any statement executes. The caller
        owns the transaction, so a failing statement aborts the whole edit.

        Raises:
            ValidationFailedError: If a provided value is not allowed.
            NotFoundError: If the collection does not exist.
        """
        CollectionValidator.ensure_valid(
            CollectionValidator.validate_edit(title=title, description=description)
        )
        if status is not None:
            try:
                status = CollectionStatus(status)
            except ValueError:
                raise ValidationFailedError.single(
                    "status", f"Unknown status '{status}'", "status_invalid"
                ) from None

        if title is not None:
            await self._update(collection_id, title=title)
        if description is not None:
            await self._update(collection_id, description=description)
        if status is not None:
            await self._update(collection_id, status=status.value)

    async def update_icon(
        self, collection_id: str, icon_url: str | None, color: int | None
    ) -> None:
        """Set or clear the icon URL and colour together."""
        await self._update(collection_id, icon_url=icon_url, color=color)

    async def _update(self, collection_id: str, **values: Any) -> None:
        result = await self.session.execute(
            update(CollectionModel)
            .where(CollectionModel.id == collection_id)
            .values(**values)
        )
        if result.rowcount == 0:
            raise NotFoundError(collection_id)
        self.invalidate_cache(collection_id)

    async def remove(self, collection_id: str) -> bool:
        """Delete a collection and all of its membership links.

        Returns:
            True if a row existed, False otherwise.
        """
        await self.delete_links(collection_id)
        result = await self.session.execute(
            delete(CollectionModel).where(CollectionModel.id == collection_id)
        )
        self.invalidate_cache(collection_id)
        found = result.rowcount > 0
        logger.debug("Collection row deleted", collection_id=collection_id, found=found)
        return found

    async def get_project_ids(self, collection_id: str) -> set[str]:
        """Get the current membership set straight from the database."""
        result = await self.session.execute(
            select(CollectionProjectModel.project_id).where(
                CollectionProjectModel.collection_id == collection_id
            )
        )
        return set(result.scalars().all())

    async def delete_links(self, collection_id: str) -> int:
        """Delete every membership link of a collection.

        Returns:
            Number of links deleted.
        """
        result = await self.session.execute(
            delete(CollectionProjectModel).where(
                CollectionProjectModel.collection_id == collection_id
            )
        )
        self.invalidate_cache(collection_id)
        return result.rowcount

    async def insert_links(self, collection_id: str, project_ids: Iterable[str]) -> list[str]:
        """Link projects to a collection.

        Inserting a pair that already exists is a no-op.

        Returns:
            The de-duplicated project IDs, in submission order.
        """
        ids = list(dict.fromkeys(project_ids))
        if not ids:
            return ids

        rows = [{"collection_id": collection_id, "project_id": pid} for pid in ids]
        dialect = self.session.get_bind().dialect.name
        table = CollectionProjectModel.__table__

        if dialect == "postgresql":
            stmt = postgresql.insert(table).values(rows).on_conflict_do_nothing()
        elif dialect == "sqlite":
            stmt = sqlite.insert(table).values(rows).on_conflict_do_nothing()
        else:
            existing = await self.get_project_ids(collection_id)
            rows = [row for row in rows if row["project_id"] not in existing]
            stmt = insert(table).values(rows) if rows else None

        if stmt is not None:
            await self.session.execute(stmt)
        self.invalidate_cache(collection_id)
        return ids

    def invalidate_cache(self, collection_id: str) -> None:
        """Clear the cache entry for a collection.

        Inside a transaction the invalidation is deferred until the
        transaction ends; outside one it is applied immediately.
        """
        if self.session.in_transaction():
            self._pending[collection_id] = None
        else:
            self.cache.invalidate(collection_id)

    def _write_through(self, collection: Collection) -> None:
        if self.session.in_transaction():
            self._pending[collection.id] = collection
        else:
            self.cache.set(collection)
