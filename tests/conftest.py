"""Pytest configuration for all tests."""

from dataclasses import dataclass
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from collectionhub.core.config import Settings
from collectionhub.core.exceptions import StorageFailureError
from collectionhub.domain.entities import Actor, UserRole
from collectionhub.domain.services import ResourceCache
from collectionhub.domain.services.collection_service import CollectionService
from collectionhub.infrastructure.persistence.database import (
    Base,
    enable_sqlite_foreign_keys,
)
from collectionhub.infrastructure.persistence.models import ProjectModel
from collectionhub.infrastructure.storage import AssetStore, UploadedAsset

PROJECT_IDS = ["proj-alpha", "proj-bravo", "proj-charlie", "proj-delta", "proj-echo"]


class MemoryAssetStore(AssetStore):
    """In-memory asset store recording every call."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.uploads: list[str] = []
        self.deletes: list[str] = []
        self.fail_uploads = False
        self.fail_deletes = False

    async def upload_file(self, content_type: str, path: str, data: bytes) -> UploadedAsset:
        if self.fail_uploads:
            raise StorageFailureError("upload refused")
        self.uploads.append(path)
        self.files[path] = data
        return UploadedAsset(file_name=path, content_type=content_type, size=len(data))

    async def delete_file(self, path: str) -> None:
        self.deletes.append(path)
        if self.fail_deletes:
            raise StorageFailureError("delete refused")
        self.files.pop(path, None)

    async def test_connection(self) -> tuple[bool, str | None]:
        return True, "memory"


@dataclass
class ActorHolder:
    """Mutable holder for the actor attached to API requests."""

    current: Actor | None = None


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database with foreign keys enforced and a
    handful of seeded projects.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        session.add_all([ProjectModel(id=pid, title=pid.title()) for pid in PROJECT_IDS])
        await session.commit()

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        cdn_url="https://cdn.example.test/",
        icon_namespace="data",
        max_icon_size=256 * 1024,
    )


@pytest.fixture
def resource_cache() -> ResourceCache:
    return ResourceCache(ttl_seconds=60)


@pytest.fixture
def asset_store() -> MemoryAssetStore:
    return MemoryAssetStore()


@pytest.fixture
def service(
    db_session: AsyncSession,
    resource_cache: ResourceCache,
    asset_store: MemoryAssetStore,
    settings: Settings,
) -> CollectionService:
    return CollectionService(db_session, resource_cache, asset_store, settings=settings)


@pytest.fixture
def owner() -> Actor:
    return Actor(user_id="user-owner")


@pytest.fixture
def stranger() -> Actor:
    return Actor(user_id="user-stranger")


@pytest.fixture
def moderator() -> Actor:
    return Actor(user_id="user-mod", role=UserRole.MODERATOR)


@pytest.fixture
def api_actor() -> ActorHolder:
    return ActorHolder()


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    resource_cache: ResourceCache,
    asset_store: MemoryAssetStore,
    api_actor: ActorHolder,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden dependencies."""
    from collectionhub.infrastructure.api.app import app
    from collectionhub.infrastructure.api.dependencies import (
        get_asset_store,
        get_current_actor,
        get_resource_cache,
    )
    from collectionhub.infrastructure.persistence.database import get_db_session

    app.dependency_overrides[get_db_session] = lambda: db_session
    app.dependency_overrides[get_resource_cache] = lambda: resource_cache
    app.dependency_overrides[get_asset_store] = lambda: asset_store
    app.dependency_overrides[get_current_actor] = lambda: api_actor.current

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}
