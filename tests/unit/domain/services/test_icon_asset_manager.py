"""Unit tests for IconAssetManager."""

from io import BytesIO
from unittest import mock

import pytest
import pytest_asyncio
from PIL import Image

from collectionhub.core.exceptions import (
    PersistenceFailureError,
    StorageFailureError,
    ValidationFailedError,
)
from collectionhub.domain.services.icon_asset_manager import (
    IconAssetManager,
    wait_for_icon_cleanup,
)
from collectionhub.domain.services.image_utils import content_hash
from collectionhub.infrastructure.persistence.database import transaction
from collectionhub.infrastructure.persistence.repositories import CollectionRepository


def png_bytes(color=(10, 20, 30)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (16, 16), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def repository(db_session, resource_cache) -> CollectionRepository:
    return CollectionRepository(db_session, resource_cache)


@pytest.fixture
def manager(repository, asset_store, settings) -> IconAssetManager:
    return IconAssetManager(repository, asset_store, settings)


@pytest_asyncio.fixture
async def collection(db_session, repository):
    async with transaction(db_session):
        return await repository.create(
            owner_user_id="user-owner",
            title="Favourites",
            description="Some mods",
            project_ids=[],
        )


class TestPaths:
    def test_asset_path(self, manager):
        assert manager.asset_path("col-1", "abc123", "png") == "data/col-1/abc123.png"

    def test_icon_url_round_trip(self, manager):
        url = manager.icon_url("data/col-1/abc123.png")

        assert url == "https://cdn.example.test/data/col-1/abc123.png"
        assert manager.path_from_url(url) == "data/col-1/abc123.png"

    def test_foreign_url_has_no_path(self, manager):
        assert manager.path_from_url("https://elsewhere.test/data/x.png") is None

    def test_content_type_for_rejects_unknown_extension(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            IconAssetManager.content_type_for("exe")

        assert exc_info.value.errors[0].field == "ext"


class TestSetIcon:
    @pytest.mark.asyncio
    async def test_uploads_and_updates_row(self, manager, repository, asset_store, collection):
        data = png_bytes((255, 0, 0))

        url = await manager.set_icon(collection, "png", data)

        expected_path = f"data/{collection.id}/{content_hash(data)}.png"
        assert asset_store.uploads == [expected_path]
        assert url == f"https://cdn.example.test/{expected_path}"

        stored = await repository.get(collection.id)
        assert stored.icon_url == url
        assert stored.color == 0xFF0000

    @pytest.mark.asyncio
    async def test_oversized_payload_never_reaches_store(
        self, manager, repository, asset_store, collection, settings
    ):
        with pytest.raises(ValidationFailedError):
            await manager.set_icon(collection, "png", b"x" * (settings.max_icon_size + 1))

        assert asset_store.uploads == []
        assert (await repository.get(collection.id)).icon_url is None

    @pytest.mark.asyncio
    async def test_bad_extension_never_reaches_store(self, manager, asset_store, collection):
        with pytest.raises(ValidationFailedError):
            await manager.set_icon(collection, "exe", png_bytes())

        assert asset_store.uploads == []

    @pytest.mark.asyncio
    async def test_undecodable_image_gets_no_colour(self, manager, repository, collection):
        url = await manager.set_icon(collection, "svg", b"<svg xmlns='http://www.w3.org/2000/svg'/>")

        stored = await repository.get(collection.id)
        assert stored.icon_url == url
        assert stored.color is None

    @pytest.mark.asyncio
    async def test_replacing_icon_deletes_old_blob(self, manager, repository, asset_store, collection):
        await manager.set_icon(collection, "png", png_bytes((1, 2, 3)))
        first = await repository.get(collection.id)
        old_path = manager.path_from_url(first.icon_url)

        await manager.set_icon(first, "png", png_bytes((4, 5, 6)))
        await wait_for_icon_cleanup()

        assert asset_store.deletes == [old_path]
        assert old_path not in asset_store.files

    @pytest.mark.asyncio
    async def test_same_content_keeps_blob(self, manager, repository, asset_store, collection):
        data = png_bytes()
        await manager.set_icon(collection, "png", data)
        first = await repository.get(collection.id)

        await manager.set_icon(first, "png", data)
        await wait_for_icon_cleanup()

        assert asset_store.deletes == []

    @pytest.mark.asyncio
    async def test_old_blob_cleanup_failure_is_swallowed(
        self, manager, repository, asset_store, collection
    ):
        await manager.set_icon(collection, "png", png_bytes((1, 2, 3)))
        first = await repository.get(collection.id)
        asset_store.fail_deletes = True

        url = await manager.set_icon(first, "png", png_bytes((4, 5, 6)))
        await wait_for_icon_cleanup()

        assert (await repository.get(collection.id)).icon_url == url
        assert len(asset_store.deletes) == 1

    @pytest.mark.asyncio
    async def test_cleanup_is_awaited_across_managers(
        self, repository, asset_store, settings, collection
    ):
        first = IconAssetManager(repository, asset_store, settings)
        await first.set_icon(collection, "png", png_bytes((1, 2, 3)))
        stored = await repository.get(collection.id)
        old_path = first.path_from_url(stored.icon_url)

        second = IconAssetManager(repository, asset_store, settings)
        await second.set_icon(stored, "png", png_bytes((4, 5, 6)))
        del first, second
        await wait_for_icon_cleanup()

        assert asset_store.deletes == [old_path]

    @pytest.mark.asyncio
    async def test_upload_failure_leaves_row_untouched(
        self, manager, repository, asset_store, collection
    ):
        asset_store.fail_uploads = True

        with pytest.raises(StorageFailureError):
            await manager.set_icon(collection, "png", png_bytes())

        assert (await repository.get(collection.id)).icon_url is None

    @pytest.mark.asyncio
    async def test_row_update_failure_orphans_blob(
        self, manager, repository, asset_store, collection
    ):
        with mock.patch.object(
            repository, "update_icon", side_effect=PersistenceFailureError("db down")
        ):
            with pytest.raises(PersistenceFailureError):
                await manager.set_icon(collection, "png", png_bytes())

        assert len(asset_store.uploads) == 1
        assert asset_store.deletes == []
        assert (await repository.get(collection.id)).icon_url is None


class TestClearIcon:
    @pytest.mark.asyncio
    async def test_clears_row_and_blob(self, manager, repository, asset_store, collection):
        await manager.set_icon(collection, "png", png_bytes())
        with_icon = await repository.get(collection.id)
        path = manager.path_from_url(with_icon.icon_url)

        await manager.clear_icon(with_icon)

        stored = await repository.get(collection.id)
        assert stored.icon_url is None
        assert stored.color is None
        assert asset_store.deletes == [path]

    @pytest.mark.asyncio
    async def test_blob_delete_failure_still_clears_row(
        self, manager, repository, asset_store, collection
    ):
        await manager.set_icon(collection, "png", png_bytes())
        with_icon = await repository.get(collection.id)
        asset_store.fail_deletes = True

        await manager.clear_icon(with_icon)

        assert (await repository.get(collection.id)).icon_url is None

    @pytest.mark.asyncio
    async def test_without_icon_touches_no_blob(self, manager, asset_store, collection):
        await manager.clear_icon(collection)

        assert asset_store.deletes == []
