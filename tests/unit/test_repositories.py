# ---------------------------------------------------------------------------
# Repository contract tests, run against both ItemRepository implementations.
# ---------------------------------------------------------------------------
import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from core.errors import NotFoundError, ValidationError
from db.memory_repository import InMemoryItemRepository


def test_create_requires_name(run_repo):
    async def scenario(repo):
        for name in (None, ""):
            with pytest.raises(ValidationError):
                await repo.create(name, "desc")
        return await repo.list()

    assert run_repo(scenario) == []


def test_create_get_and_list(run_repo):
    async def scenario(repo):
        first = await repo.create("Drill", "18V")
        second = await repo.create("Saw", None)
        return first, second, await repo.get(first.id), await repo.list()

    first, second, fetched, listed = run_repo(scenario)
    assert first.photo is None
    assert second.description == ""
    assert fetched == first
    assert [i.id for i in listed] == [first.id, second.id]


def test_get_missing_raises(run_repo):
    async def scenario(repo):
        with pytest.raises(NotFoundError):
            await repo.get("missing")

    run_repo(scenario)


def test_update_only_touches_supplied_fields(run_repo):
    async def scenario(repo):
        item = await repo.create("Drill", "18V")
        updated, changed = await repo.update(item.id, description="20V")
        unchanged, no_change = await repo.update(item.id, name="", description="")
        return updated, changed, unchanged, no_change

    updated, changed, unchanged, no_change = run_repo(scenario)
    assert (updated.name, updated.description, changed) == ("Drill", "20V", True)
    assert unchanged == updated
    assert no_change is False


def test_update_missing_raises_even_without_fields(run_repo):
    async def scenario(repo):
        for kwargs in ({"name": "X"}, {}):
            with pytest.raises(NotFoundError):
                await repo.update("missing", **kwargs)

    run_repo(scenario)


def test_attach_photo_and_delete_returns_removed_record(run_repo):
    async def scenario(repo):
        item = await repo.create("Drill")
        await repo.attach_photo(item.id, "abc123")
        removed = await repo.delete(item.id)
        with pytest.raises(NotFoundError):
            await repo.get(item.id)
        with pytest.raises(NotFoundError):
            await repo.delete(item.id)
        with pytest.raises(NotFoundError):
            await repo.attach_photo(item.id, "def456")
        return removed

    removed = run_repo(scenario)
    assert removed.photo == "abc123"


def test_search_by_exact_id(run_repo):
    async def scenario(repo):
        item = await repo.create("Drill", "18V")
        plain = await repo.search(item.id)
        with_photo = await repo.search(item.id, include_photo=True)
        with pytest.raises(NotFoundError):
            await repo.search("Drill")
        return item, plain, with_photo

    item, plain, with_photo = run_repo(scenario)
    assert plain.as_text() == "Name: Drill\nDescription: 18V"
    assert with_photo.photo_url == f"/inventory/{item.id}/photo"


def test_ids_are_not_reused_after_delete(run_repo):
    async def scenario(repo):
        seen = set()
        for _ in range(10):
            item = await repo.create("temp")
            assert item.id not in seen
            seen.add(item.id)
            await repo.delete(item.id)
        return seen

    assert len(run_repo(scenario)) == 10


def test_memory_repository_concurrent_creates_are_all_kept():
    repo = InMemoryItemRepository()

    def create(i):
        return asyncio.run(repo.create(f"item-{i}")).id

    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = list(pool.map(create, range(200)))

    assert len(set(ids)) == 200
    assert len(asyncio.run(repo.list())) == 200


def test_memory_repository_returns_copies():
    repo = InMemoryItemRepository()

    async def scenario():
        item = await repo.create("Drill")
        item.name = "mutated"
        return await repo.get(item.id)

    assert asyncio.run(scenario()).name == "Drill"
