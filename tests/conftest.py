# ---------------------------------------------------------------------------
# Shared fixtures.
#
# Most suites run twice: once against the in-memory repository and once
# against the SQLAlchemy repository backed by a temporary SQLite file.
# ---------------------------------------------------------------------------
import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine

from core.config import Settings
from db.database import create_db_and_tables
from db.memory_repository import InMemoryItemRepository
from db.sql_repository import SqlItemRepository
from main import create_app


@pytest.fixture(params=["memory", "database"])
def backend(request):
    return request.param


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'inventory.db'}"


@pytest.fixture
def settings(tmp_path, backend, sqlite_url):
    return Settings(
        host="127.0.0.1",
        port=8000,
        cache_dir=tmp_path / "cache",
        backend=backend,
        database_url=sqlite_url,
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def cache_dir(client):
    return client.app.state.settings.cache_dir


@pytest.fixture
def run_repo(backend, sqlite_url):
    """Run ``scenario(repo)`` on a fresh repository inside one event loop."""

    def _run(scenario):
        async def _main():
            if backend == "memory":
                repo = InMemoryItemRepository()
            else:
                engine = create_async_engine(sqlite_url)
                await create_db_and_tables(engine)
                repo = SqlItemRepository(engine)
            try:
                return await scenario(repo)
            finally:
                await repo.close()

        return asyncio.run(_main())

    return _run


@pytest.fixture
def register(client):
    """POST /register as a form, with an optional photo upload."""

    def _register(name="Drill", description="18V", photo=None, filename="drill.jpg"):
        data = {"description": description} if description is not None else {}
        if name is not None:
            data["inventory_name"] = name
        files = {"photo": (filename, photo, "image/jpeg")} if photo is not None else None
        return client.post("/register", data=data, files=files)

    return _register
