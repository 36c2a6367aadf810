# ---------------------------------------------------------------------------
# Unit tests: Settings loading and startup validation.
# ---------------------------------------------------------------------------
import pytest
from sqlalchemy.engine import make_url

from core.config import Settings
from core.errors import ConfigError
from db.memory_repository import InMemoryItemRepository
from main import create_app


def test_validate_creates_and_resolves_cache_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    settings = Settings(cache_dir="nested/cache").validate()
    assert settings.cache_dir == (tmp_path / "nested" / "cache").resolve()
    assert settings.cache_dir.is_dir()


def test_cache_dir_that_is_a_file_is_rejected(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(ConfigError):
        Settings(cache_dir=blocker).validate()


@pytest.mark.parametrize("overrides", [{"backend": "redis"}, {"port": 0}, {"port": 70000}, {"db_pool_size": 0}])
def test_invalid_settings_are_rejected(tmp_path, overrides):
    with pytest.raises(ConfigError):
        Settings(cache_dir=tmp_path, **overrides).validate()


def test_environment_is_read(tmp_path, monkeypatch):
    monkeypatch.setenv("HOST", "0.0.0.0")
    monkeypatch.setenv("PORT", "9001")
    monkeypatch.setenv("INVENTORY_BACKEND", "database")
    monkeypatch.setenv("CACHE_DIR", str(tmp_path / "photos"))
    settings = Settings().validate()
    assert (settings.host, settings.port, settings.backend) == ("0.0.0.0", 9001, "database")
    assert settings.cache_dir == (tmp_path / "photos").resolve()


def test_database_url_is_built_from_parts(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    settings = Settings(db_host="db", db_port=5433, db_user="inv", db_password="secret", db_name="stock")
    url = make_url(settings.sqlalchemy_url)
    assert url.render_as_string(hide_password=False) == "postgresql+asyncpg://inv:secret@db:5433/stock"


def test_explicit_database_url_wins():
    settings = Settings(database_url="sqlite+aiosqlite:///inventory.db")
    assert settings.sqlalchemy_url == "sqlite+aiosqlite:///inventory.db"


def test_create_app_validates_fresh_settings_once(tmp_path, mocker):
    fresh = Settings(cache_dir=tmp_path / "fresh", backend="memory")
    create_app(fresh, repository=InMemoryItemRepository())
    assert fresh.validated
    assert fresh.cache_dir.is_dir()

    ready = Settings(cache_dir=tmp_path / "ready", backend="memory").validate()
    spy = mocker.spy(ready, "validate")
    create_app(ready, repository=InMemoryItemRepository())
    spy.assert_not_called()
