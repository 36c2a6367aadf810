import argparse
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from core.config import BACKENDS, Settings
from core.errors import ConfigError
from core.logging import get_logger, setup_logger
from core.photo_store import PhotoStore
from core.request_log import RequestLogMiddleware
from db.database import create_db_and_tables, create_engine_from_settings
from db.memory_repository import InMemoryItemRepository
from db.repository import ItemRepository
from db.sql_repository import SqlItemRepository
from routers.inventory import router as inventory_router
from routers.pages import router as pages_router
from routers.search import router as search_router

logger = get_logger("main")


def build_repository(settings: Settings) -> ItemRepository:
    if settings.backend == "database":
        return SqlItemRepository(create_engine_from_settings(settings))
    return InMemoryItemRepository()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    repository: ItemRepository = app.state.repository
    if isinstance(repository, SqlItemRepository):
        await create_db_and_tables(repository.engine)
    logger.info("Server running at http://%s:%s/", settings.host, settings.port)
    logger.info("Swagger running at http://%s:%s/docs", settings.host, settings.port)
    logger.info("Cache directory: %s (backend: %s)", settings.cache_dir, settings.backend)
    yield
    await repository.close()


def create_app(settings: Optional[Settings] = None, repository: Optional[ItemRepository] = None) -> FastAPI:
    settings = settings or Settings()
    if not settings.validated:
        settings.validate()
    setup_logger()

    app = FastAPI(
        title="Inventory API",
        description="API documentation for Inventory Service",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repository = repository or build_repository(settings)
    app.state.photo_store = PhotoStore(settings.cache_dir)

    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(inventory_router, tags=["inventory"])
    app.include_router(search_router, tags=["search"])
    app.include_router(pages_router, tags=["pages"])

    # Registered last: anything no other route matched, whatever the method
    @app.api_route(
        "/{path:path}",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
        include_in_schema=False,
    )
    async def not_found(path: str):
        return PlainTextResponse("Not Found", status_code=404)

    return app


def main():
    p = argparse.ArgumentParser(description="Inventory HTTP service", add_help=False)
    p.add_argument("--help", action="help", help="Show this help message and exit")
    p.add_argument("-h", "--host", help="Host address to bind the server (env HOST)")
    p.add_argument("-p", "--port", type=int, help="Port number to bind the server (env PORT)")
    p.add_argument("-c", "--cache", dest="cache_dir", help="Cache directory for storing photos (env CACHE_DIR)")
    p.add_argument("-b", "--backend", choices=BACKENDS, help="Item storage backend (env INVENTORY_BACKEND)")
    p.add_argument("--database-url", help="SQLAlchemy URL for the database backend (env DATABASE_URL)")
    args = p.parse_args()

    overrides = {k: v for k, v in vars(args).items() if v is not None}
    try:
        settings = Settings(**overrides).validate()
    except (ConfigError, ValueError) as e:
        p.exit(1, f"error: {e}\n")

    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
