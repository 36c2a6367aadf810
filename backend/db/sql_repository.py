from typing import List, Optional, Tuple

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from core.errors import NotFoundError, StorageError
from core.logging import get_logger
from schemas.inventory import InventoryItem

from .database import create_session_maker
from .inventory.item import InventoryItem as InventoryItemModel
from .repository import ItemRepository, effective_fields, require_name

logger = get_logger("db")


class SqlItemRepository(ItemRepository):
    """Items persisted in the ``inventory`` table.

    Each call opens its own session. Multi-statement operations (update,
    delete) run in that session's transaction but take no row locks, so
    concurrent requests on the same item can still interleave.
    """

    def __init__(self, engine: AsyncEngine, session_maker: Optional[async_sessionmaker[AsyncSession]] = None):
        self.engine = engine
        self.session_maker = session_maker or create_session_maker(engine)

    async def _fetch(self, db: AsyncSession, item_id: str) -> InventoryItemModel:
        result = await db.execute(select(InventoryItemModel).where(InventoryItemModel.id == item_id))
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError(f"Item {item_id} not found")
        return row

    async def create(self, name: Optional[str], description: Optional[str] = "") -> InventoryItem:
        name = require_name(name)
        async with self.session_maker() as db:
            try:
                row = InventoryItemModel(name=name, description=description or "", photo=None)
                db.add(row)
                await db.commit()
                return row.to_schema
            except SQLAlchemyError as e:
                await db.rollback()
                raise StorageError(f"Error creating item: {e}") from e

    async def attach_photo(self, item_id: str, filename: Optional[str]) -> None:
        async with self.session_maker() as db:
            try:
                result = await db.execute(
                    update(InventoryItemModel)
                    .where(InventoryItemModel.id == item_id)
                    .values(photo=filename)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    await db.rollback()
                    raise NotFoundError(f"Item {item_id} not found")
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                raise StorageError(f"Error updating photo for {item_id}: {e}") from e

    async def list(self) -> List[InventoryItem]:
        async with self.session_maker() as db:
            try:
                result = await db.execute(
                    select(InventoryItemModel).order_by(InventoryItemModel.created_at, InventoryItemModel.id)
                )
                return [row.to_schema for row in result.scalars().all()]
            except SQLAlchemyError as e:
                raise StorageError(f"Error listing items: {e}") from e

    async def get(self, item_id: str) -> InventoryItem:
        async with self.session_maker() as db:
            try:
                return (await self._fetch(db, item_id)).to_schema
            except SQLAlchemyError as e:
                raise StorageError(f"Error loading item {item_id}: {e}") from e

    async def update(
        self, item_id: str, name: Optional[str] = None, description: Optional[str] = None
    ) -> Tuple[InventoryItem, bool]:
        fields = effective_fields(name, description)
        async with self.session_maker() as db:
            try:
                if not fields:
                    return (await self._fetch(db, item_id)).to_schema, False

                # Conditional UPDATE, existence check when nothing matched, then re-select
                result = await db.execute(
                    update(InventoryItemModel)
                    .where(InventoryItemModel.id == item_id)
                    .values(**fields)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    await self._fetch(db, item_id)
                row = await self._fetch(db, item_id)
                await db.commit()
                return row.to_schema, True
            except SQLAlchemyError as e:
                await db.rollback()
                raise StorageError(f"Error updating item {item_id}: {e}") from e

    async def delete(self, item_id: str) -> InventoryItem:
        async with self.session_maker() as db:
            try:
                # Select the photo filename first, then remove the row
                removed = (await self._fetch(db, item_id)).to_schema
                await db.execute(
                    delete(InventoryItemModel)
                    .where(InventoryItemModel.id == item_id)
                    .execution_options(synchronize_session=False)
                )
                await db.commit()
                return removed
            except SQLAlchemyError as e:
                await db.rollback()
                raise StorageError(f"Error deleting item {item_id}: {e}") from e

    async def close(self) -> None:
        logger.info("disposing database engine")
        await self.engine.dispose()
