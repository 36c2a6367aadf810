"""
Item repository interface.

Routers only talk to ``ItemRepository``; the process picks one
implementation at startup (in-memory or SQLAlchemy) and stores it on
``app.state``.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from core.errors import ValidationError
from schemas.inventory import InventoryItem, SearchResult, photo_url


class ItemRepository(ABC):

    @abstractmethod
    async def create(self, name: Optional[str], description: Optional[str] = "") -> InventoryItem:
        """Create an item with a fresh id and no photo."""

    @abstractmethod
    async def attach_photo(self, item_id: str, filename: Optional[str]) -> None:
        """Overwrite the item's photo filename."""

    @abstractmethod
    async def list(self) -> List[InventoryItem]:
        """All items, oldest first."""

    @abstractmethod
    async def get(self, item_id: str) -> InventoryItem:
        ...

    @abstractmethod
    async def update(
        self, item_id: str, name: Optional[str] = None, description: Optional[str] = None
    ) -> Tuple[InventoryItem, bool]:
        """Apply the non-empty fields and return ``(item, changed)``."""

    @abstractmethod
    async def delete(self, item_id: str) -> InventoryItem:
        """Remove the item and return the removed record."""

    async def search(self, item_id: str, include_photo: bool = False) -> SearchResult:
        # Exact id lookup; there is no text search
        item = await self.get(item_id)
        return SearchResult(
            id=item.id,
            name=item.name,
            description=item.description,
            photo_url=photo_url(item.id) if include_photo else None,
        )

    async def close(self) -> None:
        pass


def require_name(name: Optional[str]) -> str:
    if not name:
        raise ValidationError("inventory_name is required")
    return name


def effective_fields(name: Optional[str], description: Optional[str]) -> dict:
    fields = {}
    if name:
        fields["name"] = name
    if description:
        fields["description"] = description
    return fields
