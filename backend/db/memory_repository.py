import threading
import uuid
from typing import Dict, List, Optional, Tuple

from core.errors import NotFoundError
from schemas.inventory import InventoryItem

from .repository import ItemRepository, effective_fields, require_name


class InMemoryItemRepository(ItemRepository):
    """Items held in process memory, in insertion order.

    Every access goes through one lock. The critical sections never await,
    so the same lock is safe from the event loop and from worker threads.
    """

    def __init__(self):
        self._items: Dict[str, InventoryItem] = {}
        self._lock = threading.Lock()

    def _get(self, item_id: str) -> InventoryItem:
        item = self._items.get(item_id)
        if item is None:
            raise NotFoundError(f"Item {item_id} not found")
        return item

    async def create(self, name: Optional[str], description: Optional[str] = "") -> InventoryItem:
        name = require_name(name)
        with self._lock:
            item_id = str(uuid.uuid4())
            while item_id in self._items:
                item_id = str(uuid.uuid4())
            item = InventoryItem(id=item_id, name=name, description=description or "", photo=None)
            self._items[item_id] = item
            return item.model_copy()

    async def attach_photo(self, item_id: str, filename: Optional[str]) -> None:
        with self._lock:
            self._get(item_id).photo = filename

    async def list(self) -> List[InventoryItem]:
        with self._lock:
            return [item.model_copy() for item in self._items.values()]

    async def get(self, item_id: str) -> InventoryItem:
        with self._lock:
            return self._get(item_id).model_copy()

    async def update(
        self, item_id: str, name: Optional[str] = None, description: Optional[str] = None
    ) -> Tuple[InventoryItem, bool]:
        fields = effective_fields(name, description)
        with self._lock:
            item = self._get(item_id)
            for key, value in fields.items():
                setattr(item, key, value)
            return item.model_copy(), bool(fields)

    async def delete(self, item_id: str) -> InventoryItem:
        with self._lock:
            self._get(item_id)
            return self._items.pop(item_id)
