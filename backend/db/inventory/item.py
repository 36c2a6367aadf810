import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text

from schemas.inventory import InventoryItem as InventoryItemSchema

from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InventoryItem(Base):
    __tablename__ = "inventory"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    photo = Column(String, nullable=True)

    # Listing order only; not exposed through the API
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    @property
    def to_schema(self) -> InventoryItemSchema:
        return InventoryItemSchema(
            id=self.id,
            name=self.name,
            description=self.description or "",
            photo=self.photo,
        )
