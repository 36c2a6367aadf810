from typing import List, Optional

from pydantic import BaseModel, field_validator


class InventoryItem(BaseModel):
    id: str
    name: str
    description: str = ""
    # Filename inside the photo cache directory, not a URL
    photo: Optional[str] = None


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name", "description")
    @classmethod
    def _empty_as_absent(cls, v: Optional[str]) -> Optional[str]:
        # An empty string never clears a field, it just means "not supplied"
        if v is None or v == "":
            return None
        return v

    @property
    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


class SearchResult(BaseModel):
    id: str
    name: str
    description: str = ""
    photo_url: Optional[str] = None

    def as_text(self) -> str:
        lines: List[str] = [f"Name: {self.name}", f"Description: {self.description}"]
        if self.photo_url:
            lines.append(f"Photo: {self.photo_url}")
        return "\n".join(lines)


class RegisterResponse(BaseModel):
    message: str
    id: str


class UpdateResponse(BaseModel):
    message: str
    item: InventoryItem


class MessageResponse(BaseModel):
    message: str


def photo_url(item_id: str) -> str:
    return f"/inventory/{item_id}/photo"
