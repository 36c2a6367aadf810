from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile, status

from core.dependencies import get_photo_store, get_repository
from core.errors import NotFoundError, StorageError, ValidationError
from core.logging import get_logger
from core.photo_store import PhotoStore
from core.request_body import file_field, read_body, text_field
from db.repository import ItemRepository
from schemas.inventory import (
    InventoryItem,
    InventoryItemUpdate,
    MessageResponse,
    RegisterResponse,
    UpdateResponse,
)

logger = get_logger("routers.inventory")

router = APIRouter()

# Photos are always served as JPEG, whatever was uploaded
PHOTO_MEDIA_TYPE = "image/jpeg"

# Bodies are parsed by hand so JSON and form clients both work; describe them for /docs
_REGISTER_FIELDS = {"inventory_name": {"type": "string"}, "description": {"type": "string"}}
_REGISTER_SCHEMA = {"type": "object", "required": ["inventory_name"], "properties": _REGISTER_FIELDS}
_UPDATE_SCHEMA = {"type": "object", "properties": {"name": {"type": "string"}, "description": {"type": "string"}}}

REGISTER_BODY = {
    "requestBody": {
        "required": True,
        "content": {
            "multipart/form-data": {
                "schema": {
                    **_REGISTER_SCHEMA,
                    "properties": {**_REGISTER_FIELDS, "photo": {"type": "string", "format": "binary"}},
                }
            },
            "application/x-www-form-urlencoded": {"schema": _REGISTER_SCHEMA},
            "application/json": {"schema": _REGISTER_SCHEMA},
        },
    }
}
UPDATE_BODY = {
    "requestBody": {
        "required": False,
        "content": {
            "application/json": {"schema": _UPDATE_SCHEMA},
            "application/x-www-form-urlencoded": {"schema": _UPDATE_SCHEMA},
        },
    }
}


def internal_error(action: str, e: Exception) -> HTTPException:
    """Log a storage failure and build the generic 500 returned to the client."""
    logger.error("%s failed: %r", action, e, exc_info=e)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}",
    )


def _not_found(e: NotFoundError, detail: str = "Not found") -> HTTPException:
    logger.debug("not found: %s", e)
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def _has_file(upload: Optional[UploadFile]) -> bool:
    # Browsers send an empty, unnamed part when no file was chosen
    return upload is not None and bool(upload.filename)


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    openapi_extra=REGISTER_BODY,
)
async def register_item(
    request: Request,
    repo: ItemRepository = Depends(get_repository),
    photos: PhotoStore = Depends(get_photo_store),
):
    """
    Register a new inventory item (multipart or urlencoded form, or JSON).

    - inventory_name is required, description is optional.
    - photo, when present in a multipart body, is stored in the cache directory.
    """
    body = await read_body(request)
    inventory_name = text_field(body, "inventory_name")
    description = text_field(body, "description")
    photo = file_field(body, "photo")
    if not inventory_name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="inventory_name is required")

    filename = None
    try:
        if photo is not None:
            filename = await photos.save(photo)
        item = await repo.create(inventory_name, description or "")
        if filename:
            await repo.attach_photo(item.id, filename)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (StorageError, NotFoundError) as e:
        # Do not leave an unreferenced upload behind
        if filename:
            await photos.delete(filename)
        raise internal_error("register item", e)

    logger.info("registered item %s (%s)", item.id, item.name)
    return RegisterResponse(message="Created", id=item.id)


@router.get("/inventory", response_model=List[InventoryItem])
async def list_items(repo: ItemRepository = Depends(get_repository)):
    """Get all inventory items"""
    try:
        return await repo.list()
    except StorageError as e:
        raise internal_error("list items", e)


@router.get("/inventory/{item_id}", response_model=InventoryItem)
async def get_item(item_id: str, repo: ItemRepository = Depends(get_repository)):
    try:
        return await repo.get(item_id)
    except NotFoundError as e:
        raise _not_found(e)
    except StorageError as e:
        raise internal_error("load item", e)


@router.put("/inventory/{item_id}", response_model=UpdateResponse, openapi_extra=UPDATE_BODY)
async def update_item(
    item_id: str,
    request: Request,
    repo: ItemRepository = Depends(get_repository),
):
    """
    Update name and/or description (JSON or urlencoded form).

    Empty or missing fields are left untouched; when nothing is left to change
    the current item comes back with message "No changes".
    """
    body = await read_body(request)
    payload = InventoryItemUpdate(name=text_field(body, "name"), description=text_field(body, "description"))
    try:
        item, changed = await repo.update(item_id, **payload.changes)
    except NotFoundError as e:
        raise _not_found(e)
    except StorageError as e:
        raise internal_error("update item", e)
    return UpdateResponse(message="Updated" if changed else "No changes", item=item)


@router.get(
    "/inventory/{item_id}/photo",
    response_class=Response,
    responses={200: {"content": {PHOTO_MEDIA_TYPE: {}}}},
)
async def get_item_photo(
    item_id: str,
    repo: ItemRepository = Depends(get_repository),
    photos: PhotoStore = Depends(get_photo_store),
):
    try:
        item = await repo.get(item_id)
        if not item.photo:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Photo not found")
        data = await photos.read(item.photo)
    except HTTPException:
        raise
    except NotFoundError as e:
        raise _not_found(e, "Photo not found")
    except StorageError as e:
        raise internal_error("read photo", e)
    return Response(content=data, media_type=PHOTO_MEDIA_TYPE)


@router.put("/inventory/{item_id}/photo", response_model=MessageResponse)
async def replace_item_photo(
    item_id: str,
    photo: Optional[UploadFile] = File(None),
    repo: ItemRepository = Depends(get_repository),
    photos: PhotoStore = Depends(get_photo_store),
):
    """Upload a new photo for an item; the previous file is removed."""
    if not _has_file(photo):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    try:
        item = await repo.get(item_id)
    except NotFoundError as e:
        raise _not_found(e)
    except StorageError as e:
        raise internal_error("load item", e)

    filename = None
    try:
        filename = await photos.save(photo)
        await repo.attach_photo(item_id, filename)
    except NotFoundError as e:
        # Deleted between the lookup and the update
        if filename:
            await photos.delete(filename)
        raise _not_found(e)
    except StorageError as e:
        if filename:
            await photos.delete(filename)
        raise internal_error("update photo", e)

    if item.photo and item.photo != filename:
        await photos.delete(item.photo)
    return MessageResponse(message="Photo updated")


@router.delete("/inventory/{item_id}", response_model=MessageResponse)
async def delete_item(
    item_id: str,
    repo: ItemRepository = Depends(get_repository),
    photos: PhotoStore = Depends(get_photo_store),
):
    try:
        removed = await repo.delete(item_id)
    except NotFoundError as e:
        raise _not_found(e)
    except StorageError as e:
        raise internal_error("delete item", e)

    # Best effort: the item is gone even if the file cannot be removed
    if removed.photo:
        await photos.delete(removed.photo)
    logger.info("deleted item %s", item_id)
    return MessageResponse(message="Deleted")
