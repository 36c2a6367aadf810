from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, status
from fastapi.responses import PlainTextResponse

from core.dependencies import get_repository
from core.errors import NotFoundError, StorageError
from core.logging import get_logger
from db.repository import ItemRepository
from routers.inventory import internal_error

logger = get_logger("routers.search")

router = APIRouter()


def _truthy(value: Optional[str]) -> bool:
    # Any non-empty value counts, including "false" and "0"
    return value is not None and value != ""


async def _search(repo: ItemRepository, item_id: Optional[str], include_photo: Optional[str]) -> PlainTextResponse:
    logger.info("search id=%r includePhoto=%r", item_id, include_photo)
    if not item_id:
        return PlainTextResponse("Bad Request: id is required", status_code=status.HTTP_400_BAD_REQUEST)
    try:
        result = await repo.search(item_id, include_photo=_truthy(include_photo))
    except NotFoundError:
        return PlainTextResponse("Not Found", status_code=status.HTTP_404_NOT_FOUND)
    except StorageError as e:
        raise internal_error("search", e)
    return PlainTextResponse(result.as_text())


@router.get("/search", response_class=PlainTextResponse)
async def search_get(
    id: Optional[str] = Query(None, description="Exact item id"),
    includePhoto: Optional[str] = Query(None, description="Append the photo URL when set"),
    repo: ItemRepository = Depends(get_repository),
):
    """Look up an item by id and describe it as plain text."""
    return await _search(repo, id, includePhoto)


@router.post("/search", response_class=PlainTextResponse)
async def search_post(
    id: Optional[str] = Form(None),
    includePhoto: Optional[str] = Form(None),
    repo: ItemRepository = Depends(get_repository),
):
    return await _search(repo, id, includePhoto)
