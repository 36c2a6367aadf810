from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse
from starlette.datastructures import UploadFile

from core.logging import get_logger
from core.request_body import read_body

logger = get_logger("routers.pages")

router = APIRouter()

STATIC_DIR = Path(__file__).resolve().parent / "static"


@router.get("/RegisterForm.html", include_in_schema=False)
async def register_form():
    return FileResponse(STATIC_DIR / "RegisterForm.html", media_type="text/html")


@router.get("/SearchForm.html", include_in_schema=False)
async def search_form():
    return FileResponse(STATIC_DIR / "SearchForm.html", media_type="text/html")


@router.post("/hello", status_code=200)
async def hello(request: Request):
    """Echo the request body back (JSON or form data)."""
    body = await read_body(request)
    if isinstance(body, dict):
        data = {k: v for k, v in body.items() if not isinstance(v, UploadFile)}
    else:
        data = body
    logger.info("received /hello: %r", data)
    return {"message": "Hello received", "data": data}
