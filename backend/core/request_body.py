from typing import Any, Optional

from fastapi import HTTPException, Request, status
from starlette.datastructures import UploadFile

FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


async def read_body(request: Request) -> Any:
    """
    Parse the request body according to its Content-Type.

    JSON bodies come back as decoded JSON, form bodies (urlencoded or
    multipart) as a dict that may hold UploadFile values. A missing or
    unknown body is an empty dict.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        if not await request.body():
            return {}
        try:
            return await request.json()
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON body")
    if content_type.startswith(FORM_TYPES):
        form = await request.form()
        return dict(form.items())
    return {}


def text_field(body: Any, key: str) -> Optional[str]:
    """A scalar body field as text; files, objects and missing keys are None."""
    if not isinstance(body, dict):
        return None
    value = body.get(key)
    if value is None or isinstance(value, (UploadFile, dict, list)):
        return None
    return value if isinstance(value, str) else str(value)


def file_field(body: Any, key: str) -> Optional[UploadFile]:
    if not isinstance(body, dict):
        return None
    value = body.get(key)
    if isinstance(value, UploadFile) and value.filename:
        return value
    return None
