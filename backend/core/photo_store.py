import uuid
from pathlib import Path
from typing import Union

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from core.errors import NotFoundError, StorageError
from core.logging import get_logger

logger = get_logger("photos")


class PhotoStore:
    """
    Photo bytes on disk, addressed by an opaque generated filename.

    Files live flat inside ``cache_dir``. Names are random 32-char hex strings
    so concurrent uploads never collide and a name cannot escape the directory.
    """

    def __init__(self, cache_dir: Union[str, Path]):
        self.cache_dir = Path(cache_dir)

    def path_for(self, filename: str) -> Path:
        name = Path(filename).name
        if not name or name != filename:
            raise NotFoundError(f"Invalid photo name: {filename!r}")
        return self.cache_dir / name

    async def save(self, upload: UploadFile) -> str:
        """Persist an uploaded file and return its generated filename."""
        data = await upload.read()
        return await self.save_bytes(data)

    async def save_bytes(self, data: bytes) -> str:
        filename = uuid.uuid4().hex
        path = self.cache_dir / filename
        try:
            await run_in_threadpool(path.write_bytes, data)
        except OSError as e:
            raise StorageError(f"Failed to write photo {filename}: {e}") from e
        logger.debug("stored photo %s (%d bytes)", filename, len(data))
        return filename

    async def read(self, filename: str) -> bytes:
        path = self.path_for(filename)
        try:
            return await run_in_threadpool(path.read_bytes)
        except FileNotFoundError:
            raise NotFoundError(f"Photo file missing: {filename}")
        except IsADirectoryError:
            raise NotFoundError(f"Photo file missing: {filename}")
        except OSError as e:
            raise StorageError(f"Failed to read photo {filename}: {e}") from e

    async def delete(self, filename: str) -> None:
        """Best-effort removal. Failures are logged and never raised."""
        try:
            path = self.path_for(filename)
            await run_in_threadpool(path.unlink)
        except FileNotFoundError:
            logger.warning("photo %s already missing on delete", filename)
        except (OSError, NotFoundError) as e:
            logger.warning("failed to delete photo %s: %s", filename, e)
        else:
            logger.debug("deleted photo %s", filename)
