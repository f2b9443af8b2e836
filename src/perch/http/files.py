"""File streaming helper behind ``Response.send_file``.

The content type is guessed from the file name with ``mimetypes`` and
falls back to ``text/plain``. The file is read with anyio in fixed-size
chunks while the response is emitted, so large files are never held in
memory.
"""

from __future__ import annotations

import mimetypes
from collections.abc import AsyncIterator
from pathlib import Path
from typing import TYPE_CHECKING

import anyio

if TYPE_CHECKING:
    from perch.http.response import Response

CHUNK_SIZE = 64 * 1024

DEFAULT_CONTENT_TYPE = "text/plain"


def guess_content_type(path: str | Path) -> str:
    content_type, _ = mimetypes.guess_type(str(path))
    return content_type or DEFAULT_CONTENT_TYPE


async def iter_file(path: str | Path, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
    async with await anyio.open_file(path, "rb") as handle:
        while chunk := await handle.read(chunk_size):
            yield chunk


async def send_file(response: Response, path: str | Path) -> None:
    """Finish *response* with the contents of *path*.

    Missing paths and directories answer ``404 {"error": "Not found such file"}``.
    """
    file_path = anyio.Path(path)
    try:
        stat = await file_path.stat()
    except OSError:
        stat = None

    if stat is None or not await file_path.is_file():
        response.send({"error": "Not found such file"}, 404)
        return

    response.status = 200
    response.set_header("Content-Type", guess_content_type(path))
    response.stream_body(iter_file(path), content_length=stat.st_size)
