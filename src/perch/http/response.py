"""Mutable response handle.

Each request gets one ``Response`` on ``ctx.response``. Listeners set the
status and headers, ``write`` chunks, and ``end`` it; ``send`` does all of
that for a JSON body. Nothing touches the wire until the dispatcher emits
the finished response through ASGI ``send``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterable
from pathlib import Path
from typing import Any

from perch.errors import ResponseFinishedError
from perch.http.headers import ResponseHeaders

logger = logging.getLogger("perch.server")


def _encode(chunk: str | bytes) -> bytes:
    return chunk.encode("utf-8") if isinstance(chunk, str) else chunk


class Response:
    """Response state for one request.

    Usage::

        def show(ctx, next):
            ctx.response.send({"id": ctx.params["id"]})

        def teapot(ctx, next):
            ctx.response.status = 418
            ctx.response.set_header("Content-Type", "text/plain")
            ctx.response.end("short and stout")
    """

    __slots__ = ("_chunks", "_finished", "_stream", "headers", "status")

    def __init__(self) -> None:
        self.status: int = 200
        self.headers = ResponseHeaders()
        self._chunks: list[bytes] = []
        self._stream: AsyncIterable[bytes] | None = None
        self._finished = False

    # -- State --

    @property
    def finished(self) -> bool:
        """True once ``end``, ``send`` or ``send_file`` completed the response."""
        return self._finished

    @property
    def body(self) -> bytes:
        """Buffered body bytes (empty for streamed responses)."""
        return b"".join(self._chunks)

    @property
    def stream(self) -> AsyncIterable[bytes] | None:
        return self._stream

    def _ensure_open(self) -> None:
        if self._finished:
            msg = "Response already finished."
            raise ResponseFinishedError(msg)

    # -- Low-level operations --

    def set_header(self, name: str, value: str | int) -> Response:
        self._ensure_open()
        self.headers.set(name, value)
        return self

    def get_header(self, name: str) -> str | None:
        return self.headers.get(name)

    def write(self, chunk: str | bytes) -> None:
        """Append *chunk* to the body."""
        self._ensure_open()
        if chunk:
            self._chunks.append(_encode(chunk))

    def end(self, chunk: str | bytes | None = None) -> None:
        """Finish the response, optionally with a last chunk.

        Ending an already finished response without a chunk is a no-op.
        """
        if self._finished and not chunk:
            return
        if chunk:
            self.write(chunk)
        self._finished = True

    def stream_body(
        self,
        chunks: AsyncIterable[bytes],
        *,
        content_length: int | None = None,
    ) -> None:
        """Finish the response with a body produced by *chunks* at emission."""
        self._ensure_open()
        self._chunks.clear()
        self._stream = chunks
        if content_length is not None:
            self.headers.set("Content-Length", content_length)
        self._finished = True

    # -- Helpers --

    def send(self, body: Any, status: int = 200) -> None:
        """Serialize *body* as JSON and finish the response.

        A body that cannot be serialized is logged and answered with
        ``500 {"error": "<message>"}`` instead of raising. Anything written
        earlier is replaced.
        """
        self._ensure_open()
        try:
            payload = json.dumps(body, allow_nan=False)
        except (TypeError, ValueError) as exc:
            logger.error("Failed to serialize response body: %s", exc)
            status = 500
            payload = json.dumps({"error": str(exc)})

        data = payload.encode("utf-8")
        self.status = status
        self.headers.set("Content-Type", "application/json")
        self.headers.set("Content-Length", len(data))
        self._chunks = [data]
        self._finished = True

    async def send_file(self, path: str | Path) -> None:
        """Stream the file at *path*; see ``perch.http.files.send_file``."""
        from perch.http.files import send_file

        await send_file(self, path)

    def __repr__(self) -> str:
        state = "finished" if self._finished else "open"
        return f"<Response {self.status} {state}>"
