"""Incoming HTTP request.

Frozen metadata with async body access. Listeners normally reach it as
``ctx.request``; the parsed body, if any, lives on ``ctx.body``.
"""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any

from perch._internal.asgi import Receive, Scope
from perch.errors import PayloadTooLarge
from perch.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An HTTP request as received.

    Metadata is frozen at creation. The body is read from the ASGI
    ``receive`` callable once and cached.
    """

    method: str
    path: str
    query_string: str
    headers: Headers
    http_version: str
    client: tuple[str, int] | None
    max_content_length: int | None = None

    # Private: ASGI receive callable for body streaming
    _receive: Receive | None = field(default=None, repr=False, compare=False)

    # Private: mutable cache for the body bytes
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def url(self) -> str:
        """Path plus ``?query`` when a query string is present."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    async def stream(self) -> AsyncGenerator[bytes]:
        """Yield the body in the chunks the server delivered."""
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                break
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            if not message.get("more_body", False):
                break

    async def body(self) -> bytes:
        """Read the full request body.

        Raises ``PayloadTooLarge`` once more than ``max_content_length``
        bytes arrived.
        """
        if "_body" in self._cache:
            return self._cache["_body"]

        limit = self.max_content_length
        declared = self.content_length
        if limit is not None and declared is not None and declared > limit:
            raise PayloadTooLarge(limit)

        chunks: list[bytes] = []
        size = 0
        async for chunk in self.stream():
            size += len(chunk)
            if limit is not None and size > limit:
                raise PayloadTooLarge(limit)
            chunks.append(chunk)

        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def text(self) -> str:
        """Read the body as UTF-8 text."""
        raw = await self.body()
        return raw.decode("utf-8")

    async def json(self) -> Any:
        """Parse the body as JSON."""
        return json.loads(await self.body())

    @classmethod
    def from_asgi(
        cls,
        scope: Scope,
        receive: Receive | None = None,
        *,
        max_content_length: int | None = None,
    ) -> Request:
        """Create a Request from an ASGI scope and receive callable.

        ``path`` comes from ``raw_path`` (not percent-decoded) when the
        server provides it, like the query string.
        """
        client = scope.get("client")
        raw_path = scope.get("raw_path")
        return cls(
            method=scope["method"].upper(),
            path=raw_path.decode("latin-1") if raw_path else scope["path"],
            query_string=scope.get("query_string", b"").decode("latin-1"),
            headers=Headers(tuple(scope.get("headers", ()))),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            max_content_length=max_content_length,
            _receive=receive,
        )
