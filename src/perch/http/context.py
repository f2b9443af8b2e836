"""Per-request context shared by every listener of one dispatch.

The dispatcher creates one ``Context`` when a request arrives and drops it
after the response was emitted. It is passed by reference, so anything a
listener attaches is visible to the listeners after it::

    def load_user(ctx, next):
        ctx.user = users.get(ctx.query_params.get("name"))
        next()

    def greet(ctx, next):
        ctx.response.send({"hello": ctx.user})
"""

from __future__ import annotations

from typing import Any

from perch.http.headers import Headers
from perch.http.query import QueryParams
from perch.http.request import Request
from perch.http.response import Response


class Context:
    """Mutable request state.

    Attributes:
        request: The received request (headers, client, async body access).
        response: The response handle listeners fill in.
        method: Upper-case HTTP method.
        path: Request path without the query string.
        query: Raw query string, ``""`` when absent.
        query_params: Parsed lazily, only when ``query`` is non-empty.
        params: Path parameters of the matched pattern. Empty until a full
            match commits them; a parameter past the end of the path is
            ``None``.
        body: Set by ``parse_body``; ``None`` when nothing was parsed.

    Listeners may set any other attribute they need.
    """

    def __init__(self, request: Request, response: Response | None = None) -> None:
        self.request = request
        self.response = response if response is not None else Response()
        self.method: str = request.method
        self.path: str = request.path
        self.query: str = request.query_string
        self.query_params = QueryParams(self.query)
        self.params: dict[str, str | None] = {}
        self.body: Any = None

    @property
    def url(self) -> str:
        return self.request.url

    @property
    def headers(self) -> Headers:
        return self.request.headers

    def __repr__(self) -> str:
        return f"<Context {self.method} {self.url}>"
