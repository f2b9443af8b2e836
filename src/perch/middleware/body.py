"""Body parsing middleware.

Reads the whole request body for ``POST``, ``PUT`` and ``PATCH`` and
stores the decoded value on ``ctx.body``:

- ``application/json`` — parsed with ``json``; an empty body becomes ``{}``.
- ``plain/text`` (assumed when the header is missing) or ``text/plain`` —
  decoded as UTF-8 text.
- anything else — ``ctx.body`` is left unset.

Parameters after ``;`` in the content type (``charset=utf-8``) are
ignored. Invalid JSON raises ``BodyParseError``, which the dispatcher
contains like any other listener error; so does a body that is not
valid UTF-8.

Usage::

    app.use(parse_body)
"""

import json

from perch._internal.types import NextFn
from perch.errors import BodyParseError
from perch.http.context import Context

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})

DEFAULT_CONTENT_TYPE = "plain/text"

TEXT_TYPES = frozenset({"plain/text", "text/plain"})


def media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


async def _read_text(ctx: Context) -> str:
    try:
        return await ctx.request.text()
    except UnicodeDecodeError as exc:
        raise BodyParseError(f"Body is not valid UTF-8: {exc}") from exc


async def parse_body(ctx: Context, next: NextFn) -> None:
    if ctx.method in BODY_METHODS:
        kind = media_type(ctx.headers.get("content-type", DEFAULT_CONTENT_TYPE))

        if kind == "application/json":
            data = await _read_text(ctx)
            if data == "":
                ctx.body = {}
            else:
                try:
                    ctx.body = json.loads(data)
                except json.JSONDecodeError as exc:
                    raise BodyParseError(f"Invalid JSON body: {exc}") from exc
        elif kind in TEXT_TYPES:
            ctx.body = await _read_text(ctx)

    next()
