"""ASGI response emission — translates a finished ``Response`` to ASGI messages.

Buffered responses go out as one ``http.response.start`` plus one body
message with an exact ``content-length``. Streamed responses (``send_file``)
send their chunks with ``more_body=True`` and close with an empty body.
"""

import logging
from typing import Any

from perch._internal.asgi import Send
from perch.http.response import Response
from perch.server.terminal_errors import log_error

logger = logging.getLogger("perch.server")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def _close_stream(chunks: Any) -> None:
    aclose = getattr(chunks, "aclose", None)
    if aclose is not None:
        await aclose()


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Emit *response*. With ``head=True`` headers are sent but no body bytes."""
    if response.stream is not None:
        await send_streaming_response(response, send, head=head)
        return

    allowed = _body_allowed(response.status)
    body = response.body if allowed else b""
    if "content-length" not in response.headers or not allowed:
        response.headers.set("Content-Length", len(body))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": response.headers.to_raw(),
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": b"" if head else body,
        }
    )


async def send_streaming_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Send a streamed body chunk by chunk.

    A failure mid-stream is logged and the body is closed; the status line
    has already gone out, so nothing else can be reported to the client.
    """
    chunks = response.stream
    assert chunks is not None

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": response.headers.to_raw(),
        }
    )

    if head or not _body_allowed(response.status):
        await _close_stream(chunks)
    else:
        try:
            async for chunk in chunks:
                if chunk:
                    await send({"type": "http.response.body", "body": chunk, "more_body": True})
        except Exception as exc:
            log_error(exc)

    await send({"type": "http.response.body", "body": b"", "more_body": False})
