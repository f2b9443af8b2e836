"""Perch exception hierarchy.

Shared across the route table, the app, the dispatcher and middleware so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when app configuration is invalid."""


class UnsupportedMethodError(PerchError, ValueError):
    """Raised at registration time for a method the route table cannot hold.

    Only ``GET``, ``POST``, ``PUT``, ``DELETE`` and ``PATCH`` accept routes.
    """

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method {method} is not supported.")


class ResponseFinishedError(PerchError):
    """Raised when a listener writes to a response that has already ended."""


@dataclass(frozen=True, slots=True)
class HTTPError(PerchError):
    """An error that maps directly to an HTTP status code.

    Raised by listeners or middleware. The dispatcher catches these like
    any other listener error; without a custom error handler the default
    JSON body uses ``status`` and ``detail`` instead of a plain 500.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        return self.detail or str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no registered pattern matched the request path.

    Handed to the not-found handler; never raised by the dispatcher itself.
    """

    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(status=404, detail=detail)


class BodyParseError(HTTPError):
    """400 — the request body could not be decoded."""

    def __init__(self, detail: str = "Malformed request body") -> None:
        super().__init__(status=400, detail=detail)


class PayloadTooLarge(HTTPError):  # noqa: N818
    """413 — the request body exceeds ``AppConfig.max_content_length``."""

    def __init__(self, limit: int) -> None:
        super().__init__(status=413, detail=f"Request body exceeds {limit} bytes")
