"""Perch — a minimal ASGI framework built around ordered listener pipelines.

Basic usage::

    from perch import App, parse_body

    app = App()
    app.use(parse_body)

    @app.get("/")
    def index(ctx, next):
        ctx.response.send({"message": "Hello World"})

    app.listen(3000, lambda: print("Server started on port 3000"))
"""

from perch._internal.types import Listener, NextFn
from perch.app import App
from perch.config import AppConfig
from perch.context import get_context
from perch.errors import (
    BodyParseError,
    ConfigurationError,
    HTTPError,
    NotFound,
    PayloadTooLarge,
    PerchError,
    ResponseFinishedError,
    UnsupportedMethodError,
)
from perch.http.context import Context
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware import parse_body, request_logger
from perch.routing import SUPPORTED_METHODS

__version__ = "0.1.0"

__all__ = [
    "SUPPORTED_METHODS",
    "App",
    "AppConfig",
    "BodyParseError",
    "ConfigurationError",
    "Context",
    "HTTPError",
    "Listener",
    "NextFn",
    "NotFound",
    "PayloadTooLarge",
    "PerchError",
    "Request",
    "Response",
    "ResponseFinishedError",
    "UnsupportedMethodError",
    "get_context",
    "parse_body",
    "request_logger",
]
