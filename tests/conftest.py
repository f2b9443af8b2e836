"""Shared fixtures for perch tests."""

from typing import Any

import pytest

from perch.http.context import Context
from perch.http.request import Request


def make_scope(method: str = "GET", path: str = "/", query: str = "", **extra: Any) -> dict[str, Any]:
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "path": path,
        "query_string": query.encode("latin-1"),
        "headers": extra.pop("headers", []),
        "client": ("127.0.0.1", 0),
        **extra,
    }


@pytest.fixture
def ctx() -> Context:
    """A bare GET / context with no receive channel."""
    return Context(Request.from_asgi(make_scope()))
