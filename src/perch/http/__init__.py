"""HTTP types — request, response handle and per-request context."""

from perch.http.context import Context
from perch.http.headers import Headers, ResponseHeaders
from perch.http.query import QueryParams, parse_query
from perch.http.request import Request
from perch.http.response import Response

__all__ = [
    "Context",
    "Headers",
    "QueryParams",
    "Request",
    "Response",
    "ResponseHeaders",
    "parse_query",
]
