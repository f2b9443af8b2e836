"""Routing — pattern matcher and per-method route table.

Patterns use ``:name`` for parameters and ``*`` for wildcards. Every
registered pattern is tried for each request; all matches are reported.
"""

from perch.routing.pattern import Literal, Param, Pattern, PatternMatch, Wildcard, match_pattern
from perch.routing.table import SUPPORTED_METHODS, RouteGroup, RouteMatch, RouteTable

__all__ = [
    "SUPPORTED_METHODS",
    "Literal",
    "Param",
    "Pattern",
    "PatternMatch",
    "RouteGroup",
    "RouteMatch",
    "RouteTable",
    "Wildcard",
    "match_pattern",
]
