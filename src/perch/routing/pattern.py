"""Path patterns and the pattern matcher.

A pattern is the registration string split on ``/`` after trimming
surrounding slashes::

    "/"                -> [Literal("")]
    "/users"           -> [Literal("users")]
    "/users/:id"       -> [Literal("users"), Param("id")]
    "/file/*"          -> [Literal("file"), Wildcard()]

Matching is a pure function of (pattern, path). A ``*`` anywhere in the
pattern lifts the equal-length requirement, which lets a trailing wildcard
absorb zero or more remaining segments (``/file/*`` matches ``/file``,
``/file/1`` and ``/file/1/2``). Segments after the wildcard still align by
index.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class Literal:
    """Matches one request segment by exact text."""

    text: str


@dataclass(frozen=True, slots=True)
class Param:
    """Captures one request segment under ``name``."""

    name: str


@dataclass(frozen=True, slots=True)
class Wildcard:
    """Matches any segment, present or not."""


Segment: TypeAlias = Literal | Param | Wildcard


def split_path(path: str) -> list[str]:
    """Trim surrounding ``/`` and split the rest on ``/``.

    An empty remainder still yields one empty segment, so the root path
    ``/`` normalizes to ``[""]``. Interior empty segments are kept.
    """
    return path.strip("/").split("/")


def parse_segment(part: str) -> Segment:
    if part == "*":
        return Wildcard()
    if part.startswith(":"):
        return Param(part[1:])
    return Literal(part)


@dataclass(frozen=True, slots=True)
class Pattern:
    """A parsed route pattern. ``source`` is the registration string verbatim."""

    source: str
    segments: tuple[Segment, ...]
    has_wildcard: bool = field(default=False)

    @classmethod
    def parse(cls, source: str) -> Pattern:
        segments = tuple(parse_segment(part) for part in split_path(source))
        return cls(
            source=source,
            segments=segments,
            has_wildcard=any(isinstance(seg, Wildcard) for seg in segments),
        )

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(seg.name for seg in self.segments if isinstance(seg, Param))

    def __str__(self) -> str:
        return self.source


@dataclass(frozen=True, slots=True)
class PatternMatch:
    """Result of one match attempt.

    ``params`` is empty unless ``matched`` is true. A ``Param`` that lines
    up past the end of the request path captures ``None``.
    """

    matched: bool
    params: dict[str, str | None] = field(default_factory=dict)


NO_MATCH = PatternMatch(matched=False)


def match_pattern(pattern: Pattern | str, path: str) -> PatternMatch:
    """Match a request path against a pattern.

    Examples::

        match_pattern("/users/:id", "/users/42")   -> matched, {"id": "42"}
        match_pattern("/file/*", "/file")          -> matched, {}
        match_pattern("/file/*/min", "/file/1")    -> no match
        match_pattern("/a/:b/:c", "/a/x")          -> no match (length)
        match_pattern("/*/:c", "/a")               -> matched, {"c": None}
    """
    if isinstance(pattern, str):
        pattern = Pattern.parse(pattern)

    parts = split_path(path)
    if not pattern.has_wildcard and len(parts) != len(pattern.segments):
        return NO_MATCH

    # Scratch captures; only returned when every segment matched
    params: dict[str, str | None] = {}
    for index, segment in enumerate(pattern.segments):
        part = parts[index] if index < len(parts) else None
        match segment:
            case Literal(text=text):
                if part is None or part != text:
                    return NO_MATCH
            case Param(name=name):
                params[name] = part
            case Wildcard():
                pass

    return PatternMatch(matched=True, params=params)
