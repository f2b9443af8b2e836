"""Route table — per-method mapping from pattern string to listener group.

Groups are registered during setup and read-only once the app freezes.
Every group carries an explicit integer ``group_id``; the middleware
registry refers to groups by that id, never by list identity.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from perch._internal.types import Listener
from perch.errors import UnsupportedMethodError
from perch.routing.pattern import Pattern, PatternMatch, match_pattern

SUPPORTED_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH")


@dataclass(slots=True)
class RouteGroup:
    """An ordered run of listeners registered for one pattern.

    Mutable during setup only: re-registering the same ``(method, pattern)``
    extends ``listeners`` in place. A group created by ``all()`` is shared
    by several methods.
    """

    group_id: int
    pattern: Pattern
    listeners: list[Listener] = field(default_factory=list)

    @property
    def path(self) -> str:
        return self.pattern.source


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """A group whose pattern matched the request path."""

    group: RouteGroup
    params: dict[str, str | None]


def normalize_method(method: str) -> str:
    """Upper-case *method*, raising if the route table cannot hold it."""
    upper = method.upper()
    if upper not in SUPPORTED_METHODS:
        raise UnsupportedMethodError(method)
    return upper


class RouteTable:
    """Per-method mapping ``method -> pattern string -> RouteGroup``.

    Usage::

        table = RouteTable()
        group, created = table.add("GET", "/users/:id", [show_user])
        matches = table.match("GET", "/users/42")
    """

    __slots__ = ("_groups", "_next_id", "_routes")

    def __init__(self) -> None:
        self._routes: dict[str, dict[str, RouteGroup]] = {m: {} for m in SUPPORTED_METHODS}
        self._groups: dict[int, RouteGroup] = {}
        self._next_id = 1

    def _new_group(self, pattern: str, listeners: Iterable[Listener]) -> RouteGroup:
        group = RouteGroup(self._next_id, Pattern.parse(pattern), list(listeners))
        self._groups[group.group_id] = group
        self._next_id += 1
        return group

    def add(
        self,
        method: str,
        pattern: str,
        listeners: Iterable[Listener],
    ) -> tuple[RouteGroup, bool]:
        """Register *listeners* for ``(method, pattern)``.

        Returns the group and whether it was newly created. An existing
        group is extended in place and keeps its id.

        Raises ``UnsupportedMethodError`` for methods outside
        ``SUPPORTED_METHODS``.
        """
        method = normalize_method(method)
        by_pattern = self._routes[method]
        existing = by_pattern.get(pattern)
        if existing is not None:
            existing.listeners.extend(listeners)
            return existing, False

        group = self._new_group(pattern, listeners)
        by_pattern[pattern] = group
        return group, True

    def add_all(self, pattern: str, listeners: Iterable[Listener]) -> tuple[RouteGroup | None, list[RouteGroup]]:
        """Register *listeners* for *pattern* under every supported method.

        Methods that have no group for *pattern* yet share one new group.
        Groups that already exist are each extended once, even when a
        previous ``add_all`` made one group shared by several methods.

        Returns ``(new_group or None, extended_groups)``.
        """
        listeners = list(listeners)
        extended: list[RouteGroup] = []
        missing: list[str] = []
        for method in SUPPORTED_METHODS:
            existing = self._routes[method].get(pattern)
            if existing is None:
                missing.append(method)
            elif all(g.group_id != existing.group_id for g in extended):
                existing.listeners.extend(listeners)
                extended.append(existing)

        if not missing:
            return None, extended

        group = self._new_group(pattern, listeners)
        for method in missing:
            self._routes[method][pattern] = group
        return group, extended

    def group(self, group_id: int) -> RouteGroup:
        """Return the group registered under *group_id*."""
        return self._groups[group_id]

    def patterns(self, method: str) -> list[str]:
        """Registered pattern strings for *method*, in registration order."""
        return list(self._routes.get(method.upper(), {}))

    def methods_for(self, group_id: int) -> list[str]:
        """Every method whose table holds the group with *group_id*."""
        return [
            method
            for method, by_pattern in self._routes.items()
            if any(g.group_id == group_id for g in by_pattern.values())
        ]

    def match(self, method: str, path: str) -> list[RouteMatch]:
        """Match *path* against every pattern registered for *method*.

        Reports **all** matching groups in registration order, each with
        its own captured params. Unknown methods match nothing.
        """
        by_pattern = self._routes.get(method)
        if not by_pattern:
            return []

        matches: list[RouteMatch] = []
        for group in by_pattern.values():
            result: PatternMatch = match_pattern(group.pattern, path)
            if result.matched:
                matches.append(RouteMatch(group=group, params=result.params))
        return matches

    def __iter__(self) -> Iterator[RouteGroup]:
        return iter(self._groups.values())

    def __len__(self) -> int:
        return len(self._groups)
