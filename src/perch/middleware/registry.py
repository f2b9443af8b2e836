"""Middleware registry — one ordered sequence of scheduling units.

``use()`` appends a ``GlobalUnit``; the first registration of a route
group appends a ``GroupUnit`` pointing at that group's id. Registration
order across both kinds is preserved verbatim and is the execution order
at dispatch time.
"""

from collections.abc import Collection, Iterator
from dataclasses import dataclass
from typing import TypeAlias

from perch._internal.types import Listener


@dataclass(frozen=True, slots=True)
class GlobalUnit:
    """A listener that runs for every dispatched request."""

    listener: Listener


@dataclass(frozen=True, slots=True)
class GroupUnit:
    """A reference to a route group, included only when its pattern matched."""

    group_id: int


Unit: TypeAlias = GlobalUnit | GroupUnit


class MiddlewareRegistry:
    """Append-only ordered list of units.

    Invariant: a ``group_id`` appears in at most one ``GroupUnit``, so a
    group extended by a second registration still runs once per request.
    """

    __slots__ = ("_group_ids", "_units")

    def __init__(self) -> None:
        self._units: list[Unit] = []
        self._group_ids: set[int] = set()

    def add_global(self, listener: Listener) -> GlobalUnit:
        unit = GlobalUnit(listener)
        self._units.append(unit)
        return unit

    def add_group(self, group_id: int) -> GroupUnit:
        """Append a unit for *group_id*.

        Raises ``ValueError`` if the group already has a unit.
        """
        if group_id in self._group_ids:
            msg = f"Route group {group_id} is already registered."
            raise ValueError(msg)
        self._group_ids.add(group_id)
        unit = GroupUnit(group_id)
        self._units.append(unit)
        return unit

    def effective(self, group_ids: Collection[int]) -> list[Unit]:
        """Every global unit plus the group units in *group_ids*, in order."""
        return [
            unit
            for unit in self._units
            if isinstance(unit, GlobalUnit) or unit.group_id in group_ids
        ]

    def globals_only(self) -> list[Unit]:
        """Only the global units, in order. Used for OPTIONS and HEAD."""
        return [unit for unit in self._units if isinstance(unit, GlobalUnit)]

    def __iter__(self) -> Iterator[Unit]:
        return iter(self._units)

    def __len__(self) -> int:
        return len(self._units)
