"""Tests for perch.routing.table — per-method groups and multi-match."""

import pytest

from perch.errors import UnsupportedMethodError
from perch.routing.table import SUPPORTED_METHODS, RouteTable


def first(ctx, next) -> None:
    next()


def second(ctx, next) -> None:
    next()


class TestAdd:
    def test_creates_group(self) -> None:
        table = RouteTable()
        group, created = table.add("GET", "/users", [first])
        assert created is True
        assert group.listeners == [first]
        assert group.path == "/users"
        assert table.group(group.group_id) is group

    def test_method_is_case_insensitive(self) -> None:
        table = RouteTable()
        table.add("get", "/users", [first])
        assert table.patterns("GET") == ["/users"]

    def test_same_pattern_extends_in_place(self) -> None:
        table = RouteTable()
        group, _ = table.add("GET", "/list", [first])
        again, created = table.add("GET", "/list", [second])
        assert created is False
        assert again is group
        assert group.listeners == [first, second]

    def test_same_pattern_other_method_is_new_group(self) -> None:
        table = RouteTable()
        get_group, _ = table.add("GET", "/list", [first])
        post_group, created = table.add("POST", "/list", [second])
        assert created is True
        assert post_group.group_id != get_group.group_id

    def test_group_ids_are_unique_and_increasing(self) -> None:
        table = RouteTable()
        ids = [table.add("GET", f"/r{i}", [first])[0].group_id for i in range(3)]
        assert ids == sorted(set(ids))

    @pytest.mark.parametrize("method", ["OPTIONS", "HEAD", "TRACE", "CONNECT"])
    def test_unsupported_method(self, method: str) -> None:
        table = RouteTable()
        with pytest.raises(UnsupportedMethodError, match=f"Method {method} is not supported"):
            table.add(method, "/", [first])

    def test_unsupported_method_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            RouteTable().add("OPTIONS", "/", [first])

    def test_patterns_kept_verbatim(self) -> None:
        table = RouteTable()
        table.add("GET", "/users/", [first])
        table.add("GET", "/users", [second])
        assert table.patterns("GET") == ["/users/", "/users"]


class TestAddAll:
    def test_one_shared_group(self) -> None:
        table = RouteTable()
        group, extended = table.add_all("/list/*", [first])
        assert group is not None
        assert extended == []
        assert table.methods_for(group.group_id) == list(SUPPORTED_METHODS)
        assert len(table) == 1

    def test_second_all_extends_shared_group_once(self) -> None:
        table = RouteTable()
        group, _ = table.add_all("/x", [first])
        new_group, extended = table.add_all("/x", [second])
        assert new_group is None
        assert extended == [group]
        assert group.listeners == [first, second]

    def test_existing_method_group_is_extended(self) -> None:
        table = RouteTable()
        get_group, _ = table.add("GET", "/x", [first])
        shared, extended = table.add_all("/x", [second])
        assert extended == [get_group]
        assert get_group.listeners == [first, second]
        assert shared is not None
        assert "GET" not in table.methods_for(shared.group_id)
        assert shared.listeners == [second]


class TestMatch:
    def test_no_routes_for_method(self) -> None:
        table = RouteTable()
        table.add("GET", "/", [first])
        assert table.match("POST", "/") == []

    def test_unknown_method_matches_nothing(self) -> None:
        assert RouteTable().match("OPTIONS", "/") == []

    def test_reports_all_matches_in_registration_order(self) -> None:
        table = RouteTable()
        wildcard, _ = table.add("GET", "/list/*", [first])
        table.add("GET", "/users", [first])
        param, _ = table.add("GET", "/list/:id", [second])

        matches = table.match("GET", "/list/3")
        assert [m.group for m in matches] == [wildcard, param]
        assert matches[0].params == {}
        assert matches[1].params == {"id": "3"}

    def test_extended_group_matches_once(self) -> None:
        table = RouteTable()
        table.add("GET", "/list", [first])
        table.add("GET", "/list", [second])
        assert len(table.match("GET", "/list")) == 1
