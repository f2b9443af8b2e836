"""Query string parameters.

The raw query string is everything after the first ``?`` of the request
URL. It is split on ``&`` and each piece on ``=``: the key is the text
before the first ``=``, the value the text up to the next ``=`` (or
``None`` when the piece has no ``=``). Values are not percent-decoded.
"""

from collections.abc import Iterator, Mapping


def parse_query(query: str) -> dict[str, str | None]:
    """Parse a raw query string into a dict.

    Examples::

        parse_query("a=1&b=2")   -> {"a": "1", "b": "2"}
        parse_query("flag")      -> {"flag": None}
        parse_query("a=1&a=2")   -> {"a": "2"}
        parse_query("")          -> {"": None}
    """
    result: dict[str, str | None] = {}
    for piece in query.split("&"):
        key, *values = piece.split("=")
        result[key] = values[0] if values else None
    return result


class QueryParams(Mapping[str, str | None]):
    """Lazily parsed, read-only query parameters.

    Parsing happens on first access and only when the raw query string is
    non-empty; an empty query string is an empty mapping.
    """

    __slots__ = ("_data", "_raw")

    def __init__(self, raw: str = "") -> None:
        self._raw = raw
        self._data: dict[str, str | None] | None = None

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def parsed(self) -> bool:
        return self._data is not None

    def _parsed(self) -> dict[str, str | None]:
        if self._data is None:
            self._data = parse_query(self._raw) if self._raw else {}
        return self._data

    def __getitem__(self, key: str) -> str | None:
        return self._parsed()[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._parsed())

    def __len__(self) -> int:
        return len(self._parsed())

    def __repr__(self) -> str:
        return f"QueryParams({self._raw!r})"

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """Return value as int, or *default* if missing or not numeric."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default
