"""Query string parameters.

Implements ``MutableMapping[str, str]`` and the ``MultiValueMapping``
protocol. A ``Request`` holds one; the context builder hands endpoints a
copy so middlewares can rewrite it freely.
"""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from urllib.parse import parse_qsl, urlencode


class QueryParams(MutableMapping[str, str]):
    """Multi-valued query string parameters.

    ``__getitem__`` returns the first value for a key, ``get_list`` all
    of them. ``__setitem__`` replaces every value; ``append`` adds one.
    ``str()`` re-encodes the parameters in their current order.
    """

    __slots__ = ("_items",)

    def __init__(self, query: str | bytes | list[tuple[str, str]] = "") -> None:
        if isinstance(query, bytes):
            query = query.decode("utf-8", errors="replace")
        if isinstance(query, str):
            items = parse_qsl(query.lstrip("?"), keep_blank_values=True)
        else:
            items = list(query)
        self._items: list[tuple[str, str]] = items

    def __getitem__(self, key: str) -> str:
        for name, value in self._items:
            if name == key:
                return value
        raise KeyError(key)

    def __setitem__(self, key: str, value: str) -> None:
        self._items = [(n, v) for n, v in self._items if n != key]
        self._items.append((key, value))

    def __delitem__(self, key: str) -> None:
        if key not in self:
            raise KeyError(key)
        self._items = [(n, v) for n, v in self._items if n != key]

    def __contains__(self, key: object) -> bool:
        return any(name == key for name, _ in self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(name for name, _ in self._items))

    def __len__(self) -> int:
        return len(dict.fromkeys(name for name, _ in self._items))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QueryParams):
            return self._items == other._items
        return super().__eq__(other)

    def __str__(self) -> str:
        return urlencode(self._items)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"QueryParams({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return [value for name, value in self._items if name == key]

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """Return value as int, or *default* if missing or not numeric."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    def get_bool(self, key: str, default: bool | None = None) -> bool | None:
        """Return value as bool (``true``/``1``/``yes``/``on`` -> True)."""
        value = self.get(key)
        if value is None:
            return default
        return value.lower() in ("true", "1", "yes", "on")

    def append(self, key: str, value: str) -> None:
        """Add another value for *key*."""
        self._items.append((key, value))

    def multi_items(self) -> list[tuple[str, str]]:
        """All ``(name, value)`` pairs in order, repeats included."""
        return list(self._items)

    def to_dict(self) -> dict[str, str]:
        """Flatten to one value per key. The last occurrence wins."""
        return dict(self._items)

    def copy(self) -> QueryParams:
        """Return an independent copy."""
        return QueryParams(list(self._items))
