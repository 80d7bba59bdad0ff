"""Case-insensitive HTTP headers.

``Headers`` is the immutable collection a ``Request`` carries.
``MutableHeaders`` is the per-request copy placed on the context, so
middlewares can add or overwrite headers without touching the request.

Both implement ``Mapping[str, str]`` and the ``MultiValueMapping``
protocol. Names are stored as given and compared case-insensitively.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Self

type HeaderSource = Mapping[str, str] | Iterable[tuple[str, str]] | Iterable[tuple[bytes, bytes]]


def _normalize(source: HeaderSource | None) -> list[tuple[str, str]]:
    """Coerce mappings, str pairs, or raw ASGI byte pairs into str pairs."""
    if source is None:
        return []
    items = source.items() if isinstance(source, Mapping) else source
    pairs: list[tuple[str, str]] = []
    for name, value in items:
        if isinstance(name, bytes):
            name = name.decode("latin-1")
        if isinstance(value, bytes):
            value = value.decode("latin-1")
        pairs.append((name, value))
    return pairs


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header.
    """

    __slots__ = ("_items",)

    _items: list[tuple[str, str]]

    def __init__(self, source: HeaderSource | None = None) -> None:
        object.__setattr__(self, "_items", _normalize(source))

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower()
        for name, value in self._items:
            if name.lower() == key_lower:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower()
        return any(name.lower() == key_lower for name, _ in self._items)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._items:
            key = name.lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return sorted(self.multi_items()) == sorted(other.multi_items())
        return super().__eq__(other)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"{type(self).__name__}({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key* (e.g. repeated ``Accept`` lines)."""
        key_lower = key.lower()
        return [value for name, value in self._items if name.lower() == key_lower]

    def multi_items(self) -> list[tuple[str, str]]:
        """All ``(lowercased name, value)`` pairs, repeats included."""
        return [(name.lower(), value) for name, value in self._items]

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """Header byte pairs for ASGI."""
        return tuple(
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in self._items
        )

    def mutable_copy(self) -> MutableHeaders:
        """Return an independent ``MutableHeaders`` with the same entries."""
        return MutableHeaders(list(self._items))


class MutableHeaders(Headers):
    """Case-insensitive headers that can be changed in place.

    ``set`` replaces every value for a name, ``append`` adds another.
    """

    __slots__ = ()

    def __setitem__(self, key: str, value: str) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        if key not in self:
            raise KeyError(key)
        key_lower = key.lower()
        self._items[:] = [(n, v) for n, v in self._items if n.lower() != key_lower]

    def set(self, key: str, value: str) -> None:
        """Set *key* to a single *value*, dropping earlier values."""
        key_lower = key.lower()
        kept = [(n, v) for n, v in self._items if n.lower() != key_lower]
        kept.append((key, value))
        self._items[:] = kept

    def append(self, key: str, value: str) -> None:
        """Add another value for *key*, keeping existing ones."""
        self._items.append((key, value))

    def setdefault(self, key: str, default: str) -> str:  # type: ignore[override]
        """Set *key* only if absent; return the resulting first value."""
        existing = self.get(key)
        if existing is not None:
            return existing
        self._items.append((key, default))
        return default

    def update(self, other: HeaderSource) -> Self:
        """Set every header from *other*, replacing same-named entries."""
        for name, value in _normalize(other):
            self.set(name, value)
        return self
