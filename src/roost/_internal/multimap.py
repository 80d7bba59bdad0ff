"""Multi-valued string mappings: Headers, QueryParams and FormData.

Schemas validate plain dicts, so ``last_values`` collapses any of them
to one value per key before validation.
"""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable


@runtime_checkable
class MultiValueMapping(Protocol):
    """A string mapping where keys can have multiple values.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    """

    def __getitem__(self, key: str) -> str: ...
    def __contains__(self, key: object) -> bool: ...
    def __iter__(self) -> Iterator[str]: ...
    def __len__(self) -> int: ...
    def get(self, key: str, default: str | None = None) -> str | None: ...
    def get_list(self, key: str) -> list[str]: ...


def last_values(values: MultiValueMapping) -> dict[str, str]:
    """One value per key, the last one given (``?tag=a&tag=b`` -> ``b``)."""
    return {key: values.get_list(key)[-1] for key in values}
