"""Invoke helpers: call sync or async callables uniformly.

Handlers, middlewares, schema validators and the ``on_error`` hook can
all be ``def`` or ``async def``. The sync/async check lives here so
every caller awaits user code the same way.

Usage::

    from roost._internal.invoke import invoke

    result = await invoke(handler, request, context)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it is awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
