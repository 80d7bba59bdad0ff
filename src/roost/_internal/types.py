"""Shared type aliases used across roost modules.

Middleware signatures live in ``roost.middleware.protocol``.
"""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: called as handler(request, context)
Handler: TypeAlias = Callable[..., Any]

# Error hook: called as on_error(error, request), returns a response value
ErrorHook: TypeAlias = Callable[..., Any]
