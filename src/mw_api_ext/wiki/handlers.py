"""
Completion handlers for ``ApiExtensions.edit_page``.

Callers may pass ``done`` as nothing, a single callable, or a structured
set of hooks. The value is resolved once into one of three tagged
variants and dispatched on the tag afterwards.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Tuple, Union

Callback = Callable[..., Any]


@dataclass(frozen=True)
class NoHandler:
    pass


@dataclass(frozen=True)
class SimpleHandler:
    callback: Callback


@dataclass(frozen=True)
class StructuredHandler:
    success: Optional[Callback] = None
    api_error: Optional[Callback] = None
    unknown_error: Optional[Callback] = None


CompletionHandler = Union[NoHandler, SimpleHandler, StructuredHandler]

# Accepted spellings of each hook; camelCase matches the browser-side API
_HOOK_ALIASES = {
    "success": ("success",),
    "api_error": ("api_error", "apiError"),
    "unknown_error": ("unknown_error", "unknownError"),
}


def _lookup(done: Any, names: Tuple[str, ...]) -> Optional[Callback]:
    for name in names:
        if isinstance(done, Mapping):
            hook = done.get(name)
        else:
            hook = getattr(done, name, None)
        if callable(hook):
            return hook
    return None


def resolve_handler(done: Any) -> CompletionHandler:
    """
    Normalize a ``done`` value into a ``CompletionHandler``.

    ``None`` and ``False`` mean no handler; a callable becomes a
    ``SimpleHandler``. Anything else is read as a set of hooks, from
    mapping keys or attributes, keeping only the members that are
    callable. Unrecognized shapes yield a ``StructuredHandler`` with no
    hooks, so a bad ``done`` never stops the edit from being sent.
    """
    if done is None or done is False:
        return NoHandler()
    if isinstance(done, (NoHandler, SimpleHandler, StructuredHandler)):
        return done
    if callable(done):
        return SimpleHandler(done)
    return StructuredHandler(
        **{field: _lookup(done, names) for field, names in _HOOK_ALIASES.items()}
    )


async def invoke(callback: Optional[Callback], *args: Any) -> None:
    """Call ``callback`` if set, awaiting it when it is a coroutine function."""
    if callback is None:
        return
    result = callback(*args)
    if inspect.isawaitable(result):
        await result
