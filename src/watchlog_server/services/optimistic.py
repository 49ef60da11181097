"""Optimistic local updates with rollback."""

from typing import Awaitable, Callable, MutableMapping, TypeVar

K = TypeVar("K")
V = TypeVar("V")

_MISSING = object()


async def optimistic_update(
    state: MutableMapping[K, V],
    key: K,
    value: V,
    commit: Callable[[], Awaitable[None]],
) -> None:
    """
    Apply a change locally, then commit it remotely.

    If the commit raises, the key is restored to its value before the
    change (or removed if it was absent) and the error is re-raised.

    Args:
        state: Local state to update in place
        key: Key to change
        value: New value
        commit: Coroutine function persisting the change
    """
    previous = state.get(key, _MISSING)
    state[key] = value
    try:
        await commit()
    except Exception:
        if previous is _MISSING:
            state.pop(key, None)
        else:
            state[key] = previous
        raise
