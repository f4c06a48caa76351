"""Optimistic mutation with snapshot rollback."""

from __future__ import annotations

import copy
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def optimistic_update(
    current: T,
    apply: Callable[[T], T],
    commit: Callable[[], Awaitable[R]],
    store: Callable[[T], None],
) -> R:
    """
    Apply a local change before the server confirms it.

    `apply` receives a deep copy of `current` and returns the new state,
    which is stored immediately. If `commit` raises, the untouched snapshot
    is stored back and the exception propagates to the caller.
    """
    snapshot = copy.deepcopy(current)
    store(apply(copy.deepcopy(current)))
    try:
        return await commit()
    except Exception:
        store(snapshot)
        raise
