"""
Field stores.

Purpose:
- Hold the key/value fields attached to every log event.
- Shared fields are visible to every thread/task using the logger.
- Isolated fields belong to the current execution context only.

Notes:
- Shared mutations take a lock; snapshots copy under the same lock.
- Isolated fields live in one module-level ContextVar, keyed per store. Every
  write installs a new dict so a context never sees writes made by another.
- Isolated values are tagged with the thread or asyncio task that wrote them.
  A new thread or task inherits a copy of its parent's context but starts
  with an empty Isolated store.
- None values and empty containers may be stored but never leave a snapshot.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from enum import Enum
from typing import Any
import asyncio
import itertools
import threading
import weakref

_EMPTY_CONTAINERS = (Mapping, list, tuple, set, frozenset)
_store_ids = itertools.count(1)


@dataclass(frozen=True)
class _ContextFields:
    # stores maps IsolatedFieldStore ids to their fields; never mutated in place.
    owner: weakref.ref
    stores: dict[int, dict[str, Any]]


_ISOLATED_FIELDS: ContextVar[_ContextFields | None] = ContextVar(
    "logline_isolated_fields", default=None
)


def _execution_owner() -> object:
    try:
        task = asyncio.current_task()
    except RuntimeError:
        task = None
    return task if task is not None else threading.current_thread()


class FieldScope(Enum):
    SHARED = "shared"
    ISOLATED = "isolated"


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, _EMPTY_CONTAINERS) and len(value) == 0


def compact_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """
    Ordered copy of ``fields`` without None values or empty containers.
    """

    return {key: value for key, value in fields.items() if not is_blank(value)}


def _string_keys(fields: Mapping[Any, Any]) -> dict[str, Any]:
    if not isinstance(fields, Mapping):
        raise TypeError(f"fields must be a mapping, got {type(fields).__name__}")
    return {str(key): value for key, value in fields.items()}


def _key_list(keys: Iterable[Any] | str) -> list[str]:
    # A bare string is one key, not a sequence of characters.
    if isinstance(keys, str):
        return [keys]
    return [str(key) for key in keys]


class SharedFieldStore:
    """
    Process-wide fields shared by every execution context.
    """

    def __init__(self) -> None:
        self._fields: dict[str, Any] = {}
        self._lock = threading.Lock()

    def add(self, fields: Mapping[Any, Any]) -> None:
        update = _string_keys(fields)
        with self._lock:
            self._fields.update(update)

    def remove(self, keys: Iterable[Any] | str) -> None:
        names = _key_list(keys)
        with self._lock:
            for name in names:
                self._fields.pop(name, None)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            current = dict(self._fields)
        return compact_fields(current)


class IsolatedFieldStore:
    """
    Fields visible only to the current thread or asyncio task.
    """

    def __init__(self, name: str = "logline") -> None:
        self.name = name
        self._id = next(_store_ids)

    @staticmethod
    def _owned_stores() -> dict[int, dict[str, Any]]:
        state = _ISOLATED_FIELDS.get()
        # Inherited from a parent thread/task: not ours.
        if state is None or state.owner() is not _execution_owner():
            return {}
        return state.stores

    def _current(self) -> dict[str, Any]:
        return self._owned_stores().get(self._id, {})

    def _install(self, fields: dict[str, Any]) -> None:
        stores = dict(self._owned_stores())
        if fields:
            stores[self._id] = fields
        else:
            stores.pop(self._id, None)
        if not stores:
            _ISOLATED_FIELDS.set(None)
            return
        _ISOLATED_FIELDS.set(_ContextFields(weakref.ref(_execution_owner()), stores))

    def add(self, fields: Mapping[Any, Any]) -> None:
        update = _string_keys(fields)
        merged = dict(self._current())
        merged.update(update)
        self._install(merged)

    def remove(self, keys: Iterable[Any] | str) -> None:
        names = _key_list(keys)
        current = self._current()
        if not any(name in current for name in names):
            return
        self._install({key: value for key, value in current.items() if key not in names})

    def snapshot(self) -> dict[str, Any]:
        return compact_fields(self._current())

    @contextmanager
    def scoped(self, fields: Mapping[Any, Any]) -> Iterator[None]:
        """
        Apply ``fields`` for the duration of a block.

        On exit, every touched key goes back to its previous value, or is
        removed if it was not set before. Runs on every exit path.
        """

        update = _string_keys(fields)
        before = self._current()
        previous = {key: before[key] for key in update if key in before}
        self.add(update)
        try:
            yield
        finally:
            restored = dict(self._current())
            for key in update:
                if key in previous:
                    restored[key] = previous[key]
                else:
                    restored.pop(key, None)
            self._install(restored)


class FieldStores:
    """
    One Shared and one Isolated store, addressed by FieldScope.
    """

    def __init__(self, name: str = "logline") -> None:
        self.shared = SharedFieldStore()
        self.isolated = IsolatedFieldStore(name)

    def _store(self, scope: FieldScope) -> SharedFieldStore | IsolatedFieldStore:
        if scope is FieldScope.SHARED:
            return self.shared
        if scope is FieldScope.ISOLATED:
            return self.isolated
        raise ValueError(f"Unknown field scope '{scope}'.")

    def add(self, scope: FieldScope, fields: Mapping[Any, Any]) -> None:
        self._store(scope).add(fields)

    def remove(self, scope: FieldScope, keys: Iterable[Any] | str) -> None:
        self._store(scope).remove(keys)

    def snapshot(self, scope: FieldScope) -> dict[str, Any]:
        return self._store(scope).snapshot()

    def merged(self) -> dict[str, Any]:
        # Isolated values override Shared ones on key collision.
        merged = self.shared.snapshot()
        merged.update(self.isolated.snapshot())
        return merged
