import logging
from threading import RLock
from typing import Any, Dict, Iterator, Optional

from dynareg._storage import StorageProtocol
from dynareg.core.utils import (
    _make_default_store,
    check_lock,
    check_log_level,
    locked_method,
)
from dynareg.exceptions import UndefinedKeyError

logger = logging.getLogger(__name__)

_MISSING = object()


class GlobalNamespace:
    """
    Shared key/value store reachable from every singleton of a context.

    Reads hand out the stored object itself, so mutating a returned list or
    dict is visible to every other holder. Keys are plain strings; the same
    entries can be reached through `get`/`set`/`has`/`unset`, item access or
    attribute access:

        >>> ns = GlobalNamespace()
        >>> ns.set("debug", True)
        >>> ns.debug, ns["debug"], ns.has("debug")
        (True, True, True)
        >>> ns.unset("debug")
        >>> "debug" in ns
        False

    Attribute access only reaches keys that do not collide with a method
    name of this class; use `get` for those.
    """

    def __init__(
        self,
        *,
        lock: Optional[RLock] = None,
        log_level: int = logging.WARNING,
        store: Optional[StorageProtocol[str, Any]] = None,
    ) -> None:
        check_lock(lock)
        check_log_level(log_level)

        object.__setattr__(self, "_lock", lock or RLock())
        object.__setattr__(
            self, "_store", store if store is not None else _make_default_store()
        )
        logger.setLevel(log_level)

    @locked_method
    def get(self, key: str, default: Any = _MISSING) -> Any:
        """
        Return the value stored under `key`.

        Raises:
            UndefinedKeyError: If the key is absent and no default was given.
        """
        if key in self._store:
            return self._store.load(key)
        if default is _MISSING:
            raise UndefinedKeyError(key)
        return default

    @locked_method
    def set(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise TypeError(f"Namespace key must be a string, got {type(key)}")
        self._store.save(key, value)
        logger.debug("Namespace set %s -> %s", key, type(value))

    @locked_method
    def has(self, key: str) -> bool:
        return key in self._store

    @locked_method
    def unset(self, key: str) -> None:
        if key in self._store:
            self._store.discard(key)
            logger.debug("Namespace unset %s", key)

    @locked_method
    def clear(self) -> None:
        self._store.clear()
        logger.debug("Namespace cleared")

    @locked_method
    def snapshot(self) -> Dict[str, Any]:
        """Shallow copy of the current entries."""
        return self._store.snapshot()

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        self.unset(key)

    def __contains__(self, key: object) -> bool:
        return self.has(key)  # type: ignore[arg-type]

    @locked_method
    def __len__(self) -> int:
        return len(self._store)

    @locked_method
    def __iter__(self) -> Iterator[str]:
        return iter(list(self._store.keys()))

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self.get(name)
        except UndefinedKeyError as exc:
            raise AttributeError(name) from exc

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
        else:
            self.set(name, value)

    def __delattr__(self, name: str) -> None:
        if name.startswith("_"):
            object.__delattr__(self, name)
        else:
            self.unset(name)

    @locked_method
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self._store.keys())!r})"
