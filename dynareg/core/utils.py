import functools
import logging
import numbers
from enum import IntEnum
from typing import Any, Callable, Optional, cast

from dynareg._storage import MemoryStorage, StorageProtocol
from dynareg._types import K, V

_LOCK_METHODS = ("__enter__", "__exit__", "acquire", "release")


def locked_method(method: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to lock method calls for thread safety."""

    @functools.wraps(method)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


def _make_default_store() -> StorageProtocol[K, V]:
    return cast(StorageProtocol[K, V], MemoryStorage())


def check_lock(lock: Optional[Any]) -> None:
    if lock is not None and not all(hasattr(lock, m) for m in _LOCK_METHODS):
        raise TypeError("lock must be a threading.RLock or similar object")


def check_log_level(log_level: int) -> None:
    if not (50 >= log_level >= 0):
        raise ValueError("log_level must be a valid logging level between 0 and 50")


def validate_name(name: Any, kind: str = "Registry key") -> None:
    if not isinstance(name, str):
        raise TypeError(f"{kind} must be a string, got {type(name)}")
    elif not name:
        raise ValueError(f"{kind} cannot be an empty string")
    elif any(c.isspace() for c in name):
        raise ValueError(f"{kind} cannot contain whitespace characters")


class OverwritePolicy(IntEnum):
    FORBID = 0
    ALLOW = 1
    WARN = 2


class ChainPolicy(IntEnum):
    """Which dispatch results are replaced by the owning instance.

    FALSY collapses falsy builtin results (None, False, 0, "", empty
    builtin containers) so that chained calls keep working; NONE_ONLY keeps
    legitimate falsy values and only replaces a missing return value.
    """

    FALSY = 0
    NONE_ONLY = 1


# Only these can collapse; other objects are never empty, even when their
# truth value is false or undefined.
_COLLAPSIBLE = (
    numbers.Number,
    str,
    bytes,
    bytearray,
    list,
    tuple,
    dict,
    set,
    frozenset,
)


def is_empty(value: Any, policy: int = ChainPolicy.FALSY) -> bool:
    if value is None:
        return True
    if ChainPolicy(policy) is ChainPolicy.NONE_ONLY:
        return False
    return isinstance(value, _COLLAPSIBLE) and not value


def log_overwrite(
    logger: logging.Logger, policy: OverwritePolicy, what: str, key: str
) -> None:
    if policy is OverwritePolicy.WARN:
        logger.warning("Overwriting %s %r", what, key)
