import contextlib
import logging
from threading import RLock
from typing import (
    Any,
    Callable,
    ContextManager,
    Dict,
    Iterator,
    Mapping,
    MutableMapping,
    Optional,
)

from dynareg._storage import StorageProtocol
from dynareg._types import MethodFunc
from dynareg.core.utils import (
    OverwritePolicy,
    _make_default_store,
    check_lock,
    check_log_level,
    locked_method,
    log_overwrite,
    validate_name,
)
from dynareg.exceptions import (
    AlreadyRegisteredError,
    InvalidMethodError,
    NotRegisteredError,
)

logger = logging.getLogger(__name__)


class ClosureRegistry(MutableMapping[str, MethodFunc]):
    """
    Thread-safe, process-wide mapping of method name to unbound callable.

    Singletons fall back to this registry when a name is neither in their
    dynamic method store nor declared on their class. The first successful
    lookup binds the callable to the instance, after which the instance no
    longer consults the registry for that name.

    Callables stored here receive the owning instance as their first
    positional argument once bound.

    Raises:
        AlreadyRegisteredError: If registering an existing name under
            OverwritePolicy.FORBID.
        NotRegisteredError: If reading or deleting a name that is not present.
        InvalidMethodError: If the stored value is not callable.

    Examples:
        >>> closures = ClosureRegistry()
        >>> @closures.register()
        ... def shout(self, text):
        ...     return text.upper()
        >>> closures["shout"](None, "hi")
        'HI'
    """

    def __init__(
        self,
        *,
        lock: Optional[RLock] = None,
        log_level: int = logging.WARNING,
        overwrite_policy: int = OverwritePolicy.FORBID,
        store: Optional[StorageProtocol[str, MethodFunc]] = None,
    ) -> None:
        """
        Args:
            lock: An optional threading.RLock or similar object.
            log_level: Logging level for the closures logger.
            overwrite_policy: 0 forbids re-registering a name (default),
                1 allows it silently, 2 allows it with a warning.
            store: An optional storage backend implementing StorageProtocol.

        Raises:
            TypeError: If the lock does not behave like a lock.
            ValueError: If log_level or overwrite_policy is out of range.
        """
        check_lock(lock)
        check_log_level(log_level)

        self._lock: RLock = lock or RLock()
        self._store: StorageProtocol[str, MethodFunc] = (
            store if store is not None else _make_default_store()
        )
        self._overwrite_policy = OverwritePolicy(overwrite_policy)
        logger.setLevel(log_level)

    def register(
        self, name: Optional[str] = None
    ) -> Callable[[MethodFunc], MethodFunc]:
        """
        Decorator registering a function under `name` (defaults to its
        `__name__`). The function itself is returned unchanged.
        """

        def decorator(func: MethodFunc) -> MethodFunc:
            key = name if name is not None else getattr(func, "__name__", None)
            if key is None:
                raise ValueError("Closure name must be provided or inferable")
            self[key] = func
            return func

        return decorator

    @locked_method
    def clear(self) -> None:
        self._store.clear()
        logger.debug("Closure registry cleared")

    @locked_method
    def get(self, name: str, default: Optional[MethodFunc] = None) -> Any:
        if name not in self._store:
            return default
        return self._store.load(name)

    @locked_method
    def snapshot(self) -> Dict[str, MethodFunc]:
        return self._store.snapshot()

    @locked_method
    def update(self, data: Mapping[str, MethodFunc]) -> None:  # type: ignore[override]
        for name, func in data.items():
            self._put(name, func)

    def bulk(self) -> ContextManager["ClosureRegistry"]:
        """
        Hold the registry lock across several operations.

        Usage:
            with closures.bulk() as reg:
                reg["a"] = func_a
                reg["b"] = func_b
        """

        @contextlib.contextmanager
        def _bulk_ctx() -> Iterator[ClosureRegistry]:
            self._lock.acquire()
            try:
                yield self
            finally:
                self._lock.release()

        return _bulk_ctx()

    def _put(self, name: str, func: Any) -> None:
        validate_name(name, "Closure name")
        if not callable(func):
            raise InvalidMethodError(name, func)
        if name in self._store:
            if self._overwrite_policy is OverwritePolicy.FORBID:
                raise AlreadyRegisteredError(
                    f"Closure {name!r} is already registered"
                )
            log_overwrite(logger, self._overwrite_policy, "closure", name)
        self._store.save(name, func)
        logger.debug("Registered closure %s -> %r", name, func)

    def _require(self, name: Any) -> None:
        validate_name(name, "Closure name")
        if name not in self._store:
            raise NotRegisteredError(f"Closure {name!r} is not registered")

    @locked_method
    def __getitem__(self, name: str) -> MethodFunc:
        self._require(name)
        return self._store.load(name)  # type: ignore[return-value]

    @locked_method
    def __setitem__(self, name: str, func: MethodFunc) -> None:
        self._put(name, func)

    @locked_method
    def __delitem__(self, name: str) -> None:
        self._require(name)
        self._store.discard(name)
        logger.debug("Removed closure %s", name)

    @locked_method
    def __iter__(self) -> Iterator[str]:
        return iter(list(self._store.keys()))

    @locked_method
    def __len__(self) -> int:
        return len(self._store)

    @locked_method
    def __contains__(self, name: object) -> bool:
        return name in self._store

    @locked_method
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self._store.keys())!r})"
