import logging
from threading import RLock
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from dynareg.core.utils import check_lock

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InstanceRegistry:
    """
    Holds one lazily created instance per concrete class.

    The first `get_or_create(cls, ...)` builds the instance from its
    arguments; every later call returns that same object and ignores its
    arguments. Subclasses are keyed separately from their bases.

    Construction uses the factory registered for the class, or the class
    itself. Construction errors propagate and leave the slot empty.
    """

    def __init__(self, *, lock: Optional[RLock] = None) -> None:
        check_lock(lock)
        # reentrant: a constructor may resolve other singletons
        self._lock: RLock = lock or RLock()
        self._slots: Dict[type, Any] = {}
        self._factories: Dict[type, Callable[..., Any]] = {}

    def register_factory(
        self, cls: type, factory: Optional[Callable[..., Any]] = None
    ) -> Any:
        """
        Use `factory(*args, **kwargs)` instead of `cls(...)` to build the
        instance of `cls`. Without `factory`, returns a decorator.
        """

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            with self._lock:
                self._factories[cls] = func
            logger.debug("Registered factory for %s", cls.__qualname__)
            return func

        if factory is None:
            return decorator
        return decorator(factory)

    def get_or_create(self, cls: Type[T], *args: Any, **kwargs: Any) -> T:
        instance = self._slots.get(cls)
        if instance is not None:
            if args or kwargs:
                logger.debug(
                    "Ignoring constructor arguments for existing %s",
                    cls.__qualname__,
                )
            return instance  # type: ignore[no-any-return]

        with self._lock:
            instance = self._slots.get(cls)
            if instance is None:
                factory = self._factories.get(cls, cls)
                instance = factory(*args, **kwargs)
                self._slots[cls] = instance
                logger.debug("Created singleton %s", cls.__qualname__)
        return instance  # type: ignore[no-any-return]

    def peek(self, cls: type) -> Optional[Any]:
        return self._slots.get(cls)

    def discard(self, cls: type) -> None:
        with self._lock:
            self._slots.pop(cls, None)

    def clear(self) -> None:
        """Forget every instance; registered factories are kept."""
        with self._lock:
            self._slots.clear()

    def __contains__(self, cls: object) -> bool:
        return cls in self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        names = [c.__qualname__ for c in list(self._slots)]
        return f"{self.__class__.__name__}({names!r})"
