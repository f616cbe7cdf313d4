import functools
import logging
from threading import RLock
from typing import Any, Dict, FrozenSet, Optional, Type, TypeVar

from dynareg._types import MethodFunc
from dynareg.core.bound import BoundClosure
from dynareg.core.context import Context, default_context
from dynareg.core.namespace import GlobalNamespace
from dynareg.core.resolution import HandlerKind, declared_method, resolve
from dynareg.core.utils import is_empty, validate_name
from dynareg.exceptions import InvalidMethodError, NoSuchMethodError

logger = logging.getLogger(__name__)

S = TypeVar("S", bound="Singleton")


class SingletonMeta(type):
    """Routes unknown class attributes to `Singleton.call`.

    `Config.reload("a")` on a class that defines no `reload` attribute
    becomes `Config.call("reload", "a")`. Names the class does define are
    looked up normally, and missing underscore names raise AttributeError.

    Because every other public name answers with a dispatching callable,
    `hasattr(Config, "anything")` is always true and
    `getattr(Config, name, default)` never returns `default`. Code that
    probes class attributes should use `inspect.getattr_static` instead.
    """

    def __getattr__(cls, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(
                f"type object {cls.__name__!r} has no attribute {name!r}"
            )
        return functools.partial(cls.call, name)


class Singleton(metaclass=SingletonMeta):
    """
    Base class for process-wide singletons with runtime-extensible methods.

    Subclasses get one shared instance each, created by the first
    `get_instance(...)` (or first class-level call) with that call's
    arguments. Method calls on the instance are resolved in this order:

    1. methods added to the instance at runtime (`_add_method`),
    2. methods declared on the class (any visibility),
    3. closures in the context's closure registry, which are bound to the
       instance on first use and called from its own method store after.

    Anything else raises `NoSuchMethodError`. Attribute access follows the
    same order for non-dunder names, except that a value stored on the
    instance itself (`self.label = ...`) is returned as-is, even when the
    class declares a method with that name. A call whose result is empty
    (by the context's `ChainPolicy`) returns the instance instead, so calls
    can be chained.

    Shared state comes from a `Context`, the process-wide default one unless
    the class is declared with another:

        class Settings(Singleton, context=my_context):
            ...

    Example:
        >>> class Counter(Singleton):
        ...     def __init__(self, start=0):
        ...         self.value = start
        ...     def bump(self):
        ...         self.value += 1
        >>> Counter.get_instance(5).bump().bump().value
        7
    """

    _dispatch_context: Optional[Context] = None

    def __init_subclass__(
        cls, context: Optional[Context] = None, **kwargs: Any
    ) -> None:
        super().__init_subclass__(**kwargs)
        if context is not None:
            cls._dispatch_context = context

    def __new__(cls, *args: Any, **kwargs: Any) -> "Singleton":
        self = super().__new__(cls)
        self._lock = RLock()
        self._methods: Dict[str, BoundClosure] = {}
        self._storage = None
        return self

    @classmethod
    def _context(cls) -> Context:
        return cls._dispatch_context or default_context()

    @classmethod
    def get_instance(cls: Type[S], *args: Any, **kwargs: Any) -> S:
        """Return the shared instance, building it from these arguments if needed."""
        return cls._context().instances.get_or_create(cls, *args, **kwargs)

    @classmethod
    def call(cls, name: str, *args: Any, **kwargs: Any) -> Any:
        """
        Class-level dispatch: the arguments build the instance when it does
        not exist yet and are then passed to the method as well.
        """
        instance = cls.get_instance(*args, **kwargs)
        return instance.invoke(name, *args, **kwargs)

    def invoke(self, name: str, *args: Any, **kwargs: Any) -> Any:
        context = self._context()
        handler = resolve(self, name, context.closures, _RESERVED)

        match handler.kind:
            case HandlerKind.DYNAMIC:
                result = handler.target(*args, **kwargs)
            case HandlerKind.DECLARED:
                method = handler.target.__get__(self, type(self))
                result = method(*args, **kwargs)
            case HandlerKind.REGISTRY:
                self._add_method(name, handler.target)
                logger.debug(
                    "Bound registry closure %s to %s", name, type(self).__qualname__
                )
                result = self._methods[name](*args, **kwargs)
            case _:
                raise NoSuchMethodError(name, type(self).__qualname__)

        if is_empty(result, context.chain_policy):
            return self
        return result

    def _add_method(self, name: str, func: MethodFunc) -> None:
        """
        Bind `func` to this instance under `name`, replacing any previous
        binding. `func` is called with the instance as first argument.

        Raises:
            InvalidMethodError: If `func` is not callable.
            ValueError: If `name` clashes with the instance's own state.
        """
        validate_name(name, "Method name")
        if name in _INTERNAL:
            raise ValueError(f"Method name {name!r} is used by the instance itself")
        if not callable(func):
            raise InvalidMethodError(name, func)
        with self._lock:
            self._methods[name] = BoundClosure.bind(func, self)
        logger.debug("Added method %s to %s", name, type(self).__qualname__)

    @property
    def namespace(self) -> GlobalNamespace:
        return self._context().namespace

    def _get_storage(self) -> Any:
        return self._storage

    def _set_storage(self, value: Any) -> None:
        self._storage = value

    def _has_storage(self) -> bool:
        return self._storage is not None

    def __call__(self) -> Any:
        return self._storage

    def __getattribute__(self, name: str) -> Any:
        if name.startswith("__") or name in _RESERVED or name in _INTERNAL:
            return object.__getattribute__(self, name)
        state = object.__getattribute__(self, "__dict__")
        dispatch = object.__getattribute__(self, "invoke")
        if name in state.get("_methods", ()):
            return functools.partial(dispatch, name)
        if name not in state and (
            declared_method(type(self), name, _RESERVED) is not None
        ):
            return functools.partial(dispatch, name)
        return object.__getattribute__(self, name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") or name in _INTERNAL:
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}"
            )
        if name in self._context().closures:
            return functools.partial(self.invoke, name)
        raise NoSuchMethodError(name, type(self).__qualname__)


_RESERVED: FrozenSet[str] = frozenset(
    name for name in vars(Singleton) if not name.startswith("__")
)

# per-instance state set up in __new__
_INTERNAL: FrozenSet[str] = frozenset({"_lock", "_methods", "_storage"})
