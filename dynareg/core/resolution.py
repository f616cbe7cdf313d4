"""Method-name resolution for singletons.

`resolve` decides, for one instance and one name, which handler a call
should run. The order is fixed: the instance's dynamic methods, then
methods declared on its class, then the context's closure registry.
"""
import enum
from dataclasses import dataclass
from typing import AbstractSet, Any, Mapping, Optional

from dynareg._types import MethodFunc


class HandlerKind(enum.Enum):
    DYNAMIC = "dynamic"
    DECLARED = "declared"
    REGISTRY = "registry"
    MISSING = "missing"


@dataclass(frozen=True)
class Handler:
    kind: HandlerKind
    name: str
    target: Optional[MethodFunc] = None

    @property
    def found(self) -> bool:
        return self.kind is not HandlerKind.MISSING


_NOT_METHODS = (staticmethod, classmethod, property)


def declared_method(
    cls: type, name: str, reserved: AbstractSet[str] = frozenset()
) -> Optional[Any]:
    """Return the instance method `name` defined on `cls` or its bases.

    Any callable class attribute that binds through `__get__` counts, so
    decorated methods (`functools.lru_cache`, `functools.wraps` wrappers) are
    found too. Static methods, class methods, properties, nested classes and
    data attributes are ignored, as is anything listed in `reserved`.
    """
    if name in reserved:
        return None
    for klass in cls.__mro__:
        if name in vars(klass):
            attr = vars(klass)[name]
            break
    else:
        return None
    if isinstance(attr, (_NOT_METHODS, type)):
        return None
    if callable(attr) and hasattr(attr, "__get__"):
        return attr
    return None


def resolve(
    instance: Any,
    name: str,
    closures: Mapping[str, MethodFunc],
    reserved: AbstractSet[str] = frozenset(),
) -> Handler:
    methods = instance._methods
    if name in methods:
        return Handler(HandlerKind.DYNAMIC, name, methods[name])

    declared = declared_method(type(instance), name, reserved)
    if declared is not None:
        return Handler(HandlerKind.DECLARED, name, declared)

    registered = closures.get(name)
    if registered is not None:
        return Handler(HandlerKind.REGISTRY, name, registered)

    return Handler(HandlerKind.MISSING, name)
