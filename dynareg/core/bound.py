from dataclasses import dataclass, field
from typing import Any

from dynareg._types import MethodFunc


@dataclass(frozen=True)
class BoundClosure:
    """A callable paired with the instance it runs against.

    Calling it invokes `func(instance, *args, **kwargs)`; `owner` records the
    concrete class the closure was bound for.
    """

    func: MethodFunc
    instance: Any = field(repr=False)
    owner: type

    @classmethod
    def bind(cls, func: MethodFunc, instance: Any) -> "BoundClosure":
        # rebinding keeps the original function, not the previous binding
        if isinstance(func, BoundClosure):
            func = func.func
        return cls(func, instance, type(instance))

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.func(self.instance, *args, **kwargs)
