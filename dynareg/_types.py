from typing import Any, Callable, TypeVar

K = TypeVar("K", bound=str)
V = TypeVar("V")

# Anything a dispatcher may call: registered closures receive the owning
# instance as their first positional argument.
MethodFunc = Callable[..., Any]

__all__ = ["K", "V", "MethodFunc"]
