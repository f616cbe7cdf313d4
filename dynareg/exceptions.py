from typing import Any, Optional


class DynaregError(Exception):
    """Base class for every error raised by dynareg."""


class NoSuchMethodError(DynaregError, AttributeError):
    """No dynamic method, declared method or registry closure matched a name."""

    def __init__(self, name: str, owner: Optional[str] = None) -> None:
        target = f" on {owner}" if owner else ""
        super().__init__(
            f"There is no valid method or closure named {name!r}{target} to call"
        )
        self.name = name
        self.owner = owner


class InvalidMethodError(DynaregError, TypeError):
    """A non-callable value was offered as a method."""

    def __init__(self, name: str, value: Any) -> None:
        super().__init__(
            f"Method {name!r} must be callable, got {type(value).__name__}"
        )
        self.name = name
        self.value = value


class UndefinedKeyError(DynaregError, KeyError):
    """The global namespace has no entry for the requested key."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Global namespace key {self.key!r} is not defined"


class AlreadyRegisteredError(DynaregError, ValueError):
    pass


class NotRegisteredError(DynaregError, KeyError):
    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


__all__ = [
    "DynaregError",
    "NoSuchMethodError",
    "InvalidMethodError",
    "UndefinedKeyError",
    "AlreadyRegisteredError",
    "NotRegisteredError",
]
