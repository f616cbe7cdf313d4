"""dynareg — singletons with runtime-extensible method dispatch.

Subclass `Singleton` to get one shared instance per class whose methods can
be extended at runtime, either per instance or from a process-wide
`ClosureRegistry`, plus a `GlobalNamespace` shared by every singleton.
It's intentionally small and dependency-free.
"""
from pathlib import Path
from typing import Optional

from importlib.metadata import PackageNotFoundError, version as _pkg_version

from dynareg.core import (
    BoundClosure,
    ChainPolicy,
    ClosureRegistry,
    Context,
    GlobalNamespace,
    InstanceRegistry,
    OverwritePolicy,
    Singleton,
    default_context,
)
from dynareg.exceptions import (
    AlreadyRegisteredError,
    DynaregError,
    InvalidMethodError,
    NoSuchMethodError,
    NotRegisteredError,
    UndefinedKeyError,
)


def _read_version_file() -> Optional[str]:
    try:
        return Path(__file__).with_name("VERSION").read_text(encoding="utf8").strip()
    except OSError:
        return None


def _get_version() -> str:
    # 1) Try to read installed distribution metadata
    try:
        return _pkg_version("dynareg")
    except PackageNotFoundError:
        pass

    # 2) Try a VERSION file shipped next to the package
    v = _read_version_file()
    if v:
        return v

    # 3) Fall back to a safe default
    return "0.0.0"


__version__ = _get_version()


__all__ = [
    "Singleton",
    "Context",
    "default_context",
    "ClosureRegistry",
    "GlobalNamespace",
    "InstanceRegistry",
    "BoundClosure",
    "ChainPolicy",
    "OverwritePolicy",
    "DynaregError",
    "NoSuchMethodError",
    "InvalidMethodError",
    "UndefinedKeyError",
    "AlreadyRegisteredError",
    "NotRegisteredError",
    "__version__",
]
