from dynareg.core.bound import BoundClosure
from dynareg.core.closures import ClosureRegistry
from dynareg.core.context import Context, default_context
from dynareg.core.instances import InstanceRegistry
from dynareg.core.namespace import GlobalNamespace
from dynareg.core.resolution import Handler, HandlerKind, resolve
from dynareg.core.singleton import Singleton, SingletonMeta
from dynareg.core.utils import ChainPolicy, OverwritePolicy, is_empty

__all__ = [
    "BoundClosure",
    "ChainPolicy",
    "ClosureRegistry",
    "Context",
    "GlobalNamespace",
    "Handler",
    "HandlerKind",
    "InstanceRegistry",
    "OverwritePolicy",
    "Singleton",
    "SingletonMeta",
    "default_context",
    "is_empty",
    "resolve",
]
