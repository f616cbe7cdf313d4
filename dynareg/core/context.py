from dataclasses import dataclass, field

from dynareg.core.closures import ClosureRegistry
from dynareg.core.instances import InstanceRegistry
from dynareg.core.namespace import GlobalNamespace
from dynareg.core.utils import ChainPolicy


@dataclass
class Context:
    """Shared state a family of singletons dispatches against."""

    namespace: GlobalNamespace = field(default_factory=GlobalNamespace)
    closures: ClosureRegistry = field(default_factory=ClosureRegistry)
    instances: InstanceRegistry = field(default_factory=InstanceRegistry)
    chain_policy: ChainPolicy = ChainPolicy.FALSY

    def reset(self) -> None:
        """Drop instances, namespace entries and closures."""
        self.instances.clear()
        self.namespace.clear()
        self.closures.clear()


_DEFAULT = Context()


def default_context() -> Context:
    """The process-wide context used by singletons that do not pick one."""
    return _DEFAULT
