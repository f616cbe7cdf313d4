from typing import Dict, Iterator, Optional, Protocol, runtime_checkable

from dynareg._types import K, V


@runtime_checkable
class StorageProtocol(Protocol[K, V]):
    """Backend interface shared by `GlobalNamespace` and `ClosureRegistry`.

    Locking is the caller's job: backends only hold the data.
    """

    def load(
        self, key: K, default: Optional[V] = None
    ) -> Optional[V]:  # pragma: no cover - interface
        ...

    def save(self, key: K, value: V) -> None:  # pragma: no cover - interface
        ...

    def discard(self, key: K) -> None:  # pragma: no cover - interface
        ...

    def clear(self) -> None:  # pragma: no cover - interface
        ...

    def keys(self) -> Iterator[K]:  # pragma: no cover - interface
        ...

    def snapshot(self) -> Dict[K, V]:  # pragma: no cover - interface
        ...

    def __len__(self) -> int:  # pragma: no cover - interface
        ...

    def __contains__(self, key: object) -> bool:  # pragma: no cover - interface
        ...
