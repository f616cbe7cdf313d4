from typing import Dict, Generic, Iterator, Optional

from dynareg._types import K, V


class MemoryStorage(Generic[K, V]):
    """Dictionary-backed storage; values are kept (and handed out) by reference."""

    def __init__(self) -> None:
        self._data: Dict[K, V] = {}

    def load(self, key: K, default: Optional[V] = None) -> Optional[V]:
        return self._data.get(key, default)

    def save(self, key: K, value: V) -> None:
        self._data[key] = value

    def discard(self, key: K) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> Iterator[K]:
        return iter(list(self._data))

    def snapshot(self) -> Dict[K, V]:
        return dict(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data
