"""
Per-invocation proxy identity cache.

Reads through the proxy layer always re-resolve against live state, so the
same node is reached again and again while an action runs. The cache hands
back the same proxy each time, which keeps ``state.a is state.a`` true and
lets a local alias of a nested node keep working after other mutations.

Entries are keyed by (path, id(node)). The cache holds a strong reference to
every node it has seen, so an id can not be recycled by a different object
while the cache is alive. One cache is created per action invocation and
dropped with it.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Tuple, TypeVar

from livestate.paths import Path

P = TypeVar('P')


@dataclass(frozen=True)
class NodeHandle:
    """Stable handle for one live node reached at one path."""
    path: Path
    node_id: int

    @classmethod
    def of(cls, path: Path, node: Any) -> 'NodeHandle':
        return cls(path=tuple(path), node_id=id(node))


class ProxyIdentityCache(Generic[P]):
    """
    Map from live node (at a path) to the proxy standing in for it.

    Example:
        cache = ProxyIdentityCache()
        proxy = cache.get_or_create(('foo',), node, lambda: make_view(node))
        assert cache.get_or_create(('foo',), node, make_other) is proxy
    """

    def __init__(self):
        self._entries: Dict[NodeHandle, Tuple[Any, P]] = {}

    def get_or_create(self, path: Path, node: Any, factory: Callable[[], P]) -> P:
        """
        Get the cached proxy for ``node`` at ``path`` or build and cache one.

        Args:
            path: Path the node was reached at
            node: The live node
            factory: Builds the proxy on a cache miss

        Returns:
            Cached or newly built proxy
        """
        handle = NodeHandle.of(path, node)
        entry = self._entries.get(handle)
        if entry is not None:
            return entry[1]

        proxy = factory()
        self._entries[handle] = (node, proxy)
        return proxy

    def get(self, path: Path, node: Any):
        entry = self._entries.get(NodeHandle.of(path, node))
        return entry[1] if entry is not None else None

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        # An empty cache is still a cache
        return True

    def __contains__(self, item: Tuple[Path, Any]) -> bool:
        path, node = item
        return NodeHandle.of(path, node) in self._entries

    def clear(self):
        """Drop every entry."""
        self._entries.clear()
