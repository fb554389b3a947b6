"""
Path resolution over state trees.

A path is a tuple of keys (strings for mappings, integers for lists) read
left to right from the root. Resolution is permissive: a missing key, an
out-of-range index or a step taken from a non-container yields None rather
than raising, mirroring how reads through the proxy layer behave.
"""

from collections.abc import Mapping
from typing import Any, Hashable, Iterable, Tuple

Key = Hashable
Path = Tuple[Key, ...]


def is_container(value: Any) -> bool:
    """True for the node types the proxy layer wraps (mappings and lists)."""
    return isinstance(value, (Mapping, list))


def read_key(node: Any, key: Key) -> Any:
    """Index one step into ``node``; None when the step does not exist."""
    if isinstance(node, list):
        if isinstance(key, int) and not isinstance(key, bool) and -len(node) <= key < len(node):
            return node[key]
        return None
    if isinstance(node, Mapping):
        return node.get(key)
    return None


def resolve(root: Any, path: Iterable[Key]) -> Any:
    """Walk ``path`` down from ``root`` and return the addressed node."""
    node = root
    for key in path:
        node = read_key(node, key)
    return node
