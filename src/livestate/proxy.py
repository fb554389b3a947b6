"""
Mutation-tracking proxies over live state.

A proxy is a stateless view bound to (dispatch, get_state, path, cache). It
owns no data: every read resolves its path against the state get_state()
returns right now, so code that mutates and then reads again always sees
the committed result of its own earlier writes, also across awaits.

Writes never touch the tree. Assignment, deletion and the list mutators are
turned into Mutation descriptors and passed to dispatch; the store's
reducer applies them. Return values of the list mutators are computed from
the pre-call snapshot (see Mutation.preview) so they match what the
imperative call would have returned.

Reads:
    state.foo / state['foo']    child proxy for dicts and lists, else the value
    missing key / index         None
    len, in, ==, bool, repr     delegated to the live node

Writes:
    state.foo.bar = 1           SET   ('foo', 'bar')
    del state.foo.bar           DELETE ('foo', 'bar')
    state.items.push(x)         PUSH  ('items',)

TrackedDict helpers (get, keys, items, values, copy, update, pop, setdefault,
clear) are reachable as attributes only while the live mapping has no key of
the same name; a stored key always wins, and item access always reaches it.
"""

import functools
import logging
from collections.abc import Mapping
from typing import Any, Callable, Iterator, Optional, Tuple

from livestate.frozen import FrozenDict, FrozenList
from livestate.identity_cache import ProxyIdentityCache
from livestate.mutations import Mutation, MutationKind
from livestate.paths import Key, Path, is_container, read_key, resolve

logger = logging.getLogger(__name__)

Dispatch = Callable[[Mutation], Any]
GetState = Callable[[], Any]

_MISSING = object()

_MAPPING_HELPERS = frozenset({
    'keys', 'get', 'values', 'items', 'copy', 'update', 'pop', 'setdefault', 'clear',
})


def make_proxy(
    dispatch: Dispatch,
    get_state: GetState,
    path: Path,
    cache: ProxyIdentityCache,
    node: Any = _MISSING,
) -> 'TrackedNode':
    """Get the cached proxy for the node at ``path``, creating it on first access.

    Args:
        dispatch: Receives every Mutation the proxy emits.
        get_state: Returns the current committed root.
        path: Path of the node relative to the root.
        cache: Identity cache of the running action invocation.
        node: The live node at ``path`` when the caller already resolved it.
    """
    path = tuple(path)
    if node is _MISSING:
        node = resolve(get_state(), path)
    proxy_type = TrackedList if isinstance(node, list) else TrackedDict
    return cache.get_or_create(path, node, lambda: proxy_type(dispatch, get_state, path, cache))


def unwrap(value: Any) -> Any:
    """Replace proxies (also nested in plain containers) by their live nodes."""
    if isinstance(value, TrackedNode):
        return value._target()
    if isinstance(value, (FrozenDict, FrozenList)):
        return value
    if isinstance(value, dict):
        return {key: unwrap(item) for key, item in value.items()}
    if isinstance(value, list):
        return [unwrap(item) for item in value]
    if type(value) is tuple:
        return tuple(unwrap(item) for item in value)
    return value


def tracked_path(proxy: 'TrackedNode') -> Path:
    """Path a proxy is bound to."""
    return proxy._path


class TrackedNode:
    """Shared read side of the dict and list proxies."""

    __slots__ = ('_dispatch', '_get_state', '_path', '_cache')

    def __init__(self, dispatch: Dispatch, get_state: GetState, path: Path, cache: ProxyIdentityCache):
        object.__setattr__(self, '_dispatch', dispatch)
        object.__setattr__(self, '_get_state', get_state)
        object.__setattr__(self, '_path', tuple(path))
        object.__setattr__(self, '_cache', cache)

    def _target(self) -> Any:
        """The live node this proxy stands for."""
        return resolve(self._get_state(), self._path)

    def _read(self, key: Key) -> Any:
        value = read_key(self._target(), key)
        if is_container(value):
            return make_proxy(self._dispatch, self._get_state, self._path + (key,), self._cache, value)
        return value

    def _emit(self, mutation: Mutation) -> None:
        logger.debug(f"Dispatching {mutation.mutation} at {list(mutation.path)}")
        self._dispatch(mutation)

    def _set_key(self, key: Key, value: Any) -> None:
        self._emit(Mutation(self._path + (key,), MutationKind.SET, value=unwrap(value)))

    def _delete_key(self, key: Key) -> None:
        self._emit(Mutation(self._path + (key,), MutationKind.DELETE))

    def __len__(self) -> int:
        target = self._target()
        return len(target) if is_container(target) else 0

    def __bool__(self) -> bool:
        return bool(self._target())

    def __contains__(self, item: Any) -> bool:
        target = self._target()
        return is_container(target) and unwrap(item) in target

    def __eq__(self, other: Any) -> bool:
        return self._target() == unwrap(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._target()!r}, path={list(self._path)})"


class TrackedDict(TrackedNode):
    """Proxy for a mapping node; keys are reachable as attributes and items."""

    __slots__ = ()

    def _live(self) -> Mapping:
        target = self._target()
        return target if isinstance(target, Mapping) else FrozenDict()

    def __getattribute__(self, name: str) -> Any:
        # Stored keys win over helpers of the same name
        if name in _MAPPING_HELPERS and name in object.__getattribute__(self, '_live')():
            return object.__getattribute__(self, '_read')(name)
        return object.__getattribute__(self, name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith('__') and name.endswith('__'):
            raise AttributeError(name)
        return self._read(name)

    def __setattr__(self, name: str, value: Any) -> None:
        self._set_key(name, value)

    def __delattr__(self, name: str) -> None:
        self._delete_key(name)

    def __getitem__(self, key: Key) -> Any:
        return self._read(key)

    def __setitem__(self, key: Key, value: Any) -> None:
        self._set_key(key, value)

    def __delitem__(self, key: Key) -> None:
        self._delete_key(key)

    def __iter__(self) -> Iterator[Key]:
        return iter(list(self._live()))

    def keys(self):
        return self._live().keys()

    def get(self, key: Key, default: Any = None) -> Any:
        if key not in self._live():
            return default
        return self._read(key)

    def values(self) -> Iterator[Any]:
        for key in list(self._live()):
            yield self._read(key)

    def items(self) -> Iterator[Tuple[Key, Any]]:
        for key in list(self._live()):
            yield key, self._read(key)

    def copy(self) -> dict:
        """Plain shallow copy of the live mapping."""
        return dict(self._live())

    def update(self, *args, **kwargs) -> None:
        for key, value in dict(*args, **kwargs).items():
            self._set_key(key, value)

    def pop(self, key: Key, default: Any = _MISSING) -> Any:
        live = self._live()
        if key not in live:
            if default is _MISSING:
                raise KeyError(key)
            return default
        value = live[key]
        self._delete_key(key)
        return value

    def setdefault(self, key: Key, default: Any = None) -> Any:
        if key not in self._live():
            self._set_key(key, default)
        return self._read(key)

    def clear(self) -> None:
        for key in list(self._live()):
            self._delete_key(key)


class TrackedList(TrackedNode):
    """Proxy for a list node.

    push/shift/pop/unshift/splice/reverse/sort/copy_within emit the mutation
    kind of the same name. append/extend/insert/remove/clear and pop(index)
    emit the same kinds but keep Python's list return contract.
    """

    __slots__ = ()

    def _live(self) -> list:
        target = self._target()
        return target if isinstance(target, list) else FrozenList()

    def _normalize(self, index: int) -> int:
        # Paths store absolute indices; -1 must keep meaning the element it meant
        if isinstance(index, int) and index < 0:
            return index + len(self._live())
        return index

    def _array_call(self, kind: MutationKind, args: Tuple = ()) -> Any:
        target = self._target()
        if not isinstance(target, list):
            logger.warning(
                f"Skipping {kind} at {list(self._path)}: target is "
                f"{type(target).__name__}, not a list"
            )
            return None
        mutation = Mutation(self._path, kind, args=tuple(unwrap(arg) for arg in args))
        result = mutation.preview(target)
        self._emit(mutation)
        return result

    def _current(self) -> 'TrackedNode':
        return make_proxy(self._dispatch, self._get_state, self._path, self._cache)

    def _splice_slice(self, index: slice, values) -> None:
        if index.step not in (None, 1):
            raise TypeError("extended slices are not supported on tracked lists")
        start, stop, _ = index.indices(len(self._live()))
        self._array_call(MutationKind.SPLICE, (start, max(stop - start, 0)) + tuple(values))

    def __getitem__(self, index):
        if isinstance(index, slice):
            return FrozenList(self._live()[index])
        return self._read(self._normalize(index))

    def __setitem__(self, index, value) -> None:
        if isinstance(index, slice):
            self._splice_slice(index, value)
            return
        self._set_key(self._normalize(index), value)

    def __delitem__(self, index) -> None:
        if isinstance(index, slice):
            self._splice_slice(index, ())
            return
        self._delete_key(self._normalize(index))

    def __iter__(self) -> Iterator[Any]:
        for index in range(len(self._live())):
            yield self._read(index)

    def __reversed__(self) -> Iterator[Any]:
        for index in reversed(range(len(self._live()))):
            yield self._read(index)

    def __add__(self, other) -> list:
        return list(self._live()) + list(unwrap(other))

    def __radd__(self, other) -> list:
        return list(unwrap(other)) + list(self._live())

    # ========== MUTATION KINDS ==========

    def push(self, *items) -> int:
        return self._array_call(MutationKind.PUSH, items)

    def shift(self) -> Any:
        return self._array_call(MutationKind.SHIFT)

    def pop(self, index: Optional[int] = None) -> Any:
        if index is None:
            return self._array_call(MutationKind.POP)
        live = self._live()
        if not -len(live) <= index < len(live):
            raise IndexError("pop index out of range")
        removed = self._array_call(MutationKind.SPLICE, (index, 1))
        return removed[0] if removed else None

    def unshift(self, *items) -> int:
        return self._array_call(MutationKind.UNSHIFT, items)

    def splice(self, *args) -> FrozenList:
        return self._array_call(MutationKind.SPLICE, args)

    def reverse(self) -> 'TrackedNode':
        self._array_call(MutationKind.REVERSE)
        return self._current()

    def sort(self, compare: Optional[Callable[[Any, Any], int]] = None, *, key=None, reverse: bool = False) -> 'TrackedNode':
        if compare is not None:
            key = functools.cmp_to_key(compare)
        self._array_call(MutationKind.SORT, (key, reverse))
        return self._current()

    def copy_within(self, target: int, start: int = 0, end: Optional[int] = None) -> 'TrackedNode':
        self._array_call(MutationKind.COPYWITHIN, (target, start, end))
        return self._current()

    # ========== PYTHON LIST PROTOCOL ==========

    def append(self, item) -> None:
        self._array_call(MutationKind.PUSH, (item,))

    def extend(self, items) -> None:
        self._array_call(MutationKind.PUSH, tuple(items))

    def insert(self, index: int, item) -> None:
        self._array_call(MutationKind.SPLICE, (index, 0, item))

    def remove(self, item) -> None:
        index = self._live().index(unwrap(item))
        self._array_call(MutationKind.SPLICE, (index, 1))

    def clear(self) -> None:
        self._array_call(MutationKind.SPLICE, (0, len(self._live())))

    def index(self, item, *args) -> int:
        return self._live().index(unwrap(item), *args)

    def count(self, item) -> int:
        return self._live().count(unwrap(item))

    def copy(self) -> list:
        """Plain shallow copy of the live list."""
        return list(self._live())
