"""
Deep-freeze primitives for committed state trees.

Committed nodes are FrozenDict / FrozenList: real dict and list subclasses
whose in-place mutators raise FrozenStateError. Being real subclasses, they
compare equal to plain dicts and lists and can be read with ordinary code.

deep_freeze() returns nodes that are already frozen by identity, so freezing
an edited copy never clones the untouched subtrees hanging off it.
"""

from typing import Any


class FrozenStateError(TypeError):
    """Raised when committed state is mutated in place."""


def _refuse(name: str):
    def method(self, *args, **kwargs):
        raise FrozenStateError(
            f"{type(self).__name__} is frozen; '{name}' is not allowed on committed state"
        )
    method.__name__ = name
    return method


class FrozenDict(dict):
    """A committed mapping node."""

    __slots__ = ()

    __setitem__ = _refuse('__setitem__')
    __delitem__ = _refuse('__delitem__')
    __ior__ = _refuse('__ior__')
    update = _refuse('update')
    pop = _refuse('pop')
    popitem = _refuse('popitem')
    setdefault = _refuse('setdefault')
    clear = _refuse('clear')

    def __repr__(self) -> str:
        return f"FrozenDict({dict.__repr__(self)})"

    def __reduce__(self):
        return (FrozenDict, (dict(self),))

    def __copy__(self) -> 'FrozenDict':
        return self

    def __deepcopy__(self, memo) -> 'FrozenDict':
        return self


class FrozenList(list):
    """A committed sequence node."""

    __slots__ = ()

    __setitem__ = _refuse('__setitem__')
    __delitem__ = _refuse('__delitem__')
    __iadd__ = _refuse('__iadd__')
    __imul__ = _refuse('__imul__')
    append = _refuse('append')
    extend = _refuse('extend')
    insert = _refuse('insert')
    remove = _refuse('remove')
    pop = _refuse('pop')
    clear = _refuse('clear')
    sort = _refuse('sort')
    reverse = _refuse('reverse')

    def __repr__(self) -> str:
        return f"FrozenList({list.__repr__(self)})"

    def __reduce__(self):
        return (FrozenList, (list(self),))

    def __copy__(self) -> 'FrozenList':
        return self

    def __deepcopy__(self, memo) -> 'FrozenList':
        return self


def is_frozen(value: Any) -> bool:
    """True for committed nodes and for values that are immutable by nature."""
    if isinstance(value, (FrozenDict, FrozenList)):
        return True
    if isinstance(value, (dict, list, set, bytearray)):
        return False
    if isinstance(value, tuple):
        return all(is_frozen(item) for item in value)
    return True


def deep_freeze(value: Any) -> Any:
    """Recursively convert plain containers into committed nodes.

    Already-frozen nodes are returned as-is; their subtrees are frozen by
    construction. Objects that are not dicts, lists, tuples or sets are
    opaque leaves and are returned untouched.
    """
    if isinstance(value, (FrozenDict, FrozenList)):
        return value
    if isinstance(value, dict):
        return FrozenDict((key, deep_freeze(item)) for key, item in value.items())
    if isinstance(value, list):
        return FrozenList(deep_freeze(item) for item in value)
    if isinstance(value, tuple):
        items = [deep_freeze(item) for item in value]
        if all(new is old for new, old in zip(items, value)):
            return value
        # namedtuples keep their type
        return type(value)._make(items) if hasattr(value, '_make') else tuple(items)
    if isinstance(value, set):
        return frozenset(value)
    return value


def freeze_shallow(node: Any) -> Any:
    """Freeze one level whose children are already committed."""
    if isinstance(node, list):
        return FrozenList(node)
    return FrozenDict(node)


def thaw(node: Any) -> Any:
    """Shallow, mutable copy of a container node."""
    if isinstance(node, list):
        return list(node)
    return dict(node)
