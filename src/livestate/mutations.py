"""
Mutation descriptors and the edits they stand for.

Writes made through the proxy layer are never applied directly. Each one is
packaged as a Mutation (kind, path, value, args) and dispatched; the reducer
turns it back into an edit callback and hands it to apply_edit().

Kinds and what the imperative equivalent returns:

    SET         container[key] = value            -> value
    DELETE      remove key from container         -> True
    PUSH        append args                       -> new length
    SHIFT       drop first element                -> former first element
    POP         drop last element                 -> former last element
    UNSHIFT     prepend args                      -> new length
    SPLICE      splice(start, count, *items)      -> removed elements (frozen)
    REVERSE     reversed copy                     -> the new list
    SORT        sorted(copy, key, reverse)        -> the new list
    COPYWITHIN  copy_within(target, start, end)   -> the new list

Array kinds carry the path of the list itself, so the edit sees the list's
parent as its container and the list's key as ``key``.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, List, Optional, Tuple

from livestate.frozen import deep_freeze
from livestate.paths import Key, resolve
from livestate.structural import apply_edit, strip_namespace

logger = logging.getLogger(__name__)

MUTATION_TYPE = 'mutation'


class MutationKind(str, Enum):
    SET = 'SET'
    DELETE = 'DELETE'
    PUSH = 'PUSH'
    SHIFT = 'SHIFT'
    POP = 'POP'
    UNSHIFT = 'UNSHIFT'
    SPLICE = 'SPLICE'
    REVERSE = 'REVERSE'
    SORT = 'SORT'
    COPYWITHIN = 'COPYWITHIN'

    def __str__(self) -> str:
        return self.value


# Proxy method name -> kind, for the methods that mutate a list
ARRAY_METHODS: Dict[str, MutationKind] = {
    'push': MutationKind.PUSH,
    'shift': MutationKind.SHIFT,
    'pop': MutationKind.POP,
    'unshift': MutationKind.UNSHIFT,
    'splice': MutationKind.SPLICE,
    'reverse': MutationKind.REVERSE,
    'sort': MutationKind.SORT,
    'copy_within': MutationKind.COPYWITHIN,
}

ARRAY_KINDS = frozenset(ARRAY_METHODS.values())


def _relative_index(index: Any, length: int) -> int:
    """Clamp a possibly negative index into [0, length]."""
    index = int(index)
    if index < 0:
        return max(length + index, 0)
    return min(index, length)


def splice(items: List[Any], *args: Any) -> List[Any]:
    """Splice ``items`` in place: ``splice(items, start, delete_count, *new)``.

    Negative starts count from the end, an omitted delete count removes
    everything from ``start`` on, and no arguments at all removes nothing.

    Returns:
        The removed elements.
    """
    if not args:
        return []
    length = len(items)
    start = _relative_index(args[0], length)
    if len(args) < 2 or args[1] is None:
        delete_count = length - start
    else:
        delete_count = min(max(int(args[1]), 0), length - start)
    removed = items[start:start + delete_count]
    items[start:start + delete_count] = list(args[2:])
    return removed


def copy_within(items: List[Any], target: Any = 0, start: Any = 0, end: Any = None) -> List[Any]:
    """Copy ``items[start:end]`` over ``items`` starting at ``target``, in place.

    The list never grows; copying stops at the end of the list.
    """
    length = len(items)
    to = _relative_index(target, length)
    origin = _relative_index(start, length)
    final = length if end is None else _relative_index(end, length)
    count = min(final - origin, length - to)
    if count > 0:
        items[to:to + count] = items[origin:origin + count]
    return items


# ========== EDITS ==========
# Each edit mutates ``container`` (a thawed copy) and returns the value the
# imperative operation would have returned.

def _set(container, key, mutation: 'Mutation'):
    if isinstance(container, list) and key == len(container):
        container.append(mutation.value)
    else:
        container[key] = mutation.value
    return mutation.value


def _delete(container, key, mutation: 'Mutation'):
    if isinstance(container, list):
        if -len(container) <= key < len(container):
            del container[key]
    else:
        container.pop(key, None)
    return True


def _push(container, key, mutation: 'Mutation'):
    container[key] = list(container[key]) + list(mutation.args)
    return len(container[key])


def _shift(container, key, mutation: 'Mutation'):
    items = list(container[key])
    first = items[0] if items else None
    container[key] = items[1:]
    return first


def _pop(container, key, mutation: 'Mutation'):
    items = list(container[key])
    last = items[-1] if items else None
    container[key] = items[:-1]
    return last


def _unshift(container, key, mutation: 'Mutation'):
    container[key] = list(mutation.args) + list(container[key])
    return len(container[key])


def _splice(container, key, mutation: 'Mutation'):
    items = list(container[key])
    removed = splice(items, *mutation.args)
    container[key] = items
    return deep_freeze(removed)


def _reverse(container, key, mutation: 'Mutation'):
    container[key] = list(reversed(container[key]))
    return container[key]


def _sort(container, key, mutation: 'Mutation'):
    sort_key, reverse = (tuple(mutation.args) + (None, False))[:2]
    container[key] = sorted(container[key], key=sort_key, reverse=bool(reverse))
    return container[key]


def _copy_within(container, key, mutation: 'Mutation'):
    container[key] = copy_within(list(container[key]), *mutation.args)
    return container[key]


_EDITS: Dict[str, Callable[[Any, Key, 'Mutation'], Any]] = {
    MutationKind.SET: _set,
    MutationKind.DELETE: _delete,
    MutationKind.PUSH: _push,
    MutationKind.SHIFT: _shift,
    MutationKind.POP: _pop,
    MutationKind.UNSHIFT: _unshift,
    MutationKind.SPLICE: _splice,
    MutationKind.REVERSE: _reverse,
    MutationKind.SORT: _sort,
    MutationKind.COPYWITHIN: _copy_within,
}


def _normalize_kind(kind: Any) -> str:
    """Map an exact kind name onto MutationKind; anything else passes through as a string."""
    name = str(kind)
    try:
        return MutationKind(name)
    except ValueError:
        return name


@dataclass(frozen=True)
class Mutation:
    """Immutable description of one intended state edit.

    ``path`` addresses the edited key for SET/DELETE and the list itself for
    the array kinds.
    """
    path: Tuple[Key, ...]
    mutation: str
    value: Any = None
    args: Tuple[Any, ...] = ()

    type: ClassVar[str] = MUTATION_TYPE

    def __post_init__(self):
        object.__setattr__(self, 'path', tuple(self.path))
        object.__setattr__(self, 'mutation', _normalize_kind(self.mutation))
        object.__setattr__(self, 'args', tuple(self.args))

    @property
    def is_known(self) -> bool:
        return self.mutation in _EDITS

    def apply_to(self, container: Any, key: Key) -> Any:
        """Run this mutation's edit against a mutable container copy."""
        return _EDITS[self.mutation](container, key, self)

    def edit(self) -> Optional[Callable[[Any, Key], Any]]:
        """Edit callback for apply_edit(), or None for an unknown kind."""
        if not self.is_known:
            return None
        return self.apply_to

    def preview(self, target: Any) -> Any:
        """Return value of this mutation computed against a pre-mutation snapshot.

        ``target`` is the node the path addresses (the list, for array kinds).
        The snapshot is copied into a scratch holder, so committed state is
        never touched.
        """
        holder = [target]
        return self.apply_to(holder, 0)

    def to_dict(self) -> Dict[str, Any]:
        """Export to the wire shape."""
        data = {
            'type': MUTATION_TYPE,
            'path': list(self.path),
            'mutation': str(self.mutation),
        }
        if self.mutation == MutationKind.SET:
            data['value'] = self.value
        if self.args:
            data['args'] = list(self.args)
        return data

    @classmethod
    def from_dict(cls, data: Mapping) -> 'Mutation':
        """Import from the wire shape."""
        return cls(
            path=tuple(data['path']),
            mutation=data['mutation'],
            value=data.get('value'),
            args=tuple(data.get('args') or ()),
        )


def as_mutation(action: Any) -> Optional[Mutation]:
    """Return ``action`` as a Mutation, or None when it is not one."""
    if isinstance(action, Mutation):
        return action
    if isinstance(action, Mapping) and action.get('type') == MUTATION_TYPE:
        return Mutation.from_dict(action)
    return None


def reduce_mutation(state: Any, mutation: Mutation, namespace: Optional[str] = None) -> Any:
    """Fold one mutation into ``state`` and return the next state.

    Unknown kinds leave ``state`` untouched (same object), and so do array
    kinds whose path does not address a list.
    """
    edit = mutation.edit()
    if edit is None:
        logger.debug(f"Ignoring unknown mutation kind {mutation.mutation!r} at {list(mutation.path)}")
        return state
    if mutation.mutation in ARRAY_KINDS:
        target = resolve(state, strip_namespace(mutation.path, namespace))
        if not isinstance(target, list):
            logger.warning(
                f"Skipping {mutation.mutation} at {list(mutation.path)}: target is "
                f"{type(target).__name__}, not a list"
            )
            return state
    return apply_edit(state, mutation.path, edit, namespace)

