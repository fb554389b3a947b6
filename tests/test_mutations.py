"""Tests for mutation descriptors and their edits."""
import logging

import pytest

from livestate import (
    FrozenList,
    Mutation,
    MutationKind,
    as_mutation,
    copy_within,
    deep_freeze,
    reduce_mutation,
    splice,
)


@pytest.fixture
def state():
    return deep_freeze({'foo': {'bar': ['a', 'b', 'c']}, 'other': {'x': 1}})


def reduce(state, kind, path=('foo', 'bar'), value=None, args=()):
    return reduce_mutation(state, Mutation(path, kind, value=value, args=args))


class TestEdits:
    """Each kind folds into the expected next state."""

    @pytest.mark.parametrize('kind, args, expected', [
        (MutationKind.PUSH, ('d', 'e'), ['a', 'b', 'c', 'd', 'e']),
        (MutationKind.SHIFT, (), ['b', 'c']),
        (MutationKind.POP, (), ['a', 'b']),
        (MutationKind.UNSHIFT, ('z',), ['z', 'a', 'b', 'c']),
        (MutationKind.SPLICE, (1, 1), ['a', 'c']),
        (MutationKind.SPLICE, (1, 1, 'x', 'y'), ['a', 'x', 'y', 'c']),
        (MutationKind.REVERSE, (), ['c', 'b', 'a']),
        (MutationKind.SORT, (None, True), ['c', 'b', 'a']),
        (MutationKind.COPYWITHIN, (0, 1), ['b', 'c', 'c']),
    ])
    def test_array_kinds(self, state, kind, args, expected):
        """Array kinds replace the list with the edited copy."""
        new_state = reduce(state, kind, args=args)
        assert new_state['foo']['bar'] == expected
        assert isinstance(new_state['foo']['bar'], FrozenList)
        assert state['foo']['bar'] == ['a', 'b', 'c']

    def test_set(self, state):
        """SET assigns the value at the path."""
        new_state = reduce(state, MutationKind.SET, path=('foo', 'baz'), value={'n': 1})
        assert new_state['foo']['baz'] == {'n': 1}

    def test_set_list_append_position(self, state):
        """SET one past the end of a list appends."""
        new_state = reduce(state, MutationKind.SET, path=('foo', 'bar', 3), value='d')
        assert new_state['foo']['bar'] == ['a', 'b', 'c', 'd']

    def test_delete_key(self, state):
        """DELETE removes a mapping key."""
        new_state = reduce(state, MutationKind.DELETE, path=('other', 'x'))
        assert new_state['other'] == {}

    def test_delete_missing_key_is_noop(self, state):
        """DELETE of an absent key leaves the content unchanged."""
        new_state = reduce(state, MutationKind.DELETE, path=('other', 'nope'))
        assert new_state == state

    def test_delete_list_element(self, state):
        """DELETE of a list index removes the element."""
        new_state = reduce(state, MutationKind.DELETE, path=('foo', 'bar', 0))
        assert new_state['foo']['bar'] == ['b', 'c']

    def test_sort_with_key(self):
        """SORT uses the key function carried in its args."""
        state = deep_freeze({'items': [{'n': 2}, {'n': 1}]})
        new_state = reduce(state, MutationKind.SORT, path=('items',), args=(lambda item: item['n'], False))
        assert new_state['items'] == [{'n': 1}, {'n': 2}]

    def test_unknown_kind_is_noop(self, state):
        """Unknown kinds return the state object unchanged."""
        assert reduce(state, 'EXPLODE') is state

    @pytest.mark.parametrize('kind', ['set', 'push', 'Delete'])
    def test_kind_names_are_case_sensitive(self, state, kind):
        """Only exact upper-case kind names are applied."""
        assert reduce(state, kind, path=('other', 'x'), value=2, args=(1,)) is state

    @pytest.mark.parametrize('kind, path', [
        (MutationKind.PUSH, ('foo', 'missing')),
        (MutationKind.POP, ('other', 'x')),
        (MutationKind.SORT, ('missing', 'deeper')),
        (MutationKind.SPLICE, ('other',)),
    ])
    def test_array_kind_without_list_is_skipped(self, state, kind, path, caplog):
        """Array kinds at a path that holds no list leave the state and log a warning."""
        with caplog.at_level(logging.WARNING, logger='livestate.mutations'):
            assert reduce(state, kind, path=path, args=(0,)) is state
        assert f"Skipping {kind}" in caplog.text

    def test_array_kind_on_namespace_root(self):
        """A namespaced slice that is itself a list can be pushed onto."""
        slice_state = deep_freeze(['a'])
        new_slice = reduce_mutation(slice_state, Mutation(('todos',), MutationKind.PUSH, args=('b',)), 'todos')
        assert new_slice == ['a', 'b']


class TestReturnValues:
    """preview() reproduces the imperative return contract."""

    @pytest.mark.parametrize('kind, target, args, expected', [
        (MutationKind.PUSH, [], ('x',), 1),
        (MutationKind.PUSH, ['a', 'b'], ('x', 'y', 'z'), 5),
        (MutationKind.SHIFT, ['a', 'b'], (), 'a'),
        (MutationKind.SHIFT, [], (), None),
        (MutationKind.POP, ['a', 'b'], (), 'b'),
        (MutationKind.POP, [], (), None),
        (MutationKind.UNSHIFT, ['a'], ('b',), 2),
        (MutationKind.SPLICE, ['a', 'b', 'c'], (1, 1), ['b']),
    ])
    def test_preview(self, kind, target, args, expected):
        """Return values are computed against the pre-mutation snapshot."""
        frozen = deep_freeze(target)
        assert Mutation(('list',), kind, args=args).preview(frozen) == expected
        assert frozen == target

    def test_set_and_delete(self):
        """SET returns the value, DELETE returns True."""
        assert Mutation(('k',), MutationKind.SET, value=5).preview(None) == 5
        assert Mutation(('k',), MutationKind.DELETE).preview('old') is True

    def test_splice_result_frozen(self):
        """The removed slice of SPLICE is frozen."""
        removed = Mutation(('list',), MutationKind.SPLICE, args=(0, 2)).preview(deep_freeze([[1], [2], [3]]))
        assert isinstance(removed, FrozenList)
        assert removed == [[1], [2]]


class TestSplice:
    """splice() follows Array.prototype.splice index rules."""

    @pytest.mark.parametrize('args, removed, remaining', [
        ((), [], ['a', 'b', 'c', 'd']),
        ((1,), ['b', 'c', 'd'], ['a']),
        ((-1,), ['d'], ['a', 'b', 'c']),
        ((-10, 1), ['a'], ['b', 'c', 'd']),
        ((10, 1, 'x'), [], ['a', 'b', 'c', 'd', 'x']),
        ((1, -1, 'x'), [], ['a', 'x', 'b', 'c', 'd']),
        ((1, 100), ['b', 'c', 'd'], ['a']),
        ((1, 2, 'x'), ['b', 'c'], ['a', 'x', 'd']),
    ])
    def test_splice(self, args, removed, remaining):
        items = ['a', 'b', 'c', 'd']
        assert splice(items, *args) == removed
        assert items == remaining


class TestCopyWithin:
    """copy_within() follows Array.prototype.copyWithin index rules."""

    @pytest.mark.parametrize('items, args, expected', [
        (['foo', 'bar'], (0, 1), ['bar', 'bar']),
        ([1, 2, 3, 4, 5], (0, 3), [4, 5, 3, 4, 5]),
        ([1, 2, 3, 4, 5], (0, 3, 4), [4, 2, 3, 4, 5]),
        ([1, 2, 3, 4, 5], (-2, -3, -1), [1, 2, 3, 3, 4]),
        ([1, 2, 3, 4, 5], (1, 0), [1, 1, 2, 3, 4]),
    ])
    def test_copy_within(self, items, args, expected):
        assert copy_within(items, *args) == expected
        assert len(items) == len(expected)


class TestWireShape:
    """Descriptors cross the boundary as plain dicts."""

    def test_to_dict_set(self):
        mutation = Mutation(('foo', 'bar'), MutationKind.SET, value='baz')
        assert mutation.to_dict() == {
            'type': 'mutation',
            'path': ['foo', 'bar'],
            'mutation': 'SET',
            'value': 'baz',
        }

    def test_to_dict_array(self):
        mutation = Mutation(['foo'], 'PUSH', args=[1, 2])
        assert mutation.to_dict() == {
            'type': 'mutation',
            'path': ['foo'],
            'mutation': 'PUSH',
            'args': [1, 2],
        }

    def test_from_dict(self):
        """from_dict() accepts the wire shape and maps the kind onto MutationKind."""
        mutation = Mutation.from_dict({'type': 'mutation', 'path': ['a', 0], 'mutation': 'SPLICE', 'args': [0, 1]})
        assert mutation == Mutation(('a', 0), MutationKind.SPLICE, args=(0, 1))
        assert mutation.mutation is MutationKind.SPLICE

    def test_as_mutation(self):
        """Wire dicts convert; other actions do not."""
        assert as_mutation({'type': 'mutation', 'path': ['a'], 'mutation': 'DELETE'}).mutation == MutationKind.DELETE
        assert as_mutation({'type': 'other'}) is None
        assert as_mutation(lambda dispatch, get_state: None) is None

    def test_unknown_kind_kept(self):
        """Unknown kinds are kept as plain strings."""
        mutation = Mutation(('a',), 'frobnicate')
        assert mutation.mutation == 'frobnicate'
        assert not mutation.is_known
        assert mutation.edit() is None

    def test_descriptor_is_immutable(self):
        mutation = Mutation(('a',), MutationKind.SET, value=1)
        with pytest.raises(AttributeError):
            mutation.value = 2
