"""Pytest configuration and shared fixtures."""
import pytest

from livestate import (
    Config,
    Options,
    ProxyIdentityCache,
    Store,
    create_reducer,
    create_store,
    make_proxy,
)


@pytest.fixture(autouse=True)
def clear_livestate_env(monkeypatch):
    """Keep the environment override out of tests unless a test sets it."""
    monkeypatch.delenv('LIVESTATE_ENV', raising=False)


@pytest.fixture
def quiet_options():
    """Options with debug output disabled."""
    return Options(debug=False)


@pytest.fixture
def nested_state():
    """Tree with a list of records and an untouched sibling subtree."""
    return {
        'foo': {
            'bar': [{'mip': 'mop'}],
            'other': {'deep': [1, 2, 3]},
        },
        'sibling': {'untouched': {'value': 1}},
    }


@pytest.fixture
def make_store(quiet_options):
    """Build a (store, actions) pair from initial state and actions."""
    def factory(state, actions=None, effects=None, options=None):
        config = Config(state=state, actions=actions or {}, effects=effects)
        return create_store(config, options or quiet_options)
    return factory


class RecordingStore:
    """Flat single-tree store plus the proxy machinery, for driving proxies directly."""

    def __init__(self, initial_state):
        self.store = Store(create_reducer(initial_state), options=Options(debug=False))
        self.dispatched = []

    def dispatch(self, mutation):
        self.dispatched.append(mutation)
        return self.store.dispatch(mutation)

    def get_state(self):
        return self.store.get_state()

    def root(self, cache=None):
        return make_proxy(self.dispatch, self.get_state, (), cache if cache is not None else ProxyIdentityCache())


@pytest.fixture
def recording_store():
    """Factory for a RecordingStore over the given initial state."""
    return RecordingStore
