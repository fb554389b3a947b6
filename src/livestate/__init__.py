"""
Mutable-looking actions over immutable, structurally-shared state.

Application code mutates state with ordinary assignment, deletion and list
methods. Nothing is mutated in place: every write is captured by a proxy as a
Mutation descriptor, dispatched to the store, and folded into a new frozen
tree that shares every untouched subtree with the previous one.

Quick Start:
    >>> from livestate import Config, create_store
    >>>
    >>> def rename(context, name):
    ...     context.state.user.name = name
    >>>
    >>> store, actions = create_store(Config(
    ...     state={'user': {'name': 'ada'}},
    ...     actions={'rename': rename},
    ... ))
    >>> store.dispatch(actions.rename('grace'))
    >>> store.get_state()
    FrozenDict({'user': FrozenDict({'name': 'grace'})})

Architecture:
    action body
        -> root proxy (reads re-resolve against live state)
        -> Mutation descriptor
        -> store.dispatch -> reducer -> apply_edit (copy-on-write along the path)
        -> next frozen root

Modules:
    - frozen: FrozenDict / FrozenList and deep_freeze
    - paths: permissive path resolution
    - structural: copy-on-write edits along a path
    - mutations: the Mutation descriptor and its edits
    - identity_cache: per-invocation proxy identity cache
    - proxy: mutation-tracking proxies
    - store: reducers, middleware, Store
    - actions: action creators, create() and create_store()
    - options: Options, Config, LogType
    - history: mutation log for debugging
"""

# Frozen state
from livestate.frozen import (
    FrozenStateError,
    FrozenDict,
    FrozenList,
    deep_freeze,
    is_frozen,
)

# Path resolution
from livestate.paths import resolve, read_key, is_container

# Structural updates
from livestate.structural import apply_edit

# Mutation descriptors
from livestate.mutations import (
    MutationKind,
    Mutation,
    as_mutation,
    reduce_mutation,
    splice,
    copy_within,
)

# Proxies
from livestate.identity_cache import ProxyIdentityCache
from livestate.proxy import TrackedNode, TrackedDict, TrackedList, make_proxy, unwrap, tracked_path

# Configuration
from livestate.options import Options, Config, LogType

# Store
from livestate.store import (
    Store,
    StoreAPI,
    create_reducer,
    combine_reducers,
    thunk_middleware,
    UNINITIALIZED,
)
from livestate.history import MutationRecord, MutationLog

# Actions
from livestate.actions import (
    ActionContext,
    StoreBundle,
    create,
    create_store,
    create_action,
)

__all__ = [
    # Frozen state
    'FrozenStateError',
    'FrozenDict',
    'FrozenList',
    'deep_freeze',
    'is_frozen',
    # Path resolution
    'resolve',
    'read_key',
    'is_container',
    # Structural updates
    'apply_edit',
    # Mutation descriptors
    'MutationKind',
    'Mutation',
    'as_mutation',
    'reduce_mutation',
    'splice',
    'copy_within',
    # Proxies
    'ProxyIdentityCache',
    'TrackedNode',
    'TrackedDict',
    'TrackedList',
    'make_proxy',
    'unwrap',
    'tracked_path',
    # Configuration
    'Options',
    'Config',
    'LogType',
    # Store
    'Store',
    'StoreAPI',
    'create_reducer',
    'combine_reducers',
    'thunk_middleware',
    'UNINITIALIZED',
    'MutationRecord',
    'MutationLog',
    # Actions
    'ActionContext',
    'StoreBundle',
    'create',
    'create_store',
    'create_action',
]

__version__ = '1.0.0'
__description__ = 'Mutable-looking actions over immutable, structurally-shared state'
