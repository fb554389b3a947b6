"""
Action creators and store construction.

Application code writes actions as plain functions that mutate ``state``:

    def add_todo(context, title):
        context.state.todos.items.push({'title': title, 'done': False})

create() turns every action into an action creator. Calling a creator returns
a thunk; dispatching that thunk (through thunk_middleware) builds a fresh
identity cache and root proxy for the invocation and runs the action body
against it. Every write inside the body becomes a Mutation dispatched to the
store, so the body always reads back what it just wrote.

Async actions (``async def``) work the same way: dispatch returns the
coroutine, and awaiting it runs the body with the same proxy and cache across
each suspension point.
"""

import logging
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from livestate.identity_cache import ProxyIdentityCache
from livestate.options import Config, Options
from livestate.proxy import make_proxy
from livestate.store import Reducer, Store, combine_reducers, create_reducer, thunk_middleware

logger = logging.getLogger(__name__)

_NO_PAYLOAD = object()


@dataclass(frozen=True)
class ActionContext:
    """First argument of every action: the root proxy and the effects bag."""
    state: Any
    effects: Any


@dataclass(frozen=True)
class StoreBundle:
    """Everything create() produces, ready to be wired into a Store."""
    reducers: Dict[str, Reducer]
    actions: SimpleNamespace
    middleware: Callable
    options: Options

    def reducer(self) -> Reducer:
        """All namespaced reducers combined into one."""
        return combine_reducers(self.reducers)


def create_action(name: str, func: Callable, effects: Any = None) -> Callable:
    """Wrap an action function into an action creator.

    Args:
        name: Dotted action name (for logging).
        func: ``func(context)`` or ``func(context, payload)``.
        effects: Passed through unchanged as ``context.effects``.

    Returns:
        ``creator(payload?)`` returning a thunk ``thunk(dispatch, get_state)``.
    """
    def creator(payload: Any = _NO_PAYLOAD):
        def thunk(dispatch, get_state):
            cache = ProxyIdentityCache()
            root = make_proxy(dispatch, get_state, (), cache)
            context = ActionContext(state=root, effects=effects)
            logger.debug(f"Running action {name}")
            if payload is _NO_PAYLOAD:
                return func(context)
            return func(context, payload)

        thunk.action_name = name
        return thunk

    creator.__name__ = name.rsplit('.', 1)[-1]
    creator.__qualname__ = name
    creator.__doc__ = func.__doc__
    return creator


def create_nested_structure(
    tree: Mapping[str, Any],
    make_leaf: Callable[[str, Callable], Any],
    prefix: str = '',
) -> SimpleNamespace:
    """Mirror a nested dict of callables, converting each callable with ``make_leaf``.

    Raises:
        TypeError: For a value that is neither callable nor a mapping.
    """
    converted = {}
    for key, value in tree.items():
        name = f"{prefix}.{key}" if prefix else key
        if callable(value):
            converted[key] = make_leaf(name, value)
        elif isinstance(value, Mapping):
            converted[key] = create_nested_structure(value, make_leaf, name)
        else:
            raise TypeError(f"Action '{name}' must be a callable or a mapping of actions, got {type(value).__name__}")
    return SimpleNamespace(**converted)


def create(config: Config, options: Optional[Options] = None) -> StoreBundle:
    """Build reducers, action creators and middleware for ``config``.

    One namespaced reducer is created per top-level key of ``config.state``.
    """
    options = (options or Options()).resolved()

    reducers = {
        key: create_reducer(initial, namespace=key)
        for key, initial in config.state.items()
    }
    actions = create_nested_structure(
        config.actions or {},
        lambda name, func: create_action(name, func, config.effects),
    )
    logger.debug(f"Created store bundle: slices={list(reducers)}")
    return StoreBundle(reducers=reducers, actions=actions, middleware=thunk_middleware, options=options)


def create_store(config: Config, options: Optional[Options] = None, middleware: Sequence[Callable] = ()):
    """Create a ready-to-use Store and the action creators for ``config``.

    Returns:
        (store, actions)
    """
    bundle = create(config, options)
    store = Store(bundle.reducer(), middleware=[bundle.middleware, *middleware], options=bundle.options)
    return store, bundle.actions
