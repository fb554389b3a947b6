"""
Hosting store: reducers, middleware and the dispatch cycle.

The store owns the single mutable reference in the system, the current
committed root. Every dispatch runs the reducer synchronously and swaps that
reference in one assignment, then notifies subscribers. Mutations are folded
in exactly the order they are dispatched.

Reducers:
- create_reducer(): folds Mutation descriptors into one (optionally
  namespaced) state tree
- combine_reducers(): composes namespaced reducers under top-level keys

Middleware follows the ``middleware(store_api)(next_dispatch)(action)`` shape;
thunk_middleware runs callable actions with (dispatch, get_state).
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from livestate.frozen import FrozenDict, deep_freeze
from livestate.history import MutationLog, MutationRecord
from livestate.mutations import as_mutation, reduce_mutation
from livestate.options import LogType, Options

logger = logging.getLogger(__name__)


class _Uninitialized:
    """Marker for a slice the store has not produced yet."""

    def __repr__(self) -> str:
        return 'UNINITIALIZED'


UNINITIALIZED = _Uninitialized()

INIT_ACTION = {'type': '@@livestate/INIT'}

Reducer = Callable[[Any, Any], Any]
Listener = Callable[[], None]


def create_reducer(initial_state: Any, namespace: Optional[str] = None) -> Reducer:
    """Build a reducer that applies Mutation descriptors to one state tree.

    Args:
        initial_state: Initial tree; deep-frozen once, up front.
        namespace: Top-level key this reducer owns in a combined store.
            Mutations whose path does not start with it are ignored and the
            leading segment is stripped before the path is indexed.

    Returns:
        ``reducer(state, action) -> state``
    """
    frozen_initial = deep_freeze(initial_state)

    def reducer(state: Any, action: Any) -> Any:
        if state is UNINITIALIZED:
            state = frozen_initial

        mutation = as_mutation(action)
        if mutation is None:
            return state

        if namespace is not None and (not mutation.path or mutation.path[0] != namespace):
            return state

        return reduce_mutation(state, mutation, namespace)

    reducer.namespace = namespace
    return reducer


def combine_reducers(reducers: Dict[str, Reducer]) -> Reducer:
    """Compose reducers under top-level keys into one frozen root.

    The previous root is returned by identity when no slice changed.
    """
    reducers = dict(reducers)

    def combination(state: Any, action: Any) -> Any:
        previous = {} if state is UNINITIALIZED or state is None else state
        changed = state is UNINITIALIZED
        next_state = {}
        for key, reducer in reducers.items():
            previous_slice = previous.get(key, UNINITIALIZED)
            next_slice = reducer(previous_slice, action)
            next_state[key] = next_slice
            changed = changed or next_slice is not previous_slice
        return FrozenDict(next_state) if changed else state

    return combination


@dataclass(frozen=True)
class StoreAPI:
    """What middleware gets to see of the store."""
    get_state: Callable[[], Any]
    dispatch: Callable[[Any], Any]


def thunk_middleware(store_api: StoreAPI):
    """Run callable actions with (dispatch, get_state) instead of reducing them."""
    def wrap(next_dispatch):
        def dispatch(action):
            if callable(action):
                return action(store_api.dispatch, store_api.get_state)
            return next_dispatch(action)
        return dispatch
    return wrap


class Store:
    """
    Holds the committed root and runs the dispatch cycle.

    Lifecycle:
    - On construction the reducer is called once with UNINITIALIZED to
      produce the initial root
    - dispatch() runs middleware, then the reducer, swaps the root and
      notifies listeners, all before it returns

    Thread safety: Not thread-safe (single-threaded cooperative use only).
    """

    def __init__(self, reducer: Reducer, middleware: Sequence[Callable] = (), options: Optional[Options] = None):
        self.options = (options or Options()).resolved()
        self._reducer = reducer
        self._state = reducer(UNINITIALIZED, INIT_ACTION)
        self._listeners: List[Listener] = []
        self._history: Optional[MutationLog] = (
            MutationLog(self.options.history_limit) if self.options.history_limit else None
        )

        api = StoreAPI(get_state=self.get_state, dispatch=lambda action: self.dispatch(action))
        dispatch = self._dispatch_to_reducer
        for factory in reversed(list(middleware)):
            dispatch = factory(api)(dispatch)
        self._dispatch = dispatch

    def get_state(self) -> Any:
        """Current committed root."""
        return self._state

    def dispatch(self, action: Any) -> Any:
        """Dispatch an action through the middleware chain."""
        return self._dispatch(action)

    def _dispatch_to_reducer(self, action: Any) -> Any:
        mutation = as_mutation(action)
        if mutation is not None:
            if self.options.debug:
                logger.info(f"{LogType.MUTATION} {mutation.mutation} {list(mutation.path)}")
            if self._history is not None:
                self._history.record(mutation)

        self._state = self._reducer(self._state, action)
        self._notify_listeners()
        return action

    # ========== SUBSCRIPTIONS ==========

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener()`` after every dispatch; returns the unsubscribe function."""
        if listener not in self._listeners:
            self._listeners.append(listener)
            logger.debug(f"Connected store listener: {listener}")

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
                logger.debug(f"Disconnected store listener: {listener}")

        return unsubscribe

    def _notify_listeners(self) -> None:
        if self.options.debug:
            logger.info(f"{LogType.FLUSH} notifying {len(self._listeners)} listeners")
        for listener in list(self._listeners):
            try:
                listener()
            except Exception as e:
                logger.warning(f"Store listener failed: {e}")

    # ========== HISTORY ==========

    @property
    def history(self) -> List[MutationRecord]:
        """Recorded mutations, oldest first (empty unless history_limit > 0)."""
        return self._history.records() if self._history is not None else []

    def clear_history(self) -> None:
        if self._history is not None:
            self._history.clear()
