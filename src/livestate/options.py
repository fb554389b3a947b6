"""
Configuration values for stores built by livestate.

Options are an explicit, immutable value passed to create() / Store rather
than process-wide state. Config describes what a store is built from: the
initial state, the effects handed to every action, and the (possibly nested)
action functions.
"""

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Union

# Environments in which debug output is always off
QUIET_ENVIRONMENTS = ('production', 'test')
ENV_VAR = 'LIVESTATE_ENV'


class LogType(str, Enum):
    MUTATION = 'MUTATION'
    FLUSH = 'FLUSH'

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Options:
    """Store options.

    debug: log every mutation and listener flush at INFO level.
    history_limit: keep the last N mutations in Store.history (0 disables).
    """
    debug: bool = True
    history_limit: int = 0

    def __post_init__(self):
        if self.history_limit < 0:
            raise ValueError(f"history_limit must be >= 0, got {self.history_limit}")

    def resolved(self, environ: Optional[Mapping[str, str]] = None) -> 'Options':
        """Apply environment overrides: debug is forced off in production and test."""
        environ = os.environ if environ is None else environ
        if self.debug and environ.get(ENV_VAR, '').lower() in QUIET_ENVIRONMENTS:
            return replace(self, debug=False)
        return self


ActionTree = Dict[str, Union[Callable[..., Any], 'ActionTree']]


@dataclass(frozen=True)
class Config:
    """What a store is created from.

    state: initial state; each top-level key becomes its own namespaced slice.
    effects: opaque capability object passed unchanged to every action.
    actions: action functions ``action(context, payload)``, optionally nested
        in dicts to group them.
    """
    state: Mapping[str, Any]
    effects: Any = None
    actions: ActionTree = field(default_factory=dict)
