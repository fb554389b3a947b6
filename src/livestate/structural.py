"""
Copy-on-write updates along a path.

apply_edit() is the only place committed state is ever rebuilt. Given the
current root, a path and an edit callback it:

1. splits the path into the parent path and the last key
2. resolves the container at the parent path
3. shallow-copies the container and lets the edit mutate the copy
4. deep-freezes the edited copy
5. rebuilds each ancestor from the container's parent up to the root as a
   frozen shallow copy pointing at the next copy down the chain

Nodes off the path are carried over by reference, so two successive roots
share every subtree the edit did not touch.
"""

import logging
from typing import Any, Callable, Optional, Sequence

from livestate.frozen import deep_freeze, freeze_shallow, thaw
from livestate.paths import Key, is_container, read_key

logger = logging.getLogger(__name__)

Edit = Callable[[Any, Key], Any]


def strip_namespace(path: Sequence[Key], namespace: Optional[str]) -> tuple:
    """Drop the leading namespace segment of a composed-store path."""
    path = tuple(path)
    return path[1:] if namespace is not None else path


def apply_edit(root: Any, path: Sequence[Key], edit: Edit, namespace: Optional[str] = None) -> Any:
    """Return a new root with ``edit`` applied to the container of ``path``.

    Args:
        root: Current committed root (or namespace slice).
        path: Full path of the edited location, namespace segment included
            when ``namespace`` is given.
        edit: ``edit(container_copy, last_key)``; mutates the copy in place.
        namespace: Leading segment to strip before indexing.

    Returns:
        The new frozen root. ``root`` itself when the parent path does not
        address a container.
    """
    local_path = strip_namespace(path, namespace)

    if not local_path:
        # The edit targets the root itself: run it against a one-slot holder
        holder = [root]
        edit(holder, 0)
        return deep_freeze(holder[0]) if holder else None

    parent_path, last_key = local_path[:-1], local_path[-1]

    # Collect the chain root -> container so ancestors can be re-linked
    chain = [root]
    for key in parent_path:
        chain.append(read_key(chain[-1], key))
    container = chain[-1]

    if not is_container(container):
        logger.warning(
            f"Skipping edit at {list(path)}: parent {list(parent_path)} is "
            f"{type(container).__name__}, not a container"
        )
        return root

    container_copy = thaw(container)
    edit(container_copy, last_key)
    child = deep_freeze(container_copy)

    for ancestor, key in zip(reversed(chain[:-1]), reversed(parent_path)):
        ancestor_copy = thaw(ancestor)
        ancestor_copy[key] = child
        child = freeze_shallow(ancestor_copy)

    logger.debug(f"Applied edit at {list(local_path)}")
    return child
