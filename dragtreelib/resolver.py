"""Move resolution: apply one Destination to a tree.

``move`` never raises for drag input.  Unknown ids, a group aimed into a
group and unknown target groups all leave the tree untouched; the input
object itself is returned so callers can test ``result is tree``.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .models import (
    Destination,
    Entry,
    GroupPosition,
    NotFound,
    RootPosition,
    Tree,
)
from .tree import attach, check_tree, detach, element_kind, is_descendant_safe, locate

log = logging.getLogger(__name__)


def _same_container(a: RootPosition | GroupPosition, b: Destination) -> bool:
    if isinstance(a, RootPosition):
        return isinstance(b, RootPosition)
    return isinstance(b, GroupPosition) and a.group_id == b.group_id


def move(tree: Tree, element_id: str, destination: Destination) -> Tree:
    """Move *element_id* to *destination* and return the resulting tree."""
    check_tree(tree)

    source = locate(tree, element_id)
    if isinstance(source, NotFound):
        log.debug("move %r: not in tree, ignored", element_id)
        return tree

    if isinstance(destination, GroupPosition):
        if not is_descendant_safe(tree, element_id, destination.group_id):
            log.debug("move %r: cannot enter group %r, ignored",
                      element_id, destination.group_id)
            return tree
    elif not isinstance(destination, RootPosition):
        log.debug("move %r: unsupported destination %r", element_id, destination)
        return tree

    entry = Entry(element_kind(tree, element_id), element_id)
    index = destination.index
    # Removing from the same container shifts every later gap down by one.
    if _same_container(source, destination) and source.index < index:
        index -= 1

    intermediate = detach(tree, source)
    if isinstance(destination, RootPosition):
        target: Destination = RootPosition(index)
    else:
        target = GroupPosition(destination.group_id, index)
    result = attach(intermediate, entry, target)

    if result == tree:
        return tree
    log.debug("move %r: %s -> %s", element_id, source, target)
    return result


def move_many(
    tree: Tree,
    moves: Iterable[tuple[str, Destination]],
) -> Tree:
    """Apply ``(element_id, destination)`` pairs left to right."""
    for element_id, destination in moves:
        tree = move(tree, element_id, destination)
    return tree
