"""Drop classification: hovered element + geometry -> Destination.

The classifier only reads the tree and its arguments, so calling it twice
with the same inputs always gives the same answer.  Indices are gaps in the
target container *before* the dragged element is removed, which is the
coordinate space :func:`~dragtreelib.resolver.move` expects.

Vertical layout is assumed: ``y`` grows downwards and "before" means above.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from .config import default_config
from .models import (
    Destination,
    EntryKind,
    GroupPosition,
    Point,
    Rect,
    RootPosition,
    TargetKind,
    Tree,
)
from .tree import locate

log = logging.getLogger(__name__)

_GROUP_MARKERS = (
    TargetKind.GROUP_PLACEHOLDER,
    TargetKind.GROUP_EDGE_BEFORE,
    TargetKind.GROUP_EDGE_AFTER,
)


class _Band(Enum):
    BEFORE = "before"
    MIDDLE = "middle"
    AFTER = "after"


def _band(rect: Rect | None, pointer: Point | None, edge: float) -> _Band:
    """Which horizontal band of *rect* the pointer is in.

    Missing geometry counts as the middle band.
    """
    if rect is None or pointer is None or rect.height <= 0:
        return _Band.MIDDLE
    if pointer.y < rect.top + edge:
        return _Band.BEFORE
    if pointer.y > rect.bottom - edge:
        return _Band.AFTER
    return _Band.MIDDLE


def _resolve_kind(
    tree: Tree,
    over_id: str,
    over_kind: TargetKind | None,
) -> TargetKind | None:
    """Check *over_kind* against the tree, or look it up when omitted."""
    if over_kind is None:
        if over_id in tree.items:
            return TargetKind.ITEM
        if over_id in tree.groups:
            return TargetKind.GROUP
        return None
    if over_kind is TargetKind.ITEM:
        return over_kind if over_id in tree.items else None
    return over_kind if over_id in tree.groups else None


def _root_index(tree: Tree, element_id: str) -> int | None:
    """Index of the root entry that holds *element_id* (itself or its group)."""
    location = locate(tree, element_id)
    if isinstance(location, RootPosition):
        return location.index
    if isinstance(location, GroupPosition):
        return _root_index(tree, location.group_id)
    return None


def classify_drop(
    tree: Tree,
    active_id: str,
    active_kind: EntryKind,
    over_id: str | None,
    over_rect: Rect | None,
    pointer: Point | None,
    over_kind: TargetKind | None = None,
    config: dict[str, Any] | None = None,
    root_rect: Rect | None = None,
) -> Destination:
    """Resolve one drag-over sample into a single :data:`Destination`.

    Parameters
    ----------
    tree : Tree
        The tree as it was when the gesture started.
    active_id, active_kind
        The dragged element and whether it is an item or a group.
    over_id : str or None
        Hovered element, or ``None`` over empty space.  For drop markers
        this is the id of the group the marker belongs to.
    over_rect, pointer
        Bounding box of the hovered element and the pointer position.
    over_kind : TargetKind, optional
        Explicit kind of the hovered element.  Required for markers; looked
        up in the tree otherwise.
    config : dict, optional
        Classifier settings (see :data:`~dragtreelib.config.CLASSIFIER_PARAMS`).
    root_rect : Rect, optional
        Bounding box of the root entry that holds *over_id*.  Only group
        drags use it: their before/after bands belong to the root entry, so
        hovering an item inside a group measures against the whole group.
        Without it the bands are taken from *over_rect*, i.e. the child
        item's own box.
    """
    cfg = {**default_config(), **(config or {})}
    append = RootPosition(len(tree.root))

    if over_id is None:
        return append

    kind = _resolve_kind(tree, over_id, over_kind)
    anchor = _root_index(tree, over_id) if kind is not None else None
    if kind is None or anchor is None:
        log.debug("unresolvable drop target %r (%s), appending to root",
                  over_id, over_kind)
        return append

    if active_kind is EntryKind.GROUP:
        rect = root_rect if root_rect is not None else over_rect
        return _classify_group_drag(tree, active_id, kind, anchor,
                                    rect, pointer, cfg)
    return _classify_item_drag(tree, over_id, kind, anchor,
                               over_rect, pointer, cfg)


def _classify_group_drag(
    tree: Tree,
    active_id: str,
    kind: TargetKind,
    anchor: int,
    over_rect: Rect | None,
    pointer: Point | None,
    cfg: dict[str, Any],
) -> RootPosition:
    # Groups stay in the root: every target collapses onto its root entry.
    if kind is TargetKind.GROUP_EDGE_BEFORE:
        return RootPosition(anchor)
    if kind is TargetKind.GROUP_EDGE_AFTER:
        return RootPosition(anchor + 1)

    edge = over_rect.height * cfg["group_drag_band_ratio"] if over_rect else 0.0
    band = _band(over_rect, pointer, edge)
    if band is _Band.BEFORE:
        return RootPosition(anchor)
    if band is _Band.AFTER:
        return RootPosition(anchor + 1)

    # Middle band: land on the far side of the hovered entry, relative to
    # where the dragged group currently is.
    source = locate(tree, active_id)
    if isinstance(source, RootPosition) and source.index > anchor:
        return RootPosition(anchor)
    return RootPosition(anchor + 1)


def _classify_item_drag(
    tree: Tree,
    over_id: str,
    kind: TargetKind,
    anchor: int,
    over_rect: Rect | None,
    pointer: Point | None,
    cfg: dict[str, Any],
) -> Destination:
    if kind is TargetKind.GROUP_PLACEHOLDER:
        return GroupPosition(over_id, 0)
    if kind is TargetKind.GROUP_EDGE_BEFORE:
        return RootPosition(anchor)
    if kind is TargetKind.GROUP_EDGE_AFTER:
        return RootPosition(anchor + 1)

    if kind is TargetKind.GROUP:
        edge = 0.0
        if over_rect is not None:
            edge = min(over_rect.height * cfg["group_edge_ratio"],
                       cfg["group_edge_max_px"])
        band = _band(over_rect, pointer, edge)
        if band is _Band.BEFORE:
            return RootPosition(anchor)
        if band is _Band.AFTER:
            return RootPosition(anchor + 1)
        return GroupPosition(over_id, len(tree.groups[over_id].children))

    # Hovering another item: before/after split at its vertical midpoint.
    after = over_rect is None or pointer is None or pointer.y >= over_rect.mid_y
    offset = 1 if after else 0
    location = locate(tree, over_id)
    if isinstance(location, GroupPosition):
        return GroupPosition(location.group_id, location.index + offset)
    return RootPosition(anchor + offset)
