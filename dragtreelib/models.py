from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Union


class DragTreeError(Exception):
    """Base class for errors raised by dragtreelib."""


class EntryKind(Enum):
    ITEM = "item"
    GROUP = "group"


class TargetKind(Enum):
    """What the pointer is hovering during a drag.

    ``ITEM`` and ``GROUP`` are real tree elements.  The remaining kinds are
    drop markers rendered by the UI; their id is always the id of the group
    they belong to.
    """
    ITEM = "item"
    GROUP = "group"
    GROUP_PLACEHOLDER = "group_placeholder"
    GROUP_EDGE_BEFORE = "group_edge_before"
    GROUP_EDGE_AFTER = "group_edge_after"


class SessionState(Enum):
    IDLE = "idle"
    ACTIVE = "active"


# ---------------------------------------------------------------------------
# Tree records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Item:
    """A leaf element.  ``content`` is an opaque, JSON-compatible payload."""
    id: str
    content: Any = None


@dataclass(frozen=True)
class Group:
    """A titled container holding an ordered tuple of item ids."""
    id: str
    title: str = ""
    children: tuple[str, ...] = ()


@dataclass(frozen=True)
class Entry:
    """One slot of the root sequence: a reference to an item or a group."""
    kind: EntryKind
    id: str

    @classmethod
    def item(cls, item_id: str) -> Entry:
        return cls(EntryKind.ITEM, item_id)

    @classmethod
    def group(cls, group_id: str) -> Entry:
        return cls(EntryKind.GROUP, group_id)


@dataclass(frozen=True)
class Tree:
    """Complete two-level layout: root order, groups and items.

    Trees are values.  Operations never modify a tree in place; they build a
    new one and share every untouched ``Group`` and ``Item`` record with the
    previous tree.  ``groups`` and ``items`` are copied into read-only
    mappings on construction, so a committed tree cannot be edited through
    them either.
    """
    root: tuple[Entry, ...] = ()
    groups: Mapping[str, Group] = field(default_factory=dict)
    items: Mapping[str, Item] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", tuple(self.root))
        object.__setattr__(self, "groups", _frozen(self.groups))
        object.__setattr__(self, "items", _frozen(self.items))

    def __hash__(self) -> int:
        # Item content may be any JSON value, so only the layout is hashed.
        layout = frozenset((g.id, g.children) for g in self.groups.values())
        return hash((self.root, layout, frozenset(self.items)))


def _frozen(mapping: Mapping) -> MappingProxyType:
    # A proxy built here is the only reference to its dict, so it is shared
    # as is; anything else is copied first.
    if isinstance(mapping, MappingProxyType):
        return mapping
    return MappingProxyType(dict(mapping))


# ---------------------------------------------------------------------------
# Positions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RootPosition:
    """Gap ``index`` of the root sequence (0 = before the first entry)."""
    index: int


@dataclass(frozen=True)
class GroupPosition:
    """Gap ``index`` of a group's children."""
    group_id: str
    index: int


@dataclass(frozen=True)
class NotFound:
    """Result of :func:`~dragtreelib.tree.locate` for an unknown id."""


Destination = Union[RootPosition, GroupPosition]
Location = Union[RootPosition, GroupPosition, NotFound]


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    """Screen-space bounding box.  ``y`` is the top edge; y grows downwards."""
    x: float
    y: float
    width: float
    height: float

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2.0
