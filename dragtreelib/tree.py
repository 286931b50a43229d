"""Tree model lookups, validation and shell operations.

Every function takes a :class:`~dragtreelib.models.Tree` and returns a value
or a *new* tree.  Nothing here mutates its input: the root tuple, the group
mapping and the one or two affected groups are rebuilt, untouched records are
shared with the previous tree.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from .models import (
    Destination,
    Entry,
    EntryKind,
    Group,
    GroupPosition,
    Item,
    Location,
    NotFound,
    RootPosition,
    Tree,
)

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def locate(tree: Tree, element_id: str) -> Location:
    """Return where *element_id* currently sits, or ``NotFound()``."""
    for i, entry in enumerate(tree.root):
        if entry.id == element_id:
            return RootPosition(i)
    for entry in tree.root:
        if entry.kind is not EntryKind.GROUP:
            continue
        group = tree.groups.get(entry.id)
        if group is not None and element_id in group.children:
            return GroupPosition(group.id, group.children.index(element_id))
    return NotFound()


def element_kind(tree: Tree, element_id: str) -> EntryKind | None:
    if element_id in tree.items:
        return EntryKind.ITEM
    if element_id in tree.groups:
        return EntryKind.GROUP
    return None


def container_children(tree: Tree, group_id: str | None = None) -> tuple[str, ...]:
    """Ids held by the root (``group_id=None``) or by one group."""
    if group_id is None:
        return tuple(e.id for e in tree.root)
    group = tree.groups.get(group_id)
    return group.children if group is not None else ()


def entry_count(tree: Tree) -> int:
    """Number of placed items and groups (root entries + group children)."""
    count = len(tree.root)
    for entry in tree.root:
        if entry.kind is EntryKind.GROUP and entry.id in tree.groups:
            count += len(tree.groups[entry.id].children)
    return count


def is_descendant_safe(
    tree: Tree,
    element_id: str,
    candidate_parent: str | None,
) -> bool:
    """Can *element_id* be placed under *candidate_parent* without nesting?

    ``None`` stands for the root, which accepts anything.  A group accepts
    items only, and nothing can be placed inside itself.
    """
    if candidate_parent is None:
        return True
    if candidate_parent == element_id or candidate_parent not in tree.groups:
        return False
    return element_kind(tree, element_id) is not EntryKind.GROUP


def unique_id(tree: Tree, base: str) -> str:
    """Return *base*, or ``base-N`` with the smallest free N >= 2."""
    taken = set(tree.items) | set(tree.groups)
    if base not in taken:
        return base
    n = 2
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_tree(tree: Tree) -> list[str]:
    """Return a list of invariant violations (empty = valid)."""
    errors: list[str] = []

    for key, item in tree.items.items():
        if item.id != key:
            errors.append(f"Item stored under {key!r} has id {item.id!r}")
    for key, group in tree.groups.items():
        if group.id != key:
            errors.append(f"Group stored under {key!r} has id {group.id!r}")
        if key in tree.items:
            errors.append(f"Id {key!r} is used by both an item and a group")

    placed: dict[str, int] = {}
    seen_groups: set[str] = set()

    for entry in tree.root:
        if entry.kind is EntryKind.ITEM:
            if entry.id not in tree.items:
                errors.append(f"Root references unknown item {entry.id!r}")
            placed[entry.id] = placed.get(entry.id, 0) + 1
        elif entry.kind is EntryKind.GROUP:
            group = tree.groups.get(entry.id)
            if group is None:
                errors.append(f"Root references unknown group {entry.id!r}")
                continue
            if entry.id in seen_groups:
                errors.append(f"Group {entry.id!r} appears more than once in root")
                continue
            seen_groups.add(entry.id)
            for child in group.children:
                if child in tree.groups:
                    errors.append(
                        f"Group {entry.id!r} contains group {child!r}")
                    continue
                if child not in tree.items:
                    errors.append(
                        f"Group {entry.id!r} references unknown item {child!r}")
                placed[child] = placed.get(child, 0) + 1
        else:
            errors.append(f"Root entry {entry.id!r} has invalid kind {entry.kind!r}")

    for item_id, count in placed.items():
        if count > 1:
            errors.append(f"Item {item_id!r} is placed {count} times")
    for item_id in tree.items:
        if item_id not in placed:
            errors.append(f"Item {item_id!r} is not placed in any container")
    for group_id in tree.groups:
        if group_id not in seen_groups:
            errors.append(f"Group {group_id!r} is not referenced from root")

    return errors


def check_tree(tree: Tree) -> None:
    """Assert that *tree* is well formed (skipped under ``python -O``)."""
    if __debug__:
        errors = validate_tree(tree)
        assert not errors, "Malformed tree: " + "; ".join(errors)


# ---------------------------------------------------------------------------
# Container editing (copy-on-write)
# ---------------------------------------------------------------------------

def clamp_index(index: int, length: int) -> int:
    return max(0, min(index, length))


def _replace_group(tree: Tree, group: Group) -> Tree:
    groups = dict(tree.groups)
    groups[group.id] = group
    return replace(tree, groups=groups)


def detach(tree: Tree, location: RootPosition | GroupPosition) -> Tree:
    """Remove the reference at *location*.  Records stay in the mappings."""
    i = location.index
    if isinstance(location, RootPosition):
        return replace(tree, root=tree.root[:i] + tree.root[i + 1:])
    group = tree.groups[location.group_id]
    children = group.children[:i] + group.children[i + 1:]
    return _replace_group(tree, replace(group, children=children))


def attach(tree: Tree, entry: Entry, position: Destination) -> Tree:
    """Insert *entry* at *position*, clamping the index to the container."""
    if isinstance(position, RootPosition):
        i = clamp_index(position.index, len(tree.root))
        return replace(tree, root=tree.root[:i] + (entry,) + tree.root[i:])
    group = tree.groups[position.group_id]
    i = clamp_index(position.index, len(group.children))
    children = group.children[:i] + (entry.id,) + group.children[i:]
    return _replace_group(tree, replace(group, children=children))


# ---------------------------------------------------------------------------
# Shell operations (add / remove)
# ---------------------------------------------------------------------------

def add_item(tree: Tree, container: Destination, item: Item) -> Tree:
    """Place a new *item* at *container* (root or group gap)."""
    if element_kind(tree, item.id) is not None:
        log.warning("Cannot add item %r: id already in use", item.id)
        return tree
    if isinstance(container, GroupPosition) and container.group_id not in tree.groups:
        log.warning("Cannot add item %r: unknown group %r",
                    item.id, container.group_id)
        return tree
    items = dict(tree.items)
    items[item.id] = item
    return attach(replace(tree, items=items), Entry.item(item.id), container)


def add_group(tree: Tree, root_index: int, group: Group) -> Tree:
    """Insert a new, empty *group* into the root at *root_index*."""
    if element_kind(tree, group.id) is not None:
        log.warning("Cannot add group %r: id already in use", group.id)
        return tree
    if group.children:
        log.warning("Cannot add group %r: new groups must be empty", group.id)
        return tree
    groups = dict(tree.groups)
    groups[group.id] = group
    return attach(replace(tree, groups=groups), Entry.group(group.id),
                  RootPosition(root_index))


def remove_group(tree: Tree, group_id: str) -> Tree:
    """Delete a group; its children take its place in the root, in order."""
    group = tree.groups.get(group_id)
    location = locate(tree, group_id)
    if group is None or not isinstance(location, RootPosition):
        return tree
    i = location.index
    promoted = tuple(Entry.item(child) for child in group.children)
    groups = {k: v for k, v in tree.groups.items() if k != group_id}
    return Tree(
        root=tree.root[:i] + promoted + tree.root[i + 1:],
        groups=groups,
        items=tree.items,
    )


def remove_item(tree: Tree, item_id: str) -> Tree:
    if item_id not in tree.items:
        return tree
    location = locate(tree, item_id)
    if not isinstance(location, NotFound):
        tree = detach(tree, location)
    items = {k: v for k, v in tree.items.items() if k != item_id}
    return replace(tree, items=items)


def rename_group(tree: Tree, group_id: str, title: str) -> Tree:
    group = tree.groups.get(group_id)
    if group is None or group.title == title:
        return tree
    return _replace_group(tree, replace(group, title=title))


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

def demo_tree() -> Tree:
    """Six items and three empty groups, interleaved in the root."""
    items = {f"item-{n}": Item(f"item-{n}", f"Item {n}") for n in range(1, 7)}
    groups = {
        "group-1": Group("group-1", "Group A"),
        "group-2": Group("group-2", "Group B"),
        "group-3": Group("group-3", "Group C"),
    }
    root = (
        Entry.item("item-1"),
        Entry.group("group-1"),
        Entry.item("item-2"),
        Entry.item("item-3"),
        Entry.group("group-2"),
        Entry.item("item-4"),
        Entry.group("group-3"),
        Entry.item("item-5"),
        Entry.item("item-6"),
    )
    return Tree(root=root, groups=groups, items=items)
