"""Persisted shape of a tree.

::

    {
        "root":   [{"kind": "item" | "group", "id": ...}, ...],
        "groups": {"<group id>": {"title": str, "childIds": [item ids]}},
        "items":  {"<item id>": {"content": <any JSON value>}}
    }

The shape is plain JSON data with no version field and no engine handles.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from .models import DragTreeError, Entry, EntryKind, Group, Item, Tree
from .tree import validate_tree

log = logging.getLogger(__name__)


class TreeFormatError(DragTreeError):
    """Raised when persisted tree data is malformed."""
    pass


def tree_to_dict(tree: Tree) -> dict[str, Any]:
    return {
        "root": [{"kind": e.kind.value, "id": e.id} for e in tree.root],
        "groups": {
            gid: {"title": g.title, "childIds": list(g.children)}
            for gid, g in tree.groups.items()
        },
        "items": {iid: {"content": it.content} for iid, it in tree.items.items()},
    }


def _expect(cond: bool, message: str) -> None:
    if not cond:
        raise TreeFormatError(message)


def tree_from_dict(data: Any) -> Tree:
    """Build a :class:`Tree` from its persisted shape.

    Raises :class:`TreeFormatError` on wrong shapes and on invariant
    violations (duplicates, orphans, unknown references).
    """
    _expect(isinstance(data, dict),
            f"Tree data must be an object, got {type(data).__name__}")
    root_data = data.get("root", [])
    groups_data = data.get("groups", {})
    items_data = data.get("items", {})
    _expect(isinstance(root_data, list), "'root' must be a list")
    _expect(isinstance(groups_data, dict), "'groups' must be an object")
    _expect(isinstance(items_data, dict), "'items' must be an object")

    kinds = {k.value: k for k in EntryKind}
    root: list[Entry] = []
    for i, raw in enumerate(root_data):
        _expect(isinstance(raw, dict), f"root[{i}] must be an object")
        raw_kind = raw.get("kind")
        kind = kinds.get(raw_kind) if isinstance(raw_kind, str) else None
        _expect(kind is not None,
                f"root[{i}].kind must be 'item' or 'group', got {raw_kind!r}")
        _expect(isinstance(raw.get("id"), str), f"root[{i}].id must be a string")
        root.append(Entry(kind, raw["id"]))

    groups: dict[str, Group] = {}
    for gid, raw in groups_data.items():
        _expect(isinstance(raw, dict), f"groups[{gid!r}] must be an object")
        title = raw.get("title", "")
        child_ids = raw.get("childIds", [])
        _expect(isinstance(title, str), f"groups[{gid!r}].title must be a string")
        _expect(isinstance(child_ids, list)
                and all(isinstance(c, str) for c in child_ids),
                f"groups[{gid!r}].childIds must be a list of strings")
        groups[gid] = Group(gid, title, tuple(child_ids))

    items: dict[str, Item] = {}
    for iid, raw in items_data.items():
        _expect(isinstance(raw, dict), f"items[{iid!r}] must be an object")
        items[iid] = Item(iid, raw.get("content"))

    tree = Tree(root=tuple(root), groups=groups, items=items)
    errors = validate_tree(tree)
    if errors:
        raise TreeFormatError("Invalid tree:\n  • " + "\n  • ".join(errors))
    return tree


def load_tree(path: str) -> Tree:
    """Read a tree from a JSON file.  Raises :class:`TreeFormatError`."""
    if not os.path.isfile(path):
        raise TreeFormatError(f"Tree file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise TreeFormatError(f"Invalid JSON in tree file {path}: {e}")
    except OSError as e:
        raise TreeFormatError(f"Cannot read tree file {path}: {e}")
    return tree_from_dict(data)


def save_tree(tree: Tree, path: str) -> str:
    """Write *tree* as JSON.  Returns the path written."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(tree_to_dict(tree), f, indent=4, ensure_ascii=False)
        f.write("\n")
    log.info("Tree saved to %s", path)
    return path
