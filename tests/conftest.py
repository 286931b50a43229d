import pytest

from dragtreelib.models import Entry, EntryKind, Group, Item, Tree


def build_tree(layout):
    """Build a tree from ``["a", ("g1", ["b", "c"]), "d"]``.

    Strings are root items, tuples are groups with their child ids.  Item
    content is the upper-cased id, group title is ``"Group <id>"``.
    """
    root, groups, items = [], {}, {}
    for node in layout:
        if isinstance(node, tuple):
            gid, children = node
            groups[gid] = Group(gid, f"Group {gid}", tuple(children))
            root.append(Entry.group(gid))
            for child in children:
                items[child] = Item(child, child.upper())
        else:
            root.append(Entry.item(node))
            items[node] = Item(node, node.upper())
    return Tree(root=tuple(root), groups=groups, items=items)


def layout_of(tree):
    """Inverse of :func:`build_tree` (ignores titles and content)."""
    out = []
    for entry in tree.root:
        if entry.kind is EntryKind.GROUP:
            out.append((entry.id, list(tree.groups[entry.id].children)))
        else:
            out.append(entry.id)
    return out


@pytest.fixture
def build():
    return build_tree


@pytest.fixture
def layout():
    return layout_of


@pytest.fixture
def scenario_tree():
    """root = [a, g1[b, c], d]"""
    return build_tree(["a", ("g1", ["b", "c"]), "d"])


@pytest.fixture
def wide_tree():
    """Three groups (one empty) interleaved with root items."""
    return build_tree([
        "a",
        ("g1", ["b", "c"]),
        "d",
        ("g2", []),
        "e",
        ("g3", ["f"]),
        "h",
    ])
