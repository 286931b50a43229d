from __future__ import annotations

from .models import Destination, EntryKind, GroupPosition, Item, RootPosition, Tree
from .tree import clamp_index

DROP_MARKER = "────────"


def item_label(item: Item) -> str:
    if item.content is None:
        return item.id
    return f"{item.id}: {item.content}"


def render_tree_text(
    tree: Tree,
    preview: Destination | None = None,
    indent: str = "  ",
) -> str:
    """Render *tree* as an indented outline.

    Groups print as ``[id] title`` with their items indented below;
    empty groups show ``(empty)``.  When *preview* is given, a marker line
    is drawn at that insertion gap (index clamped like ``move`` would).
    """
    lines: list[str] = []

    root_marker = None
    if isinstance(preview, RootPosition):
        root_marker = clamp_index(preview.index, len(tree.root))

    for i, entry in enumerate(tree.root):
        if root_marker == i:
            lines.append(DROP_MARKER)
        if entry.kind is EntryKind.ITEM:
            lines.append(f"- {item_label(tree.items[entry.id])}")
            continue

        group = tree.groups[entry.id]
        lines.append(f"[{group.id}] {group.title}".rstrip())
        group_marker = None
        if isinstance(preview, GroupPosition) and preview.group_id == group.id:
            group_marker = clamp_index(preview.index, len(group.children))
        for j, child in enumerate(group.children):
            if group_marker == j:
                lines.append(f"{indent}{DROP_MARKER}")
            lines.append(f"{indent}- {item_label(tree.items[child])}")
        if group_marker == len(group.children):
            lines.append(f"{indent}{DROP_MARKER}")
        elif not group.children:
            lines.append(f"{indent}(empty)")

    if root_marker == len(tree.root):
        lines.append(DROP_MARKER)

    return "\n".join(lines)
