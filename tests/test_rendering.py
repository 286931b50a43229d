from dragtreelib.models import GroupPosition, Item, RootPosition, Tree, Entry
from dragtreelib.rendering import DROP_MARKER, item_label, render_tree_text


def test_outline(wide_tree):
    assert render_tree_text(wide_tree).splitlines() == [
        "- a: A",
        "[g1] Group g1",
        "  - b: B",
        "  - c: C",
        "- d: D",
        "[g2] Group g2",
        "  (empty)",
        "- e: E",
        "[g3] Group g3",
        "  - f: F",
        "- h: H",
    ]


def test_root_preview_marker(scenario_tree):
    lines = render_tree_text(scenario_tree, RootPosition(1)).splitlines()
    assert lines[:3] == ["- a: A", DROP_MARKER, "[g1] Group g1"]
    lines = render_tree_text(scenario_tree, RootPosition(99)).splitlines()
    assert lines[-1] == DROP_MARKER


def test_group_preview_marker(scenario_tree):
    lines = render_tree_text(scenario_tree, GroupPosition("g1", 2)).splitlines()
    assert lines == [
        "- a: A",
        "[g1] Group g1",
        "  - b: B",
        "  - c: C",
        f"  {DROP_MARKER}",
        "- d: D",
    ]


def test_marker_replaces_empty_hint(wide_tree):
    text = render_tree_text(wide_tree, GroupPosition("g2", 0))
    assert "(empty)" not in text
    assert f"[g2] Group g2\n  {DROP_MARKER}" in text


def test_item_label_without_content():
    assert item_label(Item("x")) == "x"
    assert item_label(Item("x", 3)) == "x: 3"


def test_empty_tree():
    assert render_tree_text(Tree()) == ""
    assert render_tree_text(Tree(), RootPosition(0)) == DROP_MARKER
    tree = Tree(root=(Entry.item("x"),), items={"x": Item("x")})
    assert render_tree_text(tree) == "- x"
