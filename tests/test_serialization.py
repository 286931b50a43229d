import json

import pytest

from dragtreelib.models import GroupPosition
from dragtreelib.resolver import move
from dragtreelib.serialization import (
    TreeFormatError,
    load_tree,
    save_tree,
    tree_from_dict,
    tree_to_dict,
)
from dragtreelib.tree import demo_tree


def test_persisted_shape(scenario_tree):
    assert tree_to_dict(scenario_tree) == {
        "root": [
            {"kind": "item", "id": "a"},
            {"kind": "group", "id": "g1"},
            {"kind": "item", "id": "d"},
        ],
        "groups": {"g1": {"title": "Group g1", "childIds": ["b", "c"]}},
        "items": {
            "a": {"content": "A"},
            "b": {"content": "B"},
            "c": {"content": "C"},
            "d": {"content": "D"},
        },
    }


def test_from_dict_restores_tree(wide_tree):
    moved = move(wide_tree, "h", GroupPosition("g2", 0))
    assert tree_from_dict(tree_to_dict(moved)) == moved
    assert tree_from_dict(tree_to_dict(demo_tree())) == demo_tree()


def test_shape_is_json_compatible(scenario_tree):
    text = json.dumps(tree_to_dict(scenario_tree))
    assert tree_from_dict(json.loads(text)) == scenario_tree


def test_missing_sections_default_to_empty():
    tree = tree_from_dict({})
    assert tree.root == ()
    assert tree.groups == {}
    assert tree.items == {}


def test_optional_fields_default():
    tree = tree_from_dict({
        "root": [{"kind": "group", "id": "g"}, {"kind": "item", "id": "x"}],
        "groups": {"g": {}},
        "items": {"x": {}},
    })
    assert tree.groups["g"].title == ""
    assert tree.groups["g"].children == ()
    assert tree.items["x"].content is None


@pytest.mark.parametrize("data, fragment", [
    ([], "must be an object"),
    ({"root": {}}, "'root' must be a list"),
    ({"groups": []}, "'groups' must be an object"),
    ({"root": ["x"]}, "root[0] must be an object"),
    ({"root": [{"kind": "folder", "id": "x"}]}, "root[0].kind must be 'item' or 'group'"),
    ({"root": [{"kind": ["item"], "id": "x"}]}, "root[0].kind must be 'item' or 'group'"),
    ({"root": [{"kind": "item", "id": 3}]}, "root[0].id must be a string"),
    ({"groups": {"g": {"childIds": "abc"}}}, "childIds must be a list of strings"),
    ({"groups": {"g": {"title": 5}}}, "title must be a string"),
    ({"items": {"x": "X"}}, "items['x'] must be an object"),
])
def test_malformed_shapes(data, fragment):
    with pytest.raises(TreeFormatError) as exc:
        tree_from_dict(data)
    assert fragment in str(exc.value)


def test_invariant_violations_are_rejected():
    data = {
        "root": [{"kind": "item", "id": "a"}, {"kind": "group", "id": "g"}],
        "groups": {"g": {"title": "G", "childIds": ["a"]}},
        "items": {"a": {"content": 1}},
    }
    with pytest.raises(TreeFormatError, match="'a' is placed 2 times"):
        tree_from_dict(data)


def test_save_and_load(tmp_path, scenario_tree):
    path = tmp_path / "out" / "tree.json"
    assert save_tree(scenario_tree, str(path)) == str(path)
    assert path.read_text(encoding="utf-8").endswith("\n")
    assert load_tree(str(path)) == scenario_tree


def test_load_errors(tmp_path):
    with pytest.raises(TreeFormatError, match="not found"):
        load_tree(str(tmp_path / "missing.json"))
    bad = tmp_path / "bad.json"
    bad.write_text("{", encoding="utf-8")
    with pytest.raises(TreeFormatError, match="Invalid JSON"):
        load_tree(str(bad))
