import json

import pytest

from dragtreelib.config import (
    CLASSIFIER_PARAMS,
    ConfigError,
    ParamSpec,
    default_config,
    load_preset,
    merge_configs,
    save_preset,
    validate_config,
    validate_config_fields,
    validate_param_values,
)


def test_default_config_matches_params():
    cfg = default_config()
    assert cfg == {
        "group_edge_ratio": 0.25,
        "group_edge_max_px": 20.0,
        "group_drag_band_ratio": 0.25,
    }
    assert set(cfg) == {p.key for p in CLASSIFIER_PARAMS}
    assert validate_config_fields(cfg) == []


def test_merge_configs_later_wins():
    merged = merge_configs(default_config(), {"group_edge_max_px": 8}, {"group_edge_max_px": 12})
    assert merged["group_edge_max_px"] == 12
    assert merged["group_edge_ratio"] == 0.25


@pytest.mark.parametrize("values, fragment", [
    ({"group_edge_ratio": "wide"}, "must be int or float, got str"),
    ({"group_edge_ratio": True}, "got boolean"),
    ({"group_edge_ratio": -0.1}, "must be at least 0.0"),
    ({"group_drag_band_ratio": 0.75}, "must be at most 0.5"),
    ({"group_edge_max_px": None}, "must be int or float, got NoneType"),
])
def test_invalid_values(values, fragment):
    errors = validate_config_fields(values)
    assert len(errors) == 1
    assert fragment in errors[0].message
    assert errors[0].key == next(iter(values))


def test_unknown_keys_are_reported_but_private_keys_ignored():
    errors = validate_config_fields({"nope": 1, "_source": "cli"})
    assert [e.key for e in errors] == ["nope"]


def test_validate_config_raises_listing_all_errors():
    with pytest.raises(ConfigError) as exc:
        validate_config({"group_edge_ratio": 9, "group_edge_max_px": -1})
    assert "Group edge band (fraction of height)" in str(exc.value)
    assert "Group edge band cap (px)" in str(exc.value)


def test_bounds_are_inclusive():
    assert validate_config_fields({
        "group_edge_ratio": 0,
        "group_drag_band_ratio": 0.5,
        "group_edge_max_px": 0.0,
    }) == []


def test_param_spec_defaults_to_numeric():
    spec = ParamSpec(key="gap", default=4, label="Gap", min=1)
    assert spec.type == (int, float)
    assert validate_param_values([spec], {}) == []
    assert validate_param_values([spec], {"gap": 1}) == []
    errors = validate_param_values([spec], {"gap": "4"})
    assert [e.message for e in errors] == ["Gap must be int or float, got str."]


def test_preset_round_trip(tmp_path):
    path = tmp_path / "presets" / "tight.json"
    cfg = merge_configs(default_config(), {"group_edge_max_px": 8.0})
    save_preset(cfg, str(path), description="Tight edges")

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw == {
        "schema_version": "1.0",
        "_description": "Tight edges",
        "group_edge_max_px": 8.0,
    }
    assert load_preset(str(path)) == {"group_edge_max_px": 8.0}


def test_load_preset_errors(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_preset(str(tmp_path / "missing.json"))

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid JSON"):
        load_preset(str(bad))

    wrong = tmp_path / "list.json"
    wrong.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigError, match="JSON object, got list"):
        load_preset(str(wrong))
