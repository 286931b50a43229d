from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any

from .models import DragTreeError

PRESET_SCHEMA_VERSION = "1.0"


class ConfigError(DragTreeError):
    """Raised when configuration validation fails."""
    pass


@dataclass
class ConfigFieldError:
    """A single validation error for one configuration field.

    Attributes:
        key:     The config key that failed validation.
        value:   The offending value.
        message: Human-readable explanation of what is wrong.
    """
    key: str
    value: Any
    message: str


@dataclass(frozen=True)
class ParamSpec:
    """One numeric classifier setting: default, bounds and UI text."""
    key: str
    default: float
    label: str
    description: str = ""
    min: float | None = None    # inclusive
    max: float | None = None    # inclusive
    type: tuple = (int, float)


# ---------------------------------------------------------------------------
# Drop classifier parameters
# ---------------------------------------------------------------------------

CLASSIFIER_PARAMS: list[ParamSpec] = [
    ParamSpec(
        key="group_edge_ratio", default=0.25,
        min=0.0, max=0.5,
        label="Group edge band (fraction of height)",
        description=(
            "While dragging an item over a group, a pointer within this "
            "fraction of the group's height from its top or bottom edge drops "
            "the item beside the group instead of into it."
        ),
    ),
    ParamSpec(
        key="group_edge_max_px", default=20.0, min=0.0,
        label="Group edge band cap (px)",
        description=(
            "Upper bound for the group edge band, so tall groups keep most of "
            "their area as an 'into the group' target."
        ),
    ),
    ParamSpec(
        key="group_drag_band_ratio", default=0.25,
        min=0.0, max=0.5,
        label="Group reorder band (fraction of height)",
        description=(
            "While dragging a group, the top and bottom bands of the hovered "
            "entry select before / after.  The middle band keeps the "
            "direction of travel so wide groups do not oscillate."
        ),
    ),
]


def default_config() -> dict[str, Any]:
    """Returns the built-in default configuration."""
    return {p.key: p.default for p in CLASSIFIER_PARAMS}


def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Merge config dicts left-to-right.  Later values override earlier ones."""
    result: dict[str, Any] = {}
    for cfg in configs:
        result.update(cfg)
    return result


def load_preset(path: str) -> dict[str, Any]:
    """
    Load a JSON preset file. Returns a partial config dict.
    Raises ConfigError if the file cannot be read or parsed.
    """
    if not os.path.isfile(path):
        raise ConfigError(f"Preset file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in preset file {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read preset file {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Preset file must contain a JSON object, got {type(data).__name__}")

    return {k: v for k, v in data.items() if k not in ("schema_version", "_description")}


def save_preset(config: dict[str, Any], path: str, *, description: str | None = None) -> None:
    """Save the non-default values of *config* as a JSON preset file."""
    preset: dict[str, Any] = {"schema_version": PRESET_SCHEMA_VERSION}
    if description:
        preset["_description"] = description

    defaults = default_config()
    for k, v in config.items():
        if k.startswith("_"):
            continue
        if k in defaults and defaults[k] == v:
            continue
        preset[k] = v

    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(preset, f, indent=4, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Validation  (ParamSpec-driven)
# ---------------------------------------------------------------------------

def validate_param_values(
    params: list[ParamSpec],
    values: dict[str, Any],
) -> list[ConfigFieldError]:
    """Validate *values* against a list of :class:`ParamSpec` definitions.

    Only keys present in *values* are checked; missing keys fall back to
    their default.  Every parameter is a number with inclusive bounds.
    """
    errors: list[ConfigFieldError] = []

    for spec in params:
        if spec.key not in values:
            continue
        value = values[spec.key]

        # bool is an int subclass; a band width of True is a caller mistake
        if isinstance(value, bool) or not isinstance(value, spec.type):
            got = "boolean" if isinstance(value, bool) else type(value).__name__
            message = f"{spec.label} must be {_type_label(spec.type)}, got {got}."
        elif spec.min is not None and value < spec.min:
            message = f"{spec.label} must be at least {spec.min}."
        elif spec.max is not None and value > spec.max:
            message = f"{spec.label} must be at most {spec.max}."
        else:
            continue
        errors.append(ConfigFieldError(spec.key, value, message))

    return errors


def validate_config_fields(config: dict[str, Any]) -> list[ConfigFieldError]:
    """Validate a config dict against :data:`CLASSIFIER_PARAMS`.  Never raises."""
    errors = validate_param_values(CLASSIFIER_PARAMS, config)
    known = {p.key for p in CLASSIFIER_PARAMS}
    for key in config:
        if key not in known and not key.startswith("_"):
            errors.append(ConfigFieldError(key, config[key], f"Unknown setting '{key}'."))
    return errors


def validate_config(config: dict[str, Any]) -> None:
    """Raise :class:`ConfigError` listing every invalid field."""
    errors = validate_config_fields(config)
    if errors:
        lines = [e.message for e in errors]
        raise ConfigError(
            "Configuration has invalid values:\n  • " + "\n  • ".join(lines)
        )


def _type_label(types: tuple) -> str:
    return " or ".join(t.__name__ for t in types)
