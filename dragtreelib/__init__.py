from ._version import __version__
from .models import (
    DragTreeError,
    EntryKind,
    TargetKind,
    SessionState,
    Item,
    Group,
    Entry,
    Tree,
    RootPosition,
    GroupPosition,
    NotFound,
    Destination,
    Location,
    Point,
    Rect,
)
from .tree import (
    locate,
    element_kind,
    container_children,
    entry_count,
    is_descendant_safe,
    unique_id,
    validate_tree,
    check_tree,
    add_item,
    add_group,
    remove_group,
    remove_item,
    rename_group,
    demo_tree,
)
from .classifier import classify_drop
from .resolver import move, move_many
from .session import DragSession, DragSessionError
from .config import (
    default_config,
    merge_configs,
    validate_config,
    validate_config_fields,
    validate_param_values,
    load_preset,
    save_preset,
    ConfigError,
    ConfigFieldError,
    ParamSpec,
    CLASSIFIER_PARAMS,
)
from .serialization import (
    tree_to_dict,
    tree_from_dict,
    load_tree,
    save_tree,
    TreeFormatError,
)
from .rendering import render_tree_text
from .events import (
    GESTURE_CANCEL,
    GESTURE_COMMIT,
    GESTURE_EVENTS,
    GESTURE_PREVIEW,
    GESTURE_START,
    EventBus,
)

__all__ = [
    "__version__",
    "DragTreeError",
    "EntryKind",
    "TargetKind",
    "SessionState",
    "Item",
    "Group",
    "Entry",
    "Tree",
    "RootPosition",
    "GroupPosition",
    "NotFound",
    "Destination",
    "Location",
    "Point",
    "Rect",
    "locate",
    "element_kind",
    "container_children",
    "entry_count",
    "is_descendant_safe",
    "unique_id",
    "validate_tree",
    "check_tree",
    "add_item",
    "add_group",
    "remove_group",
    "remove_item",
    "rename_group",
    "demo_tree",
    "classify_drop",
    "move",
    "move_many",
    "DragSession",
    "DragSessionError",
    "default_config",
    "merge_configs",
    "validate_config",
    "validate_config_fields",
    "validate_param_values",
    "load_preset",
    "save_preset",
    "ConfigError",
    "ConfigFieldError",
    "ParamSpec",
    "CLASSIFIER_PARAMS",
    "tree_to_dict",
    "tree_from_dict",
    "load_tree",
    "save_tree",
    "TreeFormatError",
    "render_tree_text",
    "EventBus",
    "GESTURE_START",
    "GESTURE_PREVIEW",
    "GESTURE_COMMIT",
    "GESTURE_CANCEL",
    "GESTURE_EVENTS",
]
