from __future__ import annotations

import logging
from typing import Any, Callable

from .classifier import classify_drop
from .config import default_config, merge_configs, validate_config
from .events import (
    GESTURE_CANCEL,
    GESTURE_COMMIT,
    GESTURE_PREVIEW,
    GESTURE_START,
    EventBus,
)
from .models import (
    Destination,
    DragTreeError,
    EntryKind,
    Point,
    Rect,
    SessionState,
    TargetKind,
    Tree,
)
from .resolver import move
from .tree import element_kind

log = logging.getLogger(__name__)


class DragSessionError(DragTreeError):
    """Raised when the session is driven in a way that indicates a caller bug."""


class DragSession:
    """Sequences one drag gesture at a time against a committed tree.

    ``IDLE -> ACTIVE`` on :meth:`on_gesture_start`.  While active, pointer
    moves only refresh :attr:`preview`, always classified against the
    snapshot taken at gesture start.  The committed tree changes at most
    once per gesture, in :meth:`on_gesture_end`; :meth:`on_gesture_cancel`
    simply drops the gesture.
    """

    def __init__(
        self,
        tree: Tree,
        config: dict[str, Any] | None = None,
        event_bus: EventBus | None = None,
    ):
        self.config = merge_configs(default_config(), config or {})
        validate_config(self.config)
        self.event_bus = event_bus

        self._tree = tree
        self._state = SessionState.IDLE
        self._snapshot: Tree | None = None
        self._active_id: str | None = None
        self._active_kind: EntryKind | None = None
        self._preview: Destination | None = None

    def _emit(self, event_type: str, **data: Any) -> None:
        if self.event_bus:
            self.event_bus.emit(event_type, **data)

    def _reset(self) -> None:
        self._state = SessionState.IDLE
        self._snapshot = None
        self._active_id = None
        self._active_kind = None
        self._preview = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def tree(self) -> Tree:
        """The committed tree."""
        return self._tree

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is SessionState.ACTIVE

    @property
    def active_id(self) -> str | None:
        return self._active_id

    @property
    def active_kind(self) -> EntryKind | None:
        return self._active_kind

    @property
    def preview(self) -> Destination | None:
        return self._preview

    # ------------------------------------------------------------------
    # Gesture callbacks
    # ------------------------------------------------------------------

    def on_gesture_start(self, element_id: str) -> bool:
        """Begin dragging *element_id*.  Returns False if refused."""
        if self.is_active:
            log.debug("start %r refused: %r still active", element_id, self._active_id)
            return False
        kind = element_kind(self._tree, element_id)
        if kind is None:
            log.debug("start %r refused: not in tree", element_id)
            return False

        self._state = SessionState.ACTIVE
        self._snapshot = self._tree
        self._active_id = element_id
        self._active_kind = kind
        self._preview = None
        self._emit(GESTURE_START, element_id=element_id, kind=kind)
        return True

    def on_gesture_move(
        self,
        over_id: str | None,
        over_rect: Rect | None,
        pointer: Point | None,
        over_kind: TargetKind | None = None,
        root_rect: Rect | None = None,
    ) -> Destination | None:
        """Reclassify the drop target; returns the new preview.

        *root_rect* is the box of the root entry holding *over_id*; see
        :func:`~dragtreelib.classifier.classify_drop`.
        """
        if not self.is_active:
            return None
        destination = classify_drop(
            self._snapshot,
            self._active_id,
            self._active_kind,
            over_id,
            over_rect,
            pointer,
            over_kind=over_kind,
            config=self.config,
            root_rect=root_rect,
        )
        if destination != self._preview:
            self._preview = destination
            self._emit(GESTURE_PREVIEW, element_id=self._active_id,
                       destination=destination)
        return destination

    def on_gesture_end(self) -> Tree:
        """Commit the previewed move and return the committed tree."""
        if not self.is_active:
            return self._tree
        if self._preview is None:
            return self.on_gesture_cancel()

        element_id, destination = self._active_id, self._preview
        result = move(self._snapshot, element_id, destination)
        changed = result is not self._snapshot
        self._tree = result
        self._reset()
        log.debug("commit %r -> %s (changed=%s)", element_id, destination, changed)
        self._emit(GESTURE_COMMIT, element_id=element_id,
                   destination=destination, changed=changed)
        return self._tree

    def on_gesture_cancel(self) -> Tree:
        if not self.is_active:
            return self._tree
        element_id = self._active_id
        self._reset()
        self._emit(GESTURE_CANCEL, element_id=element_id)
        return self._tree

    # ------------------------------------------------------------------
    # Shell edits between gestures
    # ------------------------------------------------------------------

    def replace_tree(self, tree: Tree) -> None:
        if self.is_active:
            raise DragSessionError(
                "Cannot replace the tree while a gesture is active")
        self._tree = tree

    def apply(self, operation: Callable[..., Tree], *args: Any) -> Tree:
        """Run a shell operation (``add_item``, ``remove_group``, …) on the
        committed tree and install the result."""
        self.replace_tree(operation(self._tree, *args))
        return self._tree
