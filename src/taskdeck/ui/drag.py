"""Drag-and-drop infrastructure for the taskdeck UI.

Two mixins:
- DraggableMixin: on dragged widgets, owns the "flying" phase
- DropTarget: on containers, owns the "landing" phase

Dropping outside every target cancels the drag.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.errors import NoWidget
from textual.geometry import Offset
from textual.widgets import Static

if TYPE_CHECKING:
    from textual.widget import Widget


class DropTarget:
    """Mixin for widgets that can accept drops.

    Returns False to ignore (bubbles to parent), True to consume.
    """

    def drag_over(self, draggable: DraggableMixin, x: int, y: int) -> bool:
        """Called while a draggable hovers over this target. Return True to accept."""
        return False

    def drag_away(self, draggable: DraggableMixin) -> None:
        """Called when a draggable leaves this target."""

    def try_drop(self, draggable: DraggableMixin, x: int, y: int) -> bool:
        """Called on mouse-up to attempt the drop. Return True if accepted."""
        return False


class DraggableMixin:
    """Mixin for widgets that can be dragged.

    Subclasses should:
    - Call _init_draggable() in __init__
    - Implement draggable_make_ghost() to return the ghost widget
    - Implement draggable_clicked() for click-without-drag behavior
    - Optionally implement draggable_begin() to refuse a drag
    - Optionally override DRAG_THRESHOLD
    """

    DRAG_THRESHOLD = 2

    def _init_draggable(self) -> None:
        self._drag_start_pos: Offset | None = None
        self._dragging = False
        self._ghost: Widget | None = None
        self._drag_offset: Offset = Offset(0, 0)
        self._current_target: DropTarget | None = None

    def on_mouse_down(self, event) -> None:
        if event.button != 1:
            return
        event.stop()
        event.prevent_default()
        self._drag_start_pos = Offset(event.screen_x, event.screen_y)
        self.capture_mouse()

    def on_mouse_move(self, event) -> None:
        if self._drag_start_pos is None:
            return
        event.stop()
        event.prevent_default()
        dx = abs(event.screen_x - self._drag_start_pos.x)
        dy = abs(event.screen_y - self._drag_start_pos.y)
        if dx > self.DRAG_THRESHOLD or dy > self.DRAG_THRESHOLD:
            self.release_mouse()
            mouse_pos = self._drag_start_pos
            self._drag_start_pos = None
            if self.draggable_begin():
                self._drag_start(mouse_pos)

    def on_mouse_up(self, event) -> None:
        event.stop()
        event.prevent_default()
        self.release_mouse()
        if self._drag_start_pos is not None:
            self._drag_start_pos = None
            self.draggable_clicked()

    def _drag_start(self, mouse_pos: Offset) -> None:
        """Begin drag: create ghost, add .dragging class, register on screen."""
        self._dragging = True
        self.add_class("dragging")
        self.screen.set_focus(None)

        region = self.region
        self._drag_offset = Offset(mouse_pos.x - region.x, mouse_pos.y - region.y)

        self._ghost = self.draggable_make_ghost()
        self._ghost.styles.width = region.width
        self._ghost.styles.offset = (region.x, region.y)
        self.screen.mount(self._ghost)

        self.screen._active_draggable = self
        self.screen.capture_mouse()

    def _drag_move(self, x: int, y: int) -> None:
        """Called by screen on mouse move during drag."""
        if self._ghost is not None:
            self._ghost.styles.offset = (x - self._drag_offset.x, y - self._drag_offset.y)
        self._update_drop_target(x, y)

    def _update_drop_target(self, x: int, y: int) -> None:
        """Hit-test for DropTargets and call drag_over/drag_away."""
        new_target = self._find_drop_target(x, y)

        if new_target is self._current_target:
            if new_target is not None:
                new_target.drag_over(self, x, y)
            return

        if self._current_target is not None:
            self._current_target.drag_away(self)
        self._current_target = new_target
        if new_target is not None:
            new_target.drag_over(self, x, y)

    def _drag_finish(self, x: int, y: int) -> None:
        """Called by screen on mouse-up. Try to drop, innermost-out."""
        self.screen.release_mouse()

        for target in self._iter_drop_targets(x, y):
            if target.try_drop(self, x, y):
                self._current_target = None
                self._drag_cleanup()
                return

        self._drag_cancel()

    def _drag_cancel(self) -> None:
        """Cancel drag: drag_away + cleanup."""
        self.screen.release_mouse()
        if self._current_target is not None:
            self._current_target.drag_away(self)
            self._current_target = None
        self._drag_cleanup()

    def _drag_cleanup(self) -> None:
        """Remove ghost, clear state, deregister from screen."""
        if self._ghost is not None:
            self._ghost.remove()
        self._ghost = None
        self._dragging = False
        self._drag_offset = Offset(0, 0)
        self.remove_class("dragging")
        if getattr(self.screen, "_active_draggable", None) is self:
            self.screen._active_draggable = None

    def _iter_drop_targets(self, x: int, y: int) -> list[DropTarget]:
        """All DropTargets at position, innermost-out, skipping the ghost."""
        targets: list[DropTarget] = []
        try:
            widgets = list(self.screen.get_widgets_at(x, y))
        except NoWidget:
            return targets

        for widget, _region in widgets:
            if self._ghost is not None and (widget is self._ghost or self._ghost in widget.ancestors):
                continue
            candidate = widget
            while candidate is not None:
                if isinstance(candidate, DropTarget) and candidate is not self and candidate not in targets:
                    targets.append(candidate)
                candidate = candidate.parent
        return targets

    def _find_drop_target(self, x: int, y: int) -> DropTarget | None:
        """The innermost DropTarget at screen position, or None."""
        targets = self._iter_drop_targets(x, y)
        return targets[0] if targets else None

    def draggable_begin(self) -> bool:
        """Called once the drag threshold is crossed. Return False to refuse."""
        return True

    def draggable_make_ghost(self) -> Widget:
        """Create and return the ghost widget for dragging. Override in subclass."""
        raise NotImplementedError

    def draggable_clicked(self) -> None:
        """Called when mouse released without dragging. Override for click behavior."""
        raise NotImplementedError


class DragGhost(Static):
    """Floating overlay showing the task being dragged."""

    DEFAULT_CSS = """
    DragGhost {
        layer: overlay;
        height: auto;
        padding: 0 1;
        background: $primary-darken-1;
        border: round $primary;
    }
    """
