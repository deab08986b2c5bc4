"""Depth-tinted highlighting of descendant and predecessor chains."""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, List, Optional, Tuple

from .scene import Arc, Point, SceneModel
from .scheduler import Scheduler, TimerHandle, cancel

logger = logging.getLogger(__name__)

HIGHLIGHT_CLASS = "highlight"
ACTIVE_CLASS = "active"
DESCENDANT_PREFIX = "depth-"
PREDECESSOR_PREFIX = "depth-m"

Listener = Callable[[str, int], None]


def descendant_tag(depth: int) -> str:
    return f"{DESCENDANT_PREFIX}{depth}"


def predecessor_tag(depth: int) -> str:
    return f"{PREDECESSOR_PREFIX}{depth}"


class HighlightController:
    """Highlight state, active set and hover handling for one scene.

    Each point and arc carries two highlight depths: the distance below the
    highlighted node (``depth-N`` tags) and the distance above it
    (``depth-mN`` tags). A depth is only ever lowered, so the closest path
    wins when several highlight origins reach the same element.
    """

    def __init__(
        self,
        scene: SceneModel,
        scheduler: Scheduler,
        restore_delay: float = 0.3,
    ) -> None:
        self.scene = scene
        self.scheduler = scheduler
        self.restore_delay = restore_delay
        self.active: List[int] = []
        self._restore_timer: Optional[TimerHandle] = None
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _emit(self, event: str, index: int) -> None:
        for listener in list(self._listeners):
            listener(event, index)

    def _set_descendant_depth(self, item, depth: int) -> None:
        surface = self.scene.surface
        if item.descendant_depth != item.unset:
            surface.remove_class(item.handle, descendant_tag(item.descendant_depth))
        item.descendant_depth = depth
        surface.add_class(item.handle, descendant_tag(depth))

    def _set_predecessor_depth(self, item, depth: int) -> None:
        surface = self.scene.surface
        if item.predecessor_depth != item.unset:
            surface.remove_class(item.handle, predecessor_tag(item.predecessor_depth))
        item.predecessor_depth = depth
        surface.add_class(item.handle, predecessor_tag(depth))

    def _tag_descendants(self, origin: int) -> None:
        points, arcs = self.scene.points, self.scene.arcs
        queue: Deque[Tuple[int, int]] = deque([(origin, 0)])
        while queue:
            index, depth = queue.popleft()
            for arc_index in points[index].arcs_out:
                arc: Arc = arcs[arc_index]
                # Depths never reach the sentinel on acyclic input; on a
                # cycle they grow until this check stops the walk.
                if depth >= arc.unset:
                    continue
                if depth < arc.descendant_depth:
                    self._set_descendant_depth(arc, depth)
                target: Point = points[arc.target]
                if depth < target.descendant_depth:
                    self._set_descendant_depth(target, depth)
                    queue.append((target.index, depth + 1))

    def _tag_predecessors(self, origin: int) -> None:
        points, arcs = self.scene.points, self.scene.arcs
        queue: Deque[Tuple[int, int]] = deque([(origin, 0)])
        while queue:
            index, depth = queue.popleft()
            for arc_index in points[index].arcs_in:
                arc: Arc = arcs[arc_index]
                if depth >= arc.unset:
                    continue
                if depth < arc.predecessor_depth:
                    self._set_predecessor_depth(arc, depth)
                source: Point = points[arc.source]
                if depth < source.predecessor_depth:
                    self._set_predecessor_depth(source, depth)
                    queue.append((source.index, depth + 1))

    def highlight(self, index: int) -> None:
        point = self.scene.point(index)
        self.scene.surface.add_class(point.handle, HIGHLIGHT_CLASS)
        self._tag_descendants(index)
        self._tag_predecessors(index)

    def reset_highlighting(self) -> None:
        surface = self.scene.surface
        for item in [*self.scene.arcs, *self.scene.points]:
            if item.descendant_depth != item.unset:
                surface.remove_class(item.handle, descendant_tag(item.descendant_depth))
            if item.predecessor_depth != item.unset:
                surface.remove_class(item.handle, predecessor_tag(item.predecessor_depth))
            item.reset_depths()
        for point in self.scene.points:
            surface.remove_class(point.handle, HIGHLIGHT_CLASS)

    def activate(self, index: int) -> None:
        point = self.scene.point(index)
        self.scene.surface.add_class(point.handle, ACTIVE_CLASS)
        self.highlight(index)
        if index not in self.active:
            self.active.append(index)
            logger.debug("Activated node %d (active: %s)", index, self.active)
            self._emit("activate", index)

    def deactivate(self, index: int) -> None:
        point = self.scene.point(index)
        self.scene.surface.remove_class(point.handle, ACTIVE_CLASS)
        was_active = index in self.active
        if was_active:
            self.active.remove(index)
        self.reset_highlighting()
        self.show_active()
        if was_active:
            logger.debug("Deactivated node %d (active: %s)", index, self.active)
            self._emit("deactivate", index)

    def toggle(self, index: int) -> None:
        if index in self.active:
            self.deactivate(index)
        else:
            self.activate(index)

    def show_active(self) -> None:
        for index in list(self.active):
            self.activate(index)

    def cancel_restore(self) -> None:
        cancel(self._restore_timer)
        self._restore_timer = None

    def _restore(self) -> None:
        self._restore_timer = None
        self.show_active()
        if self.active:
            self._emit("restore", self.active[-1])

    def pointer_enter(self, index: int) -> None:
        self.cancel_restore()
        if self.active:
            self.reset_highlighting()
        self.highlight(index)
        self._emit("enter", index)

    def pointer_leave(self, index: int) -> None:
        self.reset_highlighting()
        self.cancel_restore()
        self._restore_timer = self.scheduler.call_later(self.restore_delay, self._restore)
        self._emit("leave", index)

    def clear(self) -> None:
        """Forget the active set and any pending restore."""

        self.cancel_restore()
        self.active = []
