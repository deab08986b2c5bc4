"""Floating info panel that follows the hovered or activated node."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from .highlight import HighlightController
from .scene import SceneModel
from .scheduler import Scheduler, TimerHandle, cancel
from .surface import POINTER_ENTER, POINTER_LEAVE

logger = logging.getLogger(__name__)

HIDDEN_CLASS = "hidden"
TOOLTIP_CLASS = "tooltip"
FADE_DURATION = 0.2

Formatter = Callable[[Any], str]


class TooltipController:
    """Shows one panel per diagram and hides it in two stages.

    Leaving a node first fades the panel after ``fade_delay`` and hides it
    after a further ``hide_delay``. Entering the panel in between cancels both
    steps and re-enters the node the panel belongs to.
    """

    def __init__(
        self,
        scene: SceneModel,
        highlighter: HighlightController,
        scheduler: Scheduler,
        formatter: Optional[Formatter] = None,
        fade_delay: float = 0.5,
        hide_delay: float = 0.3,
    ) -> None:
        self.scene = scene
        self.highlighter = highlighter
        self.scheduler = scheduler
        self.formatter: Formatter = formatter or str
        self.fade_delay = fade_delay
        self.hide_delay = hide_delay
        self.node: Optional[int] = None
        self.handle = None
        self._fade_timer: Optional[TimerHandle] = None
        self._hide_timer: Optional[TimerHandle] = None
        highlighter.subscribe(self._on_highlight_event)

    @property
    def visible(self) -> bool:
        if self.handle is None:
            return False
        surface = self.scene.surface
        return float(surface.get_attribute(self.handle, "opacity", 0.0)) > 0.0

    def attach(self) -> None:
        """Create the panel on the surface and wire its pointer events."""

        surface = self.scene.surface
        self.handle = surface.create_panel()
        surface.add_class(self.handle, TOOLTIP_CLASS)
        surface.add_class(self.handle, HIDDEN_CLASS)
        surface.bind(self.handle, POINTER_ENTER, self.panel_enter)
        surface.bind(self.handle, POINTER_LEAVE, self.panel_leave)

    def detach(self) -> None:
        self._cancel_timers()
        if self.handle is not None:
            self.scene.surface.remove(self.handle)
        self.handle = None
        self.node = None

    def anchor(self, index: int):
        """Panel position: the point, pushed across the axis past the arcs.

        The cross-axis offset never leaves the canvas.
        """

        layout = self.scene.layout
        options = layout.options
        point = self.scene.point(index)
        offset = layout.axis_pos + options.max_arc_height + options.radius
        offset = max(min(offset, options.size - options.radius), 0.0)
        if options.is_vertical:
            return (offset, point.position)
        return (point.position, offset)

    def show(self, index: int) -> None:
        if self.handle is None:
            return
        self._cancel_timers()
        surface = self.scene.surface
        x, y = self.anchor(index)
        surface.set_attribute(self.handle, "x", x)
        surface.set_attribute(self.handle, "y", y)
        surface.set_attribute(self.handle, "content", self.formatter(self.scene.layout.nodes[index]))
        surface.remove_class(self.handle, HIDDEN_CLASS)
        surface.animate(self.handle, {"opacity": 1.0}, FADE_DURATION)
        self.node = index

    def schedule_hide(self) -> None:
        if self.handle is None:
            return
        self._cancel_timers()
        self._fade_timer = self.scheduler.call_later(self.fade_delay, self._fade)

    def _fade(self) -> None:
        self._fade_timer = None
        self.scene.surface.animate(self.handle, {"opacity": 0.0}, FADE_DURATION)
        self._hide_timer = self.scheduler.call_later(self.hide_delay, self._hide)

    def _hide(self) -> None:
        self._hide_timer = None
        self.scene.surface.add_class(self.handle, HIDDEN_CLASS)
        logger.debug("Tooltip hidden (node %s)", self.node)
        self.node = None

    def _cancel_timers(self) -> None:
        cancel(self._fade_timer)
        cancel(self._hide_timer)
        self._fade_timer = None
        self._hide_timer = None

    def panel_enter(self) -> None:
        if self.node is None:
            return
        self._cancel_timers()
        self.highlighter.pointer_enter(self.node)

    def panel_leave(self) -> None:
        if self.node is None:
            return
        self.highlighter.pointer_leave(self.node)

    def _on_highlight_event(self, event: str, index: int) -> None:
        if event in ("enter", "activate", "restore"):
            self.show(index)
        elif event == "leave":
            self.schedule_hide()
        elif event == "deactivate" and self.node == index and self.highlighter.active:
            self.show(self.highlighter.active[-1])
