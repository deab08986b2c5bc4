"""Drawing surfaces consumed by the scene.

The scene only talks to the :class:`DrawingSurface` protocol. ``SvgSurface``
is an in-memory implementation that keeps every element, dispatches pointer
events to bound callbacks and serialises the result as an SVG document.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Protocol, Tuple

from .layout import ArcGeometry

logger = logging.getLogger(__name__)

Handle = int
EventCallback = Callable[[], None]

POINTER_ENTER = "enter"
POINTER_LEAVE = "leave"
CLICK = "click"
EVENTS = (POINTER_ENTER, POINTER_LEAVE, CLICK)


class DrawingSurface(Protocol):
    def create_circle(self, x: float, y: float, r: float) -> Handle: ...

    def create_path(self, geometry: ArcGeometry) -> Handle: ...

    def create_panel(self) -> Handle: ...

    def set_attribute(self, handle: Handle, name: str, value: Any) -> None: ...

    def get_attribute(self, handle: Handle, name: str, default: Any = None) -> Any: ...

    def add_class(self, handle: Handle, name: str) -> None: ...

    def remove_class(self, handle: Handle, name: str) -> None: ...

    def animate(
        self, handle: Handle, attrs: Mapping[str, Any], duration: float, easing: str = "linear"
    ) -> None: ...

    def to_front(self, handle: Handle) -> None: ...

    def remove(self, handle: Handle) -> None: ...

    def bind(self, handle: Handle, event: str, callback: EventCallback) -> None: ...


def format_number(value: float, precision: int = 2) -> str:
    if math.isnan(value) or math.isinf(value):
        raise ValueError("Cannot format non-finite coordinate for SVG output")
    formatted = f"{value:.{precision}f}"
    if "." in formatted:
        formatted = formatted.rstrip("0").rstrip(".")
    if formatted in ("", "-0"):
        return "0"
    return formatted


def path_data(geometry: ArcGeometry, precision: int = 2) -> str:
    """SVG path data ``M x y C x1 y1 x2 y2 x y`` for an arc."""

    def pair(coord: Tuple[float, float]) -> str:
        return f"{format_number(coord[0], precision)} {format_number(coord[1], precision)}"

    return (
        f"M{pair(geometry.start)} "
        f"C{pair(geometry.control1)} {pair(geometry.control2)} {pair(geometry.end)}"
    )


def _xml_escape(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


@dataclass
class SvgElement:
    kind: str
    attrs: Dict[str, Any] = field(default_factory=dict)
    classes: List[str] = field(default_factory=list)
    handlers: Dict[str, List[EventCallback]] = field(default_factory=dict)


@dataclass
class Animation:
    handle: Handle
    attrs: Dict[str, Any]
    duration: float
    easing: str


class SvgSurface:
    """Headless surface rendering to an SVG string.

    Animations are applied immediately (their final attributes are written)
    and recorded in :attr:`animations`.
    """

    def __init__(self, precision: int = 2) -> None:
        self.precision = precision
        self.elements: Dict[Handle, SvgElement] = {}
        self.stack: List[Handle] = []
        self.animations: List[Animation] = []
        self._next_handle = 1

    def _add(self, element: SvgElement) -> Handle:
        handle = self._next_handle
        self._next_handle += 1
        self.elements[handle] = element
        self.stack.append(handle)
        return handle

    def _element(self, handle: Handle) -> SvgElement:
        try:
            return self.elements[handle]
        except KeyError:
            raise KeyError(f"unknown surface handle {handle!r}") from None

    def create_circle(self, x: float, y: float, r: float) -> Handle:
        return self._add(SvgElement("circle", {"cx": x, "cy": y, "r": r}))

    def create_path(self, geometry: ArcGeometry) -> Handle:
        return self._add(SvgElement("path", {"d": path_data(geometry, self.precision)}))

    def create_panel(self) -> Handle:
        return self._add(SvgElement("panel", {"x": 0.0, "y": 0.0, "content": "", "opacity": 0.0}))

    def set_attribute(self, handle: Handle, name: str, value: Any) -> None:
        self._element(handle).attrs[name] = value

    def get_attribute(self, handle: Handle, name: str, default: Any = None) -> Any:
        return self._element(handle).attrs.get(name, default)

    def add_class(self, handle: Handle, name: str) -> None:
        classes = self._element(handle).classes
        if name not in classes:
            classes.append(name)

    def remove_class(self, handle: Handle, name: str) -> None:
        classes = self._element(handle).classes
        if name in classes:
            classes.remove(name)

    def has_class(self, handle: Handle, name: str) -> bool:
        return name in self._element(handle).classes

    def classes(self, handle: Handle) -> List[str]:
        return list(self._element(handle).classes)

    def animate(
        self, handle: Handle, attrs: Mapping[str, Any], duration: float, easing: str = "linear"
    ) -> None:
        element = self._element(handle)
        element.attrs.update(attrs)
        self.animations.append(Animation(handle, dict(attrs), duration, easing))

    def to_front(self, handle: Handle) -> None:
        self._element(handle)
        self.stack.remove(handle)
        self.stack.append(handle)

    def remove(self, handle: Handle) -> None:
        self._element(handle)
        del self.elements[handle]
        self.stack.remove(handle)

    def bind(self, handle: Handle, event: str, callback: EventCallback) -> None:
        if event not in EVENTS:
            raise ValueError(f"unsupported event {event!r}; expected one of {', '.join(EVENTS)}")
        self._element(handle).handlers.setdefault(event, []).append(callback)

    def dispatch(self, handle: Handle, event: str) -> None:
        """Deliver a pointer event to the callbacks bound on ``handle``."""

        for callback in list(self._element(handle).handlers.get(event, [])):
            callback()

    def _render(self, element: SvgElement) -> str:
        attrs = dict(element.attrs)
        class_attr = f' class="{_xml_escape(" ".join(element.classes))}"' if element.classes else ""
        if element.kind == "panel":
            x = format_number(float(attrs.pop("x")), self.precision)
            y = format_number(float(attrs.pop("y")), self.precision)
            content = _xml_escape(str(attrs.pop("content")))
            opacity = format_number(float(attrs.pop("opacity")), self.precision)
            return (
                f'<g{class_attr} transform="translate({x} {y})" opacity="{opacity}">'
                f"<text>{content}</text></g>"
            )
        parts = []
        for key, value in attrs.items():
            if isinstance(value, float):
                value = format_number(value, self.precision)
            parts.append(f'{key}="{_xml_escape(str(value))}"')
        return f"<{element.kind}{class_attr} {' '.join(parts)}/>"

    def to_svg(self, width: float, height: float) -> str:
        body = "\n".join(self._render(self.elements[handle]) for handle in self.stack)
        w = format_number(width, self.precision)
        h = format_number(height, self.precision)
        logger.debug("Serialising %d element(s) to SVG", len(self.stack))
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}">\n'
            f"{body}\n</svg>\n"
        )
