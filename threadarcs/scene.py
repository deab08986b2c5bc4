"""Points and arcs of a drawn thread, and the draw calls that create them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple

from .layout import ArcGeometry, LayoutEngine
from .surface import DrawingSurface, Handle

logger = logging.getLogger(__name__)


class SceneError(RuntimeError):
    """Raised when the scene is used out of order."""


@dataclass
class Point:
    """Drawn node. ``arcs_out``/``arcs_in`` index into ``SceneModel.arcs``."""

    index: int
    position: float
    xy: Tuple[float, float]
    unset: int
    arcs_out: List[int] = field(default_factory=list)
    arcs_in: List[int] = field(default_factory=list)
    descendant_depth: int = 0
    predecessor_depth: int = 0
    handle: Optional[Handle] = None

    def __post_init__(self) -> None:
        self.reset_depths()

    def reset_depths(self) -> None:
        self.descendant_depth = self.unset
        self.predecessor_depth = self.unset


@dataclass
class Arc:
    index: int
    source: int
    target: int
    direction: int
    geometry: ArcGeometry
    unset: int
    descendant_depth: int = 0
    predecessor_depth: int = 0
    handle: Optional[Handle] = None

    def __post_init__(self) -> None:
        self.reset_depths()

    def reset_depths(self) -> None:
        self.descendant_depth = self.unset
        self.predecessor_depth = self.unset


class SceneModel:
    """Owns the point and arc stores of one diagram and draws them."""

    def __init__(self, surface: DrawingSurface, layout: LayoutEngine) -> None:
        self.surface = surface
        self.layout = layout
        self.points: List[Point] = []
        self.arcs: List[Arc] = []
        self._drawn_edges: Set[Tuple[int, int]] = set()
        self.drawn = False

    @property
    def unset_depth(self) -> int:
        """Highlight sentinel, larger than any real depth."""
        return 2 * max(self.layout.size, 1)

    def add_point(self, position: float) -> Point:
        point = Point(
            index=len(self.points),
            position=float(position),
            xy=self.layout.xy(position),
            unset=self.unset_depth,
        )
        self.points.append(point)
        return point

    def add_arc(
        self, source: Point, target: Point, direction: int, height: Optional[float] = None
    ) -> Arc:
        arc = Arc(
            index=len(self.arcs),
            source=source.index,
            target=target.index,
            direction=direction,
            geometry=self.layout.arc_geometry(source.position, target.position, direction, height),
            unset=self.unset_depth,
        )
        self.arcs.append(arc)
        source.arcs_out.append(arc.index)
        target.arcs_in.append(arc.index)
        return arc

    def point(self, index: int) -> Point:
        if not 0 <= index < len(self.points):
            raise SceneError(f"point {index} has not been drawn ({len(self.points)} point(s) in scene)")
        return self.points[index]

    def _draw_point(self, point: Point) -> None:
        x, y = point.xy
        point.handle = self.surface.create_circle(x, y, self.layout.options.radius)
        self.surface.add_class(point.handle, "point")
        self.surface.add_class(point.handle, f"p{point.index}")

    def _draw_arc(self, arc: Arc) -> None:
        arc.handle = self.surface.create_path(arc.geometry)
        for name in ("arc", f"arc-p{arc.source}", f"arc-p{arc.target}"):
            self.surface.add_class(arc.handle, name)

    def draw_arcs_from_point(
        self,
        index: int,
        direction: Optional[int] = None,
        heights: Optional[Sequence[float]] = None,
    ) -> List[Arc]:
        """Draw the outgoing arcs of ``index``; edges drawn before are skipped.

        ``direction`` overrides the side stored on each link. ``heights`` holds
        precomputed curve heights aligned with the node's links and is ignored
        when ``direction`` is given.
        """

        source = self.point(index)
        created: List[Arc] = []
        for slot, link in enumerate(self.layout.graph.adjacency[index]):
            key = (index, link.target)
            if key in self._drawn_edges:
                continue
            if direction is None:
                height = None if heights is None else float(heights[slot])
                arc = self.add_arc(source, self.point(link.target), link.direction, height)
            else:
                arc = self.add_arc(source, self.point(link.target), direction)
            self._draw_arc(arc)
            self._drawn_edges.add(key)
            created.append(arc)
        return created

    def draw_all(self) -> None:
        if self.drawn:
            raise SceneError("scene is already drawn; clear() it before drawing again")
        for position in self.layout.positions():
            self._draw_point(self.add_point(position))
        heights = self.layout.arc_heights()
        offset = 0
        for point in self.points:
            count = len(self.layout.graph.adjacency[point.index])
            self.draw_arcs_from_point(point.index, heights=heights[offset:offset + count])
            offset += count
        # Points stack above every arc regardless of creation order.
        for point in self.points:
            self.surface.to_front(point.handle)
        self.drawn = True
        logger.info("Drew %d point(s) and %d arc(s)", len(self.points), len(self.arcs))

    def clear(self) -> None:
        for item in [*self.arcs, *self.points]:
            if item.handle is not None:
                self.surface.remove(item.handle)
        self.points = []
        self.arcs = []
        self._drawn_edges = set()
        self.drawn = False
