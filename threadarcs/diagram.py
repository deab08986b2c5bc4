"""The ``ThreadArcs`` diagram: graph, layout, scene and interaction in one place."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from .graph import Adjacency, GraphIndex, Link, RawLink, from_parents, normalize_adjacency, to_signed
from .highlight import HighlightController
from .layout import LayoutEngine, SortStrategy
from .options import ThreadArcsOptions
from .scene import SceneError, SceneModel
from .scheduler import ManualScheduler, Scheduler
from .surface import CLICK, POINTER_ENTER, POINTER_LEAVE, DrawingSurface
from .tooltip import Formatter, TooltipController
from .validate import ValidationError, validate_adjacency, validate_parents

logger = logging.getLogger(__name__)


class ThreadArcs:
    """Thread arc diagram bound to one drawing surface.

    Give either ``adjacency`` (per node, the signed indices it links to) or
    ``parents`` (per node, the indices linking to it). ``options`` may be a
    :class:`ThreadArcsOptions` or a plain mapping.
    """

    def __init__(
        self,
        surface: DrawingSurface,
        nodes: Sequence[Any],
        adjacency: Optional[Iterable[Iterable[RawLink]]] = None,
        *,
        parents: Optional[Sequence[Sequence[int]]] = None,
        options: Union[ThreadArcsOptions, Mapping[str, Any], None] = None,
        formatter: Optional[Formatter] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        if (adjacency is None) == (parents is None):
            raise ValidationError("pass exactly one of 'adjacency' or 'parents'")
        if isinstance(options, ThreadArcsOptions):
            self.options = options.resolved()
        else:
            self.options = ThreadArcsOptions.from_mapping(options)

        nodes = list(nodes)
        if parents is not None:
            validate_parents(parents, len(nodes))
            links: Adjacency = from_parents(parents)
        else:
            links = normalize_adjacency(adjacency)
            validate_adjacency(links, len(nodes))

        self.surface = surface
        if hasattr(surface, "precision"):
            surface.precision = self.options.precision
        self.scheduler: Scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.formatter = formatter
        self.layout = LayoutEngine(nodes=nodes, graph=GraphIndex.build(links), options=self.options)
        self._build_scene()
        logger.info(
            "Created thread arcs for %d node(s), %d edge(s), max arc length %.2f",
            self.layout.size,
            self.layout.graph.edge_count,
            self.layout.max_arc_length,
        )

    def _build_scene(self) -> None:
        self.scene = SceneModel(self.surface, self.layout)
        self.highlighter = HighlightController(
            self.scene, self.scheduler, restore_delay=self.options.restore_delay
        )
        self.tooltip: Optional[TooltipController] = None
        if not self.options.disable_tooltip:
            self.tooltip = TooltipController(
                self.scene,
                self.highlighter,
                self.scheduler,
                formatter=self.formatter,
                fade_delay=self.options.fade_delay,
                hide_delay=self.options.hide_delay,
            )

    @property
    def nodes(self) -> List[Any]:
        return list(self.layout.nodes)

    @property
    def depths(self) -> List[int]:
        return list(self.layout.depths)

    @property
    def adjacency(self) -> List[List[Link]]:
        return [list(links) for links in self.layout.graph.adjacency]

    @property
    def signed_adjacency(self) -> List[List[int]]:
        return to_signed(self.layout.graph.adjacency)

    @property
    def parents(self) -> List[List[int]]:
        return [list(node_parents) for node_parents in self.layout.graph.parents]

    @property
    def order(self) -> List[int]:
        """Original index of the node shown at each position."""
        return list(self.layout.order)

    @property
    def active(self) -> List[int]:
        return list(self.highlighter.active)

    @property
    def width(self) -> float:
        return self.layout.width

    @property
    def height(self) -> float:
        return self.layout.height

    def _bind_point(self, index: int) -> None:
        handle = self.scene.points[index].handle
        self.surface.bind(handle, POINTER_ENTER, lambda: self.highlighter.pointer_enter(index))
        self.surface.bind(handle, POINTER_LEAVE, lambda: self.highlighter.pointer_leave(index))
        self.surface.bind(handle, CLICK, lambda: self.highlighter.toggle(index))

    def draw(self) -> "ThreadArcs":
        if self.scene.drawn:
            raise SceneError("diagram is already drawn")
        self.scene.draw_all()
        for point in self.scene.points:
            self._bind_point(point.index)
        if self.tooltip is not None:
            self.tooltip.attach()
        return self

    def sort(self, strategy: SortStrategy) -> "ThreadArcs":
        """Reorder the nodes; a drawn diagram is redrawn in the new order.

        ``strategy`` is ``"by-generation"``, ``"depth-zero-first"`` or an
        explicit permutation of the current node indices.
        """

        layout = self.layout.sort(strategy)
        was_drawn = self.scene.drawn
        if was_drawn:
            self.teardown()
        self.layout = layout
        self._build_scene()
        if was_drawn:
            self.draw()
        return self

    def teardown(self) -> None:
        """Remove everything this diagram drew from the surface."""

        self.highlighter.clear()
        if self.tooltip is not None:
            self.tooltip.detach()
        self.scene.clear()

    def highlight(self, index: int) -> "ThreadArcs":
        self.highlighter.highlight(index)
        return self

    def reset_highlighting(self) -> "ThreadArcs":
        self.highlighter.reset_highlighting()
        return self

    def activate(self, index: int) -> "ThreadArcs":
        self.highlighter.activate(index)
        return self

    def deactivate(self, index: int) -> "ThreadArcs":
        self.highlighter.deactivate(index)
        return self

    def show_active(self) -> "ThreadArcs":
        self.highlighter.show_active()
        return self

    def to_svg(self) -> str:
        to_svg = getattr(self.surface, "to_svg", None)
        if to_svg is None:
            raise TypeError(f"{type(self.surface).__name__} cannot serialise to SVG")
        return to_svg(self.width, self.height)
