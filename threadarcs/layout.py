"""Linear node layout, arc curvature and node orderings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple, Union

import numpy as np

from .graph import DOWN, UP, Adjacency, GraphIndex, Link, arc_spans
from .logging_utils import apply_debug_logging
from .options import ThreadArcsOptions
from .validate import ValidationError, validate_permutation

logger = logging.getLogger(__name__)

Coord = Tuple[float, float]

BY_GENERATION = "by-generation"
DEPTH_ZERO_FIRST = "depth-zero-first"
SORT_STRATEGIES = (BY_GENERATION, DEPTH_ZERO_FIRST)

SortStrategy = Union[str, Sequence[int]]


@dataclass(frozen=True)
class ArcGeometry:
    """Symmetric cubic bow between two points on the axis.

    Both control points share the off-axis coordinate ``height``.
    """

    start: Coord
    control1: Coord
    control2: Coord
    end: Coord
    direction: int
    height: float


def order_by_generation(depths: Sequence[int], children: Sequence[int]) -> List[int]:
    """Older generations first, then nodes with more children; stable otherwise."""

    return sorted(range(len(depths)), key=lambda idx: (depths[idx], -children[idx]))


def order_depth_zero_first(depths: Sequence[int]) -> List[int]:
    """Move roots to the front, each inserted ahead of the ones seen before it."""

    order: List[int] = []
    for idx, depth in enumerate(depths):
        if depth == 0:
            order.insert(0, idx)
        else:
            order.append(idx)
    return order


def generation_direction(depth: int) -> int:
    """Arc side for links leaving a node at ``depth``: odd up, even down."""

    return UP if depth % 2 else DOWN


def permute_adjacency(adjacency: Adjacency, depths: Sequence[int], order: Sequence[int]) -> Adjacency:
    """Re-express ``adjacency`` in the index space given by ``order``.

    ``order[k]`` is the old index of the node placed at ``k``. Link directions
    alternate by the generation of the source node.
    """

    new_index = [0] * len(order)
    for position, old in enumerate(order):
        new_index[old] = position
    permuted: Adjacency = []
    for old in order:
        direction = generation_direction(depths[old])
        permuted.append([Link(new_index[link.target], direction) for link in adjacency[old]])
    return permuted


@dataclass
class LayoutEngine:
    """Positions and arc geometry for one ordering of the thread."""

    nodes: List[Any]
    graph: GraphIndex
    options: ThreadArcsOptions
    order: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.options = self.options.resolved()
        if not self.order:
            self.order = list(range(len(self.nodes)))
        spans = arc_spans(self.graph.adjacency)
        self._max_span = int(np.max(spans)) if spans else 0

    @property
    def size(self) -> int:
        return len(self.nodes)

    @property
    def depths(self) -> List[int]:
        return self.graph.depths

    @property
    def axis_pos(self) -> float:
        return float(self.options.axis_pos)

    @property
    def max_arc_length(self) -> float:
        return float(self._max_span * self.options.space)

    @property
    def axis_length(self) -> float:
        return self.options.space * max(self.size - 1, 0) + 2 * self.options.padding

    @property
    def width(self) -> float:
        if self.options.is_vertical:
            return float(self.options.size)
        return float(self.axis_length)

    @property
    def height(self) -> float:
        if self.options.is_vertical:
            return float(self.axis_length)
        return float(self.options.size)

    def positions(self) -> np.ndarray:
        return self.options.padding + np.arange(self.size, dtype=float) * self.options.space

    def position(self, index: int) -> float:
        if not 0 <= index < self.size:
            raise IndexError(f"node index {index} out of range for {self.size} node(s)")
        return float(self.options.padding + index * self.options.space)

    def xy(self, pos: float) -> Coord:
        if self.options.is_vertical:
            return (self.axis_pos, float(pos))
        return (float(pos), self.axis_pos)

    def arc_height(self, pos_a: float, pos_b: float, direction: int = UP) -> float:
        if self.max_arc_length <= 0:
            return self.axis_pos
        relative = abs(pos_b - pos_a) / self.max_arc_length
        bow = relative ** self.options.lambda_ * self.options.max_arc_height
        return self.axis_pos + direction * bow

    def arc_heights(self) -> np.ndarray:
        """Curve height of every edge, in adjacency order."""

        edges = list(self.graph.edges())
        if not edges or self.max_arc_length <= 0:
            return np.full(len(edges), self.axis_pos)
        table = np.array(edges, dtype=float)
        spans = np.abs(table[:, 1] - table[:, 0]) * self.options.space
        bows = np.power(spans / self.max_arc_length, self.options.lambda_) * self.options.max_arc_height
        return self.axis_pos + table[:, 2] * bows

    def arc_geometry(
        self, pos_a: float, pos_b: float, direction: int = UP, height: Optional[float] = None
    ) -> ArcGeometry:
        """Curve between two axis positions; ``height`` skips the recomputation."""

        height = self.arc_height(pos_a, pos_b, direction) if height is None else float(height)
        off_axis = self.axis_pos + direction * self.options.radius / 2

        def point(along: float, across: float) -> Coord:
            if self.options.is_vertical:
                return (float(across), float(along))
            return (float(along), float(across))

        return ArcGeometry(
            start=point(pos_a, off_axis),
            control1=point(pos_a, height),
            control2=point(pos_b, height),
            end=point(pos_b, off_axis),
            direction=direction,
            height=height,
        )

    def sorted_order(self, strategy: SortStrategy) -> List[int]:
        if isinstance(strategy, str):
            if strategy == BY_GENERATION:
                return order_by_generation(self.graph.depths, self.graph.children)
            if strategy == DEPTH_ZERO_FIRST:
                return order_depth_zero_first(self.graph.depths)
            raise ValidationError(
                f"unknown sort strategy {strategy!r}; expected one of {', '.join(SORT_STRATEGIES)} or a permutation"
            )
        return validate_permutation(list(strategy), self.size)

    def sort(self, strategy: SortStrategy) -> "LayoutEngine":
        """Return the layout of the thread reordered by ``strategy``."""

        order = self.sorted_order(strategy)
        adjacency = permute_adjacency(self.graph.adjacency, self.graph.depths, order)
        engine = LayoutEngine(
            nodes=[self.nodes[old] for old in order],
            graph=GraphIndex.build(adjacency),
            options=self.options,
            order=[self.order[old] for old in order],
        )
        logger.info(
            "Reordered %d node(s) by %s",
            self.size,
            strategy if isinstance(strategy, str) else "explicit permutation",
        )
        return engine


apply_debug_logging(globals(), logger=logger, skip={"ArcGeometry", "generation_direction"})
