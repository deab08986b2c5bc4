"""Graph indexing for thread arcs: links, parent lists and node depths."""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, NamedTuple, Sequence, Tuple, Union

from .logging_utils import apply_debug_logging

logger = logging.getLogger(__name__)

UP = 1
DOWN = -1


class GraphError(ValueError):
    """Raised when the link structure of a thread is inconsistent."""


class CycleError(GraphError):
    """Raised when depth computation runs into a cycle."""

    def __init__(self, cycle: Sequence[int]):
        self.cycle = list(cycle)
        path = " -> ".join(str(idx) for idx in self.cycle)
        super().__init__(f"thread graph contains a cycle: {path}")


class Link(NamedTuple):
    """Outgoing link of a node: target index and arc direction (+1 / -1)."""

    target: int
    direction: int = UP


RawLink = Union[int, Link, Tuple[int, int]]
Adjacency = List[List[Link]]
Parents = List[List[int]]


def _as_link(value: RawLink) -> Link:
    if isinstance(value, Link):
        return Link(int(value.target), DOWN if value.direction < 0 else UP)
    if isinstance(value, tuple):
        target, direction = value
        return Link(int(target), DOWN if direction < 0 else UP)
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise GraphError(f"link must be an int or (target, direction) pair, got {value!r}")
    # A zero target cannot carry a sign and is always drawn upwards.
    return Link(abs(int(value)), DOWN if value < 0 else UP)


def normalize_adjacency(raw: Iterable[Iterable[RawLink]]) -> Adjacency:
    """Convert signed-integer (or mixed) adjacency input into ``Link`` lists."""

    return [[_as_link(value) for value in links] for links in raw]


def to_signed(adjacency: Sequence[Sequence[Link]]) -> List[List[int]]:
    """Return the signed-integer form; direction of links to node 0 is lost."""

    return [[link.direction * link.target for link in links] for links in adjacency]


def iter_edges(adjacency: Sequence[Sequence[Link]]) -> Iterator[Tuple[int, int, int]]:
    for source, links in enumerate(adjacency):
        for link in links:
            yield source, link.target, link.direction


def invert(adjacency: Sequence[Sequence[Link]]) -> Parents:
    """Return the parent list of every node.

    ``parents[j]`` lists every ``i`` with an edge ``i -> j``, in the order the
    edges appear in ``adjacency``.
    """

    count = len(adjacency)
    parents: Parents = [[] for _ in range(count)]
    for source, target, _direction in iter_edges(adjacency):
        if not 0 <= target < count:
            raise GraphError(f"node {source} links to unknown node {target} (have {count} nodes)")
        parents[target].append(source)
    return parents


def from_parents(parents: Sequence[Sequence[int]]) -> Adjacency:
    """Derive forward adjacency from parent lists; every link points up."""

    count = len(parents)
    adjacency: Adjacency = [[] for _ in range(count)]
    for child, node_parents in enumerate(parents):
        for parent in node_parents:
            if not 0 <= parent < count:
                raise GraphError(f"node {child} names unknown parent {parent} (have {count} nodes)")
            adjacency[parent].append(Link(child, UP))
    return adjacency


_UNVISITED = 0
_IN_PROGRESS = 1
_DONE = 2


def compute_depths(parents: Sequence[Sequence[int]]) -> List[int]:
    """Depth of every node: 0 without parents, else ``1 + min(parent depths)``.

    Nodes may appear in any index order. Evaluation is a memoised depth-first
    walk over an explicit stack; each node is resolved once. Meeting a node
    that is still in progress means the graph has a cycle.
    """

    count = len(parents)
    state = [_UNVISITED] * count
    depths = [0] * count

    for root in range(count):
        if state[root] == _DONE:
            continue
        state[root] = _IN_PROGRESS
        # (node, position of the next parent to inspect)
        stack: List[List[int]] = [[root, 0]]
        while stack:
            frame = stack[-1]
            node, cursor = frame
            node_parents = parents[node]
            if cursor < len(node_parents):
                frame[1] += 1
                parent = node_parents[cursor]
                if not 0 <= parent < count:
                    raise GraphError(f"node {node} names unknown parent {parent} (have {count} nodes)")
                if state[parent] == _IN_PROGRESS:
                    trail = [entry[0] for entry in stack]
                    start = trail.index(parent)
                    # Parents were followed upwards; report the cycle in link order.
                    raise CycleError(list(reversed(trail[start:])) + [trail[-1]])
                if state[parent] == _UNVISITED:
                    state[parent] = _IN_PROGRESS
                    stack.append([parent, 0])
                continue
            if node_parents:
                depths[node] = 1 + min(depths[parent] for parent in node_parents)
            state[node] = _DONE
            stack.pop()
    return depths


def count_children(adjacency: Sequence[Sequence[Link]]) -> List[int]:
    return [len(links) for links in adjacency]


def count_parents(parents: Sequence[Sequence[int]]) -> List[int]:
    return [len(node_parents) for node_parents in parents]


def arc_spans(adjacency: Sequence[Sequence[Link]]) -> List[int]:
    """Index distance ``|target - source|`` of every edge."""

    return [abs(target - source) for source, target, _ in iter_edges(adjacency)]


@dataclass
class GraphIndex:
    """Adjacency together with everything derived from it."""

    adjacency: Adjacency
    parents: Parents = field(default_factory=list)
    depths: List[int] = field(default_factory=list)
    children: List[int] = field(default_factory=list)
    parent_counts: List[int] = field(default_factory=list)

    @classmethod
    def build(cls, adjacency: Iterable[Iterable[RawLink]]) -> "GraphIndex":
        links = normalize_adjacency(adjacency)
        parents = invert(links)
        depths = compute_depths(parents)
        index = cls(
            adjacency=links,
            parents=parents,
            depths=depths,
            children=count_children(links),
            parent_counts=count_parents(parents),
        )
        logger.debug(
            "Indexed thread graph: %d node(s), %d edge(s), max depth %s",
            len(links),
            index.edge_count,
            max(depths) if depths else None,
        )
        return index

    @classmethod
    def from_parents(cls, parents: Sequence[Sequence[int]]) -> "GraphIndex":
        return cls.build(from_parents(parents))

    @property
    def size(self) -> int:
        return len(self.adjacency)

    @property
    def edge_count(self) -> int:
        return sum(self.children)

    def edges(self) -> Iterator[Tuple[int, int, int]]:
        return iter_edges(self.adjacency)


apply_debug_logging(globals(), logger=logger, skip={"Link", "GraphError", "CycleError", "iter_edges"})
