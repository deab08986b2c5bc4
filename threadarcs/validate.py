import numbers
from typing import Any, List, Sequence

from .graph import Adjacency


class ValidationError(ValueError):
    pass


def validate_adjacency(adjacency: Adjacency, node_count: int) -> None:
    if len(adjacency) != node_count:
        raise ValidationError(
            f'adjacency lists {len(adjacency)} node(s) but {node_count} node payload(s) were given'
        )
    for source, links in enumerate(adjacency):
        for link in links:
            if not 0 <= link.target < node_count:
                raise ValidationError(
                    f'node {source} links to {link.target}, expected an index in 0..{node_count - 1}'
                )


def validate_parents(parents: Sequence[Sequence[int]], node_count: int) -> None:
    if len(parents) != node_count:
        raise ValidationError(
            f'parent lists cover {len(parents)} node(s) but {node_count} node payload(s) were given'
        )
    for child, node_parents in enumerate(parents):
        for parent in node_parents:
            if isinstance(parent, bool) or not isinstance(parent, numbers.Integral):
                raise ValidationError(f'node {child} has non-integer parent {parent!r}')
            if not 0 <= parent < node_count:
                raise ValidationError(
                    f'node {child} names parent {parent}, expected an index in 0..{node_count - 1}'
                )


def validate_permutation(order: Sequence[Any], node_count: int) -> List[int]:
    """Check that ``order`` is a bijection over ``0..node_count-1``."""

    if len(order) != node_count:
        raise ValidationError(f'permutation has {len(order)} entries, expected {node_count}')
    result: List[int] = []
    seen = set()
    for value in order:
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise ValidationError(f'permutation entries must be integers, got {value!r}')
        if not 0 <= value < node_count:
            raise ValidationError(f'permutation entry {value} outside 0..{node_count - 1}')
        if int(value) in seen:
            raise ValidationError(f'permutation repeats index {value}')
        seen.add(int(value))
        result.append(int(value))
    return result
