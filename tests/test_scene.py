import numpy as np
import pytest

from threadarcs.graph import DOWN, GraphIndex
from threadarcs.layout import LayoutEngine
from threadarcs.options import ThreadArcsOptions
from threadarcs.scene import SceneError, SceneModel
from threadarcs.surface import SvgSurface


def make_scene(adjacency):
    layout = LayoutEngine(
        nodes=list(range(len(adjacency))),
        graph=GraphIndex.build(adjacency),
        options=ThreadArcsOptions(),
    )
    return SceneModel(SvgSurface(), layout)


def test_draw_creates_points_and_arcs():
    scene = make_scene([[1, 2], [2], []])

    scene.draw_all()

    assert [point.position for point in scene.points] == [20.0, 60.0, 100.0]
    assert [(arc.source, arc.target) for arc in scene.arcs] == [(0, 1), (0, 2), (1, 2)]
    assert scene.points[0].arcs_out == [0, 1]
    assert scene.points[2].arcs_in == [1, 2]
    assert scene.points[1].arcs_in == [0]
    assert scene.points[1].arcs_out == [2]


def test_points_stack_above_arcs():
    scene = make_scene([[1, 2], [2], []])

    scene.draw_all()

    point_handles = [point.handle for point in scene.points]
    arc_handles = [arc.handle for arc in scene.arcs]
    assert scene.surface.stack == arc_handles + point_handles


def test_draw_tags_points_and_arcs():
    scene = make_scene([[1], []])

    scene.draw_all()

    surface = scene.surface
    assert surface.classes(scene.points[1].handle) == ['point', 'p1']
    assert surface.classes(scene.arcs[0].handle) == ['arc', 'arc-p0', 'arc-p1']
    assert surface.get_attribute(scene.points[1].handle, 'cx') == 60.0
    assert surface.get_attribute(scene.arcs[0].handle, 'd') == 'M20 102.5 C20 200 60 200 60 102.5'


def test_draw_arcs_from_point_is_idempotent():
    scene = make_scene([[1, 2], [2], []])
    scene.draw_all()
    elements = len(scene.surface.elements)

    assert scene.draw_arcs_from_point(0) == []
    assert scene.draw_arcs_from_point(1) == []
    assert len(scene.arcs) == 3
    assert len(scene.surface.elements) == elements
    assert scene.points[0].arcs_out == [0, 1]


def test_direction_override():
    scene = make_scene([[1], []])
    for position in scene.layout.positions():
        scene.add_point(position)

    (arc,) = scene.draw_arcs_from_point(0, direction=DOWN)

    assert arc.direction == DOWN
    assert arc.geometry.height == 0.0
    assert scene.draw_arcs_from_point(0, direction=DOWN) == []


def test_fresh_items_carry_unset_sentinel():
    scene = make_scene([[1], [2], []])

    scene.draw_all()

    assert scene.unset_depth == 6
    for item in [*scene.points, *scene.arcs]:
        assert item.descendant_depth == 6
        assert item.predecessor_depth == 6


def test_second_draw_is_rejected():
    scene = make_scene([[1], []])
    scene.draw_all()

    with pytest.raises(SceneError):
        scene.draw_all()


def test_clear_removes_everything():
    scene = make_scene([[1], []])
    scene.draw_all()

    scene.clear()

    assert scene.points == []
    assert scene.arcs == []
    assert scene.surface.elements == {}
    scene.draw_all()
    assert len(scene.surface.elements) == 3


def test_unknown_point_raises_scene_error():
    scene = make_scene([[1], []])

    with pytest.raises(SceneError):
        scene.point(0)


def test_draw_all_takes_heights_from_batched_computation(monkeypatch):
    scene = make_scene([[1, -3], [2], [], []])
    monkeypatch.setattr(scene.layout, 'arc_heights', lambda: np.array([150.0, 50.0, 175.0]))

    scene.draw_all()

    assert [(arc.source, arc.target) for arc in scene.arcs] == [(0, 1), (0, 3), (1, 2)]
    assert [arc.geometry.height for arc in scene.arcs] == [150.0, 50.0, 175.0]
    assert scene.surface.get_attribute(scene.arcs[1].handle, 'd') == 'M20 97.5 C20 50 140 50 140 97.5'


def test_batched_heights_match_per_arc_geometry():
    scene = make_scene([[1, -3], [2], [], []])

    scene.draw_all()

    expected = [
        scene.layout.arc_geometry(scene.points[arc.source].position, scene.points[arc.target].position, arc.direction)
        for arc in scene.arcs
    ]
    for arc, geometry in zip(scene.arcs, expected):
        assert arc.geometry.height == pytest.approx(geometry.height)
        assert arc.geometry.start == geometry.start
