from threadarcs import ManualScheduler, SvgSurface, ThreadArcs, ThreadArcsOptions
from threadarcs.graph import GraphIndex, Link
from threadarcs.highlight import HighlightController
from threadarcs.layout import LayoutEngine
from threadarcs.scene import SceneModel


def make_diagram(adjacency, **options):
    options.setdefault('disable_tooltip', True)
    scheduler = ManualScheduler()
    diagram = ThreadArcs(
        SvgSurface(),
        [f'n{i}' for i in range(len(adjacency))],
        adjacency,
        options=options,
        scheduler=scheduler,
    ).draw()
    return diagram, scheduler


def tags(diagram, item):
    return diagram.surface.classes(item.handle)


def depth_tags(diagram):
    found = []
    for item in [*diagram.scene.points, *diagram.scene.arcs]:
        found.extend(tag for tag in tags(diagram, item) if tag.startswith('depth') or tag == 'highlight')
    return found


def test_chain_descendant_depths():
    diagram, _ = make_diagram([[1], [2], [3], []])
    points, arcs = diagram.scene.points, diagram.scene.arcs

    diagram.highlight(0)

    assert [arc.descendant_depth for arc in arcs] == [0, 1, 2]
    assert [point.descendant_depth for point in points[1:]] == [0, 1, 2]
    assert points[0].descendant_depth == 8
    assert 'highlight' in tags(diagram, points[0])
    assert 'depth-0' in tags(diagram, arcs[0])
    assert 'depth-2' in tags(diagram, points[3])


def test_chain_predecessor_depths_use_own_tags():
    diagram, _ = make_diagram([[1], [2], [3], []])
    points, arcs = diagram.scene.points, diagram.scene.arcs

    diagram.highlight(3)

    assert [point.predecessor_depth for point in points] == [2, 1, 0, 8]
    assert [arc.predecessor_depth for arc in arcs] == [2, 1, 0]
    assert tags(diagram, points[0]) == ['point', 'p0', 'depth-m2']
    assert all(point.descendant_depth == 8 for point in points)


def test_middle_node_tags_both_directions():
    diagram, _ = make_diagram([[1], [2], []])
    points = diagram.scene.points

    diagram.highlight(1)

    assert points[0].predecessor_depth == 0
    assert points[2].descendant_depth == 0
    assert 'depth-m0' in tags(diagram, points[0])
    assert 'depth-0' in tags(diagram, points[2])


def test_closest_path_wins():
    diagram, _ = make_diagram([[1, 2], [2], []])
    points, arcs = diagram.scene.points, diagram.scene.arcs

    diagram.highlight(0)

    assert points[2].descendant_depth == 0
    assert [arc.descendant_depth for arc in arcs] == [0, 0, 1]
    assert tags(diagram, points[2]).count('depth-0') == 1
    assert 'depth-1' not in tags(diagram, points[2])


def test_second_highlight_only_lowers_depths():
    diagram, _ = make_diagram([[1], [2], [3], []])
    points = diagram.scene.points

    diagram.highlight(0)
    diagram.highlight(2)

    assert points[3].descendant_depth == 0
    assert 'depth-2' not in tags(diagram, points[3])
    assert 'depth-0' in tags(diagram, points[3])
    assert points[1].predecessor_depth == 0


def test_reset_restores_sentinel_and_removes_tags():
    diagram, _ = make_diagram([[1, 3], [2], [3], []])

    diagram.highlight(0)
    diagram.highlight(3)
    diagram.highlight(1)
    diagram.reset_highlighting()

    for item in [*diagram.scene.points, *diagram.scene.arcs]:
        assert item.descendant_depth == 8
        assert item.predecessor_depth == 8
    assert depth_tags(diagram) == []


def test_active_regions_are_united_and_recomputed():
    diagram, _ = make_diagram([[1], [2], [], [2]])
    points, arcs = diagram.scene.points, diagram.scene.arcs

    diagram.activate(0)
    diagram.activate(3)

    assert diagram.active == [0, 3]
    assert points[1].descendant_depth == 0
    assert points[2].descendant_depth == 0
    assert arcs[1].descendant_depth == 1

    diagram.deactivate(0)

    assert diagram.active == [3]
    assert points[2].descendant_depth == 0
    assert points[1].descendant_depth == 8
    assert arcs[0].descendant_depth == 8
    assert arcs[1].descendant_depth == 8
    assert 'active' not in tags(diagram, points[0])
    assert 'highlight' not in tags(diagram, points[0])
    assert 'active' in tags(diagram, points[3])


def test_activate_twice_keeps_single_entry():
    diagram, _ = make_diagram([[1], []])

    diagram.activate(1)
    diagram.activate(1)

    assert diagram.active == [1]


def test_hover_replaces_active_highlight_and_restores_it():
    diagram, scheduler = make_diagram([[1], [2], [3], []])
    points = diagram.scene.points
    diagram.activate(0)

    diagram.surface.dispatch(points[3].handle, 'enter')

    assert points[1].descendant_depth == 8
    assert points[0].predecessor_depth == 2
    assert 'highlight' in tags(diagram, points[3])

    diagram.surface.dispatch(points[3].handle, 'leave')

    assert depth_tags(diagram) == []
    assert scheduler.pending == 1

    scheduler.advance(0.2)
    assert points[1].descendant_depth == 8

    scheduler.advance(0.2)
    assert points[1].descendant_depth == 0
    assert 'highlight' in tags(diagram, points[0])


def test_entering_again_cancels_pending_restore():
    diagram, scheduler = make_diagram([[1], [2], []])
    points = diagram.scene.points
    diagram.activate(0)

    diagram.surface.dispatch(points[2].handle, 'leave')
    scheduler.advance(0.1)
    diagram.surface.dispatch(points[2].handle, 'enter')
    scheduler.advance(1.0)

    assert scheduler.pending == 0
    assert points[1].descendant_depth == 8
    assert points[1].predecessor_depth == 0


def test_custom_restore_delay():
    diagram, scheduler = make_diagram([[1], []], restore_delay=1.0)
    points = diagram.scene.points
    diagram.activate(0)

    diagram.surface.dispatch(points[1].handle, 'leave')
    scheduler.advance(0.5)
    assert points[1].descendant_depth == 8

    scheduler.advance(0.6)
    assert points[1].descendant_depth == 0


def test_click_toggles_activation():
    diagram, _ = make_diagram([[1], []])
    handle = diagram.scene.points[0].handle

    diagram.surface.dispatch(handle, 'click')
    assert diagram.active == [0]

    diagram.surface.dispatch(handle, 'click')
    assert diagram.active == []
    assert depth_tags(diagram) == []


def test_listeners_receive_events():
    diagram, _ = make_diagram([[1], []])
    events = []
    diagram.highlighter.subscribe(lambda event, index: events.append((event, index)))

    diagram.activate(1)
    diagram.surface.dispatch(diagram.scene.points[0].handle, 'enter')
    diagram.surface.dispatch(diagram.scene.points[0].handle, 'leave')
    diagram.deactivate(1)

    assert events == [('activate', 1), ('enter', 0), ('leave', 0), ('deactivate', 1)]


def test_restore_is_announced_for_last_active_node():
    diagram, scheduler = make_diagram([[1, 2], [], []])
    events = []
    diagram.highlighter.subscribe(lambda event, index: events.append((event, index)))
    diagram.activate(1)
    diagram.activate(2)

    diagram.surface.dispatch(diagram.scene.points[0].handle, 'enter')
    diagram.surface.dispatch(diagram.scene.points[0].handle, 'leave')
    scheduler.advance(0.3)

    assert events[-1] == ('restore', 2)


def test_restore_without_active_nodes_is_silent():
    diagram, scheduler = make_diagram([[1], []])
    events = []
    diagram.highlighter.subscribe(lambda event, index: events.append((event, index)))

    diagram.surface.dispatch(diagram.scene.points[0].handle, 'enter')
    diagram.surface.dispatch(diagram.scene.points[0].handle, 'leave')
    scheduler.advance(1.0)

    assert events == [('enter', 0), ('leave', 0)]


def test_highlight_terminates_on_cyclic_scene():
    graph = GraphIndex(
        adjacency=[[Link(1, 1)], [Link(0, 1)]],
        parents=[[1], [0]],
        depths=[0, 0],
        children=[1, 1],
    )
    layout = LayoutEngine(nodes=['a', 'b'], graph=graph, options=ThreadArcsOptions())
    scene = SceneModel(SvgSurface(), layout)
    scene.draw_all()
    controller = HighlightController(scene, ManualScheduler())

    controller.highlight(0)

    assert [(p.descendant_depth, p.predecessor_depth) for p in scene.points] == [(1, 1), (0, 0)]
    assert [(a.descendant_depth, a.predecessor_depth) for a in scene.arcs] == [(0, 1), (1, 0)]
