"""Example: hover and click a thread, stepping the virtual clock in between."""

from threadarcs import ManualScheduler, SvgSurface, ThreadArcs

NODES = [
    "Proposal: move the meeting",
    "Re: Proposal",
    "Re: Re: Proposal",
    "Separate question",
    "Re: Proposal (second reply)",
    "Re: Separate question",
]

# Signed targets: positive bows above the axis, negative below.
ADJACENCY = [[1, -4], [2], [], [5], [], []]


def main() -> None:
    scheduler = ManualScheduler()
    surface = SvgSurface()
    diagram = ThreadArcs(surface, NODES, ADJACENCY, scheduler=scheduler).draw()
    print(f"Depths: {diagram.depths}")

    first = diagram.scene.points[0].handle
    surface.dispatch(first, "click")
    print(f"Active after click: {diagram.active}")

    reply = diagram.scene.points[2].handle
    surface.dispatch(reply, "enter")
    print(f"Tooltip: {surface.get_attribute(diagram.tooltip.handle, 'content')!r}")
    surface.dispatch(reply, "leave")

    ran = scheduler.advance(1.0)
    print(f"Callbacks run after 1s: {ran}; tooltip visible: {diagram.tooltip.visible}")
    for point in diagram.scene.points:
        print(f"  p{point.index}: {' '.join(surface.classes(point.handle))}")


if __name__ == "__main__":
    main()
