from . import ManualScheduler, SvgSurface, ThreadArcs

NODES = [
    "Proposal: move the meeting",
    "Re: Proposal",
    "Re: Re: Proposal",
    "Separate question",
    "Re: Proposal (second reply)",
    "Re: Separate question",
]

ADJACENCY = [[1, 4], [2], [], [5], [], []]


def run():
    scheduler = ManualScheduler()
    diagram = ThreadArcs(SvgSurface(), NODES, ADJACENCY, scheduler=scheduler)
    print(f"Depths: {diagram.depths}")

    diagram.sort("by-generation").draw()
    print(f"Order after sorting: {diagram.order}")
    print(f"Links: {diagram.signed_adjacency}")

    diagram.activate(0)
    print(f"Active: {diagram.active}")
    print(diagram.to_svg())


if __name__ == "__main__":
    run()
