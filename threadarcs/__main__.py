import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from threadarcs import SvgSurface, ThreadArcs, ValidationError

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _parse_sort(value: Optional[str]) -> Optional[Union[str, List[int]]]:
    if not value:
        return None
    if "," in value or value.strip().isdigit():
        try:
            return [int(part) for part in value.split(",") if part.strip()]
        except ValueError:
            raise ValidationError(f"sort permutation must be comma separated integers, got {value!r}") from None
    return value


def load_thread(path: Union[str, Path]) -> Dict[str, Any]:
    with open(path, encoding="utf-8") as fin:
        data = json.load(fin)
    if not isinstance(data, dict) or "nodes" not in data:
        raise ValidationError(f"{path}: expected an object with a 'nodes' list")
    return data


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Render a thread arc diagram to SVG")
    parser.add_argument("path", help="Path to a JSON thread (nodes + adjacency or parents)")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--sort",
        help="by-generation, depth-zero-first or a comma separated permutation",
    )
    parser.add_argument(
        "--activate",
        type=int,
        action="append",
        default=[],
        help="Node index (after sorting) to pin as active; may be repeated",
    )
    parser.add_argument(
        "--orientation",
        choices=["horizontal", "vertical"],
        help="Override the orientation given in the thread options",
    )
    parser.add_argument(
        "--output",
        help="Write the SVG document to this path instead of stdout",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    logger.info("Loading thread from %s", args.path)
    data = load_thread(args.path)
    options = dict(data.get("options") or {})
    if args.orientation:
        options["orientation"] = args.orientation

    diagram = ThreadArcs(
        SvgSurface(),
        data["nodes"],
        data.get("adjacency"),
        parents=data.get("parents"),
        options=options,
        formatter=lambda node: str(node.get("title", node)) if isinstance(node, dict) else str(node),
    )

    strategy = _parse_sort(args.sort)
    if strategy is not None:
        diagram.sort(strategy)
    diagram.draw()
    for index in args.activate:
        diagram.activate(index)

    print(f"Order: {diagram.order}")
    print(f"Depths: {diagram.depths}")
    if args.activate:
        print(f"Active: {diagram.active}")

    svg = diagram.to_svg()
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing SVG document to %s", output_path)
        output_path.write_text(svg, encoding="utf-8")
        print(f"SVG written to {output_path}")
    else:
        sys.stdout.write(svg)


if __name__ == "__main__":
    main(sys.argv[1:])
