import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from diagram_vis import generate_tikz_document
from diagram_vis.demo import roundabout_scene, roundabout_theme, simple_demo_scene

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Render the demo diagram scenes as TikZ")
    parser.add_argument(
        "--scene",
        choices=["roundabout", "simple"],
        default="roundabout",
        help="Demo scene to render (default: roundabout)",
    )
    parser.add_argument(
        "--theme",
        dest="variation",
        help="Theme variation to switch to, e.g. dark",
    )
    parser.add_argument(
        "--amount",
        type=float,
        help="Advance a gradual variation switch by this amount instead of switching at once",
    )
    parser.add_argument(
        "-W",
        "--width",
        type=float,
        help="Fit the scene into an output area of this width (canvas units)",
    )
    parser.add_argument(
        "-H",
        "--height",
        type=float,
        help="Fit the scene into an output area of this height (canvas units)",
    )
    parser.add_argument(
        "--margin",
        type=float,
        default=10.0,
        help="Output margin used together with --width/--height (default: 10)",
    )
    parser.add_argument(
        "--all-layers",
        action="store_true",
        help="Render hidden layers and groups too",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Write the LaTeX document here instead of stdout",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )

    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    theme = roundabout_theme()
    scene = simple_demo_scene(theme) if args.scene == "simple" else roundabout_scene(theme)

    if args.variation:
        if args.amount is not None:
            theme.start_variation([args.variation])
            theme.step_variation(args.amount)
        else:
            theme.use_variation([args.variation])

    root_transform = None
    if args.width or args.height:
        width, height = scene.get_size()
        out_size = (args.width or width, args.height or height)
        root_transform = scene.fit_transform(out_size, (args.margin, args.margin))
        logger.info("Fitting scene into %s with margin %s", out_size, args.margin)

    document = generate_tikz_document(
        scene,
        theme,
        title=args.scene,
        root_transform=root_transform,
        visible_only=not args.all_layers,
    )

    if args.output:
        Path(args.output).write_text(document, encoding="utf-8")
        logger.info("Wrote %s", args.output)
    else:
        sys.stdout.write(document)


if __name__ == "__main__":
    main()
