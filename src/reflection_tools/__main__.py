import argparse
import logging
from typing import Optional

from reflection_tools.api.image import SourceImage
from reflection_tools.api.options import OptionsStore, RenderOptions
from reflection_tools.api.output import OutputSurfaceManager
from reflection_tools.api.preview import PreviewSurfaceManager
from reflection_tools.constants import (
    DEFAULT_OFFSET,
    DEFAULT_OPACITY,
    DEFAULT_ORIENTATION,
    Orientation,
)
from reflection_tools.exceptions import AssetError
from reflection_tools.version import __version__

logger = logging.getLogger(__name__)


def _size(value: str) -> tuple[int, int]:
    try:
        width, height = (int(x) for x in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError("Expected WIDTHxHEIGHT: %r" % value)
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError("Size must be positive: %r" % value)
    return width, height


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="reflection-tools command line utility."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Be more verbose.")
    parser.add_argument("--version", action="version", version=__version__)

    options_parser = argparse.ArgumentParser(add_help=False)
    options_parser.add_argument(
        "--orientation",
        type=Orientation.parse,
        default=DEFAULT_ORIENTATION,
        help="Reflecting edge: above, below, left or right (default: below).",
    )
    options_parser.add_argument(
        "--opacity", type=int, default=DEFAULT_OPACITY, help="Opacity, 0-100."
    )
    options_parser.add_argument(
        "--offset", type=int, default=DEFAULT_OFFSET, help="Fade extent, 0-100."
    )
    options_parser.add_argument("input_file", help="Input image file")
    options_parser.add_argument("output_file", help="Output image file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser(
        "export", parents=[options_parser], help="Export at full resolution"
    )
    export_parser.add_argument(
        "--reference",
        type=_size,
        default=None,
        help="Preview surface size WIDTHxHEIGHT (default: image size).",
    )

    preview_parser = subparsers.add_parser(
        "preview", parents=[options_parser], help="Render the preview surface"
    )
    preview_parser.add_argument(
        "--container",
        type=_size,
        default=(320, 240),
        help="Preview container size WIDTHxHEIGHT (default: 320x240).",
    )

    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> Optional[int]:
    args = parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    if args.verbose:
        logging.getLogger("reflection_tools").setLevel(logging.DEBUG)
    else:
        logging.getLogger("reflection_tools").setLevel(logging.INFO)

    try:
        image = SourceImage.open(args.input_file)
    except AssetError as e:
        logger.error(str(e))
        return 1
    options = RenderOptions(
        opacity=args.opacity, offset=args.offset, orientation=args.orientation
    )

    if args.command == "export":
        reference = args.reference or image.size
        result = OutputSurfaceManager().render(image, options, reference)
        result.save(args.output_file)

    elif args.command == "preview":
        preview = PreviewSurfaceManager(OptionsStore(options), image)
        preview.resize(*args.container)
        result = preview.topil()
        if result is None:
            logger.error("Preview is not available")
            return 1
        result.save(args.output_file)

    return None


if __name__ == "__main__":
    main()
