import argparse
import logging
from typing import Optional, Union

from psdlite import PSDImage
from psdlite.api.layers import Layer
from psdlite.version import __version__

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="psdlite", description="Inspect and export layered PSD documents."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--encoding",
        default="macroman",
        help="Charset of layer and resource names (default: %(default)s).",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    export = commands.add_parser("export", help="Render the document or a layer")
    export.add_argument(
        "input_file", help="PSD file, with an optional layer index: file.psd[0]"
    )
    export.add_argument("output_file", help="Image file written by Pillow")

    show = commands.add_parser("show", help="Print the header, resources and layers")
    show.add_argument("input_file", help="PSD file")

    return parser.parse_args(argv)


def _split_index(spec: str) -> tuple[str, Optional[int]]:
    if spec.endswith("]") and "[" in spec:
        path, _, index = spec[:-1].rpartition("[")
        return path, int(index)
    return spec, None


def export(input_file: str, output_file: str, encoding: str) -> int:
    path, index = _split_index(input_file)
    psd = PSDImage.open(path, encoding=encoding)
    target: Union[PSDImage, Layer] = psd if index is None else psd[index]
    image = target.composite()
    if image is None:
        logger.error("%r has no pixels to export" % target)
        return 1
    image.save(output_file)
    logger.info("exported %r to %s" % (target, output_file))
    return 0


def show(input_file: str, encoding: str) -> int:
    psd = PSDImage.open(input_file, encoding=encoding)
    print(psd)
    resolution = psd.resolution
    if resolution is not None:
        print("resolution: %gx%g" % (resolution.horizontal, resolution.vertical))
    for item in psd.image_resources:
        print("resource %d %r" % (item.key, item.name))
    for index, layer in enumerate(psd):
        print("[%d] %s%r" % (index, "+" if layer.clipping else "", layer))
    return 0


def main(argv: Optional[list[str]] = None) -> Optional[int]:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.command == "export":
        status = export(args.input_file, args.output_file, args.encoding)
    else:
        status = show(args.input_file, args.encoding)
    return status or None


if __name__ == "__main__":
    raise SystemExit(main())
