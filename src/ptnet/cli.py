import argparse
import sys
import os
import logging

import ptnet

from ptnet import PetriNetViewer
from ptnet.exceptions import ExportError, NetDefinitionError
from ptnet.exporter import EXPORTERS

logger = logging.getLogger("ptnet.cli")

IMAGE_FORMATS = ("png", "svg")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ptnet", description="ptnet: Place/Transition net exporter")
    parser.add_argument("file", help="Path to the net description file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Sub-commands")

    # --- Export Command ---
    exp_p = subparsers.add_parser("export", help="Export net to various formats")
    exp_p.add_argument("--format", choices=[*EXPORTERS, *IMAGE_FORMATS], required=True)
    exp_p.add_argument("-o", "--output", help="Output filename (default: standard output)")

    # --- Inspect Command ---
    subparsers.add_parser("inspect", help="Print a summary of the net")

    return parser


def export(net, fmt: str, output):
    if fmt in IMAGE_FORMATS:
        if not output:
            raise ExportError(f"The {fmt} format needs an output file (-o)")
        viewer = PetriNetViewer(net)
        if fmt == "png":
            viewer.save_png(output)
        else:
            viewer.save_svg(output)
        return

    writer = EXPORTERS[fmt]
    if not output:
        writer(net, sys.stdout.buffer)
        sys.stdout.buffer.flush()
        return
    try:
        with open(output, "wb") as f:
            writer(net, f)
    except OSError as e:
        raise ExportError(f"Could not open {output}: {e}") from e


def inspect(net):
    print(net)
    print(f"Places: {net.get_cardinality_places()}")
    print(f"Transitions: {net.get_cardinality_transitions()}")
    arcs = len(net.find_arcs_place_transition()) + len(net.find_arcs_transition_place())
    print(f"Arcs: {arcs}")
    unconnected = sorted(net.find_unconnected_places())
    if unconnected:
        print(f"Unconnected places: {', '.join(str(p) for p in unconnected)}")


def main(argv=None) -> int:
    # Configure logging to show up in the console when running the CLI
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger("ptnet").setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled.")

    if not os.path.exists(args.file):
        logger.error(f"File '{args.file}' not found.")
        return 1

    try:
        net = ptnet.compile_file(args.file)
        logger.info(f"Compiled {args.file} successfully.")
    except NetDefinitionError as e:
        logger.error(f"Compilation Error: {e}")
        return 1

    if args.command == "export":
        logger.info(f"Exporting net to {args.format} format.")
        try:
            export(net, args.format, args.output)
        except ExportError as e:
            logger.error(f"Export Error: {e}")
            return 1
        if args.output:
            logger.info(f"Exported to {args.output}")

    elif args.command == "inspect":
        inspect(net)

    return 0


if __name__ == "__main__":
    sys.exit(main())
