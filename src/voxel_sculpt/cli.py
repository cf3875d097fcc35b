"""
Command-Line Interface for voxel_sculpt

Usage:
    voxsculpt --union cube:8,8,8:40,40,40 --stats
    voxsculpt --union sphere:32,32,32:20 --difference cube:32,0,0:64,63,63 -o half.obj
    voxsculpt --union cube:0,0,0:64,63,63 --capacity 65536

"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from .config import UPLOAD_BUFFER_SIZE
from .document import BlendMode, Document
from .exporters import OBJExporter
from .logging_config import setup_logging
from .surface_mesh import mesh_stats
from .upload import UploadBuffers

logger = logging.getLogger(__name__)

Shape = Tuple[str, tuple]


def _parse_triple(text: str, kind=int) -> tuple:
    parts = text.split(",")
    if len(parts) != 3:
        raise ValueError(f"expected three comma-separated values, got {text!r}")
    return tuple(kind(p) for p in parts)


def parse_shape(text: str) -> Shape:
    """
    Parse a primitive description.

    Formats:
        cube:X0,Y0,Z0:X1,Y1,Z1   (x half-open, y and z inclusive)
        sphere:X,Y,Z:R

    Returns:
        ("cube", (min, max)) or ("sphere", (center, radius))
    """
    try:
        kind, first, second = text.split(":")
        if kind == "cube":
            return "cube", (_parse_triple(first), _parse_triple(second))
        if kind == "sphere":
            return "sphere", (_parse_triple(first), float(second))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid shape {text!r}: {e}")
    raise argparse.ArgumentTypeError(f"unknown shape kind {kind!r} (use cube or sphere)")


def _union_shape(text: str) -> Tuple[BlendMode, Shape]:
    return BlendMode.UNION, parse_shape(text)


def _difference_shape(text: str) -> Tuple[BlendMode, Shape]:
    return BlendMode.DIFFERENCE, parse_shape(text)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="voxsculpt",
        description="Compose a layered 64³ voxel volume and extract its surface mesh",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Shapes:
  cube:X0,Y0,Z0:X1,Y1,Z1   Box with x in [X0, X1), y in [Y0, Y1], z in [Z0, Z1]
  sphere:X,Y,Z:R           Ball of radius R around voxel (X, Y, Z)

Each --union / --difference adds one layer; layers are folded in the
order they appear on the command line.

Examples:
  voxsculpt --union sphere:32,32,32:20 --stats
      Mesh a single sphere and print statistics

  voxsculpt --union cube:8,8,8:56,55,55 --difference sphere:32,32,32:22 -o shell.obj
      Carve a ball out of a box and export the result
        """
    )

    parser.add_argument(
        "--union",
        dest="layers",
        action="append",
        type=_union_shape,
        metavar="SHAPE",
        help="Add a layer that unions SHAPE into the composite"
    )

    parser.add_argument(
        "--difference",
        dest="layers",
        action="append",
        type=_difference_shape,
        metavar="SHAPE",
        help="Add a layer that removes SHAPE from the composite"
    )

    parser.add_argument(
        "-o", "--output",
        help="Write the extracted mesh to this OBJ file"
    )

    parser.add_argument(
        "--scale",
        type=float,
        default=1.0,
        help="Output scale factor for OBJ export (default: 1.0)"
    )

    parser.add_argument(
        "--capacity",
        type=int,
        default=UPLOAD_BUFFER_SIZE,
        help=f"Upload buffer capacity in bytes (default: {UPLOAD_BUFFER_SIZE})"
    )

    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print mesh statistics"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose (debug) logging"
    )

    parser.add_argument(
        "--log-file",
        help="Also write log output to this file"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0"
    )

    return parser


def build_document(layers: List[Tuple[BlendMode, Shape]]) -> Document:
    """Create one document layer per command-line shape."""
    doc = Document()
    for i, (blend_mode, (kind, params)) in enumerate(layers):
        layer = doc.add_layer(f"{kind}_{i}", blend_mode)
        if kind == "cube":
            layer.volume.paint_cube(*params)
        else:
            layer.volume.paint_sphere(*params)
    return doc


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    if not args.layers:
        print("Error: No layers specified (use --union or --difference)", file=sys.stderr)
        return 1

    start_time = time.time()

    try:
        doc = build_document(args.layers)
        mesh = doc.generate_mesh()

        if args.stats or args.verbose:
            stats = mesh_stats(mesh)
            print("\nMesh Statistics:")
            print(f"  Layers: {len(doc)}")
            print(f"  Voxels: {doc.composite().count_voxels()}")
            print(f"  Vertices: {stats['vertices']}")
            print(f"  Triangles: {stats['triangles']}")
            print(f"  Vertex buffer: {stats['vertex_bytes']} bytes")
            print(f"  Index buffer: {stats['index_bytes']} bytes")

        UploadBuffers(args.capacity).check(mesh)

        if args.output:
            output_path = Path(args.output)
            OBJExporter(scale=args.scale).export(mesh, output_path)
            logger.info("Exported: %s", output_path)

        elapsed = time.time() - start_time
        logger.info("Completed in %.2fs", elapsed)

        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.debug("Failure details", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
