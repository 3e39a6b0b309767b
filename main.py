"""Command line entry point: extrude an outline, sweep or revolve it, export the mesh."""

import sys
import argparse
import logging

import trimesh

from extrusion import extrude
from mesh.mesh_config import DEFAULT_REVOLVE_DEGREES, DEFAULT_SLICES
from sweep.sweep_assembler import SweepAssembler

logger = logging.getLogger("polysweep")


def _parse_points(text: str):
    """'0,0 1,0 1,1' -> [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]"""
    return [tuple(float(c) for c in pair.split(",")) for pair in text.split()]


def _parse_vector(text: str):
    vals = tuple(float(c) for c in text.split(","))
    if len(vals) != 3:
        raise argparse.ArgumentTypeError(f"expected x,y,z got {text!r}")
    return vals


def _export(solids, output_path: str) -> None:
    meshes = [s.to_trimesh() for s in solids if s is not None]
    if not meshes:
        raise RuntimeError("nothing to export")
    mesh = trimesh.util.concatenate(meshes) if len(meshes) > 1 else meshes[0]
    mesh.export(output_path)
    logger.info("Wrote %d faces to %s", len(mesh.faces), output_path)


def main():
    """Build the requested solid and write it to --output."""
    parser = argparse.ArgumentParser(
        description="polysweep - extrude simple polygons and sweep cross-sections into meshes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s extrude --points "0,0 2,0 2,1 1,1 1,2 0,2" --output l.stl
  %(prog)s linear  --points "0,0 1,0 0,1" --end 5,5,5 --slices 8 --output tube.stl
  %(prog)s revolve --points "0,0 1,0 0,1" --radius 10 --slices 24 --output ring.stl
        """
    )

    parser.add_argument(
        "operation",
        choices=["extrude", "linear", "revolve"],
        help="'extrude' a single outline, sweep it along a 'linear' path, or 'revolve' it about z"
    )

    parser.add_argument(
        "--points",
        required=True,
        help="Outline vertices as space separated x,y pairs"
    )

    parser.add_argument(
        "--direction",
        type=_parse_vector,
        default=(0.0, 0.0, 1.0),
        help="Extrusion direction x,y,z (z must not be negative)"
    )

    parser.add_argument(
        "--end",
        type=_parse_vector,
        default=None,
        help="End point x,y,z of the linear sweep"
    )

    parser.add_argument(
        "--slices",
        type=int,
        default=DEFAULT_SLICES,
        help="Number of cross-section copies for linear/revolve"
    )

    parser.add_argument(
        "--radius",
        type=float,
        default=1.0,
        help="Revolve radius"
    )

    parser.add_argument(
        "--arc",
        type=float,
        default=DEFAULT_REVOLVE_DEGREES,
        help="Revolve arc length in degrees"
    )

    parser.add_argument(
        "--output",
        required=True,
        help="Output mesh path (format from extension: stl, obj, ply, ...)"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-piece progress"
    )

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    result = extrude.points_with_report(args.direction, _parse_points(args.points))
    for w in result.warnings:
        logger.warning("%s (piece %d): %s", w.kind, w.piece_index, w.message)
    if result.solid is None:
        logger.error("Extrusion produced no solid")
        sys.exit(1)

    if args.operation == "extrude":
        solids = [result.solid]
    elif args.operation == "linear":
        if args.end is None:
            parser.error("linear requires --end")
        solids = SweepAssembler().linear(result.solid, args.end, args.slices)
    elif args.operation == "revolve":
        solids = SweepAssembler().revolve(result.solid, args.radius, args.slices, args.arc)
    else:
        parser.print_help()
        sys.exit(1)

    _export(solids, args.output)


if __name__ == "__main__":
    main()
