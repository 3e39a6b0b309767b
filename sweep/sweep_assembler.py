from __future__ import annotations

from typing import List, Optional, Sequence, Union
import logging

from curves.bezier_path import BezierPath
from mesh.mesh_config import DEFAULT_REVOLVE_DEGREES
from mesh.mesh_engine import MeshEngine, MeshEngineError
from mesh.mesh_shapes.solid import Solid
from mesh.transform import Transform
from sweep.sweep_transforms import bezier_to_transforms, curves_to_transforms

logger = logging.getLogger(__name__)

SliceOrSlices = Union[Solid, Sequence[Solid]]

ORIGIN = (0.0, 0.0, 0.0)


class SweepAssembler:
    """
    Places cross-section copies along a sampled path and bridges each pair of
    neighbours with the convex hull of their union.

    Results have one entry per placed slice: entry i (i < n-1) spans slices i
    and i+1, the last entry is the last placed slice on its own.
    """

    def __init__(self, engine: Optional[MeshEngine] = None):
        self.engine = engine or MeshEngine()

    # ------------------------ Placement ------------------------

    @staticmethod
    def move(slices: Sequence[Solid], transforms: Sequence[Transform]) -> List[Solid]:
        return [s.transformed(t) for s, t in zip(slices, transforms)]

    def move_solid(self, slice_: Solid, transforms: Sequence[Transform]) -> List[Solid]:
        return self.move([slice_.clone() for _ in transforms], transforms)

    # ------------------------ Stitching ------------------------

    def stitch(self, slices: Sequence[Solid]) -> List[Solid]:
        parts = list(slices)
        for i in range(len(parts) - 1):
            parts[i] = self._bridge(parts[i], parts[i + 1])
        return parts

    def _bridge(self, a: Solid, b: Solid) -> Solid:
        try:
            return self.engine.hull(self.engine.union(a, b))
        except MeshEngineError as exc:
            # hull(a U b) spans the same points as the hull of both inputs
            logger.warning("Union of neighbouring slices failed, hulling them directly: %s", exc)
            return self.engine.hull_of([a, b])

    def sweep(self, copies: Sequence[Solid], transforms: Sequence[Transform]) -> List[Solid]:
        return self.stitch(self.move(copies, transforms))

    # ------------------------ Bezier / linear ------------------------

    def move_bezier(self, slices: SliceOrSlices, control_a: Sequence[float], control_b: Sequence[float],
                    end_point: Sequence[float], num_slices: Optional[int] = None) -> List[Solid]:
        copies = self._copies(slices, num_slices)
        transforms = bezier_to_transforms(control_a, control_b, end_point, len(copies))
        return self.move(copies, transforms)

    def move_along_paths(self, slice_: Solid, path_a: BezierPath, path_b: Optional[BezierPath],
                         iterations: int) -> List[Solid]:
        """Without path_b the height follows a straight chord to path_a's end point."""
        if path_b is None:
            end = path_a.eval(1.0)
            path_b = BezierPath.from_string(f"C 0,0 {end[0]},{end[1]} {end[0]},{end[1]}")
        return self.move_solid(slice_, curves_to_transforms(path_a, path_b, iterations))

    def bezier(self, slices: SliceOrSlices, control_a: Sequence[float], control_b: Sequence[float],
               end_point: Sequence[float], num_slices: Optional[int] = None) -> List[Solid]:
        return self.stitch(self.move_bezier(slices, control_a, control_b, end_point, num_slices))

    def linear(self, slices: SliceOrSlices, end_point: Sequence[float],
               num_slices: Optional[int] = None) -> List[Solid]:
        return self.bezier(slices, ORIGIN, end_point, end_point, num_slices)

    # ------------------------ Revolve ------------------------

    def revolve(self, slice_: Solid, radius: float, num_slices: int,
                arc_len: float = DEFAULT_REVOLVE_DEGREES) -> List[Solid]:
        """Slice offset by radius along y, rotated about z from 0 to arc_len degrees."""
        if num_slices < 1:
            raise ValueError(f"num_slices must be >= 1, got {num_slices}")
        increment = arc_len / float(num_slices)
        moved = slice_.move_y(radius)
        parts = [moved.rot_z(k * increment) for k in range(num_slices + 1)]
        return self.stitch(parts)

    # ------------------------ Helpers ------------------------

    @staticmethod
    def _copies(slices: SliceOrSlices, num_slices: Optional[int]) -> List[Solid]:
        if isinstance(slices, Solid):
            if num_slices is None or num_slices < 1:
                raise ValueError("num_slices is required when sweeping a single solid")
            return [slices.clone() for _ in range(num_slices)]
        copies = list(slices)
        if not copies:
            raise ValueError("no slices to sweep")
        return copies


def sweep(copies: Sequence[Solid], transforms: Sequence[Transform],
          engine: Optional[MeshEngine] = None) -> List[Solid]:
    return SweepAssembler(engine).sweep(copies, transforms)


def revolve(slice_: Solid, radius: float, num_slices: int, arc_len: float = DEFAULT_REVOLVE_DEGREES,
            engine: Optional[MeshEngine] = None) -> List[Solid]:
    return SweepAssembler(engine).revolve(slice_, radius, num_slices, arc_len)
