from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence
import logging

import numpy as np

from extrusion.extrusion_strategy import (
    BASE_DROPPED,
    PIECE_DROPPED,
    ExtrusionResult,
    ExtrusionStrategy,
    ExtrusionWarning,
    InvalidExtrusionInput,
)
from helpers.polygon_helpers import PointsLike, chord_inside, signed_area, to_ccw, turn_sign
from mesh.mesh_config import AREA_EPS, CROSS_EPS
from mesh.mesh_engine import MeshEngine, MeshEngineError
from mesh.mesh_shapes.polygon import Polygon, as_point3
from mesh.mesh_shapes.solid import Solid
from mesh.tessellator import concave_to_convex

logger = logging.getLogger(__name__)


@dataclass
class MonotoneRun:
    """
    Consecutive outline vertices that all turn the same way.
    - turn: +1 / -1 reference turning sign (0 if every triple was collinear)
    - wrapped: vertices appended from the start of the outline to close the run
    """
    points: List[np.ndarray]
    turn: int = 0
    wrapped: int = 0


def split_monotone_runs(points: Sequence[Sequence[float]]) -> List[MonotoneRun]:
    """
    Scan vertex triples and cut the outline wherever the turning sign flips.

    The breaking vertex ends one run and starts the next. The last run is closed
    back to the first vertex (and padded around the outline if it still has
    fewer than 3 vertices). Without any flip a single run holds the whole outline.
    """
    pts = [as_point3(p) for p in points]
    n = len(pts)
    if n < 3:
        raise InvalidExtrusionInput("Only polygons with at least 3 vertices are supported!")

    runs: List[MonotoneRun] = []
    current = [pts[0], pts[1]]
    reference = 0

    for i in range(n - 2):
        sign = turn_sign(pts[i], pts[i + 1], pts[i + 2], CROSS_EPS)
        if sign != 0:
            if reference == 0:
                reference = sign
            elif sign != reference:
                runs.append(MonotoneRun(current, reference))
                logger.debug("Turning direction reversed at vertex %d", i + 1)
                current = [pts[i + 1]]
                reference = 0
        current.append(pts[i + 2])

    if not runs:
        return [MonotoneRun(current, reference)]

    wrapped = 0
    while wrapped == 0 or len(current) < 3:
        current.append(pts[wrapped % n])
        wrapped += 1
    runs.append(MonotoneRun(current, reference, wrapped))
    return runs


class MonotoneExtrusion(ExtrusionStrategy):
    """
    Extrude a simple outline by splitting it into monotone runs.

    Runs that turn with the outline are extruded on their own and unioned into
    an accumulator when the chord closing them lies inside the outline; runs
    that turn against it (pockets) or close outside it stay on the base
    polygon, which joins every run through its breaking vertices and is capped
    by the tessellator. A failed union drops the piece and records a warning
    instead of aborting.
    """

    def __init__(self, engine: Optional[MeshEngine] = None):
        self.engine = engine or MeshEngine()

    # ------------------------ Entry points ------------------------

    def extrude_with_report(self, direction: Sequence[float], points: PointsLike) -> ExtrusionResult:
        storage = points.storage if isinstance(points, Polygon) else None
        if len(points) < 3:
            raise InvalidExtrusionInput("Only polygons with at least 3 vertices are supported!")
        d = self._check_direction(direction)

        outline = to_ccw(points)
        runs = split_monotone_runs(outline)
        logger.debug("Outline of %d vertices split into %d run(s)", len(outline), len(runs))
        return self._fold(d, outline, runs, storage)

    # ------------------------ Core pipeline ------------------------

    def _fold(self, direction: np.ndarray, outline: List[np.ndarray],
              runs: List[MonotoneRun], storage: Any) -> ExtrusionResult:
        warnings: List[ExtrusionWarning] = []
        accumulator: Optional[Solid] = None
        base = [runs[0].points[0]]
        end = 0

        for index, run in enumerate(runs[:-1]):
            start, end = end, end + len(run.points) - 1
            if run.turn < 0:
                base.extend(run.points[1:])
                continue
            if not chord_inside(outline, start, end):
                logger.debug("Run %d closes outside the outline, keeping it on the base polygon", index)
                base.extend(run.points[1:])
                continue

            base.append(run.points[-1])
            partial = self.extrude_monotone(direction, Polygon.from_points(run.points, storage))
            if accumulator is None:
                accumulator = partial
                continue
            try:
                accumulator = self.engine.union(accumulator, partial)
            except MeshEngineError as exc:
                logger.warning("Dropping monotone piece %d: %s", index, exc)
                warnings.append(ExtrusionWarning(PIECE_DROPPED, index, str(exc), _as_tuples(run.points)))

        last = runs[-1]
        base.extend(last.points[1:len(last.points) - last.wrapped])
        pieces = [run.points for run in runs]

        if abs(signed_area(base)) <= AREA_EPS:
            logger.debug("Base polygon has no area, keeping the accumulated pieces only")
            return ExtrusionResult(accumulator, pieces, warnings)

        base_solid = self.extrude_monotone(direction, Polygon.from_points(base, storage))
        if accumulator is None:
            return ExtrusionResult(base_solid, pieces, warnings)

        try:
            solid = self.engine.union(base_solid, accumulator)
        except MeshEngineError as exc:
            logger.warning("Final union failed, base polygon omitted from the result: %s", exc)
            warnings.append(ExtrusionWarning(BASE_DROPPED, len(runs) - 1, str(exc), _as_tuples(base)))
            solid = accumulator
        return ExtrusionResult(solid, pieces, warnings)

    # ------------------------ Walls & caps ------------------------

    def extrude_monotone(self, direction: Sequence[float], polygon: Polygon) -> Solid:
        """
        Prism over one polygon: tessellated caps plus one quad wall per edge.

        Walls are (bottomNext, topNext, topCurrent, bottomCurrent), which faces
        outward for a CCW bottom swept along +z. Caps are flipped so that the
        bottom faces against the direction and the top along it.
        """
        d = as_point3(direction)
        bottom = polygon
        top = bottom.translated(d)
        along = float(np.dot(bottom.plane_normal(), d)) >= 0.0

        if along:
            bottom_caps = concave_to_convex(bottom.flipped())
            top_caps = concave_to_convex(top)
        else:
            bottom_caps = concave_to_convex(bottom)
            top_caps = concave_to_convex(top.flipped())

        walls = []
        n = len(bottom)
        for i in range(n):
            j = (i + 1) % n
            b0, b1 = bottom.vertices[i].pos, bottom.vertices[j].pos
            t0, t1 = top.vertices[i].pos, top.vertices[j].pos
            quad = [b1, t1, t0, b0] if along else [b0, t0, t1, b1]
            walls.append(Polygon.from_points(quad, bottom.storage))

        return self.engine.from_polygons(bottom_caps + walls + top_caps)

    # ------------------------ Validation ------------------------

    @staticmethod
    def _check_direction(direction: Sequence[float]) -> np.ndarray:
        try:
            d = as_point3(direction)
        except ValueError as exc:
            raise InvalidExtrusionInput(str(exc)) from exc
        if d[2] < 0:
            raise InvalidExtrusionInput(f"Extrusion direction must not point down the z axis, got {d.tolist()}")
        if float(np.linalg.norm(d)) == 0.0:
            raise InvalidExtrusionInput("Extrusion direction has zero length")
        if d[2] == 0.0:
            raise InvalidExtrusionInput(f"Extrusion direction lies in the outline plane, got {d.tolist()}")
        return d


def _as_tuples(points: Sequence[np.ndarray]):
    return tuple(tuple(float(c) for c in p) for p in points)
