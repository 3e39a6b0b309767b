"""
Entry points for extruding outlines.

The strategy is chosen by the caller on every call; without one a fresh
MonotoneExtrusion (with its own MeshEngine) is used.
"""
from typing import Optional, Sequence

from extrusion.extrusion_strategy import ExtrusionResult, ExtrusionStrategy
from extrusion.monotone_extrusion import MonotoneExtrusion
from helpers.polygon_helpers import PointsLike
from mesh.mesh_shapes.polygon import Polygon
from mesh.mesh_shapes.solid import Solid


def _strategy(strategy: Optional[ExtrusionStrategy]) -> ExtrusionStrategy:
    return strategy if strategy is not None else MonotoneExtrusion()


def points(direction: Sequence[float], outline: PointsLike,
           strategy: Optional[ExtrusionStrategy] = None) -> Optional[Solid]:
    """Extrude a simple outline (any winding, no holes) along direction."""
    return _strategy(strategy).extrude(direction, outline)


def points_with_report(direction: Sequence[float], outline: PointsLike,
                       strategy: Optional[ExtrusionStrategy] = None) -> ExtrusionResult:
    return _strategy(strategy).extrude_with_report(direction, outline)


def polygon(direction: Sequence[float], poly: Polygon,
            strategy: Optional[ExtrusionStrategy] = None) -> Optional[Solid]:
    return points(direction, poly, strategy)
