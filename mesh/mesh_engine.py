from __future__ import annotations

import logging
from typing import Iterable, List

import numpy as np
import trimesh

from mesh.mesh_config import BOOLEAN_ENGINE
from mesh.mesh_shapes.polygon import Polygon
from mesh.mesh_shapes.solid import Solid

logger = logging.getLogger(__name__)


class MeshEngineError(RuntimeError):
    """The boolean backend rejected its input (degenerate or non-manifold)."""


class MeshEngine:
    """
    Solid construction and combination on top of trimesh.
    - from_polygons: wraps a polygon list as a Solid
    - union: boolean union through trimesh.boolean (manifold3d backend)
    - hull: convex hull (trimesh -> scipy/qhull)
    """

    def __init__(self, engine: str = BOOLEAN_ENGINE, check_volume: bool = True):
        self.engine = engine
        self.check_volume = bool(check_volume)

    def from_polygons(self, polygons: Iterable[Polygon]) -> Solid:
        return Solid(list(polygons))

    def union(self, a: Solid, b: Solid) -> Solid:
        ma, mb = a.to_trimesh(), b.to_trimesh()
        try:
            out = trimesh.boolean.union(
                [ma, mb],
                engine=self.engine,
                check_volume=self.check_volume,
            )
        except Exception as exc:
            raise MeshEngineError(f"union failed: {exc}") from exc

        if out is None or out.is_empty:
            raise MeshEngineError("union produced an empty mesh")
        return Solid.from_trimesh(out)

    def hull(self, solid: Solid) -> Solid:
        return self.hull_of([solid])

    def hull_of(self, solids: List[Solid]) -> Solid:
        """Convex hull of all vertices of the given solids."""
        blocks = [p.points for s in solids for p in s.polygons]
        if not blocks:
            raise MeshEngineError("convex hull of an empty solid list")
        pts = np.vstack(blocks)
        try:
            hull = trimesh.convex.convex_hull(pts)
        except Exception as exc:
            raise MeshEngineError(f"convex hull failed: {exc}") from exc
        return Solid.from_trimesh(hull)
