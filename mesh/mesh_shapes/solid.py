from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
import trimesh

from mesh.mesh_shapes.polygon import Polygon
from mesh.transform import Transform


@dataclass
class Solid:
    """
    Boundary representation: planar polygons forming a closed 2-manifold.
    Derived solids (transformed, moved, rotated) are new objects; the polygon
    list of an existing solid is never modified.
    """
    polygons: List[Polygon] = field(default_factory=list)

    # --- Mesh State ---
    _mesh_cache: Optional[trimesh.Trimesh] = field(default=None, init=False, repr=False, compare=False)

    @property
    def face_count(self) -> int:
        return len(self.polygons)

    # ------------------------ trimesh bridge ------------------------

    def to_trimesh(self) -> trimesh.Trimesh:
        """Fan-triangulate every (convex) face and merge coincident vertices."""
        if self._mesh_cache is not None:
            return self._mesh_cache

        vertices = []
        faces = []
        base = 0
        for poly in self.polygons:
            pts = poly.points
            n = pts.shape[0]
            vertices.append(pts)
            for k in range(1, n - 1):
                faces.append((base, base + k, base + k + 1))
            base += n

        if not vertices:
            mesh = trimesh.Trimesh()
        else:
            mesh = trimesh.Trimesh(
                vertices=np.vstack(vertices),
                faces=np.asarray(faces, dtype=np.int64),
                process=True,
            )
        self._mesh_cache = mesh
        return mesh

    @classmethod
    def from_trimesh(cls, mesh: trimesh.Trimesh) -> "Solid":
        polygons = [Polygon.from_points(mesh.vertices[f]) for f in mesh.faces]
        return cls(polygons)

    # ------------------------ Measures ------------------------

    @property
    def volume(self) -> float:
        return float(self.to_trimesh().volume)

    @property
    def is_watertight(self) -> bool:
        return bool(self.to_trimesh().is_watertight)

    @property
    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        pts = np.vstack([p.points for p in self.polygons])
        return pts.min(axis=0), pts.max(axis=0)

    # ------------------------ Derived solids ------------------------

    def transformed(self, transform: Transform) -> "Solid":
        return Solid([p.transformed(transform) for p in self.polygons])

    def move_y(self, dy: float) -> "Solid":
        return self.transformed(Transform().translate_y(dy))

    def rot_z(self, degrees: float) -> "Solid":
        return self.transformed(Transform().rot_z(degrees))

    def clone(self) -> "Solid":
        return Solid(list(self.polygons))
