# ----------------------------
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence, Tuple

import numpy as np


def as_point3(p: Sequence[float]) -> np.ndarray:
    """Coerce a 2- or 3-sequence into a float64 (3,) array (missing z = 0)."""
    arr = np.asarray(p, dtype=np.float64).reshape(-1)
    if arr.shape[0] == 2:
        return np.array([arr[0], arr[1], 0.0], dtype=np.float64)
    if arr.shape[0] != 3:
        raise ValueError(f"expected a 2D or 3D point, got shape {arr.shape}")
    return arr.copy()


@dataclass(frozen=True, eq=False)
class Vertex:
    pos: np.ndarray
    normal: Optional[np.ndarray] = None

    def flipped(self) -> "Vertex":
        if self.normal is None:
            return self
        return Vertex(self.pos, -self.normal)


@dataclass(frozen=True, eq=False)
class Polygon:
    """
    Planar polygon, implicitly closed (last vertex connects to the first).
    - vertices: >= 3, simple, winding is derived (see helpers.polygon_helpers.is_ccw)
    - storage: opaque payload carried over to every derived polygon
    """
    vertices: Tuple[Vertex, ...]
    storage: Any = None

    def __post_init__(self):
        if len(self.vertices) < 3:
            raise ValueError(f"Polygon requires at least 3 vertices, got {len(self.vertices)}")

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]], storage: Any = None) -> "Polygon":
        verts = tuple(Vertex(as_point3(p)) for p in points)
        return cls(verts, storage)

    @property
    def points(self) -> np.ndarray:
        return np.stack([v.pos for v in self.vertices], axis=0)

    def __len__(self) -> int:
        return len(self.vertices)

    def plane_normal(self) -> np.ndarray:
        """Unit normal by Newell's method; (0,0,1) for degenerate input."""
        pts = self.points
        nxt = np.roll(pts, -1, axis=0)
        n = np.array([
            np.sum((pts[:, 1] - nxt[:, 1]) * (pts[:, 2] + nxt[:, 2])),
            np.sum((pts[:, 2] - nxt[:, 2]) * (pts[:, 0] + nxt[:, 0])),
            np.sum((pts[:, 0] - nxt[:, 0]) * (pts[:, 1] + nxt[:, 1])),
        ])
        length = float(np.linalg.norm(n))
        if length < 1e-12:
            return np.array([0.0, 0.0, 1.0])
        return n / length

    def translated(self, direction: Sequence[float]) -> "Polygon":
        d = as_point3(direction)
        return Polygon(tuple(Vertex(v.pos + d, v.normal) for v in self.vertices), self.storage)

    def flipped(self) -> "Polygon":
        """Same outline with the vertex order (and therefore the normal) inverted."""
        return Polygon(tuple(v.flipped() for v in reversed(self.vertices)), self.storage)

    def transformed(self, transform) -> "Polygon":
        pts = transform.apply(self.points)
        verts = tuple(Vertex(p) for p in pts)
        if transform.is_mirror():
            verts = verts[::-1]
        return Polygon(verts, self.storage)
