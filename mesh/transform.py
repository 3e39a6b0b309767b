from __future__ import annotations

from typing import Sequence

import numpy as np


class Transform:
    """
    Affine 4x4 transform built by chaining calls.

    Every call post-multiplies the current matrix, so when applied to a point the
    last call acts first:

        Transform().translate(x, y, z).rot_z(a).rot_y(b)

    rotates about Y, then about Z, then moves the result to (x, y, z).
    Angles are in degrees.
    """

    def __init__(self, matrix: np.ndarray = None):
        if matrix is None:
            matrix = np.eye(4, dtype=np.float64)
        m = np.asarray(matrix, dtype=np.float64)
        if m.shape != (4, 4):
            raise ValueError(f"Transform matrix must be 4x4, got {m.shape}")
        self.matrix = m.copy()

    @classmethod
    def unity(cls) -> "Transform":
        return cls()

    def _mul(self, other: np.ndarray) -> "Transform":
        self.matrix = self.matrix @ other
        return self

    # ------------------------ Translation ------------------------

    def translate(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> "Transform":
        m = np.eye(4)
        m[:3, 3] = (x, y, z)
        return self._mul(m)

    def translate_x(self, dx: float) -> "Transform":
        return self.translate(x=dx)

    def translate_y(self, dy: float) -> "Transform":
        return self.translate(y=dy)

    def translate_z(self, dz: float) -> "Transform":
        return self.translate(z=dz)

    # ------------------------ Rotation ------------------------

    def rot_x(self, degrees: float) -> "Transform":
        """Rotation around the X axis, like a nodding motion."""
        c, s = np.cos(np.radians(degrees)), np.sin(np.radians(degrees))
        m = np.eye(4)
        m[1, 1], m[1, 2] = c, -s
        m[2, 1], m[2, 2] = s, c
        return self._mul(m)

    def rot_y(self, degrees: float) -> "Transform":
        """Rotation around the Y axis, like a vertical spinning top."""
        c, s = np.cos(np.radians(degrees)), np.sin(np.radians(degrees))
        m = np.eye(4)
        m[0, 0], m[0, 2] = c, s
        m[2, 0], m[2, 2] = -s, c
        return self._mul(m)

    def rot_z(self, degrees: float) -> "Transform":
        """Rotation around the Z axis, like a screwdriver."""
        c, s = np.cos(np.radians(degrees)), np.sin(np.radians(degrees))
        m = np.eye(4)
        m[0, 0], m[0, 1] = c, -s
        m[1, 0], m[1, 1] = s, c
        return self._mul(m)

    # ------------------------ Application ------------------------

    def apply(self, points: Sequence[Sequence[float]]) -> np.ndarray:
        pts = np.asarray(points, dtype=np.float64)
        single = pts.ndim == 1
        pts = np.atleast_2d(pts)
        out = pts @ self.matrix[:3, :3].T + self.matrix[:3, 3]
        return out[0] if single else out

    @property
    def translation(self) -> np.ndarray:
        return self.matrix[:3, 3].copy()

    def is_mirror(self) -> bool:
        return float(np.linalg.det(self.matrix[:3, :3])) < 0.0

    def __repr__(self) -> str:
        return f"Transform(translation={self.translation.tolist()})"
