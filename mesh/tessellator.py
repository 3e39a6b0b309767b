from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import cv2
import numpy as np

from mesh.mesh_config import CROSS_EPS, EAR_CLIP_GUARD
from mesh.mesh_shapes.polygon import Polygon

logger = logging.getLogger(__name__)


def concave_to_convex(polygon: Polygon) -> List[Polygon]:
    """
    Split a simple planar polygon (convex or concave, no holes) into convex
    pieces covering the same area exactly once.

    Convex input comes back as a single piece. Concave input is ear-clipped in
    the polygon's own plane. Every piece keeps the input orientation and storage.
    """
    poly2d = _project_to_plane(polygon)

    if _is_convex(poly2d):
        return [polygon]

    tris = _ear_clip_triangulate(poly2d)
    if tris is None or len(tris) == 0:
        logger.warning("Tessellation failed for %d-vertex polygon, keeping it whole", len(polygon))
        return [polygon]

    verts = polygon.vertices
    return [
        Polygon((verts[i0], verts[i1], verts[i2]), polygon.storage)
        for i0, i1, i2 in tris
    ]


# ------------------------ Projection ------------------------

def _local_frame(normal: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Orthonormal (u, v) spanning the plane with u x v = normal."""
    ref = np.array([1.0, 0.0, 0.0]) if abs(normal[0]) < 0.9 else np.array([0.0, 1.0, 0.0])
    u = ref - normal * float(np.dot(ref, normal))
    u /= np.linalg.norm(u)
    v = np.cross(normal, u)
    return u, v


def _project_to_plane(polygon: Polygon) -> np.ndarray:
    """2D coordinates in which the polygon winds counter-clockwise."""
    pts = polygon.points
    u, v = _local_frame(polygon.plane_normal())
    rel = pts - pts.mean(axis=0)
    return np.stack([rel @ u, rel @ v], axis=1)


# ------------------------ Geometry helpers ------------------------

def _cross(a: np.ndarray, b: np.ndarray) -> float:
    return float(a[0] * b[1] - a[1] * b[0])


def _is_convex(poly: np.ndarray) -> bool:
    n = poly.shape[0]
    for i in range(n):
        a, b, c = poly[i - 1], poly[i], poly[(i + 1) % n]
        if _cross(b - a, c - b) < -CROSS_EPS:
            return False
    return True


# ------------------------ Triangulation (Ear clipping) ------------------------

def _ear_clip_triangulate(poly: np.ndarray) -> Optional[np.ndarray]:
    n = poly.shape[0]
    if n < 3:
        return None
    if n == 3:
        return np.array([[0, 1, 2]], dtype=np.int32)

    idx = list(range(n))
    tris: List[List[int]] = []

    def is_convex(a, b, c) -> bool:
        return _cross(poly[b] - poly[a], poly[c] - poly[b]) > CROSS_EPS

    def point_in_tri(p, a, b, c) -> bool:
        v0 = c - a
        v1 = b - a
        v2 = p - a
        den = _cross(v1, v0)
        if abs(den) < 1e-12:
            return False
        u = _cross(v2, v0) / den
        v = _cross(v1, v2) / den
        return (u >= -1e-9) and (v >= -1e-9) and (u + v <= 1.0 + 1e-9)

    guard = 0
    while len(idx) > 3 and guard < EAR_CLIP_GUARD:
        guard += 1
        ear_found = False
        m = len(idx)
        for i in range(m):
            i0 = idx[(i - 1) % m]
            i1 = idx[i]
            i2 = idx[(i + 1) % m]

            if not is_convex(i0, i1, i2):
                continue

            a, b, c = poly[i0], poly[i1], poly[i2]
            any_inside = False
            for j in range(m):
                ij = idx[j]
                if ij in (i0, i1, i2):
                    continue
                if np.allclose(poly[ij], a) or np.allclose(poly[ij], b) or np.allclose(poly[ij], c):
                    continue
                if point_in_tri(poly[ij], a, b, c):
                    any_inside = True
                    break
            if any_inside:
                continue

            tris.append([i0, i1, i2])
            del idx[i]
            ear_found = True
            break

        if not ear_found:
            # Only collinear leftovers remain, or the outline is not simple.
            logger.warning("No ear found with %d vertices left, falling back to convex hull fan", len(idx))
            hull = cv2.convexHull(poly.astype(np.float32), returnPoints=False).reshape(-1).tolist()
            if len(hull) < 3:
                return None
            if _cross(poly[hull[1]] - poly[hull[0]], poly[hull[2]] - poly[hull[1]]) < 0:
                hull = hull[::-1]
            base = hull[0]
            return np.array([[base, hull[k], hull[k + 1]] for k in range(1, len(hull) - 1)], dtype=np.int32)

    if len(idx) == 3:
        tris.append([idx[0], idx[1], idx[2]])

    return np.array(tris, dtype=np.int32)
