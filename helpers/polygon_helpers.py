from typing import List, Sequence, Union

import cv2
import numpy as np

from extrusion.extrusion_strategy import InvalidExtrusionInput
from mesh.mesh_config import CROSS_EPS
from mesh.mesh_shapes.polygon import Polygon, as_point3

PointsLike = Union[Polygon, Sequence[Sequence[float]]]


def _as_points(polygon: PointsLike) -> np.ndarray:
    if isinstance(polygon, Polygon):
        return polygon.points
    pts = [as_point3(p) for p in polygon]
    if not pts:
        return np.empty((0, 3), dtype=np.float64)
    return np.stack(pts, axis=0)


def normalized_x(v1: np.ndarray, v2: np.ndarray) -> float:
    """X component of the unit vector pointing from v1 to v2."""
    d = np.asarray(v2, dtype=np.float64) - np.asarray(v1, dtype=np.float64)
    return float(d[0] / np.linalg.norm(d))


def is_ccw(polygon: PointsLike) -> bool:
    """
    Winding test from the highest-left vertex.

    Of the two neighbours of the highest-left vertex, the one further left when
    seen from the pivot is selected; the outline is counter-clockwise when that
    neighbour comes after the pivot in vertex order.
    """
    pts = _as_points(polygon)
    n = pts.shape[0]
    if n < 3:
        raise InvalidExtrusionInput("Only polygons with at least 3 vertices are supported!")

    pivot = 0
    for i in range(n):
        x, y = pts[i, 0], pts[i, 1]
        if y > pts[pivot, 1] or (y == pts[pivot, 1] and x < pts[pivot, 0]):
            pivot = i

    next_idx = (pivot + 1) % n
    prev_idx = (pivot - 1) % n

    a1 = normalized_x(pts[pivot], pts[next_idx])
    a2 = normalized_x(pts[pivot], pts[prev_idx])

    selected = next_idx if a2 > a1 else prev_idx

    # Wrap-around: keep index order equal to traversal order across 0 / n-1
    if selected == 0 and pivot == n - 1:
        selected = n
    if pivot == 0 and selected == n - 1:
        pivot = n

    return selected > pivot


def to_ccw(points: PointsLike) -> List[np.ndarray]:
    pts = list(_as_points(points))
    if not is_ccw(pts):
        pts.reverse()
    return pts


def to_cw(points: PointsLike) -> List[np.ndarray]:
    pts = list(_as_points(points))
    if is_ccw(pts):
        pts.reverse()
    return pts


def turn_sign(a: np.ndarray, b: np.ndarray, c: np.ndarray, eps: float = 0.0) -> int:
    """Sign of z of (c - b) x (a - b): +1 for a left turn at b, -1 right, 0 straight."""
    u = c - b
    w = a - b
    z = float(u[0] * w[1] - u[1] * w[0])
    if z > eps:
        return 1
    if z < -eps:
        return -1
    return 0


def signed_area(points: PointsLike) -> float:
    pts = _as_points(points)
    x = pts[:, 0]
    y = pts[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))


def _orient(a: np.ndarray, b: np.ndarray, c: np.ndarray, eps: float) -> int:
    z = float((b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0]))
    if z > eps:
        return 1
    if z < -eps:
        return -1
    return 0


def _on_segment(a: np.ndarray, b: np.ndarray, p: np.ndarray) -> bool:
    return (min(a[0], b[0]) <= p[0] <= max(a[0], b[0])
            and min(a[1], b[1]) <= p[1] <= max(a[1], b[1]))


def segments_touch(p1, p2, q1, q2, eps: float = 0.0) -> bool:
    """True if segments p1-p2 and q1-q2 share at least one point (xy only)."""
    o1 = _orient(p1, p2, q1, eps)
    o2 = _orient(p1, p2, q2, eps)
    o3 = _orient(q1, q2, p1, eps)
    o4 = _orient(q1, q2, p2, eps)

    if o1 != o2 and o3 != o4:
        return True
    # collinear contact
    if o1 == 0 and _on_segment(p1, p2, q1):
        return True
    if o2 == 0 and _on_segment(p1, p2, q2):
        return True
    if o3 == 0 and _on_segment(q1, q2, p1):
        return True
    if o4 == 0 and _on_segment(q1, q2, p2):
        return True
    return False


def chord_inside(points: PointsLike, i: int, j: int, eps: float = CROSS_EPS) -> bool:
    """
    Whether the diagonal between vertices i and j lies inside the outline.

    The diagonal may not touch any edge other than the ones meeting at its own
    endpoints, and its midpoint has to be strictly inside (cv2.pointPolygonTest).
    """
    pts = _as_points(points)
    n = pts.shape[0]
    a, b = pts[i, :2], pts[j, :2]

    for k in range(n):
        m = (k + 1) % n
        if k in (i, j) or m in (i, j):
            continue
        if segments_touch(a, b, pts[k, :2], pts[m, :2], eps):
            return False

    contour = pts[:, :2].astype(np.float32).reshape(-1, 1, 2)
    mid = (a + b) / 2.0
    return cv2.pointPolygonTest(contour, (float(mid[0]), float(mid[1])), False) > 0
