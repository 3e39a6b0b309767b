"""
Curve pair -> sequence of position + orientation transforms.

The sweep path is (A.x, A.y, B.y): its height comes from the *y* output of the
second curve, not its z output. Callers building curve pairs rely on this.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence
import logging
import math

import numpy as np

from curves.bezier_path import BezierPath
from mesh.mesh_config import FIRST_SAMPLE_OFFSET, LAST_SAMPLE_T
from mesh.transform import Transform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepFrame:
    t: float
    position: tuple
    yaw_deg: float
    pitch_deg: float

    def to_transform(self) -> Transform:
        x, y, z = self.position
        return Transform().translate(x, y, z).rot_z(-self.yaw_deg).rot_y(self.pitch_deg)


def sample_parameters(slice_count: int) -> List[float]:
    """t values: (k + 0.01) / (n - 1) for k < n - 1, then 0.99999."""
    if slice_count < 1:
        raise ValueError(f"slice_count must be >= 1, got {slice_count}")
    ts = [(k + FIRST_SAMPLE_OFFSET) / (slice_count - 1) for k in range(slice_count - 1)]
    ts.append(LAST_SAMPLE_T)
    return ts


def sample_sweep_frames(curve_a: BezierPath, curve_b: BezierPath, slice_count: int) -> List[SweepFrame]:
    frames: List[SweepFrame] = []
    last = np.zeros(3)
    for t in sample_parameters(slice_count):
        point_a = curve_a.eval(t)
        point_b = curve_b.eval(t)
        pos = np.array([point_a[0], point_a[1], point_b[1]])

        dx, dy, dz = pos - last
        run = math.sqrt(dx * dx + dy * dy)
        yaw = 90.0 - math.degrees(math.atan2(dx, dy))
        pitch = math.degrees(math.atan2(dz, run))

        frames.append(SweepFrame(t, tuple(float(c) for c in pos), yaw, pitch))
        last = pos
    return frames


def curves_to_transforms(curve_a: BezierPath, curve_b: BezierPath, slice_count: int) -> List[Transform]:
    frames = sample_sweep_frames(curve_a, curve_b, slice_count)
    logger.debug("Sampled %d sweep frames", len(frames))
    return [f.to_transform() for f in frames]


def bezier_to_transforms(control_a: Sequence[float], control_b: Sequence[float],
                         end_point: Sequence[float], iterations: int) -> List[Transform]:
    """
    Two cubics from the origin sharing the x controls: curve A uses the y
    components, curve B the z components.
    """
    for name, ctrl in (("control_a", control_a), ("control_b", control_b), ("end_point", end_point)):
        if len(ctrl) < 3:
            raise ValueError(f"{name} needs 3 coordinates, got {list(ctrl)!r}")

    path_a = BezierPath.from_string(
        f"C {control_a[0]},{control_a[1]} {control_b[0]},{control_b[1]} {end_point[0]},{end_point[1]}"
    )
    path_b = BezierPath.from_string(
        f"C {control_a[0]},{control_a[2]} {control_b[0]},{control_b[2]} {end_point[0]},{end_point[2]}"
    )
    return curves_to_transforms(path_a, path_b, iterations)
