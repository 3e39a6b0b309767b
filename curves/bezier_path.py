from __future__ import annotations

import re
from typing import List, Sequence, Tuple

import numpy as np

Point2 = Tuple[float, float]

_TOKEN_RE = re.compile(r"[A-Za-z]|[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")

# command -> number of coordinate pairs per segment
_ARITY = {"M": 1, "L": 1, "Q": 2, "C": 3}


def tokenize_path_d(d: str) -> List[str]:
    return _TOKEN_RE.findall(d)


def bezier_cubic(p0: np.ndarray, p1: np.ndarray, p2: np.ndarray, p3: np.ndarray, t: float) -> np.ndarray:
    u = 1.0 - t
    return (u * u * u) * p0 + (3.0 * u * u * t) * p1 + (3.0 * u * t * t) * p2 + (t * t * t) * p3


class BezierPath:
    """
    Piecewise path from an SVG path string, evaluated over t in [0, 1].

    Supported commands: M, L, Q, C and their relative forms. The pen starts at
    the origin, so "C 1,2 3,4 5,6" is a cubic from (0, 0). Every segment gets an
    equal share of the parameter range. eval() returns (x, y, 0).
    """

    def __init__(self):
        # each segment: (4, 2) cubic control points (lines and quads are elevated)
        self.segments: List[np.ndarray] = []

    @classmethod
    def from_string(cls, d: str) -> "BezierPath":
        path = cls()
        path.parse_path_string(d)
        return path

    @classmethod
    def from_control_points(cls, control_a: Sequence[float], control_b: Sequence[float],
                            end_point: Sequence[float]) -> "BezierPath":
        """Cubic from the origin using the first two coordinates of each control."""
        path = cls()
        p0 = np.zeros(2)
        path._add_cubic(p0, _xy(control_a), _xy(control_b), _xy(end_point))
        return path

    # ------------------------ Parsing ------------------------

    def parse_path_string(self, d: str) -> None:
        tokens = tokenize_path_d(d)
        current = np.zeros(2)
        cmd = None
        i = 0

        def is_cmd(tok: str) -> bool:
            return len(tok) == 1 and tok.isalpha()

        while i < len(tokens):
            tok = tokens[i]
            if is_cmd(tok):
                cmd = tok
                i += 1
                if cmd.upper() not in _ARITY:
                    raise ValueError(f"unsupported path command {cmd!r}")
                continue
            if cmd is None:
                raise ValueError(f"path data must start with a command, got {tok!r}")

            pairs = _ARITY[cmd.upper()]
            if i + 2 * pairs > len(tokens) or any(is_cmd(tokens[i + k]) for k in range(2 * pairs)):
                raise ValueError(f"incomplete {cmd!r} segment in path {d!r}")
            vals = np.array([float(tokens[i + k]) for k in range(2 * pairs)]).reshape(pairs, 2)
            i += 2 * pairs
            if cmd.islower():
                vals = vals + current

            upper = cmd.upper()
            if upper == "M":
                current = vals[0]
                # further pairs after a moveto are implicit linetos
                cmd = "l" if cmd == "m" else "L"
            elif upper == "L":
                self._add_cubic(current, current + (vals[0] - current) / 3.0,
                                current + 2.0 * (vals[0] - current) / 3.0, vals[0])
                current = vals[0]
            elif upper == "Q":
                c1 = current + 2.0 / 3.0 * (vals[0] - current)
                c2 = vals[1] + 2.0 / 3.0 * (vals[0] - vals[1])
                self._add_cubic(current, c1, c2, vals[1])
                current = vals[1]
            else:
                self._add_cubic(current, vals[0], vals[1], vals[2])
                current = vals[2]

        if not self.segments:
            raise ValueError(f"path {d!r} has no drawable segments")

    def _add_cubic(self, p0, p1, p2, p3) -> None:
        self.segments.append(np.array([p0, p1, p2, p3], dtype=np.float64))

    # ------------------------ Evaluation ------------------------

    def eval(self, t: float) -> np.ndarray:
        if not self.segments:
            raise ValueError("cannot evaluate an empty path")
        t = float(np.clip(t, 0.0, 1.0))
        n = len(self.segments)
        k = min(int(t * n), n - 1)
        local = t * n - k
        c = self.segments[k]
        x, y = bezier_cubic(c[0], c[1], c[2], c[3], local)
        return np.array([x, y, 0.0])

    def __len__(self) -> int:
        return len(self.segments)


def _xy(p: Sequence[float]) -> np.ndarray:
    if len(p) < 2:
        raise ValueError(f"control point needs at least 2 coordinates, got {p!r}")
    return np.array([float(p[0]), float(p[1])])
