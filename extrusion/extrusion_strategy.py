from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from mesh.mesh_shapes.solid import Solid


class InvalidExtrusionInput(ValueError):
    """Direction or outline that cannot be extruded (checked before any geometry is built)."""


# Warning kinds
PIECE_DROPPED = "piece_dropped"
BASE_DROPPED = "base_dropped"


@dataclass(frozen=True)
class ExtrusionWarning:
    kind: str
    piece_index: int
    message: str
    points: Tuple[Tuple[float, float, float], ...] = ()


@dataclass
class ExtrusionResult:
    """Best-effort solid plus what had to be left out to produce it."""
    solid: Optional[Solid]
    pieces: List[List[np.ndarray]] = field(default_factory=list)
    warnings: List[ExtrusionWarning] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.warnings)


class ExtrusionStrategy(ABC):
    """
    Contract:
    - extrude(direction, points) turns a simple outline into a closed Solid
    - extrude_with_report(direction, points) does the same and reports dropped pieces
    Strategies are passed to the entry points in extrusion.extrude per call.
    """

    @abstractmethod
    def extrude_with_report(self, direction: Sequence[float], points: Sequence[Sequence[float]]) -> ExtrusionResult:
        raise NotImplementedError

    def extrude(self, direction: Sequence[float], points: Sequence[Sequence[float]]) -> Optional[Solid]:
        return self.extrude_with_report(direction, points).solid
