"""
Monotone decomposition, wall/cap construction and degraded unions.
"""
import logging

import numpy as np
import pytest

from extrusion import extrude
from extrusion.extrusion_strategy import (
    BASE_DROPPED,
    PIECE_DROPPED,
    ExtrusionResult,
    ExtrusionStrategy,
    InvalidExtrusionInput,
)
from extrusion.monotone_extrusion import MonotoneExtrusion, split_monotone_runs
from helpers.polygon_helpers import is_ccw
from mesh.mesh_engine import MeshEngine, MeshEngineError
from mesh.mesh_shapes.polygon import Polygon
from mesh.mesh_shapes.solid import Solid

logging.basicConfig(level=logging.INFO)

SQUARE = [(0, 0), (1, 0), (1, 1), (0, 1)]
L_SHAPE = [(0, 0), (2, 0), (2, 1), (1, 1), (1, 2), (0, 2)]
U_SHAPE = [(0, 0), (3, 0), (3, 3), (2, 3), (2, 1), (1, 1), (1, 3), (0, 3)]
STAIRS = [(0, 0), (3, 0), (3, 1), (2, 1), (2, 2), (1, 2), (1, 3), (0, 3)]
NOTCHED = [(0, 0), (4, 0), (4, 4), (3, 4), (3, 1), (2, 0.5), (1, 2), (0, 3)]

UP = (0, 0, 1)


class FailingUnionEngine(MeshEngine):
    def union(self, a, b):
        raise MeshEngineError("backend rejected input")


def _reconstruct(runs):
    seq = [tuple(p[:2]) for p in runs[0].points]
    for run in runs[1:]:
        seq.extend(tuple(p[:2]) for p in run.points[1:])
    if len(runs) > 1:
        # closing duplicates of the start vertex
        seq = seq[: len(seq) - runs[-1].wrapped]
    return seq


# ------------------------ Run splitting ------------------------

def test_convex_outline_is_single_run():
    runs = split_monotone_runs(SQUARE)
    assert len(runs) == 1
    assert runs[0].turn == 1
    assert runs[0].wrapped == 0


def test_l_shape_has_one_reversal():
    runs = split_monotone_runs(L_SHAPE)
    assert len(runs) == 2
    assert [tuple(p[:2]) for p in runs[0].points] == [(0, 0), (2, 0), (2, 1), (1, 1)]
    assert [tuple(p[:2]) for p in runs[1].points] == [(1, 1), (1, 2), (0, 2), (0, 0)]

    covered = {tuple(p[:2]) for run in runs for p in run.points}
    assert covered == {tuple(map(float, p)) for p in L_SHAPE}


def test_u_shape_runs_include_pocket():
    runs = split_monotone_runs(U_SHAPE)
    assert len(runs) == 3
    assert [r.turn for r in runs[:2]] == [1, -1]


@pytest.mark.parametrize("outline", [SQUARE, L_SHAPE, U_SHAPE, STAIRS])
def test_runs_reconstruct_outline(outline):
    runs = split_monotone_runs(outline)
    assert _reconstruct(runs) == [tuple(map(float, p)) for p in outline]


def test_collinear_vertices_do_not_break_runs():
    outline = [(0, 0), (1, 0), (2, 0), (2, 1), (0, 1)]
    assert len(split_monotone_runs(outline)) == 1


def test_split_requires_three_vertices():
    with pytest.raises(InvalidExtrusionInput):
        split_monotone_runs([(0, 0), (1, 1)])


# ------------------------ Walls & caps ------------------------

def test_unit_square_prism():
    assert is_ccw(SQUARE)
    solid = extrude.points(UP, SQUARE)

    assert solid.face_count == 6
    assert solid.volume == pytest.approx(1.0)
    assert solid.is_watertight


def test_triangle_prism_faces():
    solid = MonotoneExtrusion().extrude_monotone(UP, Polygon.from_points([(0, 0), (1, 0), (0, 1)]))
    # 3 walls + one cap on each end
    assert solid.face_count == 5
    assert solid.volume == pytest.approx(0.5)


@pytest.mark.parametrize("n", [3, 5, 8])
def test_convex_face_count(n):
    angles = np.linspace(0.0, 2.0 * np.pi, num=n, endpoint=False)
    outline = np.stack([np.cos(angles), np.sin(angles)], axis=1)
    solid = extrude.points((0, 0, 2), outline)
    assert solid.face_count == n + 2
    assert solid.is_watertight


def test_walls_carry_storage():
    poly = Polygon.from_points(SQUARE, storage="color:red")
    solid = MonotoneExtrusion().extrude_monotone(UP, poly)
    assert all(p.storage == "color:red" for p in solid.polygons)


def test_cw_input_is_normalized():
    solid = extrude.points(UP, SQUARE[::-1])
    assert solid.volume == pytest.approx(1.0)
    assert solid.is_watertight


def test_slanted_direction_keeps_volume():
    solid = extrude.points((0.5, 0.25, 2.0), SQUARE)
    assert solid.volume == pytest.approx(2.0)
    lo, hi = solid.bounds
    assert np.allclose(hi, (1.5, 1.25, 2.0))


def test_caps_face_outward():
    solid = extrude.points(UP, SQUARE)
    normals = [p.plane_normal() for p in solid.polygons]
    assert np.allclose(normals[0], (0, 0, -1))
    assert np.allclose(normals[-1], (0, 0, 1))


# ------------------------ Full extrusion ------------------------

def test_l_shape_extrusion():
    result = extrude.points_with_report(UP, L_SHAPE)
    assert result.solid is not None
    assert not result.degraded
    assert len(result.pieces) == 2
    assert result.solid.volume == pytest.approx(3.0)


@pytest.mark.parametrize("outline, area", [(U_SHAPE, 7.0), (STAIRS, 6.0)])
def test_non_monotone_extrusion_volume(outline, area):
    solid = extrude.points((0, 0, 1.5), outline)
    assert solid.volume == pytest.approx(1.5 * area)


def test_run_closing_outside_outline_stays_on_base():
    # the chord (3,1)-(0,0) of the first run passes above the dip at (2,0.5)
    runs = split_monotone_runs(NOTCHED)
    assert runs[0].turn == 1
    assert tuple(runs[0].points[-1][:2]) == (3.0, 1.0)

    result = extrude.points_with_report(UP, NOTCHED)
    assert result.warnings == []
    assert result.solid.volume == pytest.approx(8.5)
    assert result.solid.is_watertight


def test_polygon_entry_point():
    solid = extrude.polygon(UP, Polygon.from_points(L_SHAPE))
    assert solid.volume == pytest.approx(3.0)


# ------------------------ Validation ------------------------

def test_negative_z_direction_rejected_before_geometry(monkeypatch):
    def forbidden(*args, **kwargs):
        raise AssertionError("geometry built for invalid input")

    monkeypatch.setattr(MonotoneExtrusion, "extrude_monotone", forbidden)
    with pytest.raises(InvalidExtrusionInput):
        extrude.points((0, 0, -1), SQUARE)


def test_zero_direction_rejected():
    with pytest.raises(InvalidExtrusionInput):
        extrude.points((0, 0, 0), SQUARE)


@pytest.mark.parametrize("direction", [(1, 0, 0), (0.5, -2, 0)])
def test_direction_in_outline_plane_rejected(direction):
    with pytest.raises(InvalidExtrusionInput):
        extrude.points(direction, SQUARE)


def test_too_few_vertices_rejected():
    with pytest.raises(InvalidExtrusionInput):
        extrude.points(UP, [(0, 0), (1, 0)])


# ------------------------ Degraded unions ------------------------

def test_final_union_failure_keeps_accumulated_pieces(caplog):
    strategy = MonotoneExtrusion(engine=FailingUnionEngine())
    with caplog.at_level(logging.WARNING):
        result = strategy.extrude_with_report(UP, L_SHAPE)

    assert [w.kind for w in result.warnings] == [BASE_DROPPED]
    # only the first run (trapezoid of area 1.5) survives
    assert result.solid.volume == pytest.approx(1.5)
    assert "base polygon omitted" in caplog.text


def test_piece_union_failure_drops_piece():
    strategy = MonotoneExtrusion(engine=FailingUnionEngine())
    result = strategy.extrude_with_report(UP, STAIRS)

    kinds = [w.kind for w in result.warnings]
    assert kinds == [PIECE_DROPPED, BASE_DROPPED]
    assert result.warnings[0].piece_index == 1
    assert len(result.warnings[0].points) == 3
    assert result.degraded
    assert result.solid.volume == pytest.approx(2.0)


def test_extrude_returns_solid_even_when_degraded():
    solid = MonotoneExtrusion(engine=FailingUnionEngine()).extrude(UP, L_SHAPE)
    assert isinstance(solid, Solid)


# ------------------------ Strategy selection ------------------------

def test_strategy_is_chosen_per_call():
    calls = []

    class RecordingStrategy(ExtrusionStrategy):
        def extrude_with_report(self, direction, points):
            calls.append((direction, points))
            return ExtrusionResult(solid=None)

    assert extrude.points(UP, SQUARE, strategy=RecordingStrategy()) is None
    assert len(calls) == 1

    # the next call without a strategy is unaffected
    assert extrude.points(UP, SQUARE).face_count == 6
