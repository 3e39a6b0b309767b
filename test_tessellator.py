import numpy as np
import pytest

from helpers.polygon_helpers import signed_area
from mesh.mesh_shapes.polygon import Polygon
from mesh.tessellator import concave_to_convex

L_SHAPE = [(0, 0), (2, 0), (2, 1), (1, 1), (1, 2), (0, 2)]
U_SHAPE = [(0, 0), (3, 0), (3, 3), (2, 3), (2, 1), (1, 1), (1, 3), (0, 3)]


def test_convex_polygon_is_one_piece():
    square = Polygon.from_points([(0, 0), (1, 0), (1, 1), (0, 1)], storage="tag")
    pieces = concave_to_convex(square)
    assert len(pieces) == 1
    assert pieces[0] is square


def test_collinear_vertex_still_convex():
    poly = Polygon.from_points([(0, 0), (1, 0), (2, 0), (2, 1), (0, 1)])
    assert len(concave_to_convex(poly)) == 1


@pytest.mark.parametrize("outline, area", [(L_SHAPE, 3.0), (U_SHAPE, 7.0)])
def test_concave_polygon_split_covers_area_once(outline, area):
    poly = Polygon.from_points(outline, storage={"layer": 2})
    pieces = concave_to_convex(poly)

    assert len(pieces) == len(outline) - 2
    assert sum(signed_area(p) for p in pieces) == pytest.approx(area)
    for p in pieces:
        assert signed_area(p) > 0
        assert p.storage == {"layer": 2}


def test_pieces_keep_orientation_of_flipped_input():
    poly = Polygon.from_points(L_SHAPE).flipped()
    pieces = concave_to_convex(poly)
    assert sum(signed_area(p) for p in pieces) == pytest.approx(-3.0)
    for p in pieces:
        assert np.allclose(p.plane_normal(), (0, 0, -1))


def test_polygon_in_vertical_plane():
    # L outline standing in the x/z plane
    outline = [(x, 0.0, y) for x, y in L_SHAPE]
    poly = Polygon.from_points(outline)
    pieces = concave_to_convex(poly)
    assert len(pieces) == 4
    normal = poly.plane_normal()
    for p in pieces:
        assert np.allclose(p.plane_normal(), normal)
