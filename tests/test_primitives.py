"""Unit tests for mesh_svg.geometry.primitives."""

import math

import numpy as np
import pytest

from mesh_svg.geometry.primitives import (
    MeshFormatError,
    as_faces,
    centroid_depths,
    faces_from_indexed,
    point3,
    vector3,
    winding,
    windings,
)


class TestConstructors:

    def test_point_and_vector(self):
        np.testing.assert_array_equal(point3(1, 2, 3), [1.0, 2.0, 3.0])
        assert vector3(0, 0, 1).dtype == np.float64


class TestAsFaces:

    def test_nested_lists(self):
        faces = as_faces([[[0, 0, 0], [1, 0, 0], [0, 1, 0]]] * 2)
        assert faces.shape == (2, 3, 3)
        assert faces.dtype == np.float64

    def test_single_face_promoted(self):
        assert as_faces([[0, 0, 0], [1, 0, 0], [0, 1, 0]]).shape == (1, 3, 3)

    def test_empty(self):
        assert as_faces([]).shape == (0, 3, 3)

    @pytest.mark.parametrize("bad", [
        [[[0, 0], [1, 0], [0, 1]]],                       # 2D points
        [[[0, 0, 0], [1, 0, 0], [0, 1, 0], [1, 1, 0]]],   # quad
        [[0, 0, 0], [1, 0, 0]],                           # two points
    ])
    def test_wrong_shape(self, bad):
        with pytest.raises(MeshFormatError):
            as_faces(bad)

    def test_ragged_input(self):
        with pytest.raises(MeshFormatError):
            as_faces([[[0, 0, 0], [1, 0, 0], [0, 1, 0]], [[0, 0, 0], [1, 0, 0]]])

    def test_is_value_error(self):
        assert issubclass(MeshFormatError, ValueError)


class TestFacesFromIndexed:

    def test_expands_by_value(self):
        vertices = [[0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1]]
        faces = faces_from_indexed(vertices, [[0, 1, 2], [0, 2, 3]])

        assert faces.shape == (2, 3, 3)
        np.testing.assert_array_equal(faces[1], [[0, 0, 0], [0, 1, 0], [0, 0, 1]])

    def test_index_out_of_range(self):
        with pytest.raises(MeshFormatError, match="out of range"):
            faces_from_indexed([[0, 0, 0], [1, 0, 0], [0, 1, 0]], [[0, 1, 3]])

    def test_negative_index(self):
        with pytest.raises(MeshFormatError, match="out of range"):
            faces_from_indexed([[0, 0, 0], [1, 0, 0], [0, 1, 0]], [[0, 1, -1]])

    def test_float_indices_rejected(self):
        with pytest.raises(MeshFormatError, match="integers"):
            faces_from_indexed([[0, 0, 0], [1, 0, 0], [0, 1, 0]], [[0.0, 1.0, 2.0]])

    def test_bad_vertex_shape(self):
        with pytest.raises(MeshFormatError, match="vertices"):
            faces_from_indexed([[0, 0], [1, 0], [0, 1]], [[0, 1, 2]])

    def test_no_triangles(self):
        assert faces_from_indexed([[0, 0, 0]], np.zeros((0, 3), dtype=int)).shape == (0, 3, 3)


class TestWinding:

    def test_counter_clockwise_positive(self):
        assert winding([[0, 0, 0], [1, 0, 0], [0, 1, 0]]) == pytest.approx(1.0)

    def test_clockwise_negative(self):
        assert winding([[0, 0, 0], [0, 1, 0], [1, 0, 0]]) == pytest.approx(-1.0)

    def test_ignores_z(self):
        assert winding([[0, 0, 5], [2, 0, -1], [0, 2, 3]]) == pytest.approx(4.0)

    def test_coincident_points_zero(self):
        assert winding([[1, 1, 0], [1, 1, 0], [2, 3, 0]]) == 0.0

    def test_vectorized_matches_scalar(self):
        rng = np.random.default_rng(7)
        faces = rng.normal(size=(16, 3, 3))
        expected = [winding(face) for face in faces]
        np.testing.assert_allclose(windings(faces), expected)

    def test_nan_propagates(self):
        faces = np.array([[[math.nan, 0, 0], [1, 0, 0], [0, 1, 0]]])
        assert math.isnan(windings(faces)[0])


class TestCentroidDepths:

    def test_mean_z(self):
        faces = np.array([[[0, 0, 1.0], [0, 0, 2.0], [0, 0, 6.0]]])
        np.testing.assert_allclose(centroid_depths(faces), [3.0])
