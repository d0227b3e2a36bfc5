"""Unit tests for mesh_svg.scene.model."""

import numpy as np
import pytest

from mesh_svg.geometry.primitives import MeshFormatError
from mesh_svg.geometry.viewport import Viewport
from mesh_svg.scene.model import Mesh, Scene, View
from mesh_svg.scene.styling import PaletteStyler


class TestMesh:

    def test_faces_normalized(self, facing_triangle):
        mesh = Mesh(faces=facing_triangle.tolist())
        assert mesh.faces.shape == (1, 3, 3)
        assert len(mesh) == 1

    def test_faces_read_only(self, facing_triangle):
        mesh = Mesh(faces=facing_triangle)
        with pytest.raises(ValueError):
            mesh.faces[0, 0, 0] = 1.0

    def test_caller_array_not_frozen(self, facing_triangle):
        Mesh(faces=facing_triangle)
        facing_triangle[0, 0, 0] = 5.0
        assert facing_triangle[0, 0, 0] == 5.0

    def test_faces_copied(self, facing_triangle):
        mesh = Mesh(faces=facing_triangle)
        facing_triangle[0, 0, 0] = 5.0
        assert mesh.faces[0, 0, 0] == 0.0

    def test_defaults(self, facing_triangle):
        mesh = Mesh(faces=facing_triangle)
        assert mesh.style == {}
        assert mesh.styler is None
        assert mesh.name == ""

    def test_nested_sequence_with_keywords(self):
        styler = PaletteStyler(["#000"])
        mesh = Mesh([[[0, 0, 0], [1, 0, 0], [0, 1, 0]]],
                    style={'fill': 'red'}, styler=styler, name="tri")
        assert mesh.faces.shape == (1, 3, 3)
        assert mesh.style == {'fill': 'red'}
        assert mesh.styler is styler
        assert mesh.name == "tri"

    def test_malformed_faces(self):
        with pytest.raises(MeshFormatError):
            Mesh(faces=[[[0, 0], [1, 0], [0, 1]]])


class TestScene:

    def test_add_and_iterate(self, facing_triangle, averted_triangle):
        first = Mesh(faces=facing_triangle)
        second = Mesh(faces=averted_triangle)
        scene = Scene().add(first).add(second)

        assert len(scene) == 2
        assert list(scene) == [first, second]

    def test_empty(self):
        assert list(Scene()) == []


class TestView:

    def test_default_viewport(self, front_camera):
        view = View(camera=front_camera, scene=Scene())
        assert view.viewport == Viewport()

    def test_views_do_not_share_viewports(self, front_camera):
        custom = Viewport(0.0, 0.0, 100.0, 50.0)
        view = View(camera=front_camera, scene=Scene(), viewport=custom)
        assert view.viewport.width == 100.0
        assert np.isclose(View(camera=front_camera, scene=Scene()).viewport.width, 1.0)
