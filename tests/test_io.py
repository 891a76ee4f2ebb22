import io

import pytest

from borecad.config import BuildConfig
from borecad.csg import Cylinder, Union
from borecad.io import read_stl, write_scad, write_stl
from borecad.mesh import Mesh, block


@pytest.fixture
def box():
    return block((0, 0, 0), (1, 2, 3))


class TestStl:
    def test_binary_size(self, box, tmp_path):
        path = tmp_path / "box.stl"
        write_stl(box, path)
        data = path.read_bytes()
        assert len(data) == 84 + 12 * 50
        assert data.startswith(b"borecad")

    def test_binary_stream(self, box):
        stream = io.BytesIO()
        write_stl(box, stream, name="piece")
        assert not stream.closed
        assert stream.getvalue()[:5] == b"piece"

    def test_ascii(self, box, tmp_path):
        path = tmp_path / "box.stl"
        write_stl(box, path, binary=False, name="box")
        text = path.read_text()
        assert text.startswith("solid box\n")
        assert text.rstrip().endswith("endsolid box")
        assert text.count("facet normal") == 12
        assert text.count("vertex") == 36

    @pytest.mark.parametrize("binary", [True, False])
    def test_read_back(self, box, tmp_path, binary):
        path = tmp_path / "box.stl"
        write_stl(box, path, binary=binary)
        mesh = read_stl(path)
        assert len(mesh.vertices) == 8
        assert len(mesh.faces) == 12
        assert mesh.to_trimesh().volume == pytest.approx(6.0)

    def test_trimesh_input(self, box):
        stream = io.BytesIO()
        write_stl(box.to_trimesh(), stream)
        stream.seek(0)
        assert len(read_stl(stream).faces) == 12

    def test_empty_mesh(self, tmp_path):
        path = tmp_path / "empty.stl"
        write_stl(Mesh.empty(), path)
        assert path.stat().st_size == 84
        assert read_stl(path).is_empty


class TestScad:
    def test_tree_with_title(self, tmp_path):
        path = tmp_path / "model.scad"
        write_scad(Union([Cylinder(1, 1)]), path, title="tube")
        text = path.read_text()
        assert text.startswith("// tube\n\n")
        assert "union() {" in text

    def test_tree_quality(self, tmp_path):
        path = tmp_path / "model.scad"
        write_scad(Cylinder(1, 1), path, config=BuildConfig(quality=48))
        assert "$fn=48);" in path.read_text()

    def test_text_to_stream(self):
        stream = io.StringIO()
        write_scad("cube();\n", stream)
        assert stream.getvalue() == "cube();\n"
        stream = io.StringIO()
        write_scad("cube();\n", stream, title="t")
        assert stream.getvalue() == "// t\n\ncube();\n"
