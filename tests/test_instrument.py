import math

import numpy as np
import pytest

from borecad.config import BuildConfig
from borecad.errors import GeometryError
from borecad.instrument import ToneHole, finger_pad_meshes, hole_mesh, make_instrument
from borecad.mesh import extrude_profile
from borecad.profile import Profile

CONFIG = BuildConfig(quality=32)

INNER = Profile([0.0, 300.0], [19.0, 19.0])
OUTER = Profile([0.0, 300.0], [25.0, 25.0])


def _ring_centre(mesh, x):
    ring = mesh.vertices[np.isclose(mesh.vertices[:, 0], x)]
    return ring.mean(axis=0)


class TestToneHole:
    def test_rejects_bad_holes(self):
        with pytest.raises(GeometryError):
            ToneHole(100.0, 0.0)
        with pytest.raises(GeometryError):
            ToneHole(100.0, 8.0, vert_angle=90.0)

    def test_lean_widens_the_hole(self):
        assert ToneHole(100.0, 8.0).corrected_diameter == pytest.approx(8.0)
        assert ToneHole(100.0, 8.0, vert_angle=60.0).corrected_diameter == \
            pytest.approx(8.0 * math.sqrt(2.0))

    def test_squared_cross_section_keeps_area(self):
        hole = ToneHole(100.0, 8.0, x_pad=0.5, y_pad=0.25)
        section = hole.cross_section(8.0, 32)
        assert section.area() == pytest.approx(math.pi * 16.0)
        extent = section.extent()
        assert extent.width > extent.height


class TestHoleMesh:
    def test_straight_hole_opens_on_minus_x(self):
        mesh = hole_mesh(ToneHole(100.0, 8.0), INNER, OUTER, CONFIG)
        lo, hi = mesh.bounds()
        assert lo[0] == pytest.approx(-18.75)
        assert hi[0] == pytest.approx(-4.75)
        assert (lo[1] + hi[1]) == pytest.approx(0.0, abs=1e-9)
        assert (lo[2] + hi[2]) / 2 == pytest.approx(100.0)

    def test_leaning_hole_is_centred_at_the_surface(self):
        mesh = hole_mesh(ToneHole(100.0, 8.0, vert_angle=30.0), INNER, OUTER, CONFIG)
        assert _ring_centre(mesh, -18.75)[2] == pytest.approx(106.25 - 0.5 * 18.75)
        assert _ring_centre(mesh, -4.75)[2] == pytest.approx(106.25 - 0.5 * 4.75)

    def test_turned_hole(self):
        mesh = hole_mesh(ToneHole(100.0, 8.0, horiz_angle=90.0), INNER, OUTER, CONFIG)
        lo, hi = mesh.bounds()
        assert lo[1] == pytest.approx(-18.75)
        assert hi[1] == pytest.approx(-4.75)
        assert (lo[0] + hi[0]) == pytest.approx(0.0, abs=1e-9)

    def test_finger_pad_sits_on_the_wall(self):
        pad, dish = finger_pad_meshes(ToneHole(100.0, 8.0, finger_pad=True),
                                      INNER, OUTER, CONFIG)
        pad_height = 6.25 + 0.5 * math.sqrt(12.5 ** 2 - 16.0)
        pad_depth = pad_height - 9.5
        assert pad.bounds()[:, 0] == pytest.approx([-pad_height, -9.5])
        assert dish.bounds()[:, 0] == pytest.approx([-pad_height - pad_depth, -pad_height])


@pytest.mark.slow
class TestMakeInstrument:
    @pytest.fixture(autouse=True)
    def _needs_manifold(self):
        pytest.importorskip("manifold3d")

    def test_plain_tube(self):
        inner = Profile([-10.0, 310.0], [19.0, 19.0])
        built = make_instrument(inner, OUTER, config=CONFIG)
        assert built.solid.is_watertight
        assert built.top == pytest.approx(300.0)
        outside = extrude_profile([OUTER], config=CONFIG).to_trimesh()
        assert built.outside.volume == pytest.approx(outside.volume)
        assert built.solid.volume < outside.volume

    def test_holes_remove_material(self):
        inner = Profile([-10.0, 310.0], [19.0, 19.0])
        plain = make_instrument(inner, OUTER, config=CONFIG)
        holed = make_instrument(inner, OUTER, [ToneHole(100.0, 8.0), ToneHole(150.0, 9.0)],
                                config=CONFIG)
        assert holed.solid.is_watertight
        assert holed.solid.volume < plain.solid.volume
        # straight holes leave the outside alone
        assert holed.outside.volume == pytest.approx(plain.outside.volume)

    def test_leaning_hole_cuts_the_outside(self):
        inner = Profile([-10.0, 310.0], [19.0, 19.0])
        plain = make_instrument(inner, OUTER, config=CONFIG)
        leaning = make_instrument(inner, OUTER, [ToneHole(100.0, 8.0, vert_angle=20.0)],
                                  config=CONFIG)
        assert leaning.outside.volume < plain.outside.volume

    def test_finger_pads_are_optional(self):
        inner = Profile([-10.0, 310.0], [19.0, 19.0])
        hole = ToneHole(100.0, 8.0, finger_pad=True)
        padded = make_instrument(inner, OUTER, [hole], config=CONFIG)
        bare = make_instrument(inner, OUTER, [hole], generate_pads=False, config=CONFIG)
        assert padded.solid.is_watertight
        assert padded.solid.volume != pytest.approx(bare.solid.volume)
