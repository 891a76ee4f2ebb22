import pytest

from borecad.errors import GeometryError
from borecad.profile import Profile


@pytest.fixture
def stepped():
    """Bore of 10 mm stepping to 12 mm at 50 mm, tapering to 8 mm at 100 mm."""
    return Profile([0.0, 50.0, 100.0], [10.0, 10.0, 8.0], [10.0, 12.0, 8.0])


def test_interpolates_between_controls(stepped):
    assert stepped(25.0) == pytest.approx(10.0)
    assert stepped(75.0) == pytest.approx(10.0)


def test_step_has_two_values(stepped):
    assert stepped(50.0) == 10.0
    assert stepped(50.0, high=True) == 12.0


def test_clamps_outside_range(stepped):
    assert stepped(-5.0) == 10.0
    assert stepped(500.0) == 8.0


def test_start_end_maximum(stepped):
    assert stepped.start() == 0.0
    assert stepped.end() == 100.0
    assert stepped.maximum() == 12.0
    assert stepped.kinks == [0.0, 50.0, 100.0]


def test_from_points():
    prof = Profile.from_points([(0, 4), (10, 4, 6), (20, 6)])
    assert prof.low == [4.0, 4.0, 6.0]
    assert prof.high == [4.0, 6.0, 6.0]


def test_rejects_bad_input():
    with pytest.raises(GeometryError):
        Profile([0.0, 1.0], [1.0])
    with pytest.raises(GeometryError):
        Profile([1.0, 0.0], [1.0, 1.0])
    with pytest.raises(GeometryError):
        Profile([], [])


def test_moved_and_reversed(stepped):
    moved = stepped.moved(10.0)
    assert moved.pos == [10.0, 60.0, 110.0]
    assert moved(60.0, high=True) == 12.0
    rev = stepped.reversed()
    assert rev.pos == [-100.0, -50.0, 0.0]
    assert rev(-50.0) == 12.0
    assert rev(-50.0, high=True) == 10.0


def test_clipped():
    prof = Profile([0.0, 10.0, 20.0], [1.0, 2.0, 3.0])
    clipped = prof.clipped(5.0, 15.0)
    assert clipped.pos == [5.0, 10.0, 15.0]
    assert clipped.low == pytest.approx([1.5, 2.0, 2.5])


def test_morph_and_arithmetic():
    a = Profile([0.0, 10.0], [1.0, 3.0])
    b = Profile([5.0], [2.0])
    total = a + b
    assert total.pos == [0.0, 5.0, 10.0]
    assert total(5.0) == pytest.approx(4.0)
    assert a.max_with(b)(0.0) == 2.0
    assert a.min_with(b)(10.0) == 2.0


def test_widen_by_constant(stepped):
    wider = stepped + 1.0
    assert wider.pos == stepped.pos
    assert wider(50.0) == 11.0
    assert wider(50.0, high=True) == 13.0


def test_decorated_adds_a_bead():
    plain = Profile([0.0, 100.0], [10.0, 10.0])
    beaded = plain.decorated(50.0, 1.0)
    assert beaded(52.0) == pytest.approx(12.0)
    assert beaded(51.0) == pytest.approx(11.0)
    assert beaded(50.0) == pytest.approx(10.0)
    assert beaded(30.0) == pytest.approx(10.0)
    assert beaded(60.0) == pytest.approx(10.0)
    assert (beaded.start(), beaded.end()) == (0.0, 100.0)
    below = plain.decorated(50.0, -1.0, amount=0.1)
    assert below(49.0) == pytest.approx(11.0)
    assert below(50.0) == pytest.approx(10.0)


def test_appended_with():
    a = Profile([0.0, 10.0], [1.0, 1.0])
    b = Profile([0.0, 5.0], [2.0, 2.0])
    joined = a.appended_with(b)
    assert joined.pos == [0.0, 10.0, 15.0]
    assert joined(10.0) == 1.0
    assert joined(10.0, high=True) == 2.0


def test_as_stepped():
    taper = Profile([0.0, 10.0], [1.0, 3.0])
    steps = taper.as_stepped(0.5)
    assert steps.start() == 0.0 and steps.end() == 10.0
    for i in range(1, len(steps.pos) - 1):
        assert abs(steps.high[i] - steps.low[i]) <= 0.5 + 1e-9


def test_curved_without_angles_is_unchanged():
    pos, low, high = [0.0, 10.0, 20.0], [4.0, 6.0, 6.0], [4.0, 6.0, 6.0]
    prof = Profile.curved(pos, low, high, [None] * 3, [None] * 3)
    assert prof == Profile(pos, low, high)


def test_curved_inserts_transition():
    pos, diam = [0.0, 20.0], [4.0, 8.0]
    prof = Profile.curved(pos, diam, diam, [None, 0.0], [0.0, None], quality=32)
    assert len(prof.pos) > 2
    assert prof.start() == 0.0 and prof.end() == 20.0
    inner = prof.low[1:-1]
    assert all(4.0 < d < 8.0 for d in inner)
