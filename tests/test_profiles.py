import math

import pytest

from cq_profiles import (
    ProfileCircle, box, circle, convex_hull, extrude, horizontal_cylinder,
    horizontal_hole, hull, rectangle, rotated_square, tangent_points, teardrop,
    to_link_frame, union_all, vertical_edge,
)


def bounds(workplane):
    bb = workplane.val().BoundingBox()
    return (bb.xmin, bb.xmax, bb.ymin, bb.ymax, bb.zmin, bb.zmax)


def test_teardrop_primitives():
    flat = teardrop((0, 0), 2)
    pointed = teardrop((0, 0), 2, depth=5)

    assert flat[0] == ProfileCircle((0, 0), 2)
    half = 2 * (math.sqrt(2) - 1)
    assert [c for p in flat[1:] for c in p] == pytest.approx([-half, -2, half, -2])
    # Flat cut at or beyond the tip leaves a pointed wedge
    assert len(pointed) == 2
    assert pointed[1] == pytest.approx((0, -2 * math.sqrt(2)))


def test_convex_hull_drops_inner_and_collinear_points():
    points = [(0, 0), (1, 0), (2, 0), (2, 2), (0, 2), (1, 1), (0, 1)]

    assert convex_hull(points) == [(0, 0), (2, 0), (2, 2), (0, 2)]


def test_tangent_points_touch_circle_at_right_angles():
    c = ProfileCircle((1, 1), 1.0)
    p = (1, 1 - math.sqrt(2))

    for t in tangent_points(p, c):
        assert math.dist(t, c.centre) == pytest.approx(1.0)
        radius = (t[0] - 1, t[1] - 1)
        tangent = (t[0] - p[0], t[1] - p[1])
        assert radius[0] * tangent[0] + radius[1] * tangent[1] == pytest.approx(0, abs=1e-12)


def test_tangent_points_need_an_outside_point():
    with pytest.raises(ValueError):
        tangent_points((0.5, 0), ProfileCircle((0, 0), 1.0))


def test_hull_of_lone_circle_is_the_circle():
    solid = extrude(hull(circle((1, 2), 3), [(1, 2), (2, 2)]), 1.0)

    assert solid.val().Volume() == pytest.approx(math.pi * 9, rel=1e-6)


def test_hull_of_points_only():
    solid = extrude(hull(vertical_edge(0, 2), vertical_edge(3, 2)), 1.0)

    assert solid.val().Volume() == pytest.approx(6.0)


def test_hull_takes_one_circle():
    with pytest.raises(ValueError):
        hull(circle((0, 0), 1), circle((5, 0), 1))


@pytest.mark.parametrize('depth, cut_off', [
    (None, (math.sqrt(2) - 1) ** 2),
    (5.0, 0.0),
])
def test_teardrop_area(depth, cut_off):
    # three quarters of the circle, a square of tangents, less the flat cut
    r = 2.0
    solid = extrude(hull(teardrop((0, 0), r, depth=depth)), 1.0)

    assert solid.val().isValid()
    assert solid.val().Volume() == pytest.approx((0.75 * math.pi + 1 - cut_off) * r * r, rel=1e-6)


def test_teardrop_stays_in_bounding_square():
    r = 3.0
    solid = extrude(hull(teardrop((0, 0), r)), 2.0)

    assert bounds(solid) == pytest.approx((-r, r, -r, r, -1.0, 1.0), abs=1e-2)
    assert solid.val().Volume() > math.pi * r * r * 2.0
    assert solid.val().Volume() < (2 * r) ** 2 * 2.0


def test_hull_of_boss_and_edge():
    wire = hull(teardrop((5, 5), 5), vertical_edge(20, 10))
    solid = extrude(wire, 1.0)

    assert bounds(solid)[:4] == pytest.approx((0, 20, 0, 10), abs=1e-2)


def test_extrude_centres_on_offset():
    solid = rectangle(0, 0, 2, 3, thickness=4, offset=10)

    assert bounds(solid) == pytest.approx((0, 2, 0, 3, 8, 12), abs=1e-6)
    assert solid.val().Volume() == pytest.approx(24.0)


def test_rotated_square_area():
    solid = rotated_square((1, 1), 2.0, 45, thickness=1.0)
    xmin, xmax, ymin, ymax, _, _ = bounds(solid)

    assert solid.val().Volume() == pytest.approx(4.0)
    assert ymin == pytest.approx(1.0, abs=1e-6)
    assert ymax == pytest.approx(1.0 + 2 * math.sqrt(2), abs=1e-6)
    assert (xmin + xmax) / 2 == pytest.approx(1.0, abs=1e-6)


def test_horizontal_hole_is_taller_above_centre():
    tool = horizontal_hole((0, 0), 1.0, depth=1.2, thickness=2.0)
    xmin, xmax, ymin, ymax, zmin, zmax = bounds(tool)

    assert ymin == pytest.approx(-1.0, abs=1e-2)
    assert ymax == pytest.approx(1.2, abs=1e-2)
    # Passes through the part with margin to spare
    assert zmax - zmin > 2.0


def test_horizontal_cylinder_volume():
    pin = horizontal_cylinder((3, 4), 1.5, 2.0, offset=-5)

    assert pin.val().Volume() == pytest.approx(math.pi * 1.5 ** 2 * 2.0, rel=1e-6)
    assert bounds(pin)[4:] == pytest.approx((-6, -4), abs=1e-6)


def test_to_link_frame_turns_profile_up_into_z():
    solid = to_link_frame(rectangle(0, 0, 2, 3, thickness=1, offset=5))
    xmin, xmax, ymin, ymax, zmin, zmax = bounds(solid)

    assert (xmin, xmax) == pytest.approx((0, 2), abs=1e-6)
    assert (zmin, zmax) == pytest.approx((0, 3), abs=1e-6)
    assert (ymin, ymax) == pytest.approx((-5.5, -4.5), abs=1e-6)


def test_box_bounds():
    assert bounds(box(1, 2, -3, 3, 0, 0.5)) == pytest.approx((1, 2, -3, 3, 0, 0.5), abs=1e-6)


def test_union_all():
    joined = union_all([box(0, 1, 0, 1, 0, 1), box(1, 2, 0, 1, 0, 1)])

    assert joined.val().Volume() == pytest.approx(2.0)


def test_union_all_empty():
    with pytest.raises(ValueError):
        union_all([])
