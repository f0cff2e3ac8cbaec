"""
CadQuery profile helpers for printable hinge geometry.

Profiles are drawn in the XY plane with X along the link and Y up (the
print direction), then extruded along Z and turned into the link frame with
to_link_frame(). A profile is described by groups of primitives, plain
(x, y) points and at most one ProfileCircle, and combined with hull(), so a
two point segment behaves like an OpenSCAD square([eps, h]) inside a hull.

The hull of one circle and a set of points is the convex polygon through
the points and their tangent points on the circle, with every chord
between two tangent points replaced by the arc it cuts off. It is built
directly as a wire of lines and arcs.

Usage:
    from cq_profiles import hull, teardrop, vertical_edge, extrude, to_link_frame

    wire = hull(teardrop((5, 5), 5), vertical_edge(20, 10))
    cheek = to_link_frame(extrude(wire, 1.6, offset=8))
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import cadquery as cq


Point2 = Tuple[float, float]

# Extra thickness so cutting tools pass cleanly through their target
CUT_MARGIN = 1.0  # mm

HULL_TOLERANCE = 1e-9     # collinearity, mm^2
ON_CIRCLE_TOLERANCE = 1e-6
MERGE_DISTANCE = 1e-7     # hull vertices closer than this are one vertex


@dataclass(frozen=True)
class ProfileCircle:
    centre: Point2
    r: float


# ============================================================================
# Primitive groups (hull inputs)
# ============================================================================

def segment(p0: Point2, p1: Point2) -> List[Point2]:
    """A zero width segment, given by its two end points."""
    return [tuple(p0), tuple(p1)]


def vertical_edge(x: float, height: float, y0: float = 0.0) -> List[Point2]:
    """Zero width edge from (x, y0) up to (x, y0 + height)."""
    return segment((x, y0), (x, y0 + height))


def circle(centre: Point2, r: float) -> list:
    return [ProfileCircle(tuple(centre), r)]


def teardrop(centre: Point2, r: float, angle: float = -90.0,
             depth: float = None) -> list:
    """Circle with a 45 degree tangent wedge pointing along angle (degrees).

    The wedge tip is r·sqrt(2) from the centre. It is cut flat at depth from
    the centre, which defaults to r so the shape stays inside the circle's
    bounding square. The default angle points the wedge down, which is the
    printable orientation for a boss.
    """
    if depth is None:
        depth = r

    a = math.radians(angle)
    ux, uy = math.cos(a), math.sin(a)
    nx, ny = -uy, ux
    tip = r * math.sqrt(2)
    cx, cy = centre

    if depth >= tip:
        return circle(centre, r) + [(cx + tip * ux, cy + tip * uy)]

    half = tip - depth
    fx, fy = cx + depth * ux, cy + depth * uy
    return circle(centre, r) + segment((fx - half * nx, fy - half * ny),
                                       (fx + half * nx, fy + half * ny))


# ============================================================================
# Hull
# ============================================================================

def _cross(o: Point2, a: Point2, b: Point2) -> float:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def convex_hull(points: Iterable[Point2]) -> List[Point2]:
    """Counter-clockwise hull vertices (monotone chain), collinear points dropped."""
    pts = sorted(set(points))
    if len(pts) < 3:
        return pts

    lower = []
    for p in pts:
        while len(lower) >= 2 and _cross(lower[-2], lower[-1], p) <= HULL_TOLERANCE:
            lower.pop()
        lower.append(p)

    upper = []
    for p in reversed(pts):
        while len(upper) >= 2 and _cross(upper[-2], upper[-1], p) <= HULL_TOLERANCE:
            upper.pop()
        upper.append(p)

    return lower[:-1] + upper[:-1]


def tangent_points(p: Point2, c: ProfileCircle) -> List[Point2]:
    """The two points where lines from p touch the circle (p outside it)."""
    dx, dy = p[0] - c.centre[0], p[1] - c.centre[1]
    d = math.hypot(dx, dy)
    if d <= c.r:
        raise ValueError(f"Point {p} is not outside the circle")

    base = math.atan2(dy, dx)
    spread = math.acos(c.r / d)
    return [(c.centre[0] + c.r * math.cos(a), c.centre[1] + c.r * math.sin(a))
            for a in (base - spread, base + spread)]


def _on_circle(p: Point2, c: Optional[ProfileCircle]) -> bool:
    if c is None:
        return False
    return abs(math.dist(p, c.centre) - c.r) <= ON_CIRCLE_TOLERANCE


def _vec(p: Point2) -> cq.Vector:
    return cq.Vector(p[0], p[1], 0)


def _arc_midpoint(a: Point2, b: Point2, c: ProfileCircle) -> Point2:
    """Midpoint of the counter-clockwise arc from a to b."""
    ta = math.atan2(a[1] - c.centre[1], a[0] - c.centre[0])
    tb = math.atan2(b[1] - c.centre[1], b[0] - c.centre[0])
    tm = ta + ((tb - ta) % (2 * math.pi)) / 2
    return (c.centre[0] + c.r * math.cos(tm), c.centre[1] + c.r * math.sin(tm))


def outline_wire(vertices: Sequence[Point2], c: Optional[ProfileCircle] = None) -> cq.Wire:
    """Closed wire through counter-clockwise hull vertices.

    Consecutive vertices that both lie on c are joined by the arc of c
    between them, every other pair by a line.
    """
    merged = []
    for v in vertices:
        if not merged or math.dist(v, merged[-1]) > MERGE_DISTANCE:
            merged.append(v)
    if len(merged) > 1 and math.dist(merged[0], merged[-1]) <= MERGE_DISTANCE:
        merged.pop()
    if len(merged) < 3:
        raise ValueError("A profile needs at least three non-collinear points")

    edges = []
    for a, b in zip(merged, merged[1:] + merged[:1]):
        if _on_circle(a, c) and _on_circle(b, c):
            edges.append(cq.Edge.makeThreePointArc(_vec(a), _vec(_arc_midpoint(a, b, c)), _vec(b)))
        else:
            edges.append(cq.Edge.makeLine(_vec(a), _vec(b)))

    return cq.Wire.assembleEdges(edges)


def hull(*groups: Iterable) -> cq.Wire:
    """Convex hull of all points and (at most one) circle in the groups."""
    items = [item for group in groups for item in group]
    circles = [item for item in items if isinstance(item, ProfileCircle)]
    points = [tuple(item) for item in items if not isinstance(item, ProfileCircle)]

    if len(circles) > 1:
        raise ValueError("hull() takes at most one circle")
    if not circles:
        return outline_wire(convex_hull(points))

    c = circles[0]
    outside = [p for p in points if math.dist(p, c.centre) > c.r + ON_CIRCLE_TOLERANCE]
    if not outside:
        return cq.Wire.makeCircle(c.r, _vec(c.centre), cq.Vector(0, 0, 1))

    candidates = outside + [t for p in outside for t in tangent_points(p, c)]
    return outline_wire(convex_hull(candidates), c)


# ============================================================================
# Extruded solids (profile frame)
# ============================================================================

def extrude(wire: cq.Wire, thickness: float, offset: float = 0.0) -> cq.Workplane:
    """Extrude a closed profile along Z, centred on z = offset."""
    return (cq.Workplane("XY")
            .add(wire)
            .toPending()
            .extrude(thickness)
            .translate((0, 0, offset - thickness / 2)))


def polygon(points: Sequence[Point2], thickness: float, offset: float = 0.0) -> cq.Workplane:
    """Extrude a polygon along Z, centred on z = offset."""
    return (cq.Workplane("XY")
            .polyline(list(points))
            .close()
            .extrude(thickness)
            .translate((0, 0, offset - thickness / 2)))


def rectangle(x0: float, y0: float, width: float, height: float,
              thickness: float, offset: float = 0.0) -> cq.Workplane:
    """Axis aligned rectangle with its lower left corner at (x0, y0)."""
    return polygon([(x0, y0), (x0 + width, y0), (x0 + width, y0 + height), (x0, y0 + height)],
                   thickness, offset)


def rotated_square(corner: Point2, size: float, angle: float,
                   thickness: float, offset: float = 0.0) -> cq.Workplane:
    """Square of side size rotated by angle (degrees) about its corner."""
    a = math.radians(angle)
    u = (math.cos(a), math.sin(a))
    v = (-math.sin(a), math.cos(a))
    cx, cy = corner
    pts = [
        (cx, cy),
        (cx + size * u[0], cy + size * u[1]),
        (cx + size * (u[0] + v[0]), cy + size * (u[1] + v[1])),
        (cx + size * v[0], cy + size * v[1]),
    ]
    return polygon(pts, thickness, offset)


def horizontal_hole(centre: Point2, r: float, depth: float,
                    thickness: float, offset: float = 0.0) -> cq.Workplane:
    """Cutting tool for a hole along Z that prints without support.

    The hole is a teardrop pointing up (+Y), flattened depth above the
    centre. The tool is CUT_MARGIN thicker than the part it goes through.
    """
    wire = hull(teardrop(centre, r, angle=90.0, depth=depth))
    return extrude(wire, thickness + CUT_MARGIN, offset)


def horizontal_cylinder(centre: Point2, r: float, length: float,
                        offset: float = 0.0) -> cq.Workplane:
    """Cylinder along Z of the given length, centred on z = offset."""
    return (cq.Workplane("XY")
            .moveTo(centre[0], centre[1])
            .circle(r)
            .extrude(length)
            .translate((0, 0, offset - length / 2)))


def to_link_frame(solid: cq.Workplane) -> cq.Workplane:
    """Rotate a profile-frame solid into the link frame.

    Profile Y becomes link Z and profile Z becomes link -Y. Callers build
    both sides symmetrically so the sign of Y does not matter.
    """
    return solid.rotate((0, 0, 0), (1, 0, 0), 90)


# ============================================================================
# Link frame solids
# ============================================================================

def box(x0: float, x1: float, y0: float, y1: float, z0: float, z1: float) -> cq.Workplane:
    """Axis aligned block between the given bounds."""
    return (cq.Workplane("XY")
            .box(x1 - x0, y1 - y0, z1 - z0, centered=False)
            .translate((x0, y0, z0)))


def union_all(solids: Iterable[cq.Workplane]) -> cq.Workplane:
    """Union solids in the order given."""
    result = None
    for s in solids:
        result = s if result is None else result.union(s)
    if result is None:
        raise ValueError("Nothing to union")
    return result
