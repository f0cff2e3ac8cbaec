#!/usr/bin/env python3
"""
DRAG_CHAIN_GEOMETRY.PY - Hinge path calculations and data loading

Contains:
- circle_intersect: Where a link of fixed length meets the bend circle
- iter_hinge_points / hinge_points: Hinge centres of a chain bent 180 degrees
- segment_angle: Tilt of a link between two hinge centres
- load_chain_types_from_json / load_fabrication_from_json: Configuration files

The path lives in the X-Z plane. The fixed end starts on the upper track at
x=0 and runs in +X, turns clockwise around the bend centre and comes back
along the lower track in -X:

    p0 ---- straight ---->  .
                              .   circular
                               c
                              .
    <---- straight ------   .   <- snap back onto the lower track
"""

import json
import math
from typing import Dict, Iterator, List, Tuple

from drag_chain_models import ChainType, FabricationContext
from drag_chain_validation import (
    DragChainConfigError, HingePathError, require_valid_chain_type
)


Point = Tuple[float, float, float]

# Extra hinge points beyond the link count, enough for the 180 degree turn
EXTRA_POINTS = 5

TRACK_TOLERANCE = 1e-6  # mm


# =============================================================================
# CIRCLE GEOMETRY
# =============================================================================

def circle_intersect(c1: Point, r1: float, c2: Point, r2: float) -> Point:
    """
    Intersection of two circles in the X-Z plane.

    Of the two solutions the one returned lies clockwise around c2 from the
    line c2 -> c1, which is the one ahead of c1 when travelling clockwise
    around c2. Uses the cosine rule to find the angle at c2:

        cos(a) = (d² + r2² - r1²) / (2·d·r2)
    """
    vx = c1[0] - c2[0]
    vz = c1[2] - c2[2]
    d = math.hypot(vx, vz)

    if d == 0 or d > r1 + r2 or d < abs(r1 - r2):
        raise HingePathError(
            f"Circles at ({c1[0]:.3f}, {c1[2]:.3f}) r={r1:.3f} and "
            f"({c2[0]:.3f}, {c2[2]:.3f}) r={r2:.3f} do not intersect"
        )

    cos_a = (d * d + r2 * r2 - r1 * r1) / (2 * d * r2)
    cos_a = max(-1.0, min(1.0, cos_a))  # rounding at tangency
    a = math.atan2(vz, vx) - math.acos(cos_a)

    return (c2[0] + r2 * math.cos(a), c2[1], c2[2] + r2 * math.sin(a))


# =============================================================================
# PATH RULES
# =============================================================================

def lower_track_z(chain: ChainType) -> float:
    """Height of the hinge centres on the returning (lower) run."""
    return chain.outer_size()[2] / 2


def upper_track_z(chain: ChainType) -> float:
    """Height of the hinge centres on the fixed (upper) run."""
    return lower_track_z(chain) + 2 * chain.radius()


def bend_centre(chain: ChainType, offset: float = 0.0) -> Point:
    """Centre of the 180 degree turn for a free end moved by offset."""
    z = chain.outer_size()[2]
    return (chain.actual_travel() / 2 + offset / 2, 0.0, chain.radius() + z / 2)


def is_upper_track(p: Point, chain: ChainType) -> bool:
    return p[2] > lower_track_z(chain)


def step_direction(p: Point, chain: ChainType) -> float:
    """+link length while above the lower track, -link length on it."""
    sx = chain.inner_size[0]
    return sx if is_upper_track(p, chain) else -sx


def is_straight_step(p: Point, dx: float, centre: Point) -> bool:
    """A straight step never takes the point past the bend centre."""
    return max(p[0] + dx, p[0]) <= centre[0]


def has_passed_centre(q: Point, centre: Point) -> bool:
    """Still on the outside half of the bend circle."""
    return q[0] > centre[0]


def snap_to_lower_track(p: Point, chain: ChainType) -> Point:
    """Point one link length back from p that lies on the lower track."""
    sx = chain.inner_size[0]
    z = lower_track_z(chain)
    drop = p[2] - z
    if abs(drop) > sx:
        raise HingePathError(
            f"Hinge at ({p[0]:.3f}, {p[2]:.3f}) is {drop:.3f}mm above the lower track, "
            f"more than one link length ({sx}mm)"
        )
    return (p[0] - math.sqrt(sx * sx - drop * drop), 0.0, z)


# =============================================================================
# HINGE PATH
# =============================================================================

def iter_hinge_points(chain: ChainType, offset: float = 0.0) -> Iterator[Point]:
    """
    Generate the hinge centres of the chain, fixed end first.

    Yields link_count + EXTRA_POINTS points. Each step is exactly one link
    length:
    - straight: move along the current track while it stays before the bend
      centre
    - circular: next point on the bend circle, one link length on
    - snap back: once the circle point would come back past the centre,
      drop onto the lower track instead

    Raises HingePathError if the last point is not on the lower track.
    """
    sx = chain.inner_size[0]
    r = chain.radius()
    centre = bend_centre(chain, offset)

    p = (0.0, 0.0, upper_track_z(chain))
    yield p

    for _ in range(chain.link_count() + EXTRA_POINTS - 1):
        dx = step_direction(p, chain)
        if is_straight_step(p, dx, centre):
            p = (p[0] + dx, p[1], p[2])
        else:
            q = circle_intersect(p, sx, centre, r)
            p = q if has_passed_centre(q, centre) else snap_to_lower_track(p, chain)
        yield p

    if not math.isclose(p[2], lower_track_z(chain), abs_tol=TRACK_TOLERANCE):
        raise HingePathError(
            f"{chain.name}: hinge path did not return to the lower track within "
            f"{chain.link_count() + EXTRA_POINTS} points (last at x={p[0]:.3f}, z={p[2]:.3f})"
        )


def hinge_points(chain: ChainType, offset: float = 0.0) -> List[Point]:
    """Validated list of hinge centres for a chain moved by offset."""
    require_valid_chain_type(chain)
    if chain.actual_travel() + offset < 0:
        raise DragChainConfigError(
            "offset",
            f"{offset} puts the bend centre behind the fixed end "
            f"(actual travel {chain.actual_travel():g}mm)"
        )
    return list(iter_hinge_points(chain, offset))


def segment_angle(p: Point, q: Point) -> float:
    """Angle in degrees of the link from p to q, measured from +X toward +Z."""
    return math.degrees(math.atan2(q[2] - p[2], q[0] - p[0]))


def path_length(points: List[Point]) -> float:
    """Sum of the hinge to hinge distances."""
    return sum(math.dist(p, q) for p, q in zip(points, points[1:]))


# =============================================================================
# CONFIGURATION FILES
# =============================================================================

def load_chain_types_from_json(json_path: str) -> Dict[str, ChainType]:
    """Load chain types from a JSON file.

    Format:
        {"chains": [{"name": "x", "inner_size": [15, 15, 8], "travel": 200,
                     "wall": 1.6, "bwall": 1.5, "twall": 1.5}, ...]}

    Walls are optional. Every chain is validated as it is loaded.
    """
    with open(json_path, 'r') as f:
        data = json.load(f)

    chains = {}
    for entry in data.get('chains', []):
        chain = ChainType.from_spec(entry['name'], entry)
        chains[chain.name] = require_valid_chain_type(chain)

    return chains


def load_fabrication_from_json(json_path: str) -> FabricationContext:
    """Load the optional 'fabrication' section of a chain JSON file."""
    with open(json_path, 'r') as f:
        data = json.load(f)

    fab = data.get('fabrication', {})
    defaults = FabricationContext()
    return FabricationContext(
        layer_height=float(fab.get('layer_height', defaults.layer_height)),
        extrusion_width=float(fab.get('extrusion_width', defaults.extrusion_width)),
        supports=bool(fab.get('supports', defaults.supports)),
        tints=tuple(fab.get('tints', defaults.tints)),
    )
