#!/usr/bin/env python3
"""
Drag Chain Link - Printable Hinged Cable Chain Link

One link of a drag chain. Each link carries a socket at its head (outer
cheeks) and a pin at its tail (inner cheeks); the inner cheeks of one link
snap inside the outer cheeks of the next. Start and end links replace the
socket or the pin with a flat face.

Side view (link frame, as printed, roof on the bed at z=0):

         outer cheek            inner cheek
    +------------------+---------------------( )-+
    |  ( )  socket     |                    pin  |
    +------------------+-------------------------+
    ^                                            ^
    x=0                                      x=outer_size.x

Naming convention (export tags):
    <chain>_drag_chain_link        middle link
    <chain>_drag_chain_link_start  fixed end
    <chain>_drag_chain_link_end    free end
"""

import math
from dataclasses import dataclass
from typing import Tuple

import cadquery as cq

from cq_profiles import (
    CUT_MARGIN, box, extrude, horizontal_cylinder, horizontal_hole, hull,
    rectangle, rotated_square, teardrop, to_link_frame, union_all,
    vertical_edge,
)
from drag_chain_models import (
    CLEARANCE, DEFAULT_FABRICATION, DRAG_CHAIN_SPECS, ChainType, get_chain_type,
)
from drag_chain_validation import require_valid_chain_type


JOINT_WEB_THICKNESS = 1.0  # mm - slab bridging inner and outer cheek


@dataclass
class LinkDimensions:
    """Scalars derived from a chain type for one link variant (mm)."""
    r: float               # cheek / pivot boss radius
    pin_r: float
    inner_x_normal: float
    inner_x: float         # start of the inner cheeks
    roof_x_normal: float
    roof_x: float
    floor_x: float
    cam_r: float
    cam_x: float           # reach of the cam ledge, clamped to [0, r]
    outer_end_x: float     # end of the outer cheeks
    roof_end: float
    floor_end: float


def link_dimensions(chain: ChainType, start: bool = False, end: bool = False) -> LinkDimensions:
    """Derive every link dimension from the chain type and variant flags."""
    sx = chain.inner_size[0]
    os_x = chain.outer_size()[0]
    r = chain.cheek_radius()

    inner_x_normal = sx - chain.wall
    roof_x_normal = 2 * r - chain.twall
    cam_r = inner_x_normal - CLEARANCE - r
    cam_x = min(math.sqrt(max(cam_r ** 2 - (r - chain.twall) ** 2, 0)), r)

    return LinkDimensions(
        r=r,
        pin_r=r / 2,
        inner_x_normal=inner_x_normal,
        inner_x=0.0 if start else inner_x_normal,
        roof_x_normal=roof_x_normal,
        roof_x=0.0 if start else roof_x_normal,
        floor_x=0.0 if start else 2 * r,
        cam_r=cam_r,
        cam_x=cam_x,
        outer_end_x=os_x if end else sx - CLEARANCE,
        roof_end=sx + 2 * r if end else sx + r - chain.twall - CLEARANCE,
        floor_end=sx + 2 * r if end else sx + r - chain.bwall - CLEARANCE,
    )


# ============================================================================
# Cheeks (profile frame, see cq_profiles)
# ============================================================================

def make_outer_cheek(chain: ChainType, dims: LinkDimensions, start: bool,
                     offset: float) -> cq.Workplane:
    """Cheek carrying the hinge socket, flat faced for a start link."""
    oz = chain.outer_size()[2]
    r = dims.r

    if start:
        return rectangle(dims.floor_x, 0, dims.outer_end_x - dims.floor_x, oz, chain.wall, offset)

    cheek = extrude(hull(teardrop((r, r), r), vertical_edge(dims.outer_end_x, oz)),
                    chain.wall, offset)
    return cheek.cut(horizontal_hole((r, r), dims.pin_r, r, chain.wall, offset))


def cam_tip(chain: ChainType, dims: LinkDimensions) -> Tuple[float, float]:
    """Far end of the cam ledge, on the roof line past the pivot."""
    return (chain.inner_size[0] + dims.r + dims.cam_x, chain.twall)


def inner_cheek_outline(chain: ChainType, dims: LinkDimensions) -> cq.Wire:
    """Profile of a pin carrying inner cheek before the swing cut.

    The pin boss teardrop, the cam tip and the cheek's front edge, hulled.
    A cam tip that falls inside the boss adds nothing.
    """
    sx = chain.inner_size[0]
    oz = chain.outer_size()[2]
    r = dims.r

    boss = teardrop((sx + r, r), r)
    if dims.cam_x > 0:
        boss.append(cam_tip(chain, dims))

    return hull(boss, vertical_edge(dims.inner_x, oz))


def make_inner_cheek(chain: ChainType, dims: LinkDimensions, end: bool,
                     offset: float) -> cq.Workplane:
    """Cheek carrying the pin boss and cam, flat faced for an end link.

    Where the next link's inner cheek swings past, material above the roof
    is cut away: the cut is the overlap of what must go when the chain runs
    straight (everything past inner_size.x above the roof) and what must go
    at full bend (a 45 degree wedge opening up from the cam line).
    """
    sx = chain.inner_size[0]
    oz = chain.outer_size()[2]
    r = dims.r
    pivot = (sx + r, r)

    if end:
        return rectangle(dims.inner_x, 0, sx + 2 * r - dims.inner_x, oz, chain.wall, offset)

    cheek = extrude(inner_cheek_outline(chain, dims), chain.wall, offset)

    cut_t = chain.wall + CUT_MARGIN
    straight = rectangle(sx, chain.twall, 3 * r, oz, cut_t, offset)
    bent = rotated_square((pivot[0], chain.twall), oz, 45, cut_t, offset)
    return cheek.cut(straight.intersect(bent))


def make_cheek_web(chain, dims, offset):
    """Thin slab joining the inner and outer cheek of one side."""
    oz = chain.outer_size()[2]
    return rectangle(dims.inner_x, 0, dims.outer_end_x - dims.inner_x, oz,
                     JOINT_WEB_THICKNESS, offset)


def make_hinge_pin(chain: ChainType, dims: LinkDimensions, offset: float) -> cq.Workplane:
    """Pin on the boss axis, reaching through the next link's socket."""
    sx = chain.inner_size[0]
    return horizontal_cylinder((sx + dims.r, dims.r), dims.pin_r, 2 * chain.wall, offset)


def make_side(chain: ChainType, dims: LinkDimensions, start: bool, end: bool,
              side: int) -> cq.Workplane:
    """Everything on one side of the cable channel, in the link frame."""
    _, sy, _ = chain.inner_size
    _, os_y, _ = chain.outer_size()
    wall = chain.wall

    parts = [
        make_outer_cheek(chain, dims, start, side * (os_y / 2 - wall / 2)),
        make_inner_cheek(chain, dims, end, side * (sy / 2 + wall / 2)),
        make_cheek_web(chain, dims, side * (sy / 2 + wall + CLEARANCE / 2)),
    ]
    if not end:
        parts.append(make_hinge_pin(chain, dims, side * (sy / 2 + wall + CLEARANCE)))

    return to_link_frame(union_all(parts))


# ============================================================================
# Roof and base (link frame)
# ============================================================================

def make_roof(chain, dims):
    """Top of the channel, printed on the bed.

    A thin slab reaching the outer cheeks under a full height slab reaching
    the inner cheeks.
    """
    sy = chain.inner_size[1]
    _, os_y, _ = chain.outer_size()
    half_outer = os_y / 2 - chain.wall
    half_inner = sy / 2

    return (box(dims.roof_x, dims.roof_end, -half_outer, half_outer, 0, chain.twall / 2)
            .union(box(dims.roof_x, dims.roof_end, -half_inner, half_inner, 0, chain.twall)))


def make_base(chain, dims):
    """Bottom of the channel, the top of the part as printed."""
    sy = chain.inner_size[1]
    _, os_y, oz = chain.outer_size()
    half_outer = os_y / 2 - chain.wall
    half_inner = sy / 2

    return (box(dims.floor_x, dims.floor_end, -half_outer, half_outer, oz - chain.bwall / 2, oz)
            .union(box(dims.floor_x, dims.floor_end, -half_inner, half_inner, oz - chain.bwall, oz)))


# ============================================================================
# Print supports
# ============================================================================

def support_stub_boxes(chain, fab=DEFAULT_FABRICATION):
    """Bounds (x0, x1, y0, y1, z0, z1) of the support stubs.

    Up to three stubs per side stand on the bed, each stopping one layer
    short of the surface it holds up:

        pin   under the hinge pin, outside the inner cheek
        gap   under the middle of the cam's sloped underside
        cam   under the cam tip

    The cam's underside runs from the corner of the boss teardrop's flat
    to the cam tip. When that is 45 degrees or steeper it prints on its
    own and gets no stubs. Stubs are support_width() long in x.
    """
    sx, sy, _ = chain.inner_size
    dims = link_dimensions(chain)
    r = dims.r
    pin_r = dims.pin_r
    w = fab.support_width()
    px = sx + r

    # (x0, top, y0) per stub, y0 being the inner face of its band
    stubs = []

    stubs.append((px - w / 2, r - pin_r - fab.layer_height, sy / 2 + chain.wall + CLEARANCE))

    corner_x = px + (math.sqrt(2) - 1) * r
    tip_x, tip_z = cam_tip(chain, dims)
    run = tip_x - corner_x
    if dims.cam_x > 0 and run > tip_z and run >= w:
        def underside(x):
            return tip_z * (x - corner_x) / run

        gap_x0 = corner_x + run / 2 - w / 2
        cam_x0 = tip_x - w
        stubs.append((gap_x0, underside(gap_x0) - fab.layer_height, sy / 2))
        stubs.append((cam_x0, underside(cam_x0) - fab.layer_height, sy / 2))

    boxes = []
    for x0, top, y0 in stubs:
        if top <= 0:
            continue
        for side in (-1, 1):
            ya, yb = sorted((side * y0, side * (y0 + chain.wall)))
            boxes.append((x0, x0 + w, ya, yb, 0.0, top))

    return boxes


def make_support_stubs(chain, fab=DEFAULT_FABRICATION):
    """Support stubs as one workplane, or None if none fit."""
    boxes = support_stub_boxes(chain, fab)
    if not boxes:
        return None
    return union_all(box(*b) for b in boxes)


# ============================================================================
# Link
# ============================================================================

def make_drag_chain_link(chain, start=False, end=False, fab=DEFAULT_FABRICATION):
    """Create one drag chain link.

    Args:
        chain: ChainType
        start: Flat faced head for the fixed end
        end: Flat faced tail for the free end
        fab: FabricationContext, only supports read it

    Returns:
        CadQuery solid in the print frame: roof on z=0, hinge socket axis at
        x=z=outer_size.z/2, centred on y=0.
    """
    if start and end:
        raise ValueError("A link cannot be both the start and the end of a chain")

    require_valid_chain_type(chain)
    dims = link_dimensions(chain, start, end)

    parts = [make_side(chain, dims, start, end, side) for side in (-1, 1)]
    parts.append(make_roof(chain, dims))
    parts.append(make_base(chain, dims))

    if fab.supports and not end:
        stubs = make_support_stubs(chain, fab)
        if stubs is not None:
            parts.append(stubs)

    return union_all(parts)


def make_link_by_name(link_name, fab=DEFAULT_FABRICATION):
    """Create a preset link from its export tag (e.g., 'x_drag_chain_link_end').

    Returns:
        CadQuery solid of the link
    """
    chain_name, sep, variant = link_name.partition("_drag_chain_link")
    if not sep or chain_name not in DRAG_CHAIN_SPECS or variant not in ("", "_start", "_end"):
        raise ValueError(f"Unknown link name: {link_name}")

    chain = get_chain_type(chain_name)
    return make_drag_chain_link(chain, start=variant == "_start", end=variant == "_end", fab=fab)


def generate_link_report(chain):
    """Print the derived dimensions of all three variants."""
    os_x, os_y, os_z = chain.outer_size()

    print(f"=== {chain.name} drag chain ===")
    print()
    print(f"  Inner size:   {' x '.join(f'{v:g}' for v in chain.inner_size)} mm")
    print(f"  Outer size:   {os_x:.2f} x {os_y:.2f} x {os_z:.2f} mm")
    print(f"  Pivot radius: {chain.radius():.2f} mm")
    print(f"  Bend height:  {chain.bend_outside_z():.2f} mm")
    print(f"  Links:        {chain.link_count()} (travel {chain.actual_travel():g} mm)")
    print()

    for start, end in ((True, False), (False, False), (False, True)):
        d = link_dimensions(chain, start, end)
        print(f"  {chain.link_name(start, end)}:")
        print(f"    inner_x={d.inner_x:.2f} roof_x={d.roof_x:.2f} floor_x={d.floor_x:.2f}")
        print(f"    outer_end_x={d.outer_end_x:.2f} roof_end={d.roof_end:.2f} floor_end={d.floor_end:.2f}")
        print(f"    cam_r={d.cam_r:.2f} cam_x={d.cam_x:.2f} pin_r={d.pin_r:.2f}")
    print()


def main():
    import sys

    if len(sys.argv) > 1:
        arg = sys.argv[1]
        if arg in DRAG_CHAIN_SPECS:
            generate_link_report(get_chain_type(arg))
        else:
            print(f"Unknown argument: {arg}")
            print(f"Usage: python drag_chain_link.py [{'|'.join(DRAG_CHAIN_SPECS)}]")
    else:
        for name in DRAG_CHAIN_SPECS:
            generate_link_report(get_chain_type(name))


if __name__ == '__main__':
    main()
