#!/usr/bin/env python3
"""
Drag Chain Assembly - CadQuery Models

Lays links along the hinge path of a chain whose fixed end is at the origin
and whose free end has moved by `offset` along X.

Side view (X to the right, Z up):

    start  link  link  link  link
    [====][====][====][====][====]\
                                   \   180 degree bend
                                   /   around the bend centre
    [====][====][====][====][====]/
    end (mirrored)

Each middle link sits on the segment between two consecutive hinge points,
tilted by the segment angle. The start link is one link length before the
first hinge point. The end link is mirrored along its length at the last
hinge point so its flat face points away from the chain.
"""

from pathlib import Path

import cadquery as cq

from drag_chain_geometry import hinge_points, segment_angle
from drag_chain_link import make_drag_chain_link
from drag_chain_models import (
    DEFAULT_FABRICATION, DRAG_CHAIN_SPECS, LinkInstance, get_chain_type,
)


def hinge_offset(chain):
    """Link-frame position of the hinge socket axis."""
    r = chain.cheek_radius()
    return (r, 0.0, r)


def place_link(solid, chain, point, angle=0.0, flip=False):
    """Move a link from its print frame onto the hinge path.

    Args:
        solid: Link in its print frame (see make_drag_chain_link)
        chain: ChainType the link was built for
        point: Hinge point the socket axis lands on
        angle: Segment angle in degrees, +X toward +Z
        flip: Mirror the link along its length (end link)

    Returns:
        Placed CadQuery solid
    """
    hx, hy, hz = hinge_offset(chain)
    placed = solid.translate((-hx, -hy, -hz))

    if flip:
        placed = placed.mirror("YZ")

    if angle:
        # Right-handed rotation about +Y turns +X toward -Z
        placed = placed.rotate((0, 0, 0), (0, 1, 0), -angle)

    return placed.translate(tuple(point))


def make_link_instances(chain, offset=0.0, fab=DEFAULT_FABRICATION):
    """Build and place every link of the chain in path order.

    The three link variants are built once and reused; each placement is a
    pure transform of the shared solid.

    Returns:
        List of LinkInstance, start link first, end link last
    """
    points = hinge_points(chain, offset)
    sx = chain.inner_size[0]
    last = len(points) - 1

    start_link = make_drag_chain_link(chain, start=True, fab=fab)
    middle_link = make_drag_chain_link(chain, fab=fab)
    end_link = make_drag_chain_link(chain, end=True, fab=fab)

    p0 = points[0]
    instances = [LinkInstance(
        index=-1,
        role="start",
        name=chain.link_name(start=True),
        tint=fab.tint(-1),
        solid=place_link(start_link, chain, (p0[0] - sx, p0[1], p0[2])),
    )]

    for i, (p, q) in enumerate(zip(points, points[1:])):
        instances.append(LinkInstance(
            index=i,
            role="link",
            name=chain.link_name(),
            tint=fab.tint(i),
            solid=place_link(middle_link, chain, p, segment_angle(p, q)),
        ))

    instances.append(LinkInstance(
        index=last,
        role="end",
        name=chain.link_name(end=True),
        tint=fab.tint(last),
        solid=place_link(end_link, chain, points[last], flip=True),
    ))

    return instances


def make_drag_chain_assembly(chain, offset=0.0, fab=DEFAULT_FABRICATION):
    """Create the whole chain as one shape.

    Links are combined in path order into a single cq.Compound, not a
    boolean union. The pin of one link sits in the socket of the next at
    nominal size, and fusing would weld parts that must turn.

    Returns:
        CadQuery workplane holding the combined chain
    """
    instances = make_link_instances(chain, offset, fab)
    compound = cq.Compound.makeCompound([inst.solid.val() for inst in instances])
    return cq.Workplane("XY").newObject([compound])


def make_assembly_model(chain, offset=0.0, fab=DEFAULT_FABRICATION):
    """Create a cq.Assembly with one named, tinted child per link.

    Child names are '<link tag>_<index>' so viewers and exporters keep the
    export tag of each link.
    """
    assy = cq.Assembly(name=chain.assembly_name())
    for inst in make_link_instances(chain, offset, fab):
        assy.add(inst.solid, name=f"{inst.name}_{inst.index + 1}", color=inst.color())
    return assy


def generate_assembly_report(chain, offset=0.0):
    """Print the hinge path and link placements."""
    points = hinge_points(chain, offset)

    print(f"=== {chain.assembly_name()} (offset {offset:g} mm) ===")
    print()
    print("  #    x         z        angle")
    print("  ---  --------  -------  ------")
    for i, (p, q) in enumerate(zip(points, points[1:])):
        print(f"  {i:<3}  {p[0]:8.2f}  {p[2]:7.2f}  {segment_angle(p, q):6.1f}")
    p = points[-1]
    print(f"  {len(points) - 1:<3}  {p[0]:8.2f}  {p[2]:7.2f}   (end)")
    print()
    print(f"  Links: {len(points) + 1} including start and end")
    print(f"  Bend height: {chain.bend_outside_z():.2f} mm")


def main():
    import sys

    name = sys.argv[1] if len(sys.argv) > 1 else 'test'
    offset = float(sys.argv[2]) if len(sys.argv) > 2 else 0.0

    if name not in DRAG_CHAIN_SPECS:
        print(f"Unknown chain: {name}")
        print(f"Usage: python drag_chain_assembly.py [{'|'.join(DRAG_CHAIN_SPECS)}] [offset]")
        return

    chain = get_chain_type(name)
    generate_assembly_report(chain, offset)

    output = Path(__file__).parent / f"{chain.assembly_name()}.step"
    make_assembly_model(chain, offset).save(str(output))
    print(f"Generated {output}")


if __name__ == '__main__':
    main()
