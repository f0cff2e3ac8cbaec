#!/usr/bin/env python3
"""
DRAG_CHAIN_RENDERER.PY - SVG side view of a drag chain hinge path

Contains:
- DragChainRenderer: Draws tracks, bend circle, link segments and hinge
  points in the X-Z plane using svgwrite
"""

import math
from typing import List, Tuple

import svgwrite

from drag_chain_geometry import (
    Point, bend_centre, hinge_points, lower_track_z, upper_track_z,
)
from drag_chain_models import DEFAULT_FABRICATION, ChainType, FabricationContext


class DragChainRenderer:
    """Renders the hinge path of a ChainType to SVG using svgwrite."""

    TRACK_COLOR = "#90EE90"
    BEND_COLOR = "#8B4513"
    HINGE_COLOR = "#222222"

    def __init__(self, chain: ChainType, offset: float = 0.0,
                 fab: FabricationContext = DEFAULT_FABRICATION,
                 scale: float = 4.0, padding: float = 20):
        self.chain = chain
        self.offset = offset
        self.fab = fab
        self.scale = scale
        self.padding = padding

        self.points = hinge_points(chain, offset)
        self.centre = bend_centre(chain, offset)

        # Calculate bounds
        self._calculate_bounds()

    def _calculate_bounds(self):
        """Calculate SVG bounds from the path and the link envelope."""
        sx = self.chain.inner_size[0]
        half_z = self.chain.outer_size()[2] / 2

        all_x = [p[0] for p in self.points] + [self.points[0][0] - sx]
        all_z = [p[2] for p in self.points]

        self.min_x = min(all_x) - sx
        self.max_x = max(all_x) + sx
        self.min_z = min(all_z) - half_z - 5
        self.max_z = max(all_z) + half_z + 5

        self.width = int((self.max_x - self.min_x) * self.scale + 2 * self.padding)
        self.height = int((self.max_z - self.min_z) * self.scale + 2 * self.padding)

    def _tx(self, x_mm: float) -> float:
        """Transform X coordinate to SVG space."""
        return (x_mm - self.min_x) * self.scale + self.padding

    def _tz(self, z_mm: float) -> float:
        """Transform Z coordinate to SVG space (flip for SVG Y-down)."""
        return self.height - ((z_mm - self.min_z) * self.scale + self.padding)

    def _scale(self, val_mm: float) -> float:
        return val_mm * self.scale

    def segments(self) -> List[Tuple[Point, Point, str]]:
        """Link segments in path order with their tints, start link included."""
        sx = self.chain.inner_size[0]
        p0 = self.points[0]
        segs = [((p0[0] - sx, p0[1], p0[2]), p0, self.fab.tint(-1))]
        for i, (p, q) in enumerate(zip(self.points, self.points[1:])):
            segs.append((p, q, self.fab.tint(i)))
        return segs

    def render(self, output_path: str, show_tracks: bool = True, show_envelope: bool = True):
        """Render the chain side view to an SVG file.

        Args:
            output_path: Path to save the SVG file
            show_tracks: Draw the upper and lower track lines and bend circle
            show_envelope: Draw each link's outer height as a thick band
        """
        dwg = svgwrite.Drawing(output_path, size=(self.width, self.height))

        # White background
        dwg.add(dwg.rect((0, 0), (self.width, self.height), fill='white'))

        if show_tracks:
            self._draw_tracks(dwg)

        self._draw_links(dwg, show_envelope)
        self._draw_hinges(dwg)

        dwg.save()
        print(f"SVG saved to {output_path} ({len(self.points)} hinge points)")

    def _draw_tracks(self, dwg):
        """Draw the straight runs and the bend circle."""
        for z in (upper_track_z(self.chain), lower_track_z(self.chain)):
            dwg.add(dwg.line(
                (self._tx(self.min_x), self._tz(z)),
                (self._tx(self.centre[0]), self._tz(z)),
                stroke=self.TRACK_COLOR,
                stroke_width=0.5,
                stroke_dasharray='4,2',
            ))

        dwg.add(dwg.circle(
            center=(self._tx(self.centre[0]), self._tz(self.centre[2])),
            r=self._scale(self.chain.radius()),
            fill='none',
            stroke=self.BEND_COLOR,
            stroke_width=0.5,
            stroke_dasharray='2,2',
        ))

    def _draw_links(self, dwg, show_envelope: bool):
        """Draw one stroke per link, alternating tints."""
        band = self._scale(self.chain.outer_size()[2])

        for p, q, tint in self.segments():
            start = (self._tx(p[0]), self._tz(p[2]))
            end = (self._tx(q[0]), self._tz(q[2]))
            if show_envelope:
                dwg.add(dwg.line(start, end, stroke=tint, stroke_width=band,
                                 stroke_opacity=0.35))
            dwg.add(dwg.line(start, end, stroke=tint, stroke_width=1.0))

    def _draw_hinges(self, dwg):
        """Draw the hinge pins as small circles."""
        pin_r = max(self._scale(self.chain.pin_radius()), 1.0)
        for p in self.points:
            dwg.add(dwg.circle(
                center=(self._tx(p[0]), self._tz(p[2])),
                r=pin_r,
                fill='white',
                stroke=self.HINGE_COLOR,
                stroke_width=0.5,
            ))

    def total_angle(self) -> float:
        """Net turn of the path in degrees, 180 for a complete bend."""
        first, last = self.segments()[0], self.segments()[-1]
        a0 = math.atan2(first[1][2] - first[0][2], first[1][0] - first[0][0])
        a1 = math.atan2(last[1][2] - last[0][2], last[1][0] - last[0][0])
        return abs(math.degrees(a1 - a0))


def main():
    import argparse
    from pathlib import Path

    from drag_chain_models import DRAG_CHAIN_SPECS, get_chain_type

    parser = argparse.ArgumentParser(description='Draw the hinge path of a drag chain as SVG')
    parser.add_argument('chain', nargs='?', choices=list(DRAG_CHAIN_SPECS), default='test',
                        help='Preset chain (default: test)')
    parser.add_argument('--offset', type=float, default=0.0,
                        help='Free end position in mm (default: 0)')
    parser.add_argument('--scale', type=float, default=4.0,
                        help='SVG pixels per mm (default: 4)')
    parser.add_argument('--output', type=Path, default=None,
                        help='Output SVG path (default: <chain>_drag_chain_path.svg)')
    args = parser.parse_args()

    chain = get_chain_type(args.chain)
    output = args.output or Path(__file__).parent / f"{chain.name}_drag_chain_path.svg"
    DragChainRenderer(chain, args.offset, scale=args.scale).render(str(output))


if __name__ == '__main__':
    main()
