#!/usr/bin/env python3
"""
DRAG_CHAIN_MODELS.PY - Data classes for drag chain components

Contains the records the rest of the generator works from:
- ChainType: immutable chain descriptor with derived dimensions
- FabricationContext: printer settings consumed by supports and tints
- LinkInstance: one placed link of an assembly
- DRAG_CHAIN_SPECS: named chain presets
"""

import math
from dataclasses import dataclass, field
from typing import Tuple

import cadquery as cq


# =============================================================================
# CONSTANTS
# =============================================================================

CLEARANCE = 0.1          # mm - fabrication gap between mating parts
LINKS_PER_TURN = 16      # hinge angle granularity used for the pivot radius

Vector3 = Tuple[float, float, float]


# =============================================================================
# CHAIN DESCRIPTOR
# =============================================================================

@dataclass(frozen=True)
class ChainType:
    """A drag chain described by its internal size, link length and travel.

    inner_size is (link length, internal width, internal height).
    """
    name: str
    inner_size: Vector3
    travel: float
    wall: float = 1.6    # side wall
    bwall: float = 1.5   # bottom wall
    twall: float = 1.5   # top wall

    def outer_size(self) -> Vector3:
        """Link outer envelope (x includes the hinge overlap)."""
        sx, sy, sz = self.inner_size
        z = sz + self.bwall + self.twall
        return (sx + z, sy + 4 * self.wall + 2 * CLEARANCE, z)

    def radius(self) -> float:
        """Bend radius at the pivot centres."""
        return self.inner_size[0] / 2 / math.sin(math.radians(360 / LINKS_PER_TURN))

    def bend_outside_z(self) -> float:
        """Outside dimension of a 180 degree bend."""
        return 2 * self.radius() + self.outer_size()[2]

    def cheek_radius(self) -> float:
        return self.outer_size()[2] / 2

    def pin_radius(self) -> float:
        return self.cheek_radius() / 2

    def link_count(self) -> int:
        return math.ceil(self.travel / self.inner_size[0])

    def actual_travel(self) -> float:
        return self.link_count() * self.inner_size[0]

    def link_name(self, start: bool = False, end: bool = False) -> str:
        """Export tag for a link variant, e.g. 'x_drag_chain_link_start'."""
        suffix = "_start" if start else "_end" if end else ""
        return f"{self.name}_drag_chain_link{suffix}"

    def assembly_name(self) -> str:
        return f"{self.name}_drag_chain_assembly"

    @classmethod
    def from_spec(cls, name: str, spec: dict) -> 'ChainType':
        """Build a ChainType from a preset or JSON entry."""
        return cls(
            name=name,
            inner_size=tuple(float(v) for v in spec['inner_size']),
            travel=float(spec['travel']),
            wall=float(spec.get('wall', 1.6)),
            bwall=float(spec.get('bwall', 1.5)),
            twall=float(spec.get('twall', 1.5)),
        )


# =============================================================================
# FABRICATION SETTINGS
# =============================================================================

@dataclass(frozen=True)
class FabricationContext:
    """Printer settings and display colours.

    Only support stubs and tints read these; functional dimensions never do.
    """
    layer_height: float = 0.25
    extrusion_width: float = 0.5
    supports: bool = False
    tints: Tuple[str, str] = ("#2140BE", "#BE2140")

    def support_width(self) -> float:
        return 2 * self.extrusion_width

    def tint(self, index: int) -> str:
        """Alternating colour for the link at a path index."""
        return self.tints[index % 2]


DEFAULT_FABRICATION = FabricationContext()


# =============================================================================
# ASSEMBLY RECORDS
# =============================================================================

@dataclass
class LinkInstance:
    """One link of an assembly, already placed on the hinge path."""
    index: int
    role: str            # "start", "link" or "end"
    name: str
    tint: str
    solid: cq.Workplane = field(repr=False)

    def color(self) -> cq.Color:
        r, g, b = (int(self.tint[i:i + 2], 16) / 255 for i in (1, 3, 5))
        return cq.Color(r, g, b, 1.0)


# =============================================================================
# PRESETS
# =============================================================================

# Internal sizes in mm, (link length, width, height)
DRAG_CHAIN_SPECS = {
    'test': {
        'inner_size': (10.0, 8.0, 6.0),
        'travel': 100.0,
    },
    'x': {
        'inner_size': (15.0, 15.0, 8.0),
        'travel': 200.0,
    },
    'y': {
        'inner_size': (15.0, 20.0, 8.0),
        'travel': 250.0,
        'wall': 2.0,
    },
    'z': {
        'inner_size': (20.0, 25.0, 10.0),
        'travel': 300.0,
        'wall': 2.0,
        'bwall': 1.8,
        'twall': 1.8,
    },
}


def get_chain_type(name: str) -> ChainType:
    """Look up a preset by name."""
    return ChainType.from_spec(name, DRAG_CHAIN_SPECS[name])
