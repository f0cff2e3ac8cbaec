#!/usr/bin/env python3
"""
DRAG_CHAIN_VALIDATION.PY - Constraint validation for drag chain types

Contains:
- ConstraintViolation: Data class for constraint violations
- DragChainConfigError / HingePathError: errors raised to callers
- validate_chain_type: Check all dimensional constraints
- require_valid_chain_type: Fail fast before any geometry is built
- print_constraint_report: Print formatted validation report
"""

from dataclasses import dataclass
from typing import List, Optional

from drag_chain_models import CLEARANCE, ChainType


class DragChainConfigError(ValueError):
    """A chain type parameter is out of range."""

    def __init__(self, parameter: str, message: str):
        super().__init__(f"{parameter}: {message}")
        self.parameter = parameter


class HingePathError(RuntimeError):
    """The hinge path generator broke one of its own geometric invariants."""


@dataclass
class ConstraintViolation:
    """A constraint violation found during validation."""
    constraint: str
    message: str
    severity: str = "error"  # "error" or "warning"
    parameter: Optional[str] = None
    actual_value: Optional[float] = None
    expected_value: Optional[float] = None


def validate_chain_type(chain: ChainType) -> List[ConstraintViolation]:
    """
    Validate chain type constraints:
    1. Every inner dimension, the travel and every wall must be positive
    2. The pivot radius must not be smaller than the hinge pin radius
    3. The link must be longer than half its height plus a wall
    4. Walls thicker than half the link height leave no cheek (warning)
    5. The next link's inner cheeks must clear this link's pin boss (warning)

    Returns list of violations (empty if all constraints pass).
    """
    violations = []

    # ---------------------------------------------------------------------
    # 1. POSITIVE DIMENSIONS
    # ---------------------------------------------------------------------
    if len(chain.inner_size) != 3:
        violations.append(ConstraintViolation(
            constraint="inner_size",
            message=f"inner_size needs 3 components, got {len(chain.inner_size)}",
            parameter="inner_size",
        ))
        return violations

    for axis, value in zip("xyz", chain.inner_size):
        if not value > 0:
            violations.append(ConstraintViolation(
                constraint="positive_dimension",
                message=f"inner_size.{axis} must be positive, got {value}",
                parameter=f"inner_size.{axis}",
                actual_value=value,
                expected_value=0.0,
            ))

    for parameter in ("travel", "wall", "bwall", "twall"):
        value = getattr(chain, parameter)
        if not value > 0:
            violations.append(ConstraintViolation(
                constraint="positive_dimension",
                message=f"{parameter} must be positive, got {value}",
                parameter=parameter,
                actual_value=value,
                expected_value=0.0,
            ))

    if violations:
        return violations

    # ---------------------------------------------------------------------
    # 2. PIVOT RADIUS VS PIN
    # ---------------------------------------------------------------------
    radius = chain.radius()
    pin_r = chain.pin_radius()
    if radius < pin_r:
        violations.append(ConstraintViolation(
            constraint="pivot_radius",
            message=f"Pivot radius {radius:.2f}mm is smaller than the pin radius {pin_r:.2f}mm",
            parameter="inner_size.x",
            actual_value=radius,
            expected_value=pin_r,
        ))

    # ---------------------------------------------------------------------
    # 3. LINK LENGTH VS LINK HEIGHT
    # Roof and base slabs run from 2r to inner_size.x + r less a wall.
    # ---------------------------------------------------------------------
    r = chain.cheek_radius()
    min_length = r + max(chain.twall, chain.bwall) + CLEARANCE
    if chain.inner_size[0] <= min_length:
        violations.append(ConstraintViolation(
            constraint="link_length",
            message=f"Link length {chain.inner_size[0]:g}mm must exceed {min_length:.2f}mm "
                    f"(half the link height plus a wall)",
            parameter="inner_size.x",
            actual_value=chain.inner_size[0],
            expected_value=min_length,
        ))

    # ---------------------------------------------------------------------
    # 4. WALL THICKNESS VS LINK HEIGHT
    # Geometry is still produced, it just self-intersects.
    # ---------------------------------------------------------------------
    for parameter in ("twall", "bwall"):
        value = getattr(chain, parameter)
        if value >= r:
            violations.append(ConstraintViolation(
                constraint="wall_thickness",
                message=f"{parameter} {value}mm is not less than half the link height {r:.2f}mm",
                severity="warning",
                parameter=parameter,
                actual_value=value,
                expected_value=r,
            ))

    # ---------------------------------------------------------------------
    # 5. NEIGHBOUR CLEARANCE
    # The next link's inner cheeks start a wall short of its head, which
    # sits on this link's pivot.
    # ---------------------------------------------------------------------
    cam_r = chain.inner_size[0] - chain.wall - CLEARANCE - r
    if cam_r < r:
        violations.append(ConstraintViolation(
            constraint="neighbour_clearance",
            message=f"Next link's inner cheek comes within {cam_r:.2f}mm of the pivot, "
                    f"inside the {r:.2f}mm pin boss; consecutive links overlap",
            severity="warning",
            parameter="inner_size.x",
            actual_value=cam_r,
            expected_value=r,
        ))

    return violations


def require_valid_chain_type(chain: ChainType) -> ChainType:
    """Raise DragChainConfigError for the first error-severity violation."""
    for v in validate_chain_type(chain):
        if v.severity == "error":
            raise DragChainConfigError(v.parameter, v.message)
    return chain


def print_constraint_report(violations: List[ConstraintViolation], chain: ChainType):
    """Print a formatted constraint validation report."""

    print("\n" + "="*60)
    print(f"CONSTRAINT VALIDATION REPORT: {chain.name}")
    print("="*60)

    print(f"\nChain Parameters:")
    print(f"  Inner size: {' x '.join(f'{v:g}' for v in chain.inner_size)} mm")
    print(f"  Travel: {chain.travel:g} mm")
    print(f"  Walls (side/bottom/top): {chain.wall:g} / {chain.bwall:g} / {chain.twall:g} mm")

    if not violations:
        print("\n✓ All constraints PASSED")
        print("="*60 + "\n")
        return

    errors = [v for v in violations if v.severity == "error"]
    warnings = [v for v in violations if v.severity == "warning"]

    print(f"\n✗ Found {len(errors)} errors, {len(warnings)} warnings")

    for v in violations:
        marker = "✗" if v.severity == "error" else "⚠"
        print(f"  {marker} [{v.constraint}] {v.message}")

    print("="*60 + "\n")
