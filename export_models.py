#!/usr/bin/env python3
"""
Export Models - STEP and STL Export for Printing

Exports drag chain links and assemblies to industry-standard formats:
- STL (.stl) - for 3D printing, one file per link variant
- STEP (.step) - for CAD interchange

Files are named by export tag:
    <chain>_drag_chain_link_start.stl
    <chain>_drag_chain_link.stl
    <chain>_drag_chain_link_end.stl
    <chain>_drag_chain_assembly.step

Usage:
    python export_models.py                    # Export all preset chains
    python export_models.py x                  # Export one preset
    python export_models.py --json chains.json # Export chains from a file
    python export_models.py --format stl       # STL only
    python export_models.py --supports         # Add print supports to links
    python export_models.py --output-dir ./out # Custom output directory
"""

import sys
from dataclasses import replace
from pathlib import Path

import cadquery as cq

from drag_chain_assembly import make_drag_chain_assembly
from drag_chain_geometry import load_chain_types_from_json, load_fabrication_from_json
from drag_chain_link import make_drag_chain_link
from drag_chain_models import DEFAULT_FABRICATION, DRAG_CHAIN_SPECS, get_chain_type
from drag_chain_validation import print_constraint_report, validate_chain_type


LINK_VARIANTS = ((True, False), (False, False), (False, True))


def export_step(solid, filepath):
    """Export CadQuery solid to STEP format."""
    cq.exporters.export(solid, str(filepath), exportType='STEP')


def export_stl(solid, filepath, tolerance=0.01, angular_tolerance=0.1):
    """Export CadQuery solid to STL format.

    Args:
        solid: CadQuery solid to export
        filepath: Output file path
        tolerance: Linear tolerance for mesh (smaller = finer mesh)
        angular_tolerance: Angular tolerance in radians
    """
    cq.exporters.export(
        solid, str(filepath), exportType='STL',
        tolerance=tolerance, angularTolerance=angular_tolerance
    )


def export_solid(solid, name, output_dir, formats):
    """Write one solid in each requested format, returns the paths."""
    exported = []

    if 'step' in formats:
        step_path = output_dir / f"{name}.step"
        export_step(solid, step_path)
        exported.append(step_path)
        print(f"  STEP: {step_path}")

    if 'stl' in formats:
        stl_path = output_dir / f"{name}.stl"
        export_stl(solid, stl_path)
        exported.append(stl_path)
        print(f"  STL:  {stl_path}")

    return exported


def export_links(chain, output_dir, formats=('step', 'stl'), fab=DEFAULT_FABRICATION):
    """Export the start, middle and end link of a chain.

    Returns:
        List of exported file paths
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    exported = []
    for start, end in LINK_VARIANTS:
        link = make_drag_chain_link(chain, start=start, end=end, fab=fab)
        exported.extend(export_solid(link, chain.link_name(start, end), output_dir, formats))

    return exported


def export_assembly(chain, output_dir, formats=('step',), offset=0.0, fab=DEFAULT_FABRICATION):
    """Export the whole chain laid out on its hinge path."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    assembly = make_drag_chain_assembly(chain, offset, fab)
    return export_solid(assembly, chain.assembly_name(), output_dir, formats)


def export_chain(chain, output_dir, formats=('step', 'stl'), offset=0.0,
                 fab=DEFAULT_FABRICATION, include_assembly=True):
    """Validate then export one chain's links and, optionally, its assembly."""
    violations = validate_chain_type(chain)
    if violations:
        print_constraint_report(violations, chain)
    if any(v.severity == "error" for v in violations):
        print(f"  Skipping {chain.name}")
        return []

    print(f"{chain.name.upper()}:")
    exported = export_links(chain, output_dir, formats, fab)
    if include_assembly:
        exported.extend(export_assembly(chain, output_dir, formats, offset, fab))
    print()

    return exported


def export_all(chains, output_dir=None, formats=('step', 'stl'), offset=0.0,
               fab=DEFAULT_FABRICATION, include_assembly=True):
    """Export every chain in a name -> ChainType mapping.

    Args:
        chains: Dict of ChainType by name
        output_dir: Output directory (default: ./exports)
        formats: Tuple of formats to export
    """
    if output_dir is None:
        output_dir = Path(__file__).parent / "exports"

    output_dir = Path(output_dir)

    print("=== Exporting Drag Chains ===")
    print(f"Output directory: {output_dir}")
    print(f"Formats: {', '.join(formats).upper()}")
    print()

    all_exported = []
    for chain in chains.values():
        all_exported.extend(export_chain(chain, output_dir, formats, offset, fab, include_assembly))

    print(f"Total files exported: {len(all_exported)}")
    return all_exported


def main(argv=None):
    import argparse

    parser = argparse.ArgumentParser(
        description='Export drag chain links and assemblies to STEP/STL formats'
    )
    parser.add_argument(
        'chain', nargs='?',
        default='all',
        help='Chain to export, a preset or a name from --json (default: all)'
    )
    parser.add_argument(
        '--json', '-j',
        type=Path,
        default=None,
        help='JSON file of chain types (and optional fabrication settings)'
    )
    parser.add_argument(
        '--format', '-f',
        choices=['step', 'stl', 'both'],
        default='both',
        help='Export format (default: both)'
    )
    parser.add_argument(
        '--output-dir', '-o',
        type=Path,
        default=None,
        help='Output directory (default: ./exports)'
    )
    parser.add_argument(
        '--offset',
        type=float,
        default=0.0,
        help='Free end position for the assembly in mm (default: 0)'
    )
    parser.add_argument(
        '--supports',
        action='store_true',
        help='Add print support stubs under the hinge pins'
    )
    parser.add_argument(
        '--links-only',
        action='store_true',
        help='Skip the assembly export'
    )

    args = parser.parse_args(argv)

    # Determine formats
    if args.format == 'both':
        formats = ('step', 'stl')
    else:
        formats = (args.format,)

    # Chains and fabrication settings
    if args.json:
        chains = load_chain_types_from_json(args.json)
        fab = load_fabrication_from_json(args.json)
    else:
        chains = {name: get_chain_type(name) for name in DRAG_CHAIN_SPECS}
        fab = DEFAULT_FABRICATION

    if args.supports:
        fab = replace(fab, supports=True)

    if args.chain != 'all':
        if args.chain not in chains:
            print(f"Unknown chain: {args.chain}")
            print(f"Available: {', '.join(chains)}")
            return 1
        chains = {args.chain: chains[args.chain]}

    export_all(chains, args.output_dir, formats, args.offset, fab,
               include_assembly=not args.links_only)
    return 0


if __name__ == '__main__':
    sys.exit(main())
