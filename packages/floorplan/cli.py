"""CLI entry-point for the capture-import pipeline."""

from __future__ import annotations

import logging
import sys

import click

from packages.core.types import ImportOptions
from packages.floorplan.process import import_capture_file, import_capture_to_json
from packages.floorplan.validate import check_floor


def _import_options(func):
    """Shared clean-up options for the import and check commands."""
    options = [
        click.option("--orthogonal/--no-orthogonal", default=False, show_default=True,
                     help="Full orthogonal reconstruction (rotate, solve corners, snap)."),
        click.option("--no-straighten", "no_straighten", is_flag=True,
                     help="Skip the legacy straightening pass."),
        click.option("--angle-tolerance", default=5.0, show_default=True,
                     help="Legacy pass snap tolerance (degrees)."),
        click.option("--merge-distance", default=15.0, show_default=True,
                     help="Corner merge distance (cm)."),
        click.option("--iterations", default=5, show_default=True,
                     help="Corner-solving iterations."),
        click.option("--snap-tolerance", default=3.0, show_default=True,
                     help="Collinear snap tolerance (cm)."),
        click.option("--drop-degenerate-walls", is_flag=True,
                     help="Remove walls shorter than 1 cm before clean-up."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_options(
    orthogonal: bool,
    no_straighten: bool,
    angle_tolerance: float,
    merge_distance: float,
    iterations: int,
    snap_tolerance: float,
    drop_degenerate_walls: bool,
) -> ImportOptions:
    return ImportOptions(
        orthogonal=orthogonal,
        straighten=not no_straighten,
        angle_tolerance=angle_tolerance,
        merge_distance=merge_distance,
        iterations=iterations,
        snap_tolerance=snap_tolerance,
        drop_degenerate_walls=drop_degenerate_walls,
    )


@click.group()
def main():
    """Room-scan capture to floor-plan pipeline."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s | %(name)s | %(message)s",
    )


@main.command(name="import")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", "output_file", default=None, help="Output JSON path.")
@_import_options
def import_(input_file: str, output_file: str | None, **kwargs):
    """Import a capture (.json or .zip) and produce a floor-plan JSON."""
    json_str = import_capture_to_json(
        input_file,
        output_path=output_file,
        options=_build_options(**kwargs),
    )
    click.echo(json_str)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--tolerance", default=0.5, show_default=True,
              help="Allowed deviation from an axis (degrees).")
@_import_options
def check(input_file: str, tolerance: float, **kwargs):
    """Import a capture and report misaligned walls and corner gaps."""
    options = _build_options(**kwargs)
    floor = import_capture_file(input_file, options)
    result = check_floor(floor, tolerance_deg=tolerance, max_gap=options.merge_distance)

    for wall in result.misaligned:
        click.echo(f"misaligned: wall {wall.wall_id} off by {wall.deviation:.2f}° (len={wall.length:.1f})")
    for gap in result.gaps:
        click.echo(
            f"gap: {gap.wall_a}.{gap.end_a} <-> {gap.wall_b}.{gap.end_b} = {gap.distance:.1f}cm"
        )
    click.echo(
        f"{result.wall_count} walls, {len(result.misaligned)} misaligned, {len(result.gaps)} gaps"
    )
    if not result.ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
