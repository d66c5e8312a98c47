# scripts/house_layout_generator.py
"""CLI for batch house layout JSON generation."""
from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
import numpy as np
from tqdm import tqdm

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from houseplan.catalog import DEFAULT_CATALOG, RoomCatalog, pick_counts
from houseplan.errors import GenerationFailure
from houseplan.generator import GeneratorConfig, LayoutGenerator
from houseplan.models import FailureReason
from houseplan.validation import validate_layout


def parse_count_range(value: str) -> tuple[int, int]:
    """Parse ``N`` or ``MIN-MAX`` into an inclusive room-count range."""
    lo, sep, hi = value.strip().partition("-")
    low = int(lo)
    high = int(hi) if sep else low
    if low > high:
        raise ValueError(f"min {low} exceeds max {high}")
    return low, high


def parse_room_ranges(values: tuple[str, ...]) -> dict[str, tuple[int, int]]:
    """Parse repeated ``TYPE=MIN-MAX`` (or ``TYPE=N``) options."""
    ranges: dict[str, tuple[int, int]] = {}
    for value in values:
        type_id, sep, spec = value.partition("=")
        if not sep or not type_id:
            raise click.BadParameter(f"expected TYPE=MIN-MAX, got {value!r}", param_hint="--rooms")
        try:
            ranges[type_id] = parse_count_range(spec)
        except ValueError:
            raise click.BadParameter(f"bad count range {spec!r} for {type_id}", param_hint="--rooms")
    return ranges


DEFAULT_ROOMS = ("Hall=1", "Corridor=0-1", "LivingRoom=1", "Kitchen=1", "Bedroom=1-2", "Bathroom=1")


@click.command()
@click.option("--count", type=int, required=True, help="Number of layouts")
@click.option("--seed", type=int, default=42, help="Base random seed")
@click.option("--rooms", "rooms", multiple=True, help="Room count range per type, e.g. Bedroom=1-3")
@click.option("--catalog-types", type=click.Path(exists=True, dir_okay=False), default=None,
              help="RoomTypes.json document")
@click.option("--catalog-pool", type=click.Path(exists=True, dir_okay=False), default=None,
              help="RoomPool.json document")
@click.option("--grid-width", type=int, default=80)
@click.option("--grid-height", type=int, default=60)
@click.option("--max-attempts", type=int, default=10)
@click.option("--output-dir", type=click.Path(), required=True, help="Output directory for JSON files")
@click.option("--check", is_flag=True, help="Validate each layout before writing it")
@click.option("--ascii", "ascii_dir", type=click.Path(), default=None,
              help="Also write a text dump of each finalized grid here")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]), default="WARNING")
def cli(count, seed, rooms, catalog_types, catalog_pool, grid_width, grid_height,
        max_attempts, output_dir, check, ascii_dir, log_level):
    """Generate house layout JSON files."""
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if (catalog_types is None) != (catalog_pool is None):
        raise click.UsageError("--catalog-types and --catalog-pool must be given together")
    if catalog_types is not None:
        catalog = RoomCatalog.from_json_files(catalog_types, catalog_pool)
    else:
        catalog = DEFAULT_CATALOG

    ranges = parse_room_ranges(rooms or DEFAULT_ROOMS)

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    if ascii_dir is not None:
        Path(ascii_dir).mkdir(parents=True, exist_ok=True)

    rng = np.random.default_rng(seed)
    failures: dict[str, int] = {}
    written = 0

    for i in tqdm(range(count), desc="Generating layouts"):
        item_seed = seed + i
        cfg = GeneratorConfig(
            grid_width=grid_width, grid_height=grid_height,
            max_attempts=max_attempts, seed=item_seed,
        )
        try:
            counts = pick_counts(ranges, rng)
            result = LayoutGenerator(catalog, cfg).generate(counts)
        except GenerationFailure as exc:
            if exc.reason == FailureReason.VALIDATION_FAILED:
                raise click.ClickException(str(exc))
            failures[exc.reason.value] = failures.get(exc.reason.value, 0) + 1
            continue

        if check:
            issues = validate_layout(result.layout, counts)
            if issues:
                raise click.ClickException(f"layout {i} failed checks: {'; '.join(issues)}")

        fname = out / f"layout_{i:05d}.json"
        fname.write_text(result.layout.model_dump_json(indent=2))
        if ascii_dir is not None:
            (Path(ascii_dir) / f"layout_{i:05d}.txt").write_text(result.grid.to_ascii() + "\n")
        written += 1

    click.echo(f"Generated {written} layouts in {out}")
    if failures:
        summary = ", ".join(f"{k}={v}" for k, v in sorted(failures.items()))
        click.echo(f"Failed {count - written} layouts ({summary})")


if __name__ == "__main__":
    cli()
