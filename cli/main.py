"""Command-line entry points for evolving, rendering and plotting genomes."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

# Allow `python cli/main.py ...` execution from IDEs by adding repo root to sys.path.
if __package__ in {None, ""}:
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

from configs.loader import MAX_CHILDREN, MIN_OUTPUT_SIZE, ConfigLoader, ConfigValidationError, RunConfig
from core.genome_serializer import GenomeDocumentError, load_document
from data.image_io import ImageResourceError, save_png
from dna.settings import SettingsError
from engine.rasterizer import render_document
from main import run_evolution
from visualization.plotting import plot_run

LOGGER = logging.getLogger(__name__)

MIN_POLYGON_VERTICES = 3


def _evolve_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evoimage",
        description="Evolve translucent polygons toward a target image.",
        epilog="The target image is resampled to the canvas size (200x200 by default).",
    )
    parser.add_argument("target", help="target (environment) image")
    parser.add_argument("-r", type=int, dest="render_every", help="render every n generations (default 300)")
    parser.add_argument("-g", type=int, dest="generation_limit", help="limit generations to n (default 10000)")
    parser.add_argument(
        "-c", type=int, dest="children", help=f"generate n (n=1..{MAX_CHILDREN}) children per generation (default 1)"
    )
    parser.add_argument("-s", type=int, dest="seed", help="initialize random number generator with seed")
    parser.add_argument("-p", type=int, dest="polygons_max", help="maximum number of polygons used (default 50)")
    parser.add_argument("-v", type=int, dest="points_max", help="maximum number of vertices/polygon (default 20)")
    parser.add_argument("-j", dest="genome_path", help="write the final genome as JSON to this file")
    parser.add_argument("--config", help="YAML or JSON file with 'run' and 'dna' sections")
    parser.add_argument("--workers", type=int, help="threads used to evaluate children (default 1)")
    parser.add_argument("--partitions", type=int, dest="fitness_partitions", help="row partitions for scoring")
    parser.add_argument("--out-dir", dest="snapshot_dir", help="snapshot directory (default mutations)")
    parser.add_argument("--output-width", type=int, dest="output_width", help="final image width")
    parser.add_argument("--output-height", type=int, dest="output_height", help="final image height")
    parser.add_argument("--db", dest="db_path", help="SQLite file recording champion metrics")
    return parser


def build_run_config(args: argparse.Namespace) -> RunConfig:
    """Merge config file values with command-line overrides."""
    config = ConfigLoader.load(args.config) if args.config else RunConfig()

    dna_overrides = {}
    if args.polygons_max is not None:
        dna_overrides["polygons_max"] = args.polygons_max
    if args.points_max is not None:
        points_max = args.points_max
        if points_max < MIN_POLYGON_VERTICES:
            LOGGER.warning("polygons need at least %d vertices (fixed)", MIN_POLYGON_VERTICES)
            points_max = MIN_POLYGON_VERTICES
        dna_overrides["points_per_polygon_max"] = points_max

    try:
        dna = config.dna.with_overrides(**dna_overrides)
    except SettingsError as exc:
        raise ConfigValidationError(str(exc)) from exc

    return config.with_overrides(
        target_path=args.target,
        render_every=args.render_every,
        generation_limit=args.generation_limit,
        children=args.children,
        seed=args.seed,
        workers=args.workers,
        fitness_partitions=args.fitness_partitions,
        snapshot_dir=args.snapshot_dir,
        output_width=args.output_width,
        output_height=args.output_height,
        genome_path=args.genome_path,
        db_path=args.db_path,
        dna=dna,
    )


def evolve_main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO)
    parser = _evolve_parser()
    args = parser.parse_args(argv)

    try:
        config = build_run_config(args)
    except ConfigValidationError as exc:
        print(f"Invalid values for some arguments given: {exc}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    if args.seed is not None:
        LOGGER.info("Seeding random number generator with %d", args.seed)

    try:
        run_evolution(config)
    except (ImageResourceError, GenomeDocumentError) as exc:
        LOGGER.error("%s", exc)
        return 1
    return 0


def _render_parser() -> argparse.ArgumentParser:
    # -h is the output height, so help moves to --help only
    parser = argparse.ArgumentParser(
        prog="evorender",
        description="Render a saved genome JSON document to PNG.",
        add_help=False,
    )
    parser.add_argument("--help", action="help", help="show this help message and exit")
    parser.add_argument("-i", dest="input", required=True, help="input JSON created by evoimage -j")
    parser.add_argument("-o", dest="output", required=True, help="output PNG file")
    parser.add_argument("-w", dest="width", type=int, default=200, help="output resolution width (default 200)")
    parser.add_argument("-h", dest="height", type=int, default=200, help="output resolution height (default 200)")
    return parser


def render_main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO)
    parser = _render_parser()
    args = parser.parse_args(argv)

    if args.width < MIN_OUTPUT_SIZE or args.height < MIN_OUTPUT_SIZE:
        print(f"ERROR: width and height must be at least {MIN_OUTPUT_SIZE}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    LOGGER.info("Rendering %s to %s at %dx%d", args.input, args.output, args.width, args.height)
    try:
        document = load_document(args.input)
        save_png(render_document(document, args.width, args.height), args.output)
    except (GenomeDocumentError, ImageResourceError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    return 0


def plot_main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="evoplot", description="Plot champion metrics recorded with --db.")
    parser.add_argument("--db", required=True)
    parser.add_argument("--run", help="run id (default: most recent)")
    parser.add_argument("--out", default="artifacts/metrics.png")
    args = parser.parse_args(argv)

    try:
        path = plot_run(args.db, args.run, args.out)
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    print(path)
    return 0


if __name__ == "__main__":
    raise SystemExit(evolve_main())
