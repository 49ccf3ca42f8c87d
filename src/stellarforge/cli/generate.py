from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from stellarforge.content.config import GenerationConfig, load_generation_config_json
from stellarforge.content.io import save_universe_json
from stellarforge.generation.hash import galaxy_hash, universe_hash
from stellarforge.generation.universe import generate_universe

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _non_negative_int(value: str) -> int:
    parsed = int(value)
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stellarforge-generate",
        description=(
            "Generate a deterministic universe (galaxy, star systems, factions, languages, history) "
            "from a seed and optionally write it as a canonical universe save JSON."
        ),
    )
    parser.add_argument("name", help="Universe name")
    parser.add_argument("--seed", type=int, default=0, help="Root generation seed in [0, 2**64) (default: 0)")
    parser.add_argument("--stars", type=_non_negative_int, default=100, help="Number of stars (default: 100)")
    parser.add_argument("--factions", type=_non_negative_int, default=3, help="Number of factions (default: 3)")
    parser.add_argument("--config", help="Optional generation config JSON (schema_version 1)")
    parser.add_argument("--out", help="Optional output path for the universe save JSON")
    parser.add_argument("--force", action="store_true", help="Overwrite output path if it already exists")
    parser.add_argument(
        "--print-summary",
        action="store_true",
        help="Print concise star/system/faction/event counts",
    )
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING", help="Logging level (default: WARNING)")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        out_path = Path(args.out) if args.out else None
        if out_path is not None and out_path.exists() and not args.force:
            raise ValueError(f"output exists: {out_path} (use --force to overwrite)")

        config = load_generation_config_json(args.config) if args.config else GenerationConfig()
        universe = generate_universe(args.name, args.seed, args.stars, args.factions, config=config)

        if args.print_summary:
            summary = universe.summary()
            print(
                "summary "
                f"stars={summary['num_stars']} "
                f"systems={summary['num_systems']} "
                f"factions={summary['num_factions']} "
                f"languages={summary['num_languages']} "
                f"events={summary['num_events']}"
            )

        if out_path is not None:
            save_universe_json(out_path, universe)
            print(f"saved path={out_path}")

        print(
            "ok "
            f"name={universe.name} "
            f"seed={universe.seed} "
            f"galaxy_hash={galaxy_hash(universe)} "
            f"universe_hash={universe_hash(universe)}"
        )
    except Exception as exc:
        print(f"error: {exc}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
