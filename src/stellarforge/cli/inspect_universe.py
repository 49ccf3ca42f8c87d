from __future__ import annotations

import argparse
import logging
from collections import Counter
from typing import Sequence

from stellarforge.cli.generate import LOG_LEVELS
from stellarforge.content.io import load_universe_json
from stellarforge.generation.hash import universe_hash
from stellarforge.generation.universe import ProceduralUniverse

LANGUAGE_PRINT_WORD_LIMIT = 10
HISTORY_PRINT_EVENT_LIMIT = 20


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stellarforge-inspect",
        description="Read-only queries against a saved universe JSON. The stored universe_hash is verified on load.",
    )
    parser.add_argument("save_path", help="Path to universe save JSON")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING", help="Logging level (default: WARNING)")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("summary", help="Print universe counts")

    system_parser = commands.add_parser("system", help="Print one star system")
    system_parser.add_argument("star_id")

    faction_parser = commands.add_parser("faction", help="Print one faction and its relationships")
    faction_parser.add_argument("faction_id")

    language_parser = commands.add_parser("language", help="Print a faction's language")
    language_parser.add_argument("faction_id")
    language_parser.add_argument("--limit", type=int, default=LANGUAGE_PRINT_WORD_LIMIT)

    history_parser = commands.add_parser("history", help="Print events involving a faction")
    history_parser.add_argument("faction_id")
    history_parser.add_argument("--limit", type=int, default=HISTORY_PRINT_EVENT_LIMIT)

    commands.add_parser("timeline", help="Print the decade-grouped history timeline")

    translate_parser = commands.add_parser("translate", help="Translate text into a faction's language")
    translate_parser.add_argument("faction_id")
    translate_parser.add_argument("text", nargs="+")
    return parser


def _print_summary(universe: ProceduralUniverse) -> None:
    summary = universe.summary()
    print(" ".join(["summary"] + [f"{key}={summary[key]}" for key in summary]))
    counts = Counter(star.star_type for star in universe.galaxy.stars)
    if counts:
        print("star_types " + " ".join(f"{star_type}={counts[star_type]}" for star_type in sorted(counts)))


def _print_system(universe: ProceduralUniverse, star_id: str) -> None:
    system = universe.get_system(star_id)
    if system is None:
        raise ValueError(f"system not found: {star_id}")
    summary = system.summary()
    print(" ".join(["system"] + [f"{key}={summary[key]}" for key in summary]))
    for planet in system.planets:
        print(
            "planet "
            f"name={planet.name!r} "
            f"type={planet.planet_type} "
            f"orbit_au={planet.orbital_radius:.3f} "
            f"habitable_zone={planet.in_habitable_zone} "
            f"inhabited={planet.inhabited} "
            f"moons={len(planet.moons)}"
        )
    for station in system.stations:
        print(
            "station "
            f"station_id={station.station_id} "
            f"type={station.station_type} "
            f"orbiting={station.orbiting!r}"
        )


def _print_faction(universe: ProceduralUniverse, faction_id: str) -> None:
    faction = universe.get_faction(faction_id)
    if faction is None:
        raise ValueError(f"faction not found: {faction_id}")
    print(
        "faction "
        f"faction_id={faction.faction_id} "
        f"name={faction.name!r} "
        f"government={faction.government} "
        f"traits={','.join(faction.traits) or '-'} "
        f"tech={faction.tech_level} "
        f"military={faction.military_strength} "
        f"economy={faction.economic_power} "
        f"territories={len(faction.territories)}"
    )
    for other_id in sorted(faction.relationships):
        print(f"relationship other={other_id} status={faction.relationships[other_id]}")


def _print_language(universe: ProceduralUniverse, faction_id: str, limit: int) -> None:
    language = universe.get_faction_language(faction_id)
    if language is None:
        raise ValueError(f"language not found for faction: {faction_id}")
    print(
        "language "
        f"name={language.name!r} "
        f"consonants={len(language.phonology.consonants)} "
        f"vowels={len(language.phonology.vowels)} "
        f"pattern={language.structure.pattern} "
        f"syllables={language.structure.min_syllables}-{language.structure.max_syllables}"
    )
    for concept, word in language.sample_words(limit):
        print(f"word {concept!r}={word}")


def _print_history(universe: ProceduralUniverse, faction_id: str, limit: int) -> None:
    if universe.get_faction(faction_id) is None:
        raise ValueError(f"faction not found: {faction_id}")
    events = universe.get_faction_history(faction_id)
    print(f"history faction_id={faction_id} events={len(events)} limit={limit}")
    for event in events[:limit]:
        print(f"event year={event.year} type={event.event_type} description={event.description!r}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        universe = load_universe_json(args.save_path)
        print(f"integrity=OK universe_hash={universe_hash(universe)}")

        if args.command == "summary":
            _print_summary(universe)
        elif args.command == "system":
            _print_system(universe, args.star_id)
        elif args.command == "faction":
            _print_faction(universe, args.faction_id)
        elif args.command == "language":
            _print_language(universe, args.faction_id, args.limit)
        elif args.command == "history":
            _print_history(universe, args.faction_id, args.limit)
        elif args.command == "timeline":
            print(universe.timeline_summary(), end="")
        elif args.command == "translate":
            translated = universe.translate(args.faction_id, " ".join(args.text))
            if translated is None:
                raise ValueError(f"language not found for faction: {args.faction_id}")
            print(f"translation={translated}")
    except Exception as exc:
        print(f"error: {exc}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
