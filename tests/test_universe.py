import os
import subprocess
import sys
from pathlib import Path

import pytest

from stellarforge.content.config import GenerationConfig
from stellarforge.generation.factions import FactionGenerator
from stellarforge.generation.hash import galaxy_hash, universe_hash
from stellarforge.generation.languages import generate_language
from stellarforge.generation.rng import SEED_MODULUS, derive_entity_seed
from stellarforge.generation.systems import generate_star_system
from stellarforge.generation.universe import ProceduralUniverse, generate_universe

SEEDED = GenerationConfig(station_id_mode="seeded")
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
HASH_SCRIPT = (
    "from stellarforge.content.config import GenerationConfig\n"
    "from stellarforge.generation.hash import universe_hash\n"
    "from stellarforge.generation.universe import generate_universe\n"
    "config = GenerationConfig(station_id_mode='seeded')\n"
    "print(universe_hash(generate_universe('Test Universe', 42, 100, 3, config=config)))\n"
)


@pytest.fixture(scope="module")
def universe() -> ProceduralUniverse:
    return generate_universe("Test Universe", 42, 100, 3, config=SEEDED)


def test_seed_42_scenario(universe: ProceduralUniverse) -> None:
    assert len(universe.galaxy.stars) == 100
    assert len(universe.factions) == 3
    assert all(len(faction.relationships) == 2 for faction in universe.factions)
    assert universe.history

    again = generate_universe("Test Universe", 42, 100, 3)
    assert again.galaxy.stars[0].position == universe.galaxy.stars[0].position
    assert again.galaxy.stars[0].star_type == universe.galaxy.stars[0].star_type


def test_systems_exist_only_for_inhabited_stars(universe: ProceduralUniverse) -> None:
    inhabited_ids = [star.star_id for star in universe.galaxy.stars if star.inhabited]

    assert [system.star_id for system in universe.systems] == inhabited_ids
    assert all(system.inhabited for system in universe.systems)
    for faction in universe.factions:
        assert set(faction.territories) <= set(inhabited_ids)


def test_stage_seeds_use_fixed_offsets(universe: ProceduralUniverse) -> None:
    territories = [system.star_id for system in universe.systems]
    expected_factions = FactionGenerator(42 + 1000).generate_factions(3, territories)

    assert list(universe.factions) == expected_factions
    for index, faction in enumerate(universe.factions):
        assert universe.languages[index] == generate_language(f"{faction.name} Language", 42 + 2000 + index)

    first_system = universe.systems[0]
    star = universe.galaxy.get_star(first_system.star_id)
    assert first_system == generate_star_system(
        star.star_id,
        star.name,
        star.star_type,
        True,
        derive_entity_seed(42, star.star_id),
        station_id_mode="seeded",
    )


def test_same_seed_reproduces_universe_hash() -> None:
    seeded_a = generate_universe("Repro", 7, 60, 4, config=SEEDED)
    seeded_b = generate_universe("Repro", 7, 60, 4, config=SEEDED)
    random_a = generate_universe("Repro", 7, 60, 4)
    random_b = generate_universe("Repro", 7, 60, 4)

    assert universe_hash(seeded_a) == universe_hash(seeded_b)
    assert universe_hash(random_a, include_station_ids=False) == universe_hash(random_b, include_station_ids=False)
    assert universe_hash(random_a, include_station_ids=False) == universe_hash(seeded_a, include_station_ids=False)


def _hash_in_fresh_process(hash_seed: str) -> str:
    env = {**os.environ, "PYTHONPATH": str(SRC_DIR), "PYTHONHASHSEED": hash_seed}
    completed = subprocess.run(
        [sys.executable, "-c", HASH_SCRIPT],
        env=env,
        capture_output=True,
        text=True,
        check=True,
    )
    return completed.stdout.strip()


def test_universe_hash_is_stable_across_processes(universe: ProceduralUniverse) -> None:
    expected = universe_hash(universe)

    assert _hash_in_fresh_process("0") == expected
    assert _hash_in_fresh_process("12345") == expected


def test_different_seed_changes_galaxy_hash() -> None:
    universe_a = generate_universe("Repro", 7, 30, 2)
    universe_b = generate_universe("Repro", 8, 30, 2)

    assert galaxy_hash(universe_a) != galaxy_hash(universe_b)


def test_parallel_generation_matches_serial() -> None:
    serial = generate_universe("Parallel", 99, 150, 5, config=SEEDED)
    parallel = generate_universe(
        "Parallel", 99, 150, 5, config=GenerationConfig(station_id_mode="seeded", max_workers=4)
    )

    assert parallel == serial
    assert universe_hash(parallel) == universe_hash(serial)


def test_accessors_resolve_known_ids(universe: ProceduralUniverse) -> None:
    system = universe.systems[0]
    faction = universe.factions[1]

    assert universe.get_system(system.star_id) == system
    assert universe.get_faction(faction.faction_id) == faction
    assert universe.get_faction_language(faction.faction_id) == universe.languages[1]
    history = universe.get_faction_history(faction.faction_id)
    assert history
    assert all(faction.faction_id in event.factions for event in history)


def test_accessors_return_absence_for_unknown_ids(universe: ProceduralUniverse) -> None:
    assert universe.get_system("STAR-999999") is None
    assert universe.get_faction("FACTION-999") is None
    assert universe.get_faction_language("FACTION-999") is None
    assert universe.get_faction_history("FACTION-999") == []
    assert universe.translate("FACTION-999", "hello") is None


def test_translate_uses_faction_language(universe: ProceduralUniverse) -> None:
    language = universe.languages[0]
    expected = f"{language.vocabulary['hello']} {language.vocabulary['friend']}"

    assert universe.translate("FACTION-000", "hello stranger friend") == expected


def test_summary_and_timeline(universe: ProceduralUniverse) -> None:
    summary = universe.summary()
    timeline = universe.timeline_summary()

    assert summary["num_stars"] == 100
    assert summary["num_factions"] == summary["num_languages"] == 3
    assert summary["num_events"] == len(universe.history)
    assert timeline.startswith("=== GALACTIC HISTORY TIMELINE ===")
    assert timeline.rstrip().endswith("Active Factions: 3")


def test_universe_round_trips_through_dict(universe: ProceduralUniverse) -> None:
    assert ProceduralUniverse.from_dict(universe.to_dict()) == universe


def test_history_years_come_from_config() -> None:
    universe = generate_universe("Short", 3, 20, 3, config=GenerationConfig(history_years=10))

    assert all(-10 <= event.year <= -1 for event in universe.history)


def test_seed_at_u64_boundary_wraps_stage_seeds() -> None:
    universe = generate_universe("Edge", SEED_MODULUS - 1, 10, 2)

    assert universe.seed == SEED_MODULUS - 1
    assert len(universe.factions) == 2


def test_generate_universe_rejects_invalid_inputs() -> None:
    with pytest.raises(ValueError, match="seed"):
        generate_universe("Bad", -1, 10, 2)
    with pytest.raises(ValueError, match="num_stars"):
        generate_universe("Bad", 1, -10, 2)
    with pytest.raises(ValueError, match="num_factions"):
        generate_universe("Bad", 1, 10, -2)
