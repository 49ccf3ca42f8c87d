import json
from pathlib import Path

import pytest

from stellarforge.cli.inspect_universe import _build_parser, main
from stellarforge.content.config import GenerationConfig
from stellarforge.content.io import save_universe_json
from stellarforge.generation.universe import ProceduralUniverse, generate_universe


@pytest.fixture(scope="module")
def universe() -> ProceduralUniverse:
    return generate_universe("Inspect Universe", 42, 100, 3, config=GenerationConfig(station_id_mode="seeded"))


@pytest.fixture
def save_path(tmp_path: Path, universe: ProceduralUniverse) -> Path:
    path = tmp_path / "universe.json"
    save_universe_json(path, universe)
    return path


def test_inspect_summary(save_path: Path, capsys) -> None:
    exit_code = main([str(save_path), "summary"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "integrity=OK" in output
    assert "summary name=Inspect Universe seed=42 " in output
    assert "num_factions=3" in output
    assert "star_types " in output


def test_inspect_system(save_path: Path, universe: ProceduralUniverse, capsys) -> None:
    system = universe.systems[0]

    exit_code = main([str(save_path), "system", system.star_id])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert f"system star_id={system.star_id} " in output
    assert output.count("planet name=") == len(system.planets)
    assert output.count("station station_id=") == len(system.stations)


def test_inspect_faction_lists_relationships(save_path: Path, capsys) -> None:
    exit_code = main([str(save_path), "faction", "FACTION-000"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "faction faction_id=FACTION-000 " in output
    assert "relationship other=FACTION-001 status=" in output
    assert "relationship other=FACTION-002 status=" in output


def test_inspect_language_prints_sample_words(save_path: Path, capsys) -> None:
    exit_code = main([str(save_path), "language", "FACTION-001", "--limit", "3"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "language name=" in output
    assert output.count("word ") == 3


def test_inspect_history_and_timeline(save_path: Path, capsys) -> None:
    assert main([str(save_path), "history", "FACTION-002", "--limit", "1000"]) == 0
    history_output = capsys.readouterr().out
    assert "history faction_id=FACTION-002 " in history_output
    assert "type=first_contact" in history_output

    assert main([str(save_path), "timeline"]) == 0
    timeline_output = capsys.readouterr().out
    assert "=== GALACTIC HISTORY TIMELINE ===" in timeline_output
    assert "Active Factions: 3" in timeline_output


def test_inspect_translate(save_path: Path, universe: ProceduralUniverse, capsys) -> None:
    language = universe.languages[0]

    exit_code = main([str(save_path), "translate", "FACTION-000", "hello", "friend"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert f"translation={language.vocabulary['hello']} {language.vocabulary['friend']}" in output


@pytest.mark.parametrize(
    ("command", "message"),
    [
        (["system", "STAR-999999"], "system not found"),
        (["faction", "FACTION-999"], "faction not found"),
        (["language", "FACTION-999"], "language not found"),
        (["history", "FACTION-999"], "faction not found"),
        (["translate", "FACTION-999", "hello"], "language not found"),
    ],
)
def test_inspect_unknown_ids_fail(save_path: Path, capsys, command: list, message: str) -> None:
    exit_code = main([str(save_path), *command])
    output = capsys.readouterr().out

    assert exit_code == 1
    assert f"error: {message}" in output


def test_inspect_rejects_tampered_save(save_path: Path, capsys) -> None:
    payload = json.loads(save_path.read_text(encoding="utf-8"))
    payload["universe"]["name"] = "Tampered"
    save_path.write_text(json.dumps(payload), encoding="utf-8")

    exit_code = main([str(save_path), "summary"])
    output = capsys.readouterr().out

    assert exit_code == 1
    assert "universe_hash mismatch" in output


def test_inspect_accepts_log_level(save_path: Path, capsys) -> None:
    args = _build_parser().parse_args([str(save_path), "summary"])
    assert args.log_level == "WARNING"

    exit_code = main([str(save_path), "--log-level", "DEBUG", "summary"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "integrity=OK" in output
