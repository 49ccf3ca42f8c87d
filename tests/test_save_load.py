import json
import os
from pathlib import Path

import pytest

from stellarforge.content.config import GenerationConfig
from stellarforge.content.io import load_universe_json, save_universe_json
from stellarforge.generation.hash import universe_hash
from stellarforge.generation.universe import ProceduralUniverse, generate_universe


def _build_universe(seed: int = 123) -> ProceduralUniverse:
    return generate_universe("Saved Universe", seed, 80, 3, config=GenerationConfig(station_id_mode="seeded"))


def _write_payload(path: Path, payload: dict) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_save_then_load_round_trip_matches_universe(tmp_path: Path) -> None:
    universe = _build_universe()
    out_path = tmp_path / "universe.json"

    stored_hash = save_universe_json(out_path, universe)
    loaded = load_universe_json(out_path)

    assert loaded == universe
    assert universe_hash(loaded) == stored_hash == universe_hash(universe)


def test_round_trip_keeps_random_station_ids(tmp_path: Path) -> None:
    universe = generate_universe("Random Stations", 5, 60, 2)
    out_path = tmp_path / "universe.json"

    save_universe_json(out_path, universe)

    assert load_universe_json(out_path) == universe


def test_save_includes_schema_version_and_universe_hash(tmp_path: Path) -> None:
    universe = _build_universe()
    out_path = tmp_path / "nested" / "universe.json"

    save_universe_json(out_path, universe)
    payload = json.loads(out_path.read_text(encoding="utf-8"))

    assert payload["schema_version"] == 1
    assert payload["universe_hash"] == universe_hash(universe)
    assert payload["universe"]["name"] == "Saved Universe"
    assert payload["universe"]["seed"] == 123
    assert list(out_path.parent.glob("*.tmp")) == []


def test_loader_fails_when_universe_hash_does_not_match(tmp_path: Path) -> None:
    out_path = tmp_path / "universe.json"
    save_universe_json(out_path, _build_universe())

    payload = json.loads(out_path.read_text(encoding="utf-8"))
    payload["universe"]["factions"][0]["name"] = "Tampered"
    _write_payload(out_path, payload)

    with pytest.raises(ValueError, match="universe_hash mismatch"):
        load_universe_json(out_path)


def test_loader_rejects_unsupported_schema_version(tmp_path: Path) -> None:
    out_path = tmp_path / "universe.json"
    save_universe_json(out_path, _build_universe())

    payload = json.loads(out_path.read_text(encoding="utf-8"))
    payload["schema_version"] = 2
    _write_payload(out_path, payload)

    with pytest.raises(ValueError, match="unsupported schema_version"):
        load_universe_json(out_path)


def test_loader_rejects_misaligned_languages(tmp_path: Path) -> None:
    out_path = tmp_path / "universe.json"
    save_universe_json(out_path, _build_universe())

    payload = json.loads(out_path.read_text(encoding="utf-8"))
    payload["universe"]["languages"].pop()
    _write_payload(out_path, payload)

    with pytest.raises(ValueError, match="languages must align"):
        load_universe_json(out_path)


def test_loader_rejects_unknown_relationship_target(tmp_path: Path) -> None:
    out_path = tmp_path / "universe.json"
    save_universe_json(out_path, _build_universe())

    payload = json.loads(out_path.read_text(encoding="utf-8"))
    payload["universe"]["factions"][0]["relationships"]["FACTION-999"] = "war"
    _write_payload(out_path, payload)

    with pytest.raises(ValueError, match="unknown faction_id"):
        load_universe_json(out_path)


def test_loader_rejects_out_of_order_history(tmp_path: Path) -> None:
    out_path = tmp_path / "universe.json"
    save_universe_json(out_path, _build_universe())

    payload = json.loads(out_path.read_text(encoding="utf-8"))
    payload["universe"]["history"].reverse()
    payload["universe"]["history"][0]["year"] = -1
    payload["universe"]["history"][-1]["year"] = -150
    _write_payload(out_path, payload)

    with pytest.raises(ValueError, match="chronological order"):
        load_universe_json(out_path)


def test_loader_rejects_missing_universe_fields(tmp_path: Path) -> None:
    out_path = tmp_path / "universe.json"
    save_universe_json(out_path, _build_universe())

    payload = json.loads(out_path.read_text(encoding="utf-8"))
    del payload["universe"]["history"]
    _write_payload(out_path, payload)

    with pytest.raises(ValueError, match="universe missing fields"):
        load_universe_json(out_path)


@pytest.mark.parametrize(
    ("record_path", "field_name"),
    [
        (("galaxy", "stars", 0), "name"),
        (("galaxy", "sectors", 0), "star_density"),
        (("languages", 0, "phonology"), "vowels"),
        (("factions", 0), "tech_level"),
        (("history", 0), "description"),
    ],
)
def test_loader_reports_missing_nested_field_as_value_error(
    tmp_path: Path, record_path: tuple, field_name: str
) -> None:
    out_path = tmp_path / "universe.json"
    save_universe_json(out_path, _build_universe())

    payload = json.loads(out_path.read_text(encoding="utf-8"))
    record = payload["universe"]
    for key in record_path:
        record = record[key]
    del record[field_name]
    _write_payload(out_path, payload)

    with pytest.raises(ValueError, match=f"missing or malformed field: '{field_name}'"):
        load_universe_json(out_path)


def test_failed_write_leaves_no_temp_file(tmp_path: Path, monkeypatch) -> None:
    def fail_fsync(fd: int) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(os, "fsync", fail_fsync)
    out_path = tmp_path / "universe.json"

    with pytest.raises(OSError, match="disk full"):
        save_universe_json(out_path, _build_universe())

    assert not out_path.exists()
    assert list(tmp_path.glob("*.tmp")) == []
