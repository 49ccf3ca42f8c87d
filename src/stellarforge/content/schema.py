from __future__ import annotations

from typing import Any

from stellarforge.generation.factions import RELATIONSHIP_VALUES
from stellarforge.generation.galaxy import SECTOR_TYPES, STAR_TYPES
from stellarforge.generation.history import EVENT_TYPES

SUPPORTED_SCHEMA_VERSIONS = {1}
REQUIRED_UNIVERSE_FIELDS = ("name", "seed", "galaxy", "systems", "factions", "languages", "history")


def _is_json_primitive(value: Any) -> bool:
    return value is None or isinstance(value, (bool, int, float, str))


def _validate_json_value(value: Any, *, field_name: str) -> None:
    if _is_json_primitive(value):
        return
    if isinstance(value, list):
        for item in value:
            _validate_json_value(item, field_name=field_name)
        return
    if isinstance(value, dict):
        for key, nested_value in value.items():
            if not isinstance(key, str):
                raise ValueError(f"{field_name} keys must be strings")
            _validate_json_value(nested_value, field_name=field_name)
        return
    raise ValueError(f"{field_name} must contain only canonical JSON primitives")


def _require_list(payload: dict[str, Any], key: str, *, field_name: str) -> list[Any]:
    value = payload.get(key)
    if not isinstance(value, list):
        raise ValueError(f"{field_name}.{key} must be a list")
    for index, row in enumerate(value):
        if not isinstance(row, dict):
            raise ValueError(f"{field_name}.{key}[{index}] must be an object")
    return value


def _require_string(row: dict[str, Any], key: str, *, field_name: str) -> str:
    value = row.get(key)
    if not isinstance(value, str) or not value:
        raise ValueError(f"{field_name}.{key} must be a non-empty string")
    return value


def _validate_galaxy_shape(galaxy: dict[str, Any]) -> set[str]:
    for key in ("radius", "sectors_per_dimension", "seed"):
        if isinstance(galaxy.get(key), bool) or not isinstance(galaxy.get(key), (int, float)):
            raise ValueError(f"universe.galaxy.{key} must be numeric")

    for index, sector in enumerate(_require_list(galaxy, "sectors", field_name="universe.galaxy")):
        if sector.get("sector_type") not in SECTOR_TYPES:
            raise ValueError(f"universe.galaxy.sectors[{index}] invalid sector_type: {sector.get('sector_type')}")
        coord = sector.get("coord")
        if not isinstance(coord, dict) or not {"x", "y", "z"} <= coord.keys():
            raise ValueError(f"universe.galaxy.sectors[{index}] invalid coord")

    star_ids: set[str] = set()
    for index, star in enumerate(_require_list(galaxy, "stars", field_name="universe.galaxy")):
        field_name = f"universe.galaxy.stars[{index}]"
        star_id = _require_string(star, "star_id", field_name=field_name)
        if star_id in star_ids:
            raise ValueError(f"duplicate star_id: {star_id}")
        star_ids.add(star_id)
        if star.get("star_type") not in STAR_TYPES:
            raise ValueError(f"{field_name} invalid star_type: {star.get('star_type')}")
        position = star.get("position")
        if not isinstance(position, list) or len(position) != 3:
            raise ValueError(f"{field_name}.position must be a list of three numbers")
    return star_ids


def _validate_systems_shape(systems: list[dict[str, Any]], star_ids: set[str]) -> None:
    station_ids: set[str] = set()
    for index, system in enumerate(systems):
        field_name = f"universe.systems[{index}]"
        star_id = _require_string(system, "star_id", field_name=field_name)
        if star_id not in star_ids:
            raise ValueError(f"{field_name} references unknown star_id: {star_id}")
        if not isinstance(system.get("star"), dict):
            raise ValueError(f"{field_name}.star must be an object")
        _require_list(system, "planets", field_name=field_name)
        _require_list(system, "asteroid_belts", field_name=field_name)
        for station_index, station in enumerate(_require_list(system, "stations", field_name=field_name)):
            station_id = _require_string(station, "station_id", field_name=f"{field_name}.stations[{station_index}]")
            if station_id in station_ids:
                raise ValueError(f"duplicate station_id: {station_id}")
            station_ids.add(station_id)


def _validate_factions_shape(factions: list[dict[str, Any]]) -> None:
    faction_ids = [
        _require_string(row, "faction_id", field_name=f"universe.factions[{index}]")
        for index, row in enumerate(factions)
    ]
    if len(set(faction_ids)) != len(faction_ids):
        raise ValueError("universe.factions contains duplicate faction_id")

    for index, faction in enumerate(factions):
        field_name = f"universe.factions[{index}]"
        relationships = faction.get("relationships")
        if not isinstance(relationships, dict):
            raise ValueError(f"{field_name}.relationships must be an object")
        for other_id, relationship in relationships.items():
            if relationship not in RELATIONSHIP_VALUES:
                raise ValueError(f"{field_name}.relationships[{other_id}] invalid relationship: {relationship}")
            if other_id not in faction_ids:
                raise ValueError(f"{field_name}.relationships references unknown faction_id: {other_id}")


def _validate_history_shape(history: list[dict[str, Any]]) -> None:
    previous_year: int | None = None
    for index, event in enumerate(history):
        field_name = f"universe.history[{index}]"
        year = event.get("year")
        if isinstance(year, bool) or not isinstance(year, int):
            raise ValueError(f"{field_name}.year must be an integer")
        if previous_year is not None and year < previous_year:
            raise ValueError(f"{field_name}.year breaks chronological order")
        previous_year = year
        if event.get("event_type") not in EVENT_TYPES:
            raise ValueError(f"{field_name} invalid event_type: {event.get('event_type')}")
        if not isinstance(event.get("factions"), list):
            raise ValueError(f"{field_name}.factions must be a list")


def validate_universe_payload(payload: dict[str, Any]) -> None:
    if not isinstance(payload, dict):
        raise ValueError("universe payload must be an object")

    schema_version = payload.get("schema_version")
    if isinstance(schema_version, bool) or not isinstance(schema_version, int):
        raise ValueError("universe payload must contain integer field: schema_version")
    if schema_version not in SUPPORTED_SCHEMA_VERSIONS:
        raise ValueError(f"unsupported schema_version: {schema_version}")

    digest = payload.get("universe_hash")
    if not isinstance(digest, str) or not digest:
        raise ValueError("universe payload must contain string field: universe_hash")

    universe = payload.get("universe")
    if not isinstance(universe, dict):
        raise ValueError("universe payload must contain object field: universe")

    missing = [key for key in REQUIRED_UNIVERSE_FIELDS if key not in universe]
    if missing:
        raise ValueError(f"universe missing fields: {missing}")

    seed = universe.get("seed")
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise ValueError("universe.seed must be an integer")

    galaxy = universe.get("galaxy")
    if not isinstance(galaxy, dict):
        raise ValueError("universe.galaxy must be an object")
    star_ids = _validate_galaxy_shape(galaxy)

    _validate_systems_shape(_require_list(universe, "systems", field_name="universe"), star_ids)
    factions = _require_list(universe, "factions", field_name="universe")
    _validate_factions_shape(factions)

    languages = _require_list(universe, "languages", field_name="universe")
    if len(languages) != len(factions):
        raise ValueError("universe.languages must align with universe.factions")

    _validate_history_shape(_require_list(universe, "history", field_name="universe"))
    _validate_json_value(universe, field_name="universe")
