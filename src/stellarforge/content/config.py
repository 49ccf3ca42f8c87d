from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from stellarforge.generation.galaxy import DEFAULT_GALAXY_RADIUS, DEFAULT_SECTORS_PER_DIMENSION
from stellarforge.generation.history import DEFAULT_HISTORY_YEARS
from stellarforge.generation.systems import STATION_ID_MODE_RANDOM, STATION_ID_MODES

GENERATION_CONFIG_SCHEMA_VERSION = 1
DEFAULT_GENERATION_CONFIG_PATH = "content/generation/defaults.json"

FACTION_SEED_OFFSET = 1000
LANGUAGE_SEED_OFFSET = 2000
HISTORY_SEED_OFFSET = 3000


@dataclass(frozen=True)
class GenerationConfig:
    galaxy_radius: float = DEFAULT_GALAXY_RADIUS
    sectors_per_dimension: int = DEFAULT_SECTORS_PER_DIMENSION
    history_years: int = DEFAULT_HISTORY_YEARS
    station_id_mode: str = STATION_ID_MODE_RANDOM
    max_workers: int = 1
    faction_seed_offset: int = FACTION_SEED_OFFSET
    language_seed_offset: int = LANGUAGE_SEED_OFFSET
    history_seed_offset: int = HISTORY_SEED_OFFSET

    def __post_init__(self) -> None:
        if isinstance(self.galaxy_radius, bool) or not isinstance(self.galaxy_radius, (int, float)):
            raise ValueError("galaxy_radius must be numeric")
        if self.galaxy_radius <= 0:
            raise ValueError("galaxy_radius must be > 0")
        _require_int(self.sectors_per_dimension, "sectors_per_dimension", minimum=1)
        _require_int(self.history_years, "history_years", minimum=0)
        if self.station_id_mode not in STATION_ID_MODES:
            raise ValueError(f"station_id_mode must be one of {list(STATION_ID_MODES)}")
        _require_int(self.max_workers, "max_workers", minimum=1)
        _require_int(self.faction_seed_offset, "faction_seed_offset", minimum=0)
        _require_int(self.language_seed_offset, "language_seed_offset", minimum=0)
        _require_int(self.history_seed_offset, "history_seed_offset", minimum=0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "galaxy_radius": self.galaxy_radius,
            "sectors_per_dimension": self.sectors_per_dimension,
            "history_years": self.history_years,
            "station_id_mode": self.station_id_mode,
            "max_workers": self.max_workers,
            "faction_seed_offset": self.faction_seed_offset,
            "language_seed_offset": self.language_seed_offset,
            "history_seed_offset": self.history_seed_offset,
        }


def _require_int(value: Any, field_name: str, *, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer")
    if value < minimum:
        raise ValueError(f"{field_name} must be >= {minimum}")


CONFIG_FIELDS = frozenset(GenerationConfig().to_dict())


def load_generation_config_json(path: str | Path) -> GenerationConfig:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return config_from_payload(payload)


def config_from_payload(payload: dict[str, Any]) -> GenerationConfig:
    if not isinstance(payload, dict):
        raise ValueError("generation config payload must be an object")

    schema_version = payload.get("schema_version")
    if isinstance(schema_version, bool) or not isinstance(schema_version, int):
        raise ValueError("generation config must contain integer field: schema_version")
    if schema_version != GENERATION_CONFIG_SCHEMA_VERSION:
        raise ValueError(f"unsupported generation config schema_version: {schema_version}")

    values = {key: value for key, value in payload.items() if key != "schema_version"}
    unknown = set(values) - CONFIG_FIELDS
    if unknown:
        raise ValueError(f"generation config has unknown fields: {sorted(unknown)}")

    galaxy_radius = values.get("galaxy_radius", DEFAULT_GALAXY_RADIUS)
    if isinstance(galaxy_radius, int) and not isinstance(galaxy_radius, bool):
        values["galaxy_radius"] = float(galaxy_radius)
    return GenerationConfig(**values)
