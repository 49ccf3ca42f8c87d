from __future__ import annotations

import hashlib
import json
from typing import Any

from stellarforge.generation.universe import ProceduralUniverse


def canonical_hash(payload: Any) -> str:
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


def _strip_station_ids(payload: dict[str, Any]) -> dict[str, Any]:
    systems = []
    for system in payload["systems"]:
        stations = [
            {key: value for key, value in station.items() if key != "station_id"}
            for station in system["stations"]
        ]
        systems.append({**system, "stations": stations})
    return {**payload, "systems": systems}


def universe_hash(universe: ProceduralUniverse, *, include_station_ids: bool = True) -> str:
    """sha256 of the canonical universe JSON.

    Station ids in ``random`` mode differ between runs of the same seed; pass
    ``include_station_ids=False`` to compare two such universes.
    """
    payload = universe.to_dict()
    if not include_station_ids:
        payload = _strip_station_ids(payload)
    return canonical_hash(payload)


def galaxy_hash(universe: ProceduralUniverse) -> str:
    return canonical_hash(universe.galaxy.to_dict())
