from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from stellarforge.content.schema import validate_universe_payload
from stellarforge.generation.hash import universe_hash
from stellarforge.generation.universe import ProceduralUniverse

LOGGER = logging.getLogger(__name__)

SCHEMA_VERSION = 1
CANONICAL_JSON_INDENT = 2
CANONICAL_JSON_SEPARATORS = (",", ": ")


def _build_universe_payload(universe: ProceduralUniverse) -> dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "universe_hash": universe_hash(universe),
        "universe": universe.to_dict(),
    }


def _canonical_json(payload: dict[str, Any]) -> str:
    return json.dumps(
        payload,
        indent=CANONICAL_JSON_INDENT,
        separators=CANONICAL_JSON_SEPARATORS,
        sort_keys=True,
    )


def _write_atomic_json(path: str | Path, payload: dict[str, Any]) -> None:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    serialized = _canonical_json(payload)

    temp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=destination.parent,
            delete=False,
            suffix=".tmp",
        ) as temp_file:
            temp_path = Path(temp_file.name)
            temp_file.write(serialized)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        os.replace(temp_path, destination)
    except Exception:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise


def universe_from_payload(payload: dict[str, Any]) -> ProceduralUniverse:
    validate_universe_payload(payload)
    try:
        universe = ProceduralUniverse.from_dict(payload["universe"])
    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"universe payload missing or malformed field: {exc}") from exc
    expected_hash = payload["universe_hash"]
    actual_hash = universe_hash(universe)
    if expected_hash != actual_hash:
        raise ValueError(
            f"universe_hash mismatch while loading save (stored={expected_hash}, recomputed={actual_hash})"
        )
    return universe


def save_universe_json(path: str | Path, universe: ProceduralUniverse) -> str:
    payload = _build_universe_payload(universe)
    validate_universe_payload(payload)
    _write_atomic_json(path, payload)
    LOGGER.info("saved universe path=%s universe_hash=%s", path, payload["universe_hash"])
    return payload["universe_hash"]


def load_universe_json(path: str | Path) -> ProceduralUniverse:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    universe = universe_from_payload(payload)
    LOGGER.info("loaded universe path=%s name=%s seed=%d", path, universe.name, universe.seed)
    return universe
