from __future__ import annotations

import hashlib
import random
import uuid
from typing import Sequence, TypeVar

SEED_MODULUS = 1 << 64

T = TypeVar("T")


def require_seed(seed: int, *, field_name: str = "seed") -> int:
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise ValueError(f"{field_name} must be an integer")
    if seed < 0 or seed >= SEED_MODULUS:
        raise ValueError(f"{field_name} must be within [0, 2**64)")
    return seed


def derive_offset_seed(root_seed: int, offset: int) -> int:
    """Seed for a whole generation stage: root seed plus a fixed offset, wrapped to u64."""
    return (root_seed + offset) % SEED_MODULUS


def derive_entity_seed(root_seed: int, entity_id: str) -> int:
    """Seed for one entity: root seed plus the byte sum of its identifier, wrapped to u64."""
    return (root_seed + sum(entity_id.encode("utf-8"))) % SEED_MODULUS


def derive_stream_uuid(master_seed: int, stream_name: str) -> str:
    """Version-4-shaped UUID taken from sha256 of (master_seed, stream_name)."""
    digest = hashlib.sha256(f"{master_seed}:{stream_name}".encode("utf-8")).digest()
    return str(uuid.UUID(bytes=digest[:16], version=4))


def make_rng(seed: int) -> random.Random:
    return random.Random(seed)


def chance(rng: random.Random, probability: float) -> bool:
    return rng.random() < probability


def uniform(rng: random.Random, low: float, high: float) -> float:
    """Half-open float draw in [low, high)."""
    return low + (high - low) * rng.random()


def int_range(rng: random.Random, low: int, high: int) -> int:
    """Half-open integer draw in [low, high)."""
    return rng.randrange(low, high)


def pick(rng: random.Random, options: Sequence[T]) -> T:
    if not options:
        raise ValueError("cannot pick from an empty sequence")
    return options[rng.randrange(len(options))]
