from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from stellarforge.generation.rng import int_range, make_rng, pick, require_seed

LOGGER = logging.getLogger(__name__)

GOVERNMENT_TYPES = (
    "democracy",
    "military_dictatorship",
    "monarchy",
    "corporate",
    "collective",
    "theocracy",
    "anarchy",
)

TRAIT_EXPANSIONIST = "expansionist"
TRAIT_ISOLATIONIST = "isolationist"
TRAIT_MERCANTILE = "mercantile"
TRAIT_SCIENTIFIC = "scientific"
TRAIT_ZEALOUS = "zealous"
TRAIT_HONORABLE = "honorable"
TRAIT_CUNNING = "cunning"
TRAIT_XENOPHOBIC = "xenophobic"
TRAIT_XENOPHILIC = "xenophilic"
TRAIT_MILITARISTIC = "militaristic"
TRAIT_PACIFIST = "pacifist"
FACTION_TRAITS = (
    TRAIT_EXPANSIONIST,
    TRAIT_ISOLATIONIST,
    TRAIT_MERCANTILE,
    TRAIT_SCIENTIFIC,
    TRAIT_ZEALOUS,
    TRAIT_HONORABLE,
    TRAIT_CUNNING,
    TRAIT_XENOPHOBIC,
    TRAIT_XENOPHILIC,
    TRAIT_MILITARISTIC,
    TRAIT_PACIFIST,
)
TRAIT_CONFLICTS = (
    frozenset({TRAIT_EXPANSIONIST, TRAIT_ISOLATIONIST}),
    frozenset({TRAIT_XENOPHOBIC, TRAIT_XENOPHILIC}),
    frozenset({TRAIT_MILITARISTIC, TRAIT_PACIFIST}),
)

RELATIONSHIP_WAR = "war"
RELATIONSHIP_HOSTILE = "hostile"
RELATIONSHIP_UNFRIENDLY = "unfriendly"
RELATIONSHIP_NEUTRAL = "neutral"
RELATIONSHIP_FRIENDLY = "friendly"
RELATIONSHIP_ALLIED = "allied"
# ordered worst to best
RELATIONSHIPS = (
    RELATIONSHIP_WAR,
    RELATIONSHIP_HOSTILE,
    RELATIONSHIP_UNFRIENDLY,
    RELATIONSHIP_NEUTRAL,
    RELATIONSHIP_FRIENDLY,
    RELATIONSHIP_ALLIED,
)
RELATIONSHIP_VALUES = {
    RELATIONSHIP_WAR: -3,
    RELATIONSHIP_HOSTILE: -2,
    RELATIONSHIP_UNFRIENDLY: -1,
    RELATIONSHIP_NEUTRAL: 0,
    RELATIONSHIP_FRIENDLY: 2,
    RELATIONSHIP_ALLIED: 3,
}

TRAIT_COUNT_RANGE = (2, 5)
STAT_RANGE = (1, 11)
TERRITORY_COUNT_RANGE = (1, 11)
RELATIONSHIP_JITTER_RANGE = (-2, 3)

SAME_GOVERNMENT_BONUS = 1
SHARED_TRAIT_BONUS = 1
CONFLICTING_TRAIT_PENALTY = -2
XENOPHOBE_XENOPHILE_PENALTY = -3
MILITARIST_PACIFIST_PENALTY = -2
SHARED_TERRITORY_PENALTY = -1

NAME_PREFIXES = (
    "United", "Free", "Imperial", "Democratic", "People's", "Royal",
    "Corporate", "Galactic", "Star", "Cosmic", "Eternal", "Grand",
)
NAME_CORES = (
    "Federation", "Empire", "Alliance", "Coalition", "Consortium",
    "Commonwealth", "Republic", "Dominion", "Confederacy", "Union",
)
NAME_SUFFIXES = (
    "of Sol", "of Andromeda", "of the Outer Rim", "of the Core Worlds",
    "of Free Traders", "of Enlightened Minds", "of the Void", "",
)


def relationship_value(relationship: str) -> int:
    if relationship not in RELATIONSHIP_VALUES:
        raise ValueError(f"invalid relationship: {relationship}")
    return RELATIONSHIP_VALUES[relationship]


def relationship_from_score(score: int) -> str:
    """Map any integer score onto a relationship; out-of-range scores clamp.

    Scoring never yields unfriendly: -1 falls in the neutral band.
    """
    if score >= 3:
        return RELATIONSHIP_ALLIED
    if score == 2:
        return RELATIONSHIP_FRIENDLY
    if score >= -1:
        return RELATIONSHIP_NEUTRAL
    if score == -2:
        return RELATIONSHIP_HOSTILE
    return RELATIONSHIP_WAR


def compare_relationships(a: str, b: str) -> int:
    return RELATIONSHIPS.index(a) - RELATIONSHIPS.index(b)


def traits_conflict(a: str, b: str) -> bool:
    return frozenset({a, b}) in TRAIT_CONFLICTS


def faction_id_for_index(index: int) -> str:
    return f"FACTION-{index:03d}"


@dataclass(frozen=True)
class ProceduralFaction:
    faction_id: str
    name: str
    government: str
    traits: tuple[str, ...]
    tech_level: int
    military_strength: int
    economic_power: int
    territories: tuple[str, ...] = ()
    relationships: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "relationships", MappingProxyType(dict(self.relationships)))
        if not isinstance(self.faction_id, str) or not self.faction_id:
            raise ValueError("faction_id must be a non-empty string")
        if self.government not in GOVERNMENT_TYPES:
            raise ValueError(f"invalid government: {self.government}")
        for trait in self.traits:
            if trait not in FACTION_TRAITS:
                raise ValueError(f"invalid trait: {trait}")
        for other_id, relationship in self.relationships.items():
            if relationship not in RELATIONSHIP_VALUES:
                raise ValueError(f"invalid relationship with {other_id}: {relationship}")

    def has_trait(self, trait: str) -> bool:
        return trait in self.traits

    def relationship_with(self, other_id: str) -> str | None:
        return self.relationships.get(other_id)

    def summary(self) -> dict[str, Any]:
        return {
            "faction_id": self.faction_id,
            "name": self.name,
            "government": self.government,
            "traits": list(self.traits),
            "num_systems": len(self.territories),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "faction_id": self.faction_id,
            "name": self.name,
            "government": self.government,
            "traits": list(self.traits),
            "tech_level": self.tech_level,
            "military_strength": self.military_strength,
            "economic_power": self.economic_power,
            "territories": list(self.territories),
            "relationships": {other_id: self.relationships[other_id] for other_id in sorted(self.relationships)},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProceduralFaction":
        return cls(
            faction_id=str(data["faction_id"]),
            name=str(data["name"]),
            government=str(data["government"]),
            traits=tuple(str(trait) for trait in data.get("traits", [])),
            tech_level=int(data["tech_level"]),
            military_strength=int(data["military_strength"]),
            economic_power=int(data["economic_power"]),
            territories=tuple(str(star_id) for star_id in data.get("territories", [])),
            relationships={str(key): str(value) for key, value in dict(data.get("relationships", {})).items()},
        )


def relationship_score(a: ProceduralFaction, b: ProceduralFaction) -> int:
    """Deterministic part of the pairwise score; generation adds random jitter."""
    score = 0
    if a.government == b.government:
        score += SAME_GOVERNMENT_BONUS

    for trait_a in a.traits:
        for trait_b in b.traits:
            if trait_a == trait_b:
                score += SHARED_TRAIT_BONUS
            if traits_conflict(trait_a, trait_b):
                score += CONFLICTING_TRAIT_PENALTY
                pair = frozenset({trait_a, trait_b})
                if pair == frozenset({TRAIT_XENOPHOBIC, TRAIT_XENOPHILIC}):
                    score += XENOPHOBE_XENOPHILE_PENALTY
                elif pair == frozenset({TRAIT_MILITARISTIC, TRAIT_PACIFIST}):
                    score += MILITARIST_PACIFIST_PENALTY

    if set(a.territories) & set(b.territories):
        score += SHARED_TERRITORY_PENALTY
    return score


class FactionGenerator:
    """Builds a faction set and its symmetric relationship matrix from one seed."""

    def __init__(self, seed: int) -> None:
        self.seed = require_seed(seed)
        self._rng: random.Random = make_rng(seed)

    def generate_factions(self, num_factions: int, available_territories: Sequence[str]) -> list[ProceduralFaction]:
        if isinstance(num_factions, bool) or not isinstance(num_factions, int) or num_factions < 0:
            raise ValueError("num_factions must be an integer >= 0")

        pool = tuple(available_territories)
        drafts = [self._generate_faction(index, pool) for index in range(num_factions)]
        relationships = self._generate_relationships(drafts)
        factions = [replace(draft, relationships=relationships[draft.faction_id]) for draft in drafts]

        LOGGER.debug(
            "generated factions seed=%d count=%d territory_pool=%d",
            self.seed,
            len(factions),
            len(pool),
        )
        return factions

    def _generate_faction(self, index: int, pool: tuple[str, ...]) -> ProceduralFaction:
        name = self._generate_name()
        government = pick(self._rng, GOVERNMENT_TYPES)
        traits = self._generate_traits()
        tech_level = int_range(self._rng, *STAT_RANGE)
        military_strength = int_range(self._rng, *STAT_RANGE)
        economic_power = int_range(self._rng, *STAT_RANGE)
        territories = self._generate_territories(pool)
        return ProceduralFaction(
            faction_id=faction_id_for_index(index),
            name=name,
            government=government,
            traits=traits,
            tech_level=tech_level,
            military_strength=military_strength,
            economic_power=economic_power,
            territories=territories,
        )

    def _generate_name(self) -> str:
        prefix = pick(self._rng, NAME_PREFIXES)
        core = pick(self._rng, NAME_CORES)
        suffix = pick(self._rng, NAME_SUFFIXES)
        if not suffix:
            return f"{prefix} {core}"
        return f"{prefix} {core} {suffix}"

    def _generate_traits(self) -> tuple[str, ...]:
        # Draws that conflict with (or repeat) an accepted trait are dropped, not
        # redrawn, so a faction may end up with fewer traits than the target.
        target = int_range(self._rng, *TRAIT_COUNT_RANGE)
        accepted: list[str] = []
        for _ in range(target):
            candidate = pick(self._rng, FACTION_TRAITS)
            if candidate in accepted:
                continue
            if any(traits_conflict(candidate, existing) for existing in accepted):
                continue
            accepted.append(candidate)
        return tuple(accepted)

    def _generate_territories(self, pool: tuple[str, ...]) -> tuple[str, ...]:
        target = int_range(self._rng, *TERRITORY_COUNT_RANGE)
        territories: list[str] = []
        if not pool:
            return ()
        for _ in range(min(target, len(pool))):
            star_id = pick(self._rng, pool)
            if star_id not in territories:
                territories.append(star_id)
        return tuple(territories)

    def _generate_relationships(self, factions: list[ProceduralFaction]) -> dict[str, dict[str, str]]:
        relationships: dict[str, dict[str, str]] = {faction.faction_id: {} for faction in factions}
        for i, a in enumerate(factions):
            for b in factions[i + 1 :]:
                score = relationship_score(a, b) + int_range(self._rng, *RELATIONSHIP_JITTER_RANGE)
                relationship = relationship_from_score(score)
                relationships[a.faction_id][b.faction_id] = relationship
                relationships[b.faction_id][a.faction_id] = relationship
        return relationships
