from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Iterable, TypeVar

from stellarforge.content.config import GenerationConfig
from stellarforge.generation.factions import FactionGenerator, ProceduralFaction
from stellarforge.generation.galaxy import Galaxy, Star, generate_galaxy
from stellarforge.generation.history import (
    HistoricalEvent,
    HistoryGenerator,
    events_for_faction,
    generate_timeline_summary,
)
from stellarforge.generation.languages import AlienLanguage, generate_language
from stellarforge.generation.rng import derive_entity_seed, derive_offset_seed, require_seed
from stellarforge.generation.systems import StarSystem, generate_star_system

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class ProceduralUniverse:
    """Aggregate root of one generated universe.

    Systems exist only for inhabited stars. Languages are index-aligned with
    factions. Relationships and history refer to factions by id only.
    """

    name: str
    seed: int
    galaxy: Galaxy
    systems: tuple[StarSystem, ...]
    factions: tuple[ProceduralFaction, ...]
    languages: tuple[AlienLanguage, ...]
    history: tuple[HistoricalEvent, ...]

    def get_system(self, star_id: str) -> StarSystem | None:
        for system in self.systems:
            if system.star_id == star_id:
                return system
        return None

    def get_faction(self, faction_id: str) -> ProceduralFaction | None:
        for faction in self.factions:
            if faction.faction_id == faction_id:
                return faction
        return None

    def get_faction_language(self, faction_id: str) -> AlienLanguage | None:
        for index, faction in enumerate(self.factions):
            if faction.faction_id == faction_id:
                return self.languages[index] if index < len(self.languages) else None
        return None

    def get_faction_history(self, faction_id: str) -> list[HistoricalEvent]:
        return events_for_faction(self.history, faction_id)

    def translate(self, faction_id: str, text: str) -> str | None:
        language = self.get_faction_language(faction_id)
        if language is None:
            return None
        return language.translate_text(text)

    def timeline_summary(self) -> str:
        return generate_timeline_summary(self.history, self.factions)

    def summary(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "seed": self.seed,
            "num_sectors": len(self.galaxy.sectors),
            "num_stars": len(self.galaxy.stars),
            "num_systems": len(self.systems),
            "num_factions": len(self.factions),
            "num_languages": len(self.languages),
            "num_events": len(self.history),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "seed": self.seed,
            "galaxy": self.galaxy.to_dict(),
            "systems": [system.to_dict() for system in self.systems],
            "factions": [faction.to_dict() for faction in self.factions],
            "languages": [language.to_dict() for language in self.languages],
            "history": [event.to_dict() for event in self.history],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProceduralUniverse":
        return cls(
            name=str(data["name"]),
            seed=require_seed(int(data["seed"])),
            galaxy=Galaxy.from_dict(data["galaxy"]),
            systems=tuple(StarSystem.from_dict(row) for row in data.get("systems", [])),
            factions=tuple(ProceduralFaction.from_dict(row) for row in data.get("factions", [])),
            languages=tuple(AlienLanguage.from_dict(row) for row in data.get("languages", [])),
            history=tuple(HistoricalEvent.from_dict(row) for row in data.get("history", [])),
        )


def _map_ordered(func: Callable[[T], R], items: Iterable[T], max_workers: int) -> list[R]:
    """Apply ``func`` to every item; results always come back in input order."""
    if max_workers <= 1:
        return [func(item) for item in items]
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(func, items))


def generate_universe(
    name: str,
    seed: int,
    num_stars: int,
    num_factions: int,
    *,
    config: GenerationConfig | None = None,
) -> ProceduralUniverse:
    require_seed(seed)
    config = config or GenerationConfig()

    galaxy = generate_galaxy(
        name,
        seed,
        radius=config.galaxy_radius,
        num_stars=num_stars,
        sectors_per_dimension=config.sectors_per_dimension,
    )

    def build_system(star: Star) -> StarSystem:
        return generate_star_system(
            star.star_id,
            star.name,
            star.star_type,
            True,
            derive_entity_seed(seed, star.star_id),
            station_id_mode=config.station_id_mode,
        )

    systems = _map_ordered(build_system, galaxy.inhabited_stars(), config.max_workers)
    territories = [system.star_id for system in systems]

    faction_generator = FactionGenerator(derive_offset_seed(seed, config.faction_seed_offset))
    factions = faction_generator.generate_factions(num_factions, territories)

    def build_language(indexed: tuple[int, ProceduralFaction]) -> AlienLanguage:
        index, faction = indexed
        return generate_language(
            f"{faction.name} Language",
            derive_offset_seed(seed, config.language_seed_offset + index),
        )

    languages = _map_ordered(build_language, list(enumerate(factions)), config.max_workers)

    history_generator = HistoryGenerator(derive_offset_seed(seed, config.history_seed_offset))
    history = history_generator.generate_history(factions, config.history_years)

    LOGGER.info(
        "generated universe name=%s seed=%d stars=%d systems=%d factions=%d events=%d",
        name,
        seed,
        len(galaxy.stars),
        len(systems),
        len(factions),
        len(history),
    )
    return ProceduralUniverse(
        name=name,
        seed=seed,
        galaxy=galaxy,
        systems=tuple(systems),
        factions=tuple(factions),
        languages=tuple(languages),
        history=tuple(history),
    )
