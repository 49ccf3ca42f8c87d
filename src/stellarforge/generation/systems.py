from __future__ import annotations

import logging
import math
import random
import uuid
from dataclasses import dataclass
from typing import Any

from stellarforge.generation.galaxy import (
    STAR_BLACK_HOLE,
    STAR_BLUE_GIANT,
    STAR_NEUTRON,
    STAR_ORANGE,
    STAR_RED_DWARF,
    STAR_TYPES,
    STAR_WHITE,
    STAR_YELLOW,
)
from stellarforge.generation.rng import (
    chance,
    derive_stream_uuid,
    int_range,
    make_rng,
    pick,
    require_seed,
    uniform,
)

LOGGER = logging.getLogger(__name__)

PLANET_TERRESTRIAL = "terrestrial"
PLANET_GAS_GIANT = "gas_giant"
PLANET_ICE_GIANT = "ice_giant"
PLANET_ICE = "ice"
PLANET_VOLCANIC = "volcanic"
PLANET_OCEAN = "ocean"
PLANET_TYPES = (
    PLANET_TERRESTRIAL,
    PLANET_GAS_GIANT,
    PLANET_ICE_GIANT,
    PLANET_ICE,
    PLANET_VOLCANIC,
    PLANET_OCEAN,
)

STATION_TRADE = "trade"
STATION_MILITARY = "military"
STATION_RESEARCH = "research"
STATION_MINING = "mining"
STATION_SHIPYARD = "shipyard"
STATION_TYPES = (STATION_TRADE, STATION_MILITARY, STATION_RESEARCH, STATION_MINING, STATION_SHIPYARD)

STATION_ORBIT_STAR = "Star"
STATION_ID_MODE_RANDOM = "random"
STATION_ID_MODE_SEEDED = "seeded"
STATION_ID_MODES = (STATION_ID_MODE_RANDOM, STATION_ID_MODE_SEEDED)

# (mass range in solar masses, luminosity range in solar luminosities)
STAR_PHYSICS_RANGES = {
    STAR_BLUE_GIANT: ((10.0, 50.0), (1000.0, 10000.0)),
    STAR_WHITE: ((1.4, 2.5), (5.0, 25.0)),
    STAR_YELLOW: ((0.8, 1.2), (0.6, 1.5)),
    STAR_ORANGE: ((0.5, 0.8), (0.1, 0.6)),
    STAR_RED_DWARF: ((0.1, 0.5), (0.001, 0.1)),
    STAR_NEUTRON: ((1.4, 2.0), (0.0001, 0.001)),
    STAR_BLACK_HOLE: ((3.0, 20.0), None),
}

# half-open planet count ranges
PLANET_COUNT_RANGES = {
    STAR_BLUE_GIANT: (0, 3),
    STAR_WHITE: (2, 6),
    STAR_YELLOW: (3, 9),
    STAR_ORANGE: (2, 7),
    STAR_RED_DWARF: (1, 5),
    STAR_NEUTRON: None,
    STAR_BLACK_HOLE: None,
}

BASE_ORBIT_AU = {
    STAR_BLUE_GIANT: 5.0,
    STAR_WHITE: 2.0,
    STAR_YELLOW: 0.4,
    STAR_ORANGE: 0.3,
    STAR_RED_DWARF: 0.1,
}
DEFAULT_BASE_ORBIT_AU = 1.0
ORBIT_SPACING = 1.5
HABITABLE_ZONE_INNER = 0.95
HABITABLE_ZONE_OUTER = 1.37

# (mass range in Earth masses, radius range in Earth radii)
PLANET_PHYSICS_RANGES = {
    PLANET_TERRESTRIAL: ((0.1, 3.0), (0.5, 1.8)),
    PLANET_GAS_GIANT: ((50.0, 500.0), (5.0, 15.0)),
    PLANET_ICE_GIANT: ((10.0, 50.0), (3.0, 6.0)),
    PLANET_ICE: ((0.1, 2.0), (0.4, 1.5)),
    PLANET_VOLCANIC: ((0.5, 2.0), (0.6, 1.2)),
    PLANET_OCEAN: ((0.8, 1.5), (0.9, 1.3)),
}
ATMOSPHERIC_PLANET_TYPES = frozenset(
    {PLANET_TERRESTRIAL, PLANET_OCEAN, PLANET_VOLCANIC, PLANET_GAS_GIANT, PLANET_ICE_GIANT}
)
HABITABLE_PLANET_TYPES = frozenset({PLANET_TERRESTRIAL, PLANET_OCEAN})
PLANET_INHABITED_CHANCE = 0.5

MOON_COUNT_RANGES = {
    PLANET_GAS_GIANT: (2, 20),
    PLANET_ICE_GIANT: (1, 10),
}
TERRESTRIAL_MOON_CHANCE = 0.3
TERRESTRIAL_MOON_RANGE = (1, 3)
MOON_MASS_RANGE = (0.01, 2.0)
MOON_RADIUS_RANGE = (0.1, 1.5)

ASTEROID_BELT_CHANCE = 0.4
UNINHABITED_STATION_CHANCE = 0.3
INHABITED_STATION_RANGE = (1, 4)
UNINHABITED_STATION_RANGE = (0, 2)
STATION_PLANET_ORBIT_CHANCE = 0.7


@dataclass(frozen=True)
class StarInfo:
    star_type: str
    mass: float
    luminosity: float

    def __post_init__(self) -> None:
        if self.star_type not in STAR_TYPES:
            raise ValueError(f"invalid star_type: {self.star_type}")

    def habitable_zone(self) -> tuple[float, float]:
        root = math.sqrt(self.luminosity)
        return root * HABITABLE_ZONE_INNER, root * HABITABLE_ZONE_OUTER

    def to_dict(self) -> dict[str, Any]:
        return {"star_type": self.star_type, "mass": self.mass, "luminosity": self.luminosity}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StarInfo":
        return cls(
            star_type=str(data["star_type"]),
            mass=float(data["mass"]),
            luminosity=float(data["luminosity"]),
        )


@dataclass(frozen=True)
class Moon:
    name: str
    mass: float
    radius: float

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "mass": self.mass, "radius": self.radius}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Moon":
        return cls(name=str(data["name"]), mass=float(data["mass"]), radius=float(data["radius"]))


@dataclass(frozen=True)
class Planet:
    name: str
    orbital_radius: float
    planet_type: str
    mass: float
    radius: float
    atmosphere: bool
    in_habitable_zone: bool
    inhabited: bool
    moons: tuple[Moon, ...] = ()

    def __post_init__(self) -> None:
        if self.planet_type not in PLANET_TYPES:
            raise ValueError(f"invalid planet_type: {self.planet_type}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "orbital_radius": self.orbital_radius,
            "planet_type": self.planet_type,
            "mass": self.mass,
            "radius": self.radius,
            "atmosphere": self.atmosphere,
            "in_habitable_zone": self.in_habitable_zone,
            "inhabited": self.inhabited,
            "moons": [moon.to_dict() for moon in self.moons],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Planet":
        return cls(
            name=str(data["name"]),
            orbital_radius=float(data["orbital_radius"]),
            planet_type=str(data["planet_type"]),
            mass=float(data["mass"]),
            radius=float(data["radius"]),
            atmosphere=bool(data["atmosphere"]),
            in_habitable_zone=bool(data["in_habitable_zone"]),
            inhabited=bool(data["inhabited"]),
            moons=tuple(Moon.from_dict(row) for row in data.get("moons", [])),
        )


@dataclass(frozen=True)
class AsteroidBelt:
    name: str
    inner_radius: float
    outer_radius: float
    density: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "inner_radius": self.inner_radius,
            "outer_radius": self.outer_radius,
            "density": self.density,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AsteroidBelt":
        return cls(
            name=str(data["name"]),
            inner_radius=float(data["inner_radius"]),
            outer_radius=float(data["outer_radius"]),
            density=float(data["density"]),
        )


@dataclass(frozen=True)
class StationInfo:
    station_id: str
    name: str
    orbiting: str
    station_type: str

    def __post_init__(self) -> None:
        if not isinstance(self.station_id, str) or not self.station_id:
            raise ValueError("station_id must be a non-empty string")
        if self.station_type not in STATION_TYPES:
            raise ValueError(f"invalid station_type: {self.station_type}")

    @property
    def orbits_star(self) -> bool:
        return self.orbiting == STATION_ORBIT_STAR

    def to_dict(self) -> dict[str, Any]:
        return {
            "station_id": self.station_id,
            "name": self.name,
            "orbiting": self.orbiting,
            "station_type": self.station_type,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StationInfo":
        return cls(
            station_id=str(data["station_id"]),
            name=str(data["name"]),
            orbiting=str(data["orbiting"]),
            station_type=str(data["station_type"]),
        )


@dataclass(frozen=True)
class StarSystem:
    """Planets, belts and stations around one star, keyed by the star's id."""

    star_id: str
    name: str
    star: StarInfo
    planets: tuple[Planet, ...]
    asteroid_belts: tuple[AsteroidBelt, ...]
    stations: tuple[StationInfo, ...]
    inhabited: bool

    def moon_count(self) -> int:
        return sum(len(planet.moons) for planet in self.planets)

    def habitable_planets(self) -> list[Planet]:
        return [planet for planet in self.planets if planet.in_habitable_zone]

    def get_planet(self, name: str) -> Planet | None:
        for planet in self.planets:
            if planet.name == name:
                return planet
        return None

    def summary(self) -> dict[str, Any]:
        return {
            "star_id": self.star_id,
            "star_name": self.name,
            "num_planets": len(self.planets),
            "num_moons": self.moon_count(),
            "num_asteroid_belts": len(self.asteroid_belts),
            "num_stations": len(self.stations),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "star_id": self.star_id,
            "name": self.name,
            "star": self.star.to_dict(),
            "planets": [planet.to_dict() for planet in self.planets],
            "asteroid_belts": [belt.to_dict() for belt in self.asteroid_belts],
            "stations": [station.to_dict() for station in self.stations],
            "inhabited": self.inhabited,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StarSystem":
        return cls(
            star_id=str(data["star_id"]),
            name=str(data["name"]),
            star=StarInfo.from_dict(data["star"]),
            planets=tuple(Planet.from_dict(row) for row in data.get("planets", [])),
            asteroid_belts=tuple(AsteroidBelt.from_dict(row) for row in data.get("asteroid_belts", [])),
            stations=tuple(StationInfo.from_dict(row) for row in data.get("stations", [])),
            inhabited=bool(data["inhabited"]),
        )


def _generate_star_info(rng: random.Random, star_type: str) -> StarInfo:
    mass_range, luminosity_range = STAR_PHYSICS_RANGES[star_type]
    mass = uniform(rng, *mass_range)
    luminosity = uniform(rng, *luminosity_range) if luminosity_range is not None else 0.0
    return StarInfo(star_type=star_type, mass=mass, luminosity=luminosity)


def _choose_planet_type(rng: random.Random, orbital_radius: float, zone: tuple[float, float]) -> str:
    inner, outer = zone
    if orbital_radius < inner * 0.5:
        return PLANET_VOLCANIC if chance(rng, 0.7) else PLANET_TERRESTRIAL
    if inner <= orbital_radius <= outer:
        if chance(rng, 0.4):
            return PLANET_TERRESTRIAL
        return PLANET_OCEAN if chance(rng, 0.3) else PLANET_ICE
    if orbital_radius < outer * 2.0:
        return PLANET_GAS_GIANT if chance(rng, 0.6) else PLANET_TERRESTRIAL
    return PLANET_ICE_GIANT if chance(rng, 0.5) else PLANET_ICE


def _moon_count(rng: random.Random, planet_type: str) -> int:
    if planet_type in MOON_COUNT_RANGES:
        return int_range(rng, *MOON_COUNT_RANGES[planet_type])
    if planet_type == PLANET_TERRESTRIAL and chance(rng, TERRESTRIAL_MOON_CHANCE):
        return int_range(rng, *TERRESTRIAL_MOON_RANGE)
    return 0


def _generate_planet(rng: random.Random, index: int, star: StarInfo, system_inhabited: bool) -> Planet:
    base_radius = BASE_ORBIT_AU.get(star.star_type, DEFAULT_BASE_ORBIT_AU)
    orbital_radius = base_radius * ORBIT_SPACING**index * uniform(rng, 0.8, 1.2)

    zone = star.habitable_zone()
    in_habitable_zone = zone[0] <= orbital_radius <= zone[1]
    planet_type = _choose_planet_type(rng, orbital_radius, zone)

    mass_range, radius_range = PLANET_PHYSICS_RANGES[planet_type]
    mass = uniform(rng, *mass_range)
    radius = uniform(rng, *radius_range)

    # the coin is only drawn once every other condition holds
    inhabited = (
        system_inhabited
        and in_habitable_zone
        and planet_type in HABITABLE_PLANET_TYPES
        and chance(rng, PLANET_INHABITED_CHANCE)
    )

    moons = tuple(
        Moon(
            name=f"Moon {moon_index + 1}",
            mass=uniform(rng, *MOON_MASS_RANGE),
            radius=uniform(rng, *MOON_RADIUS_RANGE),
        )
        for moon_index in range(_moon_count(rng, planet_type))
    )

    return Planet(
        name=f"Planet {index + 1}",
        orbital_radius=orbital_radius,
        planet_type=planet_type,
        mass=mass,
        radius=radius,
        atmosphere=planet_type in ATMOSPHERIC_PLANET_TYPES,
        in_habitable_zone=in_habitable_zone,
        inhabited=inhabited,
        moons=moons,
    )


def _generate_asteroid_belt(rng: random.Random, num_planets: int) -> AsteroidBelt:
    inner_radius = 2.0 + num_planets * 0.5
    outer_radius = inner_radius + uniform(rng, 0.5, 2.0)
    return AsteroidBelt(
        name="Asteroid Belt",
        inner_radius=inner_radius,
        outer_radius=outer_radius,
        density=uniform(rng, 0.1, 1.0),
    )


def _station_id(mode: str, seed: int, star_id: str, index: int) -> str:
    if mode == STATION_ID_MODE_SEEDED:
        return derive_stream_uuid(seed, f"station:{star_id}:{index}")
    return str(uuid.uuid4())


def _generate_station(
    rng: random.Random,
    planets: tuple[Planet, ...],
    station_id: str,
) -> StationInfo:
    station_type = pick(rng, STATION_TYPES)
    if planets and chance(rng, STATION_PLANET_ORBIT_CHANCE):
        orbiting = pick(rng, planets).name
    else:
        orbiting = STATION_ORBIT_STAR
    return StationInfo(
        station_id=station_id,
        name=f"{station_type.capitalize()} Station",
        orbiting=orbiting,
        station_type=station_type,
    )


def generate_star_system(
    star_id: str,
    star_name: str,
    star_type: str,
    inhabited: bool,
    seed: int,
    *,
    station_id_mode: str = STATION_ID_MODE_RANDOM,
) -> StarSystem:
    """Expand one star into a full system from its own seed.

    Station ids are outside the seeded stream unless ``station_id_mode`` is
    ``"seeded"``; every other field is a pure function of the arguments.
    """
    require_seed(seed)
    if star_type not in STAR_TYPES:
        raise ValueError(f"invalid star_type: {star_type}")
    if station_id_mode not in STATION_ID_MODES:
        raise ValueError(f"invalid station_id_mode: {station_id_mode}")

    rng = make_rng(seed)
    star = _generate_star_info(rng, star_type)

    count_range = PLANET_COUNT_RANGES[star_type]
    num_planets = int_range(rng, *count_range) if count_range is not None else 0
    planets = tuple(_generate_planet(rng, index, star, inhabited) for index in range(num_planets))

    asteroid_belts: tuple[AsteroidBelt, ...] = ()
    if chance(rng, ASTEROID_BELT_CHANCE):
        asteroid_belts = (_generate_asteroid_belt(rng, num_planets),)

    stations: list[StationInfo] = []
    if inhabited or chance(rng, UNINHABITED_STATION_CHANCE):
        station_range = INHABITED_STATION_RANGE if inhabited else UNINHABITED_STATION_RANGE
        for index in range(int_range(rng, *station_range)):
            station_id = _station_id(station_id_mode, seed, star_id, index)
            stations.append(_generate_station(rng, planets, station_id))

    LOGGER.debug(
        "generated system star_id=%s planets=%d belts=%d stations=%d",
        star_id,
        len(planets),
        len(asteroid_belts),
        len(stations),
    )
    return StarSystem(
        star_id=star_id,
        name=star_name,
        star=star,
        planets=planets,
        asteroid_belts=asteroid_belts,
        stations=tuple(stations),
        inhabited=inhabited,
    )
