from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Any

from stellarforge.generation.rng import chance, make_rng, pick, require_seed, uniform
from stellarforge.generation.tables import BucketTable, WeightedTable

LOGGER = logging.getLogger(__name__)

SECTOR_CORE = "core"
SECTOR_ARM = "arm"
SECTOR_INTER_ARM = "inter_arm"
SECTOR_RIM = "rim"
SECTOR_VOID = "void"
SECTOR_TYPES = (SECTOR_CORE, SECTOR_ARM, SECTOR_INTER_ARM, SECTOR_RIM, SECTOR_VOID)

STAR_BLUE_GIANT = "blue_giant"
STAR_WHITE = "white"
STAR_YELLOW = "yellow"
STAR_ORANGE = "orange"
STAR_RED_DWARF = "red_dwarf"
STAR_NEUTRON = "neutron"
STAR_BLACK_HOLE = "black_hole"
STAR_TYPES = (
    STAR_BLUE_GIANT,
    STAR_WHITE,
    STAR_YELLOW,
    STAR_ORANGE,
    STAR_RED_DWARF,
    STAR_NEUTRON,
    STAR_BLACK_HOLE,
)

DEFAULT_GALAXY_RADIUS = 50000.0
DEFAULT_SECTORS_PER_DIMENSION = 10
DISTANCE_NORMALIZER_PER_SECTOR = 0.7
DISK_FLATTENING = 0.1

SECTOR_BASE_DENSITY = {
    SECTOR_CORE: 0.9,
    SECTOR_ARM: 0.7,
    SECTOR_INTER_ARM: 0.3,
    SECTOR_RIM: 0.2,
    SECTOR_VOID: 0.05,
}

# (feature tag, independent probability), drawn in this order
SECTOR_FEATURE_CHANCES = (
    ("Nebula", 0.10),
    ("Black Hole", 0.05),
    ("Asteroid Field", 0.03),
)

STAR_TYPE_TABLE: BucketTable[str] = BucketTable.from_bounds(
    100,
    (
        (1, STAR_BLUE_GIANT),
        (10, STAR_WHITE),
        (40, STAR_YELLOW),
        (70, STAR_ORANGE),
        (95, STAR_RED_DWARF),
        (98, STAR_NEUTRON),
        (99, STAR_BLACK_HOLE),
    ),
)

STAR_INHABITED_CHANCE = {
    STAR_YELLOW: 0.30,
    STAR_ORANGE: 0.20,
    STAR_WHITE: 0.10,
}
DEFAULT_INHABITED_CHANCE = 0.01

CATALOG_NAME_CHANCE = 0.3
CATALOG_NAME_BASE = 100000
STAR_NAME_PREFIXES = ("Alpha", "Beta", "Gamma", "Delta", "Epsilon", "Zeta", "Eta", "Theta")
STAR_NAME_SUFFIXES = ("Centauri", "Draconis", "Orionis", "Cygni", "Lyrae", "Aquilae")

Vector3 = tuple[float, float, float]


@dataclass(frozen=True, order=True)
class SectorCoord:
    """Integer sector coordinate on the galaxy grid."""

    x: int
    y: int
    z: int

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SectorCoord":
        return cls(x=int(data["x"]), y=int(data["y"]), z=int(data["z"]))


@dataclass(frozen=True)
class GalaxySector:
    coord: SectorCoord
    sector_type: str
    star_density: float
    features: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.sector_type not in SECTOR_TYPES:
            raise ValueError(f"invalid sector_type: {self.sector_type}")
        if self.star_density < 0.0:
            raise ValueError("star_density must be >= 0")

    def to_dict(self) -> dict[str, Any]:
        return {
            "coord": self.coord.to_dict(),
            "sector_type": self.sector_type,
            "star_density": self.star_density,
            "features": list(self.features),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GalaxySector":
        return cls(
            coord=SectorCoord.from_dict(data["coord"]),
            sector_type=str(data["sector_type"]),
            star_density=float(data["star_density"]),
            features=tuple(str(feature) for feature in data.get("features", [])),
        )


@dataclass(frozen=True)
class Star:
    star_id: str
    name: str
    position: Vector3
    star_type: str
    sector: SectorCoord
    inhabited: bool

    def __post_init__(self) -> None:
        if not isinstance(self.star_id, str) or not self.star_id:
            raise ValueError("star_id must be a non-empty string")
        if self.star_type not in STAR_TYPES:
            raise ValueError(f"invalid star_type: {self.star_type}")

    def distance_to(self, position: Vector3) -> float:
        return math.sqrt(sum((a - b) ** 2 for a, b in zip(self.position, position)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "star_id": self.star_id,
            "name": self.name,
            "position": list(self.position),
            "star_type": self.star_type,
            "sector": self.sector.to_dict(),
            "inhabited": self.inhabited,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Star":
        x, y, z = (float(value) for value in data["position"])
        return cls(
            star_id=str(data["star_id"]),
            name=str(data["name"]),
            position=(x, y, z),
            star_type=str(data["star_type"]),
            sector=SectorCoord.from_dict(data["sector"]),
            inhabited=bool(data["inhabited"]),
        )


@dataclass(frozen=True)
class Galaxy:
    name: str
    seed: int
    radius: float
    sectors_per_dimension: int
    sectors: tuple[GalaxySector, ...]
    stars: tuple[Star, ...]

    def get_star(self, star_id: str) -> Star | None:
        for star in self.stars:
            if star.star_id == star_id:
                return star
        return None

    def get_sector(self, coord: SectorCoord) -> GalaxySector | None:
        for sector in self.sectors:
            if sector.coord == coord:
                return sector
        return None

    def stars_in_sector(self, coord: SectorCoord) -> list[Star]:
        return [star for star in self.stars if star.sector == coord]

    def nearby_stars(self, position: Vector3, radius: float) -> list[Star]:
        return [star for star in self.stars if star.distance_to(position) <= radius]

    def inhabited_stars(self) -> list[Star]:
        return [star for star in self.stars if star.inhabited]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "seed": self.seed,
            "radius": self.radius,
            "sectors_per_dimension": self.sectors_per_dimension,
            "sectors": [sector.to_dict() for sector in self.sectors],
            "stars": [star.to_dict() for star in self.stars],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Galaxy":
        return cls(
            name=str(data["name"]),
            seed=int(data["seed"]),
            radius=float(data["radius"]),
            sectors_per_dimension=int(data["sectors_per_dimension"]),
            sectors=tuple(GalaxySector.from_dict(row) for row in data.get("sectors", [])),
            stars=tuple(Star.from_dict(row) for row in data.get("stars", [])),
        )


def sector_axis_range(sectors_per_dimension: int) -> range:
    half = sectors_per_dimension // 2
    return range(-half, sectors_per_dimension - half)


def classify_sector(coord: SectorCoord, sectors_per_dimension: int = DEFAULT_SECTORS_PER_DIMENSION) -> str:
    """Sector type from normalized distance to the origin and the spiral-arm angle."""
    distance = math.sqrt(coord.x * coord.x + coord.y * coord.y + coord.z * coord.z)
    normalized = distance / (DISTANCE_NORMALIZER_PER_SECTOR * sectors_per_dimension)
    if normalized < 0.2:
        return SECTOR_CORE
    if normalized < 0.6:
        angle = math.atan2(coord.y, coord.x)
        arm_strength = abs(math.sin(angle / math.pi * 2.0))
        return SECTOR_ARM if arm_strength > 0.5 else SECTOR_INTER_ARM
    if normalized < 0.9:
        return SECTOR_RIM
    return SECTOR_VOID


def _generate_sector(rng: random.Random, coord: SectorCoord, sectors_per_dimension: int) -> GalaxySector:
    sector_type = classify_sector(coord, sectors_per_dimension)
    star_density = SECTOR_BASE_DENSITY[sector_type] * uniform(rng, 0.8, 1.2)
    features = tuple(feature for feature, probability in SECTOR_FEATURE_CHANCES if chance(rng, probability))
    return GalaxySector(coord=coord, sector_type=sector_type, star_density=star_density, features=features)


def _generate_star_name(rng: random.Random, index: int) -> str:
    if chance(rng, CATALOG_NAME_CHANCE):
        return f"HD {CATALOG_NAME_BASE + index}"
    prefix = pick(rng, STAR_NAME_PREFIXES)
    suffix = pick(rng, STAR_NAME_SUFFIXES)
    return f"{prefix} {suffix}"


def star_id_for_index(index: int) -> str:
    return f"STAR-{index:06d}"


def _generate_star(
    rng: random.Random,
    index: int,
    sector_table: WeightedTable[GalaxySector],
    sector_size: float,
) -> Star:
    sector = sector_table.choose(rng)
    coord = sector.coord
    x = (coord.x + uniform(rng, -0.5, 0.5)) * sector_size
    y = (coord.y + uniform(rng, -0.5, 0.5)) * sector_size
    z = (coord.z + uniform(rng, -0.5, 0.5)) * sector_size * DISK_FLATTENING

    star_type = STAR_TYPE_TABLE.choose(rng)
    inhabited = chance(rng, STAR_INHABITED_CHANCE.get(star_type, DEFAULT_INHABITED_CHANCE))

    return Star(
        star_id=star_id_for_index(index),
        name=_generate_star_name(rng, index),
        position=(x, y, z),
        star_type=star_type,
        sector=coord,
        inhabited=inhabited,
    )


def generate_galaxy(
    name: str,
    seed: int,
    radius: float = DEFAULT_GALAXY_RADIUS,
    num_stars: int = 0,
    sectors_per_dimension: int = DEFAULT_SECTORS_PER_DIMENSION,
) -> Galaxy:
    require_seed(seed)
    if isinstance(num_stars, bool) or not isinstance(num_stars, int) or num_stars < 0:
        raise ValueError("num_stars must be an integer >= 0")
    if radius <= 0:
        raise ValueError("radius must be > 0")
    if sectors_per_dimension < 1:
        raise ValueError("sectors_per_dimension must be >= 1")

    rng = make_rng(seed)
    axis = sector_axis_range(sectors_per_dimension)
    sectors = tuple(
        _generate_sector(rng, SectorCoord(x, y, z), sectors_per_dimension)
        for x in axis
        for y in axis
        for z in axis
    )

    sector_size = radius / (sectors_per_dimension / 2.0)
    stars: tuple[Star, ...] = ()
    if num_stars:
        sector_table = WeightedTable(entries=tuple((sector.star_density, sector) for sector in sectors))
        stars = tuple(_generate_star(rng, index, sector_table, sector_size) for index in range(num_stars))

    LOGGER.debug(
        "generated galaxy name=%s seed=%d sectors=%d stars=%d inhabited=%d",
        name,
        seed,
        len(sectors),
        len(stars),
        sum(1 for star in stars if star.inhabited),
    )
    return Galaxy(
        name=name,
        seed=seed,
        radius=float(radius),
        sectors_per_dimension=sectors_per_dimension,
        sectors=sectors,
        stars=stars,
    )
