"""Reference universe: sector → galaxy → cluster → star → planet → satellite.

Only the data model lives here; renderers read ``density`` and the body
fields off the generated instances.
"""
from __future__ import annotations

import math
from typing import Iterator, List, Optional

from procgen.engine.logger import ProceduralLogger
from procgen.engine.settings import GeneratorSettings
from procgen.schema.definition import Schema, procedural
from procgen.schema.instance import Instance

MAX_PLANETS = 10
MAX_SATELLITES = 6
MAX_CLUSTER_STARS = 100


def _sector_density(sector: Instance) -> float:
    value = sector.rng().next_float()
    return value * value * value


def _cluster_star_count(cluster: Instance) -> int:
    return math.floor(cluster.galaxy.sector.density * cluster.rng().next_float(MAX_CLUSTER_STARS))


def _within_parent_count(instance: Instance, number: int, count_field: str) -> bool:
    parent = instance.get_parent()
    if parent is None:
        # Detached: no parent count to check against.
        return number > 0
    return 0 < number <= getattr(parent, count_field)


def _valid_star(star: Instance, number: int) -> bool:
    return _within_parent_count(star, number, "num_stars")


def _valid_planet(planet: Instance, number: int) -> bool:
    return _within_parent_count(planet, number, "num_planets")


def _valid_satellite(satellite: Instance, number: int) -> bool:
    return _within_parent_count(satellite, number, "num_satellites")


def build_universe(
    settings: Optional[GeneratorSettings] = None,
    logger: Optional[ProceduralLogger] = None,
) -> Schema:
    """Declare a fresh universe schema tree and return its root."""

    universe = procedural("universe", settings=settings, logger=logger).takes("seed")

    (
        universe.generates("sector")
        .takes("x", "y")
        .provides("density", _sector_density)
        .generates("galaxy")
        .takes("number")
        .generates("cluster")
        .takes("x", "y")
        .provides("num_stars", _cluster_star_count)
        .generates("star")
        .takes("number", validator=_valid_star)
        .provides("num_planets", lambda star: star.rng("planets").next_int(0, MAX_PLANETS))
        .generates("planet")
        .takes("number", validator=_valid_planet)
        # Orbits widen with the planet's position around the star (AU).
        .provides("distance", lambda planet: planet.number * planet.rng("orbit").next_float(0.3, 1.7))
        # Earth masses / Earth volumes.
        .provides("mass", lambda planet: planet.rng("mass").next_float(0.05, 300.0))
        .provides("volume", lambda planet: planet.rng("volume").next_float(0.1, 1500.0))
        .provides("num_satellites", lambda planet: planet.rng("moons").next_int(0, MAX_SATELLITES))
        .method("mean_density", lambda planet: planet.mass / planet.volume)
        .generates("satellite")
        .takes("number", validator=_valid_satellite)
        .provides("radius_km", lambda satellite: satellite.rng().next_float(100.0, 3000.0))
    )
    return universe


def density_grid(universe: Instance, columns: int, rows: int) -> List[List[float]]:
    """Sector densities laid out row by row, as a renderer would sample them."""
    return [[universe.sector(x, y).density for x in range(columns)] for y in range(rows)]


def iter_stars(cluster: Instance) -> Iterator[Instance]:
    for number in range(1, cluster.num_stars + 1):
        yield cluster.star(number)


def iter_planets(star: Instance) -> Iterator[Instance]:
    for number in range(1, star.num_planets + 1):
        yield star.planet(number)


def iter_satellites(planet: Instance) -> Iterator[Instance]:
    for number in range(1, planet.num_satellites + 1):
        yield planet.satellite(number)


__all__ = [
    "MAX_CLUSTER_STARS",
    "MAX_PLANETS",
    "MAX_SATELLITES",
    "build_universe",
    "density_grid",
    "iter_planets",
    "iter_satellites",
    "iter_stars",
]
