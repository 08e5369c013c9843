"""Stable hashes and reproducible random streams."""

from .hashing import canonical_json, fnv1a_32, murmurhash3_32
from .prng import AleaRandom, DeterministicRandom, ParkMillerRandom, create_random

__all__ = [
    "AleaRandom",
    "DeterministicRandom",
    "ParkMillerRandom",
    "canonical_json",
    "create_random",
    "fnv1a_32",
    "murmurhash3_32",
]
