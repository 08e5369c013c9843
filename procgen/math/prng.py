"""Reproducible pseudo-random streams.

Both families here are specified down to the arithmetic so a stream can be
reproduced bit-for-bit from its seed in any language: integer math for the
Park-Miller generator and IEEE-754 double math for the Alea variant.
"""
from __future__ import annotations

import math
import operator
from typing import Callable, Dict, Optional, Sequence, TypeVar

from procgen.errors import ConfigurationError
from procgen.math.hashing import MASK32, fmix32

T = TypeVar("T")

PARK_MILLER_MODULUS = 2147483647
PARK_MILLER_MULTIPLIER = 16807

ALEA_MULTIPLIER = 2091639
TWO_POW_NEG_32 = 2.3283064365386963e-10


class DeterministicRandom:
    """Range helpers shared by every generator family."""

    def next_raw(self):  # pragma: no cover - implemented by subclasses
        raise NotImplementedError

    def _unit(self) -> float:
        raise NotImplementedError  # pragma: no cover

    def next_float(self, min_or_max: Optional[float] = None, max_value: Optional[float] = None) -> float:
        """Return a float in ``[0, 1)``, ``[0, min_or_max)`` or ``[min_or_max, max_value)``."""
        value = self._unit()
        if max_value is not None:
            low, high = min_or_max, max_value
        elif min_or_max is not None:
            low, high = 0, min_or_max
        else:
            return value
        return low + value * (high - low)

    def next_int(self, min_or_max: Optional[float] = None, max_value: Optional[float] = None) -> int:
        """Same ranges as :meth:`next_float`, floored to an integer."""
        return math.floor(self.next_float(min_or_max, max_value))

    def chance(self, probability: float) -> bool:
        return self.next_float() < probability

    def choice(self, options: Sequence[T]) -> T:
        if not options:
            raise IndexError("Cannot choose from an empty sequence")
        return options[self.next_int(len(options))]


class ParkMillerRandom(DeterministicRandom):
    """Park-Miller "minimal standard" generator (multiplier 16807, modulus 2^31 - 1)."""

    def __init__(self, seed: int) -> None:
        seed = operator.index(seed)
        # Truncated remainder keeps the sign of the seed.
        state = abs(seed) % PARK_MILLER_MODULUS
        if seed < 0:
            state = -state
        if state <= 0:
            state += PARK_MILLER_MODULUS - 1
        self.seed = seed
        self._state = state

    def next_raw(self) -> int:
        """Advance the state; the result is in ``1 .. 2^31 - 2``."""
        self._state = self._state * PARK_MILLER_MULTIPLIER % PARK_MILLER_MODULUS
        return self._state

    def _unit(self) -> float:
        return (self.next_raw() - 1) / (PARK_MILLER_MODULUS - 1)

    def __repr__(self) -> str:
        return f"ParkMillerRandom(seed={self.seed})"


class AleaRandom(DeterministicRandom):
    """Two-register variant of Baagøe's Alea multiply-with-carry generator."""

    def __init__(self, s0: float, s1: float) -> None:
        for value in (s0, s1):
            if not 0.0 <= value < 1.0:
                raise ValueError(f"Alea seeds must be in [0, 1), got {value!r}")
        self._s0 = float(s0)
        self._s1 = float(s1)
        self._carry = 1

    @classmethod
    def from_seed(cls, seed: int) -> "AleaRandom":
        seed = operator.index(seed) & MASK32
        return cls(seed * TWO_POW_NEG_32, fmix32(seed) * TWO_POW_NEG_32)

    def next_raw(self) -> float:
        t = ALEA_MULTIPLIER * self._s0 + self._carry * TWO_POW_NEG_32
        self._s0 = self._s1
        self._carry = int(t)
        self._s1 = t - self._carry
        return self._s1

    def _unit(self) -> float:
        return self.next_raw()

    def __repr__(self) -> str:
        return f"AleaRandom(s0={self._s0!r}, s1={self._s1!r})"


RANDOM_ALGORITHMS: Dict[str, Callable[[int], DeterministicRandom]] = {
    "park_miller": ParkMillerRandom,
    "alea": AleaRandom.from_seed,
}


def create_random(algorithm: str, seed: int) -> DeterministicRandom:
    try:
        factory = RANDOM_ALGORITHMS[algorithm]
    except KeyError:
        known = ", ".join(sorted(RANDOM_ALGORITHMS))
        raise ConfigurationError(
            f"Unknown random algorithm '{algorithm}' (expected one of: {known})"
        ) from None
    return factory(seed)


__all__ = [
    "AleaRandom",
    "DeterministicRandom",
    "ParkMillerRandom",
    "RANDOM_ALGORITHMS",
    "create_random",
]
