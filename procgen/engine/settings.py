"""Generator settings: which hash/PRNG pairing a universe is built with."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from procgen.math.hashing import HashAlgorithm, HashInput, get_hash_algorithm
from procgen.math.prng import DeterministicRandom, create_random

DEFAULT_HASH_ALGORITHM = "murmur3"
DEFAULT_RANDOM_ALGORITHM = "park_miller"


@dataclass(frozen=True)
class GeneratorSettings:
    """Algorithm pairing and root seed shared by a schema tree.

    The generated values of a universe are only stable for a fixed pairing, so
    unknown algorithm names fail loudly instead of falling back to a default.
    """

    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
    random_algorithm: str = DEFAULT_RANDOM_ALGORITHM
    root_seed: Optional[int] = None

    def __post_init__(self) -> None:
        get_hash_algorithm(self.hash_algorithm)
        # Constructing a throwaway stream validates the name.
        create_random(self.random_algorithm, 1)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneratorSettings":
        root_seed = data.get("rootSeed")
        return cls(
            hash_algorithm=data.get("hashAlgorithm", DEFAULT_HASH_ALGORITHM),
            random_algorithm=data.get("randomAlgorithm", DEFAULT_RANDOM_ALGORITHM),
            root_seed=None if root_seed is None else int(root_seed),
        )

    @classmethod
    def from_settings(cls, settings_path: Path) -> "GeneratorSettings":
        if not settings_path.exists():
            return cls()
        try:
            data = json.loads(settings_path.read_text())
        except json.JSONDecodeError:
            return cls()
        return cls.from_dict(data)

    @property
    def hasher(self) -> HashAlgorithm:
        return get_hash_algorithm(self.hash_algorithm)

    def resolved_root_seed(self) -> int:
        if self.root_seed is None:
            return self.hasher.offset_basis
        return self.root_seed & 0xFFFFFFFF

    def hash(self, data: HashInput, seed: int) -> int:
        return self.hasher(data, seed)

    def create_random(self, seed: int) -> DeterministicRandom:
        return create_random(self.random_algorithm, seed)


__all__ = ["DEFAULT_HASH_ALGORITHM", "DEFAULT_RANDOM_ALGORITHM", "GeneratorSettings"]
