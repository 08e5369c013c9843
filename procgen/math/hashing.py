"""Stable 32-bit string hashes used to seed instances and random streams.

Python's built-in ``hash()`` is salted per process, so every fingerprint in
procgen goes through one of the fixed-constant functions below. Changing any
constant here silently changes every generated universe.
"""
from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Union

from procgen.errors import ConfigurationError

MASK32 = 0xFFFFFFFF

MURMUR3_OFFSET_BASIS = 0
FNV1A_OFFSET_BASIS = 0x811C9DC5
FNV1A_PRIME = 0x01000193

_C1 = 0xCC9E2D51
_C2 = 0x1B873593

HashInput = Union[str, bytes]


def _to_bytes(data: HashInput) -> bytes:
    if isinstance(data, bytes):
        return data
    # Lone surrogates are valid in a str; keep them instead of failing.
    return str(data).encode("utf-8", "surrogatepass")


def _rotl32(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (32 - shift))) & MASK32


def fmix32(h: int) -> int:
    """MurmurHash3 finalizer: force every input bit to affect every output bit."""
    h &= MASK32
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & MASK32
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & MASK32
    h ^= h >> 16
    return h


def _mix_block(k: int) -> int:
    k = (k * _C1) & MASK32
    k = _rotl32(k, 15)
    return (k * _C2) & MASK32


def murmurhash3_32(data: HashInput, seed: int = MURMUR3_OFFSET_BASIS) -> int:
    """MurmurHash3 (x86, 32-bit) of the UTF-8 bytes of ``data``."""
    payload = _to_bytes(data)
    length = len(payload)
    h = seed & MASK32

    tail_start = length - (length & 3)
    for offset in range(0, tail_start, 4):
        k = int.from_bytes(payload[offset:offset + 4], "little")
        h ^= _mix_block(k)
        h = _rotl32(h, 13)
        h = (h * 5 + 0xE6546B64) & MASK32

    remainder = length & 3
    if remainder:
        k = 0
        if remainder == 3:
            k ^= payload[tail_start + 2] << 16
        if remainder >= 2:
            k ^= payload[tail_start + 1] << 8
        k ^= payload[tail_start]
        h ^= _mix_block(k)

    h ^= length
    return fmix32(h)


def fnv1a_32(data: HashInput, seed: int = FNV1A_OFFSET_BASIS) -> int:
    """FNV-1a (32-bit) of the UTF-8 bytes of ``data``, starting from ``seed``."""
    h = seed & MASK32
    for byte in _to_bytes(data):
        h ^= byte
        h = (h * FNV1A_PRIME) & MASK32
    return h


def _normalize(value: Any) -> Any:
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer() and abs(value) < 1e21:
            return int(value)
        return value
    if isinstance(value, dict):
        return {key: _normalize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(item) for item in value]
    return value


def canonical_json(value: Any) -> str:
    """Compact JSON used both for hashing parameters and for display.

    Integral floats collapse to integers so ``3`` and ``3.0`` fingerprint the
    same, and non-finite floats render as ``null``.
    """
    return json.dumps(
        _normalize(value),
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


@dataclass(frozen=True)
class HashAlgorithm:
    name: str
    fn: Callable[[HashInput, int], int]
    offset_basis: int

    def __call__(self, data: HashInput, seed: int) -> int:
        return self.fn(data, seed)


HASH_ALGORITHMS: Dict[str, HashAlgorithm] = {
    "murmur3": HashAlgorithm("murmur3", murmurhash3_32, MURMUR3_OFFSET_BASIS),
    "fnv1a": HashAlgorithm("fnv1a", fnv1a_32, FNV1A_OFFSET_BASIS),
}


def get_hash_algorithm(name: str) -> HashAlgorithm:
    try:
        return HASH_ALGORITHMS[name]
    except KeyError:
        known = ", ".join(sorted(HASH_ALGORITHMS))
        raise ConfigurationError(f"Unknown hash algorithm '{name}' (expected one of: {known})") from None


__all__ = [
    "FNV1A_OFFSET_BASIS",
    "HASH_ALGORITHMS",
    "HashAlgorithm",
    "MURMUR3_OFFSET_BASIS",
    "canonical_json",
    "fmix32",
    "fnv1a_32",
    "get_hash_algorithm",
    "murmurhash3_32",
]
