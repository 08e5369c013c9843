"""Reference vectors and properties of the stable string hashes."""
from __future__ import annotations

import pytest

from procgen.errors import ConfigurationError
from procgen.math.hashing import (
    FNV1A_OFFSET_BASIS,
    HASH_ALGORITHMS,
    canonical_json,
    fmix32,
    fnv1a_32,
    get_hash_algorithm,
    murmurhash3_32,
)


@pytest.mark.parametrize(
    ("data", "seed", "expected"),
    [
        ("", 0, 0),
        ("", 1, 0x514E28B7),
        ("", 0xFFFFFFFF, 0x81F16F39),
        (b"\x00\x00\x00\x00", 0, 0x2362F9DE),
        ("a", 0x9747B28C, 0x7FA09EA6),
        ("aa", 0x9747B28C, 0x5D211726),
        ("aaa", 0x9747B28C, 0x283E0130),
        ("aaaa", 0x9747B28C, 0x5A97808A),
        ("abc", 0, 0xB3DD93FA),
        ("Hello, world!", 0x9747B28C, 0x24884CBA),
        ("The quick brown fox jumps over the lazy dog", 0x9747B28C, 0x2FA826CD),
    ],
)
def test_murmurhash3_reference_vectors(data, seed: int, expected: int) -> None:
    assert murmurhash3_32(data, seed) == expected


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        ("", 0x811C9DC5),
        ("a", 0xE40C292C),
        ("foobar", 0xBF9CF968),
    ],
)
def test_fnv1a_reference_vectors(data: str, expected: int) -> None:
    assert fnv1a_32(data) == expected
    assert fnv1a_32(data, FNV1A_OFFSET_BASIS) == expected


def test_hashes_are_32_bit_and_accept_wide_seeds() -> None:
    for algorithm in HASH_ALGORITHMS.values():
        value = algorithm("sector\x003\x007", 2 ** 40 + 17)
        assert 0 <= value <= 0xFFFFFFFF
        # Seeds are reduced to 32 bits before mixing.
        assert value == algorithm("sector\x003\x007", 17)


def test_string_and_utf8_bytes_hash_identically() -> None:
    assert murmurhash3_32("ππππ", 7) == murmurhash3_32("ππππ".encode("utf-8"), 7)


def test_lone_surrogates_hash_without_error() -> None:
    assert murmurhash3_32("\ud800", 0) == murmurhash3_32(b"\xed\xa0\x80", 0)
    assert fnv1a_32("moons\udc80") == fnv1a_32(b"moons\xed\xb2\x80")
    assert murmurhash3_32("\ud800") != murmurhash3_32("\udc00")


def test_single_character_and_seed_changes_alter_hash() -> None:
    base = murmurhash3_32("planet\x001", 12345)
    assert murmurhash3_32("planet\x002", 12345) != base
    assert murmurhash3_32("planet\x001", 12344) != base


def test_fmix32_is_an_avalanche_step() -> None:
    assert fmix32(0) == 0
    first = fmix32(1)
    second = fmix32(2)
    assert first != second
    # Nearby inputs land far apart.
    assert bin(first ^ second).count("1") > 4


def test_canonical_json_is_compact_and_float_stable() -> None:
    assert canonical_json(3) == "3"
    assert canonical_json(3.0) == "3"
    assert canonical_json(-0.0) == "0"
    assert canonical_json(0.5) == "0.5"
    assert canonical_json(float("nan")) == "null"
    assert canonical_json("abc") == '"abc"'
    assert canonical_json([1, 2.0, (3, "x")]) == '[1,2,[3,"x"]]'
    assert canonical_json({"a": 1.0}) == '{"a":1}'
    assert canonical_json(None) == "null"
    assert canonical_json(True) == "true"
    assert canonical_json("π") == '"π"'


def test_unknown_hash_algorithm_rejected() -> None:
    with pytest.raises(ConfigurationError):
        get_hash_algorithm("sha1")
    assert get_hash_algorithm("fnv1a").offset_basis == FNV1A_OFFSET_BASIS
