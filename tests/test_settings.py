"""Settings and logger configuration loaded from settings.json."""
from __future__ import annotations

import json
import logging

import pytest

from procgen import ConfigurationError, GeneratorSettings, procedural
from procgen.engine.logger import DEFAULT_CHANNELS, LoggerConfig, ProceduralLogger, init_logger
from procgen.math.hashing import FNV1A_OFFSET_BASIS, fnv1a_32, murmurhash3_32
from procgen.math.prng import AleaRandom, ParkMillerRandom


def quiet_logger() -> ProceduralLogger:
    channels = {name: False for name in DEFAULT_CHANNELS}
    return ProceduralLogger(LoggerConfig(level=logging.CRITICAL, channels=channels), configure=False)


def test_default_settings() -> None:
    settings = GeneratorSettings()
    assert settings.hash_algorithm == "murmur3"
    assert settings.random_algorithm == "park_miller"
    assert settings.resolved_root_seed() == 0
    assert isinstance(settings.create_random(5), ParkMillerRandom)


def test_settings_from_file(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"hashAlgorithm": "fnv1a", "randomAlgorithm": "alea", "rootSeed": 99}))
    settings = GeneratorSettings.from_settings(path)
    assert settings.hash_algorithm == "fnv1a"
    assert settings.resolved_root_seed() == 99
    assert isinstance(settings.create_random(5), AleaRandom)


def test_settings_fall_back_on_missing_or_malformed_file(tmp_path) -> None:
    assert GeneratorSettings.from_settings(tmp_path / "absent.json") == GeneratorSettings()
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    assert GeneratorSettings.from_settings(path) == GeneratorSettings()


def test_unknown_algorithms_rejected(tmp_path) -> None:
    with pytest.raises(ConfigurationError):
        GeneratorSettings(hash_algorithm="md5")
    with pytest.raises(ConfigurationError):
        GeneratorSettings(random_algorithm="xorshift")
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"hashAlgorithm": "crc32"}))
    with pytest.raises(ConfigurationError):
        GeneratorSettings.from_settings(path)


def test_fnv_pairing_seeds_root_with_offset_basis() -> None:
    settings = GeneratorSettings(hash_algorithm="fnv1a")
    assert settings.resolved_root_seed() == FNV1A_OFFSET_BASIS
    universe = procedural("universe", settings=settings, logger=quiet_logger()).takes("seed")
    sector = universe.generates("sector").takes("x", "y")
    root = universe("abc")
    assert root.hash == fnv1a_32('universe\x00"abc"', FNV1A_OFFSET_BASIS)
    assert root.sector(1, 2).hash == fnv1a_32("sector\x001\x002", root.hash)
    assert sector.settings is settings


def test_root_seed_changes_every_hash() -> None:
    default = procedural("universe").takes("seed")("abc")
    seeded = procedural("universe", settings=GeneratorSettings(root_seed=7)).takes("seed")("abc")
    assert seeded.hash == murmurhash3_32('universe\x00"abc"', 7)
    assert seeded.hash != default.hash


def test_logger_config_from_settings(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"logLevel": "debug", "logChannels": {"random": True, "schema": False}}))
    config = LoggerConfig.from_settings(path)
    assert config.level == logging.DEBUG
    assert config.channels["random"] is True
    assert config.channels["schema"] is False
    assert config.channels["instance"] is True


def test_logger_config_defaults_without_file(tmp_path) -> None:
    config = LoggerConfig.from_settings(tmp_path / "missing.json")
    assert config.level == logging.INFO
    assert config.channels == DEFAULT_CHANNELS


def test_init_logger_reads_settings(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"logChannels": {"instance": False}}))
    logger = init_logger(path)
    assert logger.channel("instance").enabled is False
    assert logger.channel("schema").enabled is True


def test_disabled_channel_suppresses_detached_warning(caplog) -> None:
    sector = procedural("universe", logger=quiet_logger()).generates("sector").takes("x")
    with caplog.at_level(logging.DEBUG, logger="procgen"):
        sector(1)
    assert not caplog.records


def test_unknown_channels_start_disabled() -> None:
    logger = quiet_logger()
    assert logger.channel("telemetry").enabled is False
    logger.set_enabled("telemetry", True)
    assert logger.channel("telemetry").enabled is True
    assert "telemetry" in logger.channels()


def test_random_channel_logs_stream_derivation(caplog) -> None:
    logger = quiet_logger()
    logger.set_enabled("random", True)
    node = procedural("node", logger=logger).takes("x")(1)
    with caplog.at_level(logging.DEBUG, logger="procgen.random"):
        node.rng("planets")
    assert any("planets" in record.getMessage() for record in caplog.records)


def test_logger_config_defaults_are_not_shared() -> None:
    first = LoggerConfig()
    second = LoggerConfig()
    first.channels["random"] = True
    assert second.channels == DEFAULT_CHANNELS
    assert ProceduralLogger(second, configure=False).channel("schema").enabled is True
