"""Logging utilities with channel toggles."""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional

DEFAULT_CHANNELS = {
    "schema": True,
    "instance": True,
    "random": False,
}


@dataclass
class LoggerConfig:
    """Configuration for runtime logging."""

    level: int = logging.INFO
    channels: Dict[str, bool] = field(default_factory=DEFAULT_CHANNELS.copy)

    @classmethod
    def from_settings(cls, settings_path: Path) -> "LoggerConfig":
        if not settings_path.exists():
            return cls(level=logging.INFO, channels=DEFAULT_CHANNELS.copy())
        try:
            data = json.loads(settings_path.read_text())
        except json.JSONDecodeError:
            return cls(level=logging.INFO, channels=DEFAULT_CHANNELS.copy())
        level_name = data.get("logLevel", "INFO").upper()
        level = getattr(logging, level_name, logging.INFO)
        channels = DEFAULT_CHANNELS.copy()
        channels.update(data.get("logChannels", {}))
        return cls(level=level, channels=channels)


class ChannelLogger:
    """Wrapper that only emits records when the channel is enabled."""

    def __init__(self, name: str, logger: logging.Logger, enabled: bool) -> None:
        self._logger = logger
        self._enabled = enabled
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    def debug(self, msg: str, *args, **kwargs) -> None:
        if self._enabled:
            self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        if self._enabled:
            self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        if self._enabled:
            self._logger.warning(msg, *args, **kwargs)


class ProceduralLogger:
    """Central registry of ``procgen.<channel>`` loggers.

    Applications pass ``configure=True`` (see :func:`init_logger`) to install a
    stdout handler; the library default leaves global logging untouched.
    """

    def __init__(self, config: LoggerConfig, configure: bool = True) -> None:
        if configure:
            logging.basicConfig(
                level=config.level,
                format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                stream=sys.stdout,
            )
        self._channels: Dict[str, ChannelLogger] = {}
        for name, enabled in config.channels.items():
            self._channels[name] = ChannelLogger(
                name,
                logging.getLogger(f"procgen.{name}"),
                enabled,
            )

    def channel(self, name: str) -> ChannelLogger:
        if name not in self._channels:
            # Unknown channels start disabled until explicitly enabled.
            self._channels[name] = ChannelLogger(
                name,
                logging.getLogger(f"procgen.{name}"),
                False,
            )
        return self._channels[name]

    def set_enabled(self, name: str, enabled: bool) -> None:
        self.channel(name).enabled = enabled

    def channels(self) -> Iterable[str]:
        return self._channels.keys()


_DEFAULT_LOGGER: Optional[ProceduralLogger] = None


def default_logger() -> ProceduralLogger:
    """Shared registry used by schemas that were not given a logger."""

    global _DEFAULT_LOGGER
    if _DEFAULT_LOGGER is None:
        _DEFAULT_LOGGER = ProceduralLogger(
            LoggerConfig(level=logging.INFO, channels=DEFAULT_CHANNELS.copy()),
            configure=False,
        )
    return _DEFAULT_LOGGER


def init_logger(settings_path: Optional[Path] = None) -> ProceduralLogger:
    """Initialise a logger from settings.json."""

    settings_path = settings_path or Path("settings.json")
    config = LoggerConfig.from_settings(settings_path)
    return ProceduralLogger(config)


__all__ = [
    "ChannelLogger",
    "DEFAULT_CHANNELS",
    "LoggerConfig",
    "ProceduralLogger",
    "default_logger",
    "init_logger",
]
