"""Logging and settings shared by every schema tree."""

from .logger import ChannelLogger, LoggerConfig, ProceduralLogger, default_logger, init_logger
from .settings import GeneratorSettings

__all__ = [
    "ChannelLogger",
    "GeneratorSettings",
    "LoggerConfig",
    "ProceduralLogger",
    "default_logger",
    "init_logger",
]
