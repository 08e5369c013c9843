"""Deterministic procedural generation from declarative schema trees."""
from __future__ import annotations

from .engine.logger import ProceduralLogger, init_logger
from .engine.settings import GeneratorSettings
from .errors import (
    ArityError,
    ConfigurationError,
    DuplicateFieldError,
    InvalidNameError,
    KeyPathError,
    ProceduralError,
    ReservedNameError,
    SchemaError,
    SchemaFinalizedError,
    ValidationError,
)
from .math.prng import AleaRandom, DeterministicRandom, ParkMillerRandom
from .schema.definition import FieldKind, Schema, SchemaState, procedural
from .schema.instance import Instance

__all__ = [
    "AleaRandom",
    "ArityError",
    "ConfigurationError",
    "DeterministicRandom",
    "DuplicateFieldError",
    "FieldKind",
    "GeneratorSettings",
    "Instance",
    "InvalidNameError",
    "KeyPathError",
    "ParkMillerRandom",
    "ProceduralError",
    "ProceduralLogger",
    "ReservedNameError",
    "Schema",
    "SchemaError",
    "SchemaFinalizedError",
    "SchemaState",
    "ValidationError",
    "init_logger",
    "procedural",
]
