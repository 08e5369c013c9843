"""Error taxonomy for schema declaration, invocation and lookup."""
from __future__ import annotations

from typing import Any


class ProceduralError(Exception):
    """Base class for every error raised by procgen."""


class ConfigurationError(ProceduralError, ValueError):
    """Raised when settings name an unknown hash or random algorithm."""


class SchemaError(ProceduralError):
    """Structural programmer error in a schema declaration or invocation."""


class ArityError(SchemaError, TypeError):
    """Raised when a schema is invoked with the wrong number of parameters."""


class DuplicateFieldError(SchemaError, ValueError):
    """Raised when a declared name is already taken on the schema."""


class ReservedNameError(DuplicateFieldError):
    """Raised when a declared name shadows the instance surface or parent slot."""


class InvalidNameError(SchemaError, ValueError):
    """Raised when a declared name is not usable as an instance attribute."""


class SchemaFinalizedError(SchemaError):
    """Raised when a schema is modified after it produced an instance."""


class ValidationError(ProceduralError, ValueError):
    """Raised when a parameter value is rejected by its validator."""

    def __init__(self, schema_name: str, field: str, value: Any) -> None:
        super().__init__(f"Invalid value for {schema_name}.{field}: {value!r}")
        self.schema_name = schema_name
        self.field = field
        self.value = value


class KeyPathError(ProceduralError, LookupError):
    """Raised when a key path passed to ``Instance.get`` cannot be resolved."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot resolve '{path}': {reason}")
        self.path = path
        self.reason = reason


__all__ = [
    "ArityError",
    "ConfigurationError",
    "DuplicateFieldError",
    "InvalidNameError",
    "KeyPathError",
    "ProceduralError",
    "ReservedNameError",
    "SchemaError",
    "SchemaFinalizedError",
    "ValidationError",
]
