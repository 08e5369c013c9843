"""Schema declaration and the instances it produces."""

from .definition import FieldKind, Schema, SchemaState, procedural
from .instance import Instance

__all__ = ["FieldKind", "Instance", "Schema", "SchemaState", "procedural"]
